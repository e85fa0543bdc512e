import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from rich_argparse import RawDescriptionRichHelpFormatter

from provsync.src.core.signing_tools import DECODER_CHOICES
from provsync.src.errors import ConfigurationError
from provsync.src.utils.config_loader import get_option, load_config


@dataclass
class UpdateOptions:
    provisioning_profile: Path
    xcodeproj: Optional[Path] = None
    target: Optional[str] = None
    configuration: Optional[str] = None
    decoder: str = "auto"
    dry_run: bool = False


def create_parser():
    """Create and return an argument parser with update arguments."""
    parser = argparse.ArgumentParser(
        prog="provsync",
        description="Update an xcodeproj with values extracted from a provisioning profile",
        formatter_class=RawDescriptionRichHelpFormatter,
    )
    add_update_arguments(parser)
    return parser


def add_decoder_argument(parser):
    parser.add_argument(
        "--decoder",
        choices=DECODER_CHOICES,
        default=None,
        help="How to decode profiles: macOS security/openssl tools or built-in asn1crypto [default: auto]",
    )


def add_update_arguments(parser):
    """Add all update-related arguments to an existing parser."""
    parser.add_argument(
        "--provisioning-profile",
        "-p",
        type=Path,
        help="Provisioning profile (.mobileprovision) to read [env: PROVISIONING_PROFILE]",
    )

    parser.add_argument(
        "--xcodeproj",
        type=Path,
        help="Path to the .xcodeproj directory [env: SPECIFIER_XCODEPROJ] [default: first *.xcodeproj in the current directory]",
    )

    parser.add_argument(
        "--target",
        "-t",
        type=str,
        help="Only update this target [env: SPECIFIER_TARGET] [default: all targets]",
    )

    parser.add_argument(
        "--configuration",
        "-c",
        type=str,
        help="Only update configurations matching this regex [env: SPECIFIER_CONFIGURATION] [default: all configurations]",
    )

    add_decoder_argument(parser)

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without saving the project [default: disabled]",
    )


def create_update_options(args) -> UpdateOptions:
    """Merge parsed arguments with environment and config file values."""
    config = load_config()

    profile = get_option("provisioning_profile", args.provisioning_profile, config)
    if not profile:
        raise ConfigurationError(
            "No provisioning profile given. Pass --provisioning-profile or set PROVISIONING_PROFILE"
        )
    profile = Path(profile)
    if not profile.is_file():
        raise ConfigurationError(f"Provisioning profile not found: {profile}")

    xcodeproj = get_option("xcodeproj", args.xcodeproj, config)
    if xcodeproj:
        xcodeproj = Path(xcodeproj)
        if not xcodeproj.exists():
            raise ConfigurationError(
                f"Path to Xcode project file is invalid: {xcodeproj}"
            )

    decoder = get_option("decoder", args.decoder, config) or "auto"
    if decoder not in DECODER_CHOICES:
        raise ConfigurationError(
            f"Unknown decoder '{decoder}', expected one of: {', '.join(DECODER_CHOICES)}"
        )

    return UpdateOptions(
        provisioning_profile=profile,
        xcodeproj=xcodeproj or None,
        target=get_option("target", args.target, config),
        configuration=get_option("configuration", args.configuration, config),
        decoder=decoder,
        dry_run=args.dry_run,
    )
