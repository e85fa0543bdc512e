import argparse
import sys
from pathlib import Path
from rich.panel import Panel
from rich.text import Text
from rich_argparse import RichHelpFormatter
from provsync.arguments import add_decoder_argument, add_update_arguments
from provsync.logger import get_console
from provsync.src.constants.build_settings import SIGNING_KEYS
from provsync.src.constants.cli_constants import (
    __version__,
    get_banner_text,
    APP_DESCRIPTION,
)


class ProvsyncHelpFormatter(RichHelpFormatter):
    """Help formatter with the provsync colour scheme."""

    styles = {
        **RichHelpFormatter.styles,
        "argparse.args": "yellow",
        "argparse.groups": "bold magenta",
        "argparse.metavar": "green",
    }
    group_name_formatter = str.title

    def __init__(self, prog):
        super().__init__(prog, max_help_position=30, width=100)


def display_banner():
    """Show what provsync writes before the help text."""
    body = Text.assemble(
        get_banner_text(),
        (f" v{__version__}\n", "blue"),
        (APP_DESCRIPTION, "italic"),
        "\n\nBuild settings written: ",
        (", ".join(SIGNING_KEYS), "cyan"),
    )
    get_console().print(Panel(body, border_style="blue", expand=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="provsync",
        description=f"provsync: {APP_DESCRIPTION}",
        formatter_class=ProvsyncHelpFormatter,
        add_help=True,
    )

    parser.add_argument(
        "--version", action="version", version=f"provsync {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command")

    # Update command
    update_parser = subparsers.add_parser(
        "update",
        help="Update an xcodeproj from a provisioning profile",
        formatter_class=ProvsyncHelpFormatter,
        description="Write team, signing identity and profile settings into the build configurations of an Xcode project.",
    )
    add_update_arguments(update_parser)

    # Inspect command
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Show the signing settings a provisioning profile provides",
        formatter_class=ProvsyncHelpFormatter,
        description="Decode a provisioning profile and print the build settings update would write.",
    )
    inspect_parser.add_argument(
        "provisioning_profile", type=Path, help="Path to the .mobileprovision file"
    )
    add_decoder_argument(inspect_parser)

    return parser


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    # Display the banner before the help text
    if not argv or "-h" in argv or "--help" in argv:
        display_banner()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "update":
        from provsync.commands.update import run_update_command

        return run_update_command(args)
    elif args.command == "inspect":
        from provsync.commands.inspect import run_inspect_command

        return run_inspect_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
