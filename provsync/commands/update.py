import sys

from rich.markup import escape

from dotenv import load_dotenv

from provsync.arguments import UpdateOptions, create_parser, create_update_options
from provsync.logger import get_console
from provsync.src.core.profile_sync import ProfileSync
from provsync.src.core.signing_tools import get_signing_tools
from provsync.src.errors import ProvsyncError


def print_configuration_summary(console, options: UpdateOptions) -> None:
    """Print the configuration summary."""
    console.print("\n[bold blue]Update Configuration:[/]")
    console.print(f"[cyan]Provisioning profile:[/] {escape(str(options.provisioning_profile))}")
    console.print(f"[cyan]Project:[/] {escape(str(options.xcodeproj or 'first *.xcodeproj found'))}")
    console.print(f"[cyan]Target filter:[/] {escape(options.target or 'all targets')}")
    console.print(
        f"[cyan]Configuration filter:[/] {escape(options.configuration or 'all configurations')}"
    )
    if options.dry_run:
        console.print("[cyan]Dry run:[/] project will not be saved")
    console.print()


def main(parsed_args=None) -> int:
    """Main update function that does the actual work.

    Args:
        parsed_args: Optional pre-parsed arguments (from CLI)
    """
    console = get_console()
    load_dotenv()

    if parsed_args is None:
        # Only parse arguments if not provided (direct script execution)
        args = create_parser().parse_args()
    else:
        args = parsed_args

    try:
        options = create_update_options(args)
        print_configuration_summary(console, options)

        sync = ProfileSync(get_signing_tools(options.decoder), console=console)
        sync.update_project(
            options.provisioning_profile,
            xcodeproj=options.xcodeproj,
            target=options.target,
            configuration=options.configuration,
            dry_run=options.dry_run,
        )
    except ProvsyncError as e:
        console.print(f"\n[red]Error:[/] {escape(str(e))}")
        return 1
    return 0


def run_update_command(args):
    """Entry point for the update command from CLI"""
    return main(parsed_args=args)


# For direct script execution - route through the CLI
if __name__ == "__main__":
    from provsync.cli import main as cli_main

    sys.exit(cli_main())
