import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.markup import escape
from rich.table import Table

from provsync.logger import get_console
from provsync.src.core.profile_sync import ProfileSync
from provsync.src.core.signing_tools import get_signing_tools
from provsync.src.errors import ProvsyncError
from provsync.src.utils.config_loader import get_option


def run_inspect_command(args) -> int:
    """Print the build settings a profile would write, without touching a project."""
    console = get_console()
    load_dotenv()

    profile: Path = args.provisioning_profile
    if not profile.exists():
        console.print(f"[red]Error:[/] Provisioning profile not found: {escape(str(profile))}")
        return 1

    try:
        decoder = get_option("decoder", args.decoder) or "auto"
        sync = ProfileSync(get_signing_tools(decoder), console=console)
        settings = sync.read_signing_settings(profile)
    except ProvsyncError as e:
        console.print(f"\n[red]Error:[/] {escape(str(e))}")
        return 1

    table = Table(title=f"Build settings from {escape(profile.name)}")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for key, value in settings.as_build_settings().items():
        table.add_row(escape(key), escape(value))
    console.print(table)
    return 0


if __name__ == "__main__":
    from provsync.cli import main as cli_main

    sys.exit(cli_main())
