from rich.text import Text

__version__ = "0.1.0"

APP_DESCRIPTION = "Sync Xcode signing settings with a provisioning profile"


def get_banner_text() -> Text:
    """Return the styled banner shown above the help output."""
    banner = Text()
    banner.append("prov", style="bold cyan")
    banner.append("sync", style="bold magenta")
    return banner
