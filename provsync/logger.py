from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=1)
def get_console() -> Console:
    """Shared console for status lines and errors.

    Highlighting is off so team ids and profile UUIDs print as they appear in
    the project file, and log lines carry no source location column.
    """
    return Console(highlight=False, log_path=False)
