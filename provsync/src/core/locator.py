from pathlib import Path
from typing import Optional

from provsync.src.errors import ConfigurationError

MANIFEST_NAME = "project.pbxproj"


def find_xcodeproj(search_dir: Optional[Path] = None) -> Optional[Path]:
    """Return the first *.xcodeproj entry in search_dir.

    The order is whatever the file system listing yields, so with several
    projects present the pick is not stable. Pass --xcodeproj in that case.
    """
    search_dir = search_dir or Path.cwd()
    return next(search_dir.glob("*.xcodeproj"), None)


def locate_project_manifest(
    xcodeproj: Optional[Path] = None, search_dir: Optional[Path] = None
) -> Path:
    """Resolve the project.pbxproj file to update."""
    project_dir = Path(xcodeproj) if xcodeproj else find_xcodeproj(search_dir)
    if project_dir is None:
        manifest = (search_dir or Path.cwd()) / "*.xcodeproj" / MANIFEST_NAME
    elif project_dir.name == MANIFEST_NAME:
        manifest = project_dir
    else:
        manifest = project_dir / MANIFEST_NAME

    if not manifest.is_file():
        raise ConfigurationError(
            f"Could not find path to project config '{manifest}'. "
            "Pass the path to your project (NOT workspace!)"
        )
    return manifest
