import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional


@contextmanager
def scratch_file(
    suffix: str, data: Optional[bytes] = None, directory: Optional[Path] = None
) -> Iterator[Path]:
    """Create a uniquely named file in the working directory and always remove it.

    Decoded profiles and extracted certificates pass through these files, so
    they must not outlive the step that created them, whatever the outcome.
    """
    fd, name = tempfile.mkstemp(
        prefix="provsync-", suffix=suffix, dir=directory or Path.cwd()
    )
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as f:
            if data is not None:
                f.write(data)
        yield path
    finally:
        path.unlink(missing_ok=True)
