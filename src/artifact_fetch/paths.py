"""Allocation of fresh download locations."""

import tempfile
import uuid
from pathlib import Path
from typing import Optional, Protocol, Union

from .constants import TEMP_PREFIX


class PathAllocator(Protocol):
    """
    Protocol for producing fresh, unused target paths.

    Used when the caller gives no path, and for the intermediate tarball of
    an archive download.
    """

    def allocate(self) -> Path:
        """Return a path that does not exist yet."""
        ...


class TempPathAllocator:
    """Allocate unique names under a temporary directory.

    Nothing is created on disk; the returned path is only guaranteed not to
    exist at the moment it is handed out.
    """

    def __init__(self, root: Optional[Union[str, Path]] = None, prefix: str = TEMP_PREFIX):
        self.root = Path(root) if root else Path(tempfile.gettempdir())
        self.prefix = prefix

    def allocate(self) -> Path:
        while True:
            candidate = self.root / f"{self.prefix}{uuid.uuid4().hex}"
            if not candidate.exists() and not candidate.is_symlink():
                return candidate
