"""Verify-then-reuse-or-clear check for existing download targets.

A download target that already exists is either reused, when it hashes to
the expected digest, or removed before a fresh fetch. Files and unpacked
trees follow the same rule, so both go through ``reuse_or_clear`` with a
different ``CacheCheck``.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .digests import DigestKind
from .errors import FetchIOError
from .hashing import hash_file, hash_tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheCheck:
    """How to test, hash and remove one kind of cached target."""
    kind: DigestKind
    exists: Callable[[Path], bool]
    compute: Callable[[Path], str]
    remove: Callable[[Path], None]


def _remove_file(path: Path) -> None:
    os.unlink(path)


def _remove_tree(path: Path) -> None:
    # A symlinked target is replaced, never followed into
    if path.is_symlink():
        os.unlink(path)
    else:
        shutil.rmtree(path)


FILE_CHECK = CacheCheck(
    kind=DigestKind.FILE,
    exists=Path.is_file,
    compute=hash_file,
    remove=_remove_file,
)

TREE_CHECK = CacheCheck(
    kind=DigestKind.TREE,
    exists=Path.is_dir,
    compute=hash_tree,
    remove=_remove_tree,
)


def reuse_or_clear(path: Path, expected: Optional[str], check: CacheCheck) -> bool:
    """Decide whether an existing target can be reused.

    Args:
        path: Download target
        expected: Normalized digest, or None when no verification is requested
        check: Strategy for the target kind

    Returns:
        True if ``path`` already matches ``expected`` and must be left alone.
        False otherwise; a stale target has been removed by then.

    Raises:
        FetchIOError: If a stale target cannot be removed
    """
    if expected is None or not check.exists(path):
        return False

    actual = check.compute(path)
    if actual == expected:
        logger.debug("Cache hit for %s (%s %s)", path, check.kind.algorithm, actual)
        return True

    logger.debug(
        "Stale %s at %s: expected %s, found %s; removing",
        check.kind.value, path, expected, actual,
    )
    try:
        check.remove(path)
    except OSError as e:
        raise FetchIOError(path, f"Failed to remove stale {check.kind.value} at {path}: {e}") from e
    return False


__all__ = ["CacheCheck", "FILE_CHECK", "TREE_CHECK", "reuse_or_clear"]
