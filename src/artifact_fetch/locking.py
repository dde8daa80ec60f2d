"""Per-path locking for callers that may fetch to the same target concurrently.

The fetcher itself never locks: two calls racing on one path can clobber each
other. Wrapping calls in ``path_lock`` serializes them across threads and
processes. Lock files sit next to the target and are left behind on purpose;
deleting them would let a waiting process lock a different inode.
"""

import contextlib
import logging
from pathlib import Path
from typing import Iterator, Union

import portalocker

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 300


def lock_path_for(path: Union[str, Path]) -> Path:
    """Sibling lock file for a target: ``<dir>/.<name>.lock``."""
    path = Path(path)
    return path.with_name(f".{path.name}.lock")


@contextlib.contextmanager
def path_lock(path: Union[str, Path], timeout: float = DEFAULT_LOCK_TIMEOUT) -> Iterator[Path]:
    """Hold an exclusive lock for ``path`` for the duration of the block.

    Args:
        path: Download target to protect
        timeout: Seconds to wait for the lock

    Yields:
        The lock file path

    Raises:
        portalocker.exceptions.LockException: If the lock cannot be acquired
    """
    lock_file = lock_path_for(path)
    lock_file.parent.mkdir(parents=True, exist_ok=True)
    with portalocker.Lock(str(lock_file), "w", timeout=timeout):
        logger.debug("Acquired lock %s", lock_file)
        yield lock_file
    logger.debug("Released lock %s", lock_file)
