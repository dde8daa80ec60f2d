"""Result-returning API for artifact-fetch.

The functions here mirror ``Fetcher.download`` and ``Fetcher.download_unpack``
but never raise for fetch failures. Each call returns a ``FetchResult`` whose
``kind`` tells the caller which of the four failure categories occurred, so
callers can branch on the outcome instead of catching exceptions:

    >>> result = fetch_file(url, path, file_hash=expected)
    >>> if result.ok:
    ...     use(result.path)
    ... elif result.kind is ErrorKind.INTEGRITY:
    ...     report_tampering(result.message)

Programming errors (for example an invalid bit length passed to
``normalize_hash``) still propagate.
"""

from pathlib import Path
from typing import Callable, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import ErrorKind, FetchError
from .fetcher import Fetcher

PathLike = Union[str, Path]


class FetchResult(BaseModel):
    """Outcome of a fetch operation."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    url: str
    path: Optional[Path] = None      # Set on success
    cache_hit: bool = False          # True if existing content was reused
    kind: Optional[ErrorKind] = None # Set on failure
    message: Optional[str] = None
    error: Optional[BaseException] = Field(default=None, exclude=True)

    @property
    def ok(self) -> bool:
        return self.kind is None

    def unwrap(self) -> Path:
        """Return the path, re-raising the captured error on failure."""
        if self.error is not None:
            raise self.error
        return self.path


def _run(url: str, op: Callable[[], Tuple[Path, bool]]) -> FetchResult:
    try:
        path, cache_hit = op()
    except FetchError as e:
        return FetchResult(url=url, kind=e.kind, message=str(e), error=e)
    except OSError as e:
        # Read failures while hashing or clearing stale targets
        return FetchResult(url=url, kind=ErrorKind.IO, message=str(e), error=e)
    return FetchResult(url=url, path=path, cache_hit=cache_hit)


def fetch_file(
    url: str,
    path: Optional[PathLike] = None,
    *,
    file_hash: Optional[str] = None,
    fetcher: Optional[Fetcher] = None,
) -> FetchResult:
    """Download a single file, returning the outcome as a value.

    Args:
        url: Resource to download
        path: Target file (a fresh temporary path if omitted)
        file_hash: Expected SHA2-256 digest
        fetcher: Fetcher to use (default transport and allocator if omitted)

    Returns:
        FetchResult with ``path`` on success or ``kind``/``message`` on failure
    """
    fetcher = fetcher or Fetcher()
    return _run(url, lambda: fetcher.download_with_status(url, path, file_hash=file_hash))


def fetch_archive(
    url: str,
    path: Optional[PathLike] = None,
    *,
    file_hash: Optional[str] = None,
    tree_hash: Optional[str] = None,
    fetcher: Optional[Fetcher] = None,
) -> FetchResult:
    """Download and unpack a ``.tar.gz``, returning the outcome as a value.

    Args:
        url: Tarball to download
        path: Target directory (a fresh temporary path if omitted)
        file_hash: Expected SHA2-256 digest of the tarball
        tree_hash: Expected git tree SHA1 of the unpacked directory
        fetcher: Fetcher to use (default transport and allocator if omitted)

    Returns:
        FetchResult with ``path`` on success or ``kind``/``message`` on failure
    """
    fetcher = fetcher or Fetcher()
    return _run(
        url,
        lambda: fetcher.download_unpack_with_status(
            url, path, file_hash=file_hash, tree_hash=tree_hash
        ),
    )
