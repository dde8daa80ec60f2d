"""Verified downloads with local reuse.

``Fetcher.download`` fetches a single file and ``Fetcher.download_unpack``
fetches and unpacks a gzip tarball. Both accept an optional expected digest;
when the target already matches it, nothing is fetched. On any failure the
partial or mismatched target is removed before the error is raised, so a
failed call never leaves something that looks like a valid cache entry.

Calls on the same target path must be serialized by the caller (see
``locking.path_lock``); calls on distinct paths are independent.
"""

from pathlib import Path
from typing import Optional, Tuple, Union
import logging
import shutil

from .cache import FILE_CHECK, TREE_CHECK, reuse_or_clear
from .config import FetchConfig, load_config
from .digests import normalize_file_hash, normalize_tree_hash
from .errors import (
    FetchIOError,
    FileHashMismatchError,
    TransportError,
    TreeHashMismatchError,
)
from .extract import extract_tarball
from .hashing import hash_file, hash_tree
from .paths import PathAllocator, TempPathAllocator
from .transport import Transport, TransportResponse, make_transport

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _discard_file(path: Path) -> None:
    """Best-effort removal of a file; failures are only logged."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)


def _discard_tree(path: Path) -> None:
    """Best-effort recursive removal of a directory; failures are only logged."""
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)


class Fetcher:
    """Downloads artifacts through a transport and verifies them.

    Attributes:
        transport: Performs the network requests
        allocator: Supplies fresh paths for defaulted targets and tarballs
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        allocator: Optional[PathAllocator] = None,
        config: Optional[FetchConfig] = None,
    ):
        """Initialize the fetcher.

        Args:
            transport: Transport to use (default: http, https and file)
            allocator: Path allocator (default: unique names in the temp dir)
            config: Configuration for the defaults; loaded when needed
        """
        if config is None and (transport is None or allocator is None):
            config = load_config()
        self.transport = transport if transport is not None else make_transport(config)
        self.allocator = allocator if allocator is not None else TempPathAllocator(config.temp_dir)

    # ============= Public operations =============

    def download(
        self,
        url: str,
        path: Optional[PathLike] = None,
        *,
        file_hash: Optional[str] = None,
    ) -> Path:
        """Download ``url`` to ``path``, verifying its SHA2-256 if given.

        If ``file_hash`` is given and ``path`` already holds a file with that
        digest, the file is returned without any network access. A file with
        a different digest is removed first.

        Args:
            url: Resource to download
            path: Target file (a fresh temporary path if omitted)
            file_hash: Expected SHA2-256 as 64 hex characters, any case

        Returns:
            Path of the downloaded (or reused) file

        Raises:
            HashValidationError: If ``file_hash`` is malformed (before any I/O)
            TransportError: On transport failure or non-success status
            FileHashMismatchError: If the downloaded content has another digest
            FetchIOError: If the body cannot be written to ``path``
        """
        return self.download_with_status(url, path, file_hash=file_hash)[0]

    def download_unpack(
        self,
        url: str,
        path: Optional[PathLike] = None,
        *,
        file_hash: Optional[str] = None,
        tree_hash: Optional[str] = None,
    ) -> Path:
        """Download a ``.tar.gz`` from ``url`` and unpack it into ``path``.

        If ``tree_hash`` is given and ``path`` is already a directory with
        that git tree hash, it is returned without any network access. A
        directory with a different tree hash is removed first. The tarball
        itself goes to a fresh temporary path and is verified against
        ``file_hash`` if given.

        Args:
            url: Tarball to download
            path: Target directory (a fresh temporary path if omitted)
            file_hash: Expected SHA2-256 of the tarball
            tree_hash: Expected git tree SHA1 of the unpacked directory

        Returns:
            Path of the unpacked (or reused) directory

        Raises:
            HashValidationError: If either digest is malformed (before any I/O)
            TransportError: On transport failure or non-success status
            FileHashMismatchError: If the tarball has another digest
            ArchiveError: If the tarball cannot be unpacked
            TreeHashMismatchError: If the unpacked tree has another hash
        """
        return self.download_unpack_with_status(
            url, path, file_hash=file_hash, tree_hash=tree_hash
        )[0]

    # ============= Variants reporting cache hits =============

    def download_with_status(
        self,
        url: str,
        path: Optional[PathLike] = None,
        *,
        file_hash: Optional[str] = None,
    ) -> Tuple[Path, bool]:
        """Same as ``download`` but also returns whether the target was reused."""
        file_hash = normalize_file_hash(file_hash)
        target = Path(path) if path is not None else self.allocator.allocate()

        if reuse_or_clear(target, file_hash, FILE_CHECK):
            return target, True

        response = self._fetch_to(url, target)
        if not response.ok:
            _discard_file(target)
            raise TransportError(url, response.status)

        if file_hash is not None:
            try:
                actual = hash_file(target)
            except OSError as e:
                _discard_file(target)
                raise FetchIOError(target, f"Failed to verify {target}: {e}") from e
            if actual != file_hash:
                _discard_file(target)
                raise FileHashMismatchError(target, file_hash, actual)

        logger.info("Downloaded %s to %s", url, target)
        return target, False

    def download_unpack_with_status(
        self,
        url: str,
        path: Optional[PathLike] = None,
        *,
        file_hash: Optional[str] = None,
        tree_hash: Optional[str] = None,
    ) -> Tuple[Path, bool]:
        """Same as ``download_unpack`` but also returns whether the target was reused."""
        tree_hash = normalize_tree_hash(tree_hash)
        file_hash = normalize_file_hash(file_hash)
        target = Path(path) if path is not None else self.allocator.allocate()

        if reuse_or_clear(target, tree_hash, TREE_CHECK):
            return target, True

        tarball = self.download(url, self.allocator.allocate(), file_hash=file_hash)
        try:
            extract_tarball(tarball, target)
        finally:
            _discard_file(tarball)

        if tree_hash is not None:
            try:
                actual = hash_tree(target)
            except OSError as e:
                _discard_tree(target)
                raise FetchIOError(target, f"Failed to verify {target}: {e}") from e
            if actual != tree_hash:
                _discard_tree(target)
                raise TreeHashMismatchError(target, tree_hash, actual)

        logger.info("Unpacked %s into %s", url, target)
        return target, False

    # ============= Internals =============

    def _fetch_to(self, url: str, target: Path) -> TransportResponse:
        """Stream ``url`` into ``target``, removing the partial file on failure."""
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as sink:
                return self.transport.get(url, sink)
        except OSError as e:
            _discard_file(target)
            raise FetchIOError(target, f"Failed to write {url} to {target}: {e}") from e
        except BaseException:
            _discard_file(target)
            raise


def download(
    url: str,
    path: Optional[PathLike] = None,
    *,
    file_hash: Optional[str] = None,
    fetcher: Optional[Fetcher] = None,
) -> Path:
    """Download ``url`` with a default ``Fetcher``. See ``Fetcher.download``."""
    return (fetcher or Fetcher()).download(url, path, file_hash=file_hash)


def download_unpack(
    url: str,
    path: Optional[PathLike] = None,
    *,
    file_hash: Optional[str] = None,
    tree_hash: Optional[str] = None,
    fetcher: Optional[Fetcher] = None,
) -> Path:
    """Download and unpack with a default ``Fetcher``. See ``Fetcher.download_unpack``."""
    return (fetcher or Fetcher()).download_unpack(
        url, path, file_hash=file_hash, tree_hash=tree_hash
    )
