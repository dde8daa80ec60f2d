"""Unpacking of gzip-compressed tarballs.

Only gzip framing is supported. Decompression and unpacking run as a single
streaming pass over the file, and the ``data`` extraction filter rejects
members that would land outside the destination (absolute paths, ``..``
components, links escaping the tree, device files).
"""

import logging
import tarfile
import zlib
from pathlib import Path
from typing import Union

from .errors import ArchiveError

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


def is_gzip(path: Union[str, Path]) -> bool:
    """Check the gzip magic bytes at the start of a file."""
    with open(path, "rb") as f:
        return f.read(len(GZIP_MAGIC)) == GZIP_MAGIC


def extract_tarball(tarball: Union[str, Path], dest: Union[str, Path]) -> Path:
    """Unpack a ``.tar.gz`` file into ``dest``.

    Args:
        tarball: Path to the gzip-compressed tar file
        dest: Directory to unpack into (created if missing)

    Returns:
        The destination directory

    Raises:
        ArchiveError: If the file is not gzip, is corrupt, contains unsafe
            members, or cannot be written out. The original exception is
            chained.
    """
    tarball = Path(tarball)
    dest = Path(dest)

    try:
        if not is_gzip(tarball):
            raise ArchiveError(
                tarball,
                f"Unsupported archive format for {tarball}: expected a gzip-compressed tarball",
            )
        dest.mkdir(parents=True, exist_ok=True)
        with tarball.open("rb") as raw:
            with tarfile.open(fileobj=raw, mode="r|gz") as tar:
                tar.extractall(dest, filter="data")
    except ArchiveError:
        raise
    except (tarfile.TarError, zlib.error, EOFError, OSError) as e:
        raise ArchiveError(tarball, f"Failed to extract {tarball} into {dest}: {e}") from e

    logger.debug("Extracted %s into %s", tarball, dest)
    return dest


__all__ = ["GZIP_MAGIC", "extract_tarball", "is_gzip"]
