"""Hashing utilities for downloaded files and unpacked trees.

Files are identified by their SHA2-256 content digest. Directories are
identified by the SHA1 of the git tree object they would produce, so an
unpacked archive can be checked against the tree hash a git checkout of the
same content reports.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union
import hashlib
import os
import stat

from .constants import HASH_CHUNK_SIZE

PathLike = Union[str, Path]

# git tree entry modes
MODE_FILE = "100644"
MODE_EXECUTABLE = "100755"
MODE_SYMLINK = "120000"
MODE_DIR = "40000"

EMPTY_TREE_HASH = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


def hash_file(path: PathLike) -> str:
    """Compute SHA256 hash of file contents.

    Args:
        path: Path to file to hash

    Returns:
        64-character lowercase hex digest

    Raises:
        OSError: If the file cannot be opened or read
    """
    sha256 = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            sha256.update(chunk)
    return sha256.hexdigest()


def git_mode(path: PathLike) -> Optional[str]:
    """Return the git tree mode for a filesystem entry (symlinks not followed).

    Sockets, FIFOs and device files have no git mode; None is returned for them.
    """
    st = os.lstat(path)
    if stat.S_ISLNK(st.st_mode):
        return MODE_SYMLINK
    if stat.S_ISDIR(st.st_mode):
        return MODE_DIR
    if stat.S_ISREG(st.st_mode):
        return MODE_EXECUTABLE if st.st_mode & stat.S_IXUSR else MODE_FILE
    return None


def _blob_digest(path: PathLike) -> bytes:
    """Raw SHA1 digest of the git blob for a file or symlink."""
    sha1 = hashlib.sha1()
    if os.path.islink(path):
        target = os.readlink(os.fsencode(path))
        sha1.update(b"blob %d\x00" % len(target))
        sha1.update(target)
        return sha1.digest()

    size = os.lstat(path).st_size
    sha1.update(b"blob %d\x00" % size)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            sha1.update(chunk)
    return sha1.digest()


def blob_hash(path: PathLike) -> str:
    """Compute the git blob SHA1 of a file (or of a symlink's target text)."""
    return _blob_digest(path).hex()


TreeEntry = Tuple[bytes, str, bytes]  # (name, mode, raw digest)


def _tree_entries(root: Path) -> List[TreeEntry]:
    """Collect the git tree entries of a directory, recursing into subtrees."""
    entries: List[TreeEntry] = []
    with os.scandir(root) as it:
        names = [entry.name for entry in it if entry.name != ".git"]

    for name in names:
        child = root / name
        mode = git_mode(child)
        if mode is None:
            # git does not track sockets, FIFOs or devices
            continue
        if mode == MODE_DIR:
            sub_entries = _tree_entries(child)
            if not sub_entries:
                # git cannot represent empty directories
                continue
            digest = _tree_object(sub_entries)
        else:
            digest = _blob_digest(child)
        entries.append((os.fsencode(name), mode, digest))
    return entries


def _tree_object(entries: List[TreeEntry]) -> bytes:
    """Raw SHA1 of the git tree object built from ``entries``."""
    # git orders directories as if their name had a trailing slash
    entries.sort(key=lambda e: e[0] + b"/" if e[1] == MODE_DIR else e[0])

    body = b"".join(
        mode.encode("ascii") + b" " + name + b"\x00" + digest
        for name, mode, digest in entries
    )
    sha1 = hashlib.sha1()
    sha1.update(b"tree %d\x00" % len(body))
    sha1.update(body)
    return sha1.digest()


def hash_tree(path: PathLike) -> str:
    """Compute the git tree SHA1 of a directory.

    The digest depends only on entry names, contents, executable bits,
    symlink targets and the shape of the tree, never on traversal order.
    Empty directories, special files and ``.git`` entries are ignored,
    as git does.

    Args:
        path: Directory to hash

    Returns:
        40-character lowercase hex digest

    Raises:
        OSError: If the directory cannot be traversed
    """
    return _tree_object(_tree_entries(Path(path))).hex()


__all__ = [
    "EMPTY_TREE_HASH",
    "blob_hash",
    "git_mode",
    "hash_file",
    "hash_tree",
]
