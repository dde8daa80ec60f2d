"""Verified artifact downloads with local reuse."""

from .api import FetchResult, fetch_archive, fetch_file
from .digests import DigestKind, normalize_file_hash, normalize_hash, normalize_tree_hash
from .errors import (
    ArchiveError,
    ErrorKind,
    FetchError,
    FetchIOError,
    FileHashMismatchError,
    HashValidationError,
    IntegrityError,
    TransportError,
    TreeHashMismatchError,
)
from .fetcher import Fetcher, download, download_unpack
from .hashing import hash_file, hash_tree

__all__ = [
    "ArchiveError",
    "DigestKind",
    "ErrorKind",
    "FetchError",
    "FetchIOError",
    "FetchResult",
    "Fetcher",
    "FileHashMismatchError",
    "HashValidationError",
    "IntegrityError",
    "TransportError",
    "TreeHashMismatchError",
    "download",
    "download_unpack",
    "fetch_archive",
    "fetch_file",
    "hash_file",
    "hash_tree",
    "normalize_file_hash",
    "normalize_hash",
    "normalize_tree_hash",
]
