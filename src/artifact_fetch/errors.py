"""Custom exceptions for artifact-fetch.

Every failure a fetch can report belongs to exactly one ErrorKind. The core
raises these exceptions; the result API in ``api.py`` captures them so that
callers can branch on ``kind`` instead of catching.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Union


class ErrorKind(str, Enum):
    """Closed set of failure categories."""
    VALIDATION = "validation"  # Malformed digest input, reported before any I/O
    TRANSPORT = "transport"    # Non-success status or transport-level failure
    INTEGRITY = "integrity"    # Computed digest disagrees with the expected one
    IO = "io"                  # Local read/write/extract failure


class FetchError(RuntimeError):
    """Base class for all fetch-related errors."""
    kind: ErrorKind


# Validation Errors
class HashValidationError(FetchError, ValueError):
    """Digest supplied by the caller is not valid hex of the right length."""
    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, value: str, bits: int):
        self.value = value
        self.bits = bits
        super().__init__(message)


# Transport Errors
class TransportError(FetchError):
    """Download failed at the transport level or returned a bad status."""
    kind = ErrorKind.TRANSPORT

    def __init__(self, url: str, status: Optional[int] = None, message: Optional[str] = None):
        self.url = url
        self.status = status
        if message is None:
            message = f"Download {url} failed, status code {status}"
        super().__init__(message)


# Integrity Errors
class IntegrityError(FetchError):
    """Base class for digest mismatches."""
    kind = ErrorKind.INTEGRITY
    title = "Hash mismatch!"
    algorithm = ""

    def __init__(self, path: Union[str, Path], expected: str, actual: str):
        self.path = Path(path)
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{self.title}\n"
            f"  Expected {self.algorithm}: {expected}\n"
            f"  Received {self.algorithm}: {actual}"
        )


class FileHashMismatchError(IntegrityError):
    """Downloaded file content does not match the expected SHA2-256 digest."""
    title = "File hash mismatch!"
    algorithm = "SHA2-256"


class TreeHashMismatchError(IntegrityError):
    """Unpacked directory does not match the expected git tree SHA1."""
    title = "Tree hash mismatch!"
    algorithm = "SHA1"


# I/O Errors
class FetchIOError(FetchError):
    """Local filesystem failure while writing or unpacking.

    The underlying OSError (or archive error) is chained as ``__cause__``.
    """
    kind = ErrorKind.IO

    def __init__(self, path: Union[str, Path], message: str):
        self.path = Path(path)
        super().__init__(message)


class ArchiveError(FetchIOError):
    """Tarball could not be decompressed or unpacked."""
    pass
