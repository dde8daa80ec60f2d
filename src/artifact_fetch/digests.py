"""Hash string normalization and validity checking.

User-supplied digests are validated once, at the top of each public
operation, and compared only in their normalized lowercase form afterwards.
"""

import re
from enum import Enum
from typing import Optional

from .constants import FILE_HASH_BITS, TREE_HASH_BITS
from .errors import HashValidationError

_HEX = re.compile(r"^[0-9a-fA-F]*$")


def normalize_hash(bits: int, value: Optional[str]) -> Optional[str]:
    """Validate a hex digest and return it lowercased.

    Args:
        bits: Expected digest size in bits (must fill whole hex characters)
        value: Digest supplied by the caller, or None

    Returns:
        Lowercase hex digest, or None when no digest was supplied

    Raises:
        ValueError: If ``bits`` is not a positive multiple of 4 (caller bug)
        HashValidationError: If ``value`` has the wrong length or non-hex
            characters; both problems are reported together
    """
    if value is None:
        return None
    if bits <= 0 or bits % 4 != 0:
        raise ValueError(f"Invalid number of bits for a hash: {bits}")

    length = bits // 4
    len_ok = len(value) == length
    chars_ok = _HEX.fullmatch(value) is not None
    if len_ok and chars_ok:
        return value.lower()

    problems = []
    if not chars_ok:
        if value.isascii():
            problems.append("contains non-hexadecimal characters")
        else:
            problems.append("is non-ASCII")
    if not len_ok:
        problems.append(f"has the wrong length ({len(value)})")

    raise HashValidationError(
        f"Hash value must be {length} hexadecimal characters ({bits} bits); "
        f"Given hash value {' and '.join(problems)}: {value!r}",
        value=value,
        bits=bits,
    )


def normalize_file_hash(value: Optional[str]) -> Optional[str]:
    """Normalize a SHA2-256 file digest."""
    return normalize_hash(FILE_HASH_BITS, value)


def normalize_tree_hash(value: Optional[str]) -> Optional[str]:
    """Normalize a SHA1 git tree digest."""
    return normalize_hash(TREE_HASH_BITS, value)


class DigestKind(str, Enum):
    """The two digest kinds in use, with their size and display label."""
    FILE = "file"
    TREE = "tree"

    @property
    def bits(self) -> int:
        return FILE_HASH_BITS if self is DigestKind.FILE else TREE_HASH_BITS

    @property
    def algorithm(self) -> str:
        return "SHA2-256" if self is DigestKind.FILE else "SHA1"

    def normalize(self, value: Optional[str]) -> Optional[str]:
        return normalize_hash(self.bits, value)


__all__ = [
    "DigestKind",
    "normalize_hash",
    "normalize_file_hash",
    "normalize_tree_hash",
]
