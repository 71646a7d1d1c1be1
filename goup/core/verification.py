"""
SHA-256 verification of downloaded release archives.

The file is streamed through the hash in fixed-size chunks so archives of
any size are verified without being loaded into memory. Verification is
read-only and may be repeated any number of times with the same result.
"""

import hashlib
import logging
import secrets
from pathlib import Path
from typing import Union

from .exceptions import ChecksumMismatchError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def compute_file_hash(file_path: Union[str, Path]) -> str:
    """
    Compute the SHA-256 digest of a file.

    Args:
        file_path: Path to file

    Returns:
        Lower-case hex string of the digest

    Raises:
        FileNotFoundError: If file doesn't exist

    Example:
        >>> digest = compute_file_hash(Path('go1.21.5.linux-amd64.tar.gz'))
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    hasher = hashlib.sha256()
    with open(file_path, "rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            hasher.update(chunk)

    return hasher.hexdigest()


def normalize_digest(digest: str) -> str:
    """Strip surrounding whitespace and lower-case a hex digest."""
    return digest.strip().lower()


def verify_sha256(file_path: Union[str, Path], expected_hash: str) -> None:
    """
    Verify a file matches the expected SHA-256 digest.

    The expected digest is compared case- and whitespace-insensitively,
    using a constant-time comparison.

    Args:
        file_path: File to verify
        expected_hash: Expected digest (hex)

    Raises:
        FileNotFoundError: If file doesn't exist
        ChecksumMismatchError: If the digest differs
    """
    expected = normalize_digest(expected_hash)
    actual = compute_file_hash(file_path)

    if not _constant_time_compare(actual, expected):
        raise ChecksumMismatchError(file_path, expected, actual)

    logger.debug(f"SHA-256 verified for {file_path}")


def _constant_time_compare(a: str, b: str) -> bool:
    """Compare two strings in constant time."""
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
