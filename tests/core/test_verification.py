"""
Unit tests for SHA-256 verification.
"""

import hashlib

import pytest

from goup.core.exceptions import ChecksumMismatchError, IntegrityError
from goup.core.verification import (
    compute_file_hash,
    normalize_digest,
    verify_sha256,
)


@pytest.fixture
def archive_file(tmp_path):
    """A file larger than one hashing chunk."""
    path = tmp_path / "go1.21.5.linux-amd64.tar.gz"
    path.write_bytes(b"go release bytes\n" * 2000)
    return path


class TestComputeFileHash:
    """Test compute_file_hash function."""

    def test_matches_hashlib(self, archive_file):
        """Test digest equals hashlib's digest of the whole file."""
        expected = hashlib.sha256(archive_file.read_bytes()).hexdigest()
        assert compute_file_hash(archive_file) == expected

    def test_missing_file(self, tmp_path):
        """Test missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            compute_file_hash(tmp_path / "missing.tar.gz")


class TestVerifySha256:
    """Test verify_sha256 function."""

    def test_matching_digest(self, archive_file):
        """Test matching digest passes silently."""
        digest = hashlib.sha256(archive_file.read_bytes()).hexdigest()
        verify_sha256(archive_file, digest)

    def test_digest_is_case_and_whitespace_insensitive(self, archive_file):
        """Test expected digest is normalized before comparison."""
        digest = hashlib.sha256(archive_file.read_bytes()).hexdigest()
        verify_sha256(archive_file, f"  {digest.upper()}\n")

    def test_mismatch(self, archive_file):
        """Test mismatching digest raises ChecksumMismatchError."""
        with pytest.raises(ChecksumMismatchError, match="corrupt\\? does not have expected SHA-256") as exc_info:
            verify_sha256(archive_file, "a" * 64)

        assert isinstance(exc_info.value, IntegrityError)
        assert exc_info.value.expected == "a" * 64

    def test_repeatable(self, archive_file):
        """Test verification does not modify the file."""
        digest = hashlib.sha256(archive_file.read_bytes()).hexdigest()
        before = archive_file.read_bytes()

        verify_sha256(archive_file, digest)
        verify_sha256(archive_file, digest)

        assert archive_file.read_bytes() == before


def test_normalize_digest():
    """Test digest normalization."""
    assert normalize_digest(" ABCdef\n") == "abcdef"
