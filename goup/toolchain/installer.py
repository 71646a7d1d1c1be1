"""
Release installation pipeline.

This module installs a Go release into its version directory by
coordinating the archive locator, the download service, SHA-256
verification, safe extraction and the installation store.
"""

import http
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from goup.config import GoupConfig
from goup.core.download import DownloadService
from goup.core.exceptions import (
    BinaryReleaseNotFoundError,
    DownloadError,
    ReleaseServiceError,
    SizeMismatchError,
)
from goup.core.filesystem import extract_archive
from goup.core.verification import verify_sha256
from .locator import locate_archive
from .models import Release, ReleaseFile
from .service import GoReleaseService
from .store import InstallationStore

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of a release installation."""

    version: str
    """Canonical version, e.g. 'go1.21.5'"""

    path: Path
    """Installation directory"""

    archive_path: Optional[Path]
    """Archive kept in the installation directory (None if already installed)"""

    was_cached: bool
    """Whether the version was already installed (no network access)"""

    downloaded: bool
    """Whether the archive was fetched during this install"""


class ReleaseInstaller:
    """
    Installs Go releases from the download host.

    The installation runs these steps, aborting on the first failure:
    1. Check the completion marker (already installed: done, no network)
    2. Locate the archive for the target platform
    3. Probe the archive URL
    4. Download the archive unless a file of the expected size is present
    5. Verify its SHA-256 digest
    6. Extract it into the version directory
    7. Write the completion marker

    Nothing is retried here; transient network failures are retried by
    the download service.

    Example:
        >>> installer = ReleaseInstaller(load_config())
        >>> result = installer.install(release)
        >>> print(f"Installed at: {result.path}")
    """

    def __init__(
        self,
        config: GoupConfig,
        store: Optional[InstallationStore] = None,
        downloads: Optional[DownloadService] = None,
        service: Optional[GoReleaseService] = None,
    ):
        """
        Initialize the installer.

        Args:
            config: Resolved goup configuration
            store: Installation store (default: one rooted at config.goup_dir)
            downloads: Download service (default: a new DownloadService)
            service: Release service building archive URLs (default: one
                for config.host)
        """
        self.config = config
        self.store = store or InstallationStore(config.goup_dir)
        self.downloads = downloads or DownloadService()
        self.service = service or GoReleaseService(config.host)

    def install(
        self,
        release: Release,
        progress: Optional[Callable[[int, int], None]] = None,
    ) -> InstallResult:
        """
        Install a release.

        Args:
            release: Release metadata
            progress: Optional byte-count sink for the download

        Returns:
            InstallResult

        Raises:
            ArchiveNotFoundError: No archive for the target platform
            BinaryReleaseNotFoundError: The host has no such archive (404)
            ReleaseServiceError: The probe returned another non-200 status
            DownloadError: The download failed
            SizeMismatchError: Downloaded size differs from the server size
            ChecksumMismatchError: SHA-256 mismatch
            UnsafeInputError: The archive cannot be extracted safely
        """
        version = release.version
        target_dir = self.store.version_dir(version)

        if self.store.is_installed(target_dir):
            logger.info(f"{version}: already installed in {target_dir}")
            return InstallResult(
                version=version,
                path=target_dir,
                archive_path=None,
                was_cached=True,
                downloaded=False,
            )

        archive = locate_archive(release, self.config.os, self.config.arch)
        url = self.service.archive_url(archive)
        expected_size = self._probe(version, archive, url)

        self.store.ensure_dir(target_dir)
        archive_path = target_dir / archive.filename
        downloaded = self._acquire(url, archive_path, expected_size, progress)

        verify_sha256(archive_path, archive.sha256)

        logger.info(f"Unpacking {archive_path} ...")
        extract_archive(archive_path, target_dir)

        self.store.mark_installed(target_dir)
        logger.info(f"Success: {version} installed in {target_dir}")

        return InstallResult(
            version=version,
            path=target_dir,
            archive_path=archive_path,
            was_cached=False,
            downloaded=downloaded,
        )

    def _probe(self, version: str, archive: ReleaseFile, url: str) -> int:
        """
        Check the archive exists on the host and return its size.

        The server content length is authoritative; the size from the
        release index is used only when the server does not report one.
        """
        status, content_length = self.downloads.head_size(url)

        if status == http.HTTPStatus.NOT_FOUND:
            raise BinaryReleaseNotFoundError(
                version, self.config.os, self.config.arch, url
            )
        if status != http.HTTPStatus.OK:
            raise ReleaseServiceError(
                f"server returned {_status_text(status)} checking size of {url}"
            )

        return content_length if content_length >= 0 else archive.size

    def _acquire(
        self,
        url: str,
        archive_path: Path,
        expected_size: int,
        progress: Optional[Callable[[int, int], None]],
    ) -> bool:
        """
        Download the archive unless a file of expected_size is present.

        Returns:
            True if the archive was downloaded
        """
        try:
            existing_size = archive_path.stat().st_size
        except FileNotFoundError:
            existing_size = None

        if existing_size == expected_size:
            logger.info(f"Using previously downloaded {archive_path}")
            return False

        try:
            self.downloads.download(url, archive_path, progress)
        except DownloadError as e:
            raise DownloadError(f"error downloading {url}: {e}") from e

        size = archive_path.stat().st_size
        if size != expected_size:
            raise SizeMismatchError(archive_path, size, expected_size)
        return True


def _status_text(status: int) -> str:
    try:
        return f"{status} {http.HTTPStatus(status).phrase}"
    except ValueError:
        return str(status)

