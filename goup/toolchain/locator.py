"""
Selects the archive file of a release for a target platform.
"""

import logging

from goup.core.exceptions import ArchiveNotFoundError
from .models import ArtifactKind, Release, ReleaseFile

logger = logging.getLogger(__name__)

# (os, arch) -> arch name used in published file names
ARCH_ALIASES = {
    ("linux", "arm"): "armv6l",
}


def published_arch(os_name: str, arch: str) -> str:
    """Map a GOARCH to the architecture tag Go publishes archives under."""
    return ARCH_ALIASES.get((os_name, arch), arch)


def locate_archive(release: Release, os_name: str, arch: str) -> ReleaseFile:
    """
    Find the archive of a release matching the target platform.

    Args:
        release: Release metadata
        os_name: Target GOOS
        arch: Target GOARCH (aliased before matching, e.g. linux/arm -> armv6l)

    Returns:
        The matching archive file

    Raises:
        ArchiveNotFoundError: If the release has no archive for os/arch
    """
    arch = published_arch(os_name, arch)

    for f in release.files:
        if f.os == os_name and f.arch == arch and f.kind == ArtifactKind.ARCHIVE:
            logger.debug(f"Selected {f.filename} for {os_name}/{arch}")
            return f

    raise ArchiveNotFoundError(os_name, arch)
