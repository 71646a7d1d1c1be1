"""
Go toolchain management for goup.

This module provides functionality for:
- Release metadata lookup and archive selection
- Release download, verification, extraction and installation
- Building Go tip or a CL from source
- Switching the default Go version
"""

from goup.toolchain.models import (
    ArtifactKind,
    GoVersion,
    Release,
    ReleaseFile,
    normalize_version,
)
from goup.toolchain.locator import locate_archive
from goup.toolchain.service import GoReleaseService
from goup.toolchain.store import InstallationStore, InstalledVersion, INSTALLED_MARKER
from goup.toolchain.activation import ActivationSwitch
from goup.toolchain.installer import InstallResult, ReleaseInstaller
from goup.toolchain.source_build import (
    PatchSetRef,
    SourceBuilder,
    TIP_VERSION,
    select_patch_set,
)

__all__ = [
    "ArtifactKind",
    "GoVersion",
    "Release",
    "ReleaseFile",
    "normalize_version",
    "locate_archive",
    "GoReleaseService",
    "InstallationStore",
    "InstalledVersion",
    "INSTALLED_MARKER",
    "ActivationSwitch",
    "InstallResult",
    "ReleaseInstaller",
    "PatchSetRef",
    "SourceBuilder",
    "TIP_VERSION",
    "select_patch_set",
]
