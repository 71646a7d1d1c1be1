"""
Core functionality for goup.

This package contains the foundational modules that other components depend on.
"""

from .directory import (
    get_goup_dir,
    get_current_link,
    get_version_dir,
    get_config_file,
)

from .platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .exceptions import (
    GoupError,
    ConfigError,
    NotFoundError,
    ArchiveNotFoundError,
    BinaryReleaseNotFoundError,
    ChangeListNotFoundError,
    VersionNotInstalledError,
    NoMatchingReleaseError,
    InvalidVersionError,
    IntegrityError,
    SizeMismatchError,
    ChecksumMismatchError,
    ShortWriteError,
    UnsafeInputError,
    UnsupportedArchiveError,
    UnsafeArchiveEntryError,
    UnsupportedEntryTypeError,
    ExtractionError,
    ReleaseServiceError,
    DownloadError,
    BuildStepError,
    ConfirmationDeclinedError,
)

__all__ = [
    "get_goup_dir",
    "get_current_link",
    "get_version_dir",
    "get_config_file",
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    "GoupError",
    "ConfigError",
    "NotFoundError",
    "ArchiveNotFoundError",
    "BinaryReleaseNotFoundError",
    "ChangeListNotFoundError",
    "VersionNotInstalledError",
    "NoMatchingReleaseError",
    "InvalidVersionError",
    "IntegrityError",
    "SizeMismatchError",
    "ChecksumMismatchError",
    "ShortWriteError",
    "UnsafeInputError",
    "UnsupportedArchiveError",
    "UnsafeArchiveEntryError",
    "UnsupportedEntryTypeError",
    "ExtractionError",
    "ReleaseServiceError",
    "DownloadError",
    "BuildStepError",
    "ConfirmationDeclinedError",
]
