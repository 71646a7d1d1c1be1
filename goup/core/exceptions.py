"""
Centralized exception hierarchy for goup.

Every failure raised by the install, activation and source-build pipeline
derives from GoupError so the CLI can surface it with a single handler.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class GoupError(Exception):
    """Base exception for all goup errors."""

    pass


class ConfigError(GoupError):
    """Raised when the configuration file cannot be loaded."""

    pass


# ============================================================================
# Not-found Exceptions
# ============================================================================


class NotFoundError(GoupError):
    """Base exception when a release, CL or installation cannot be found."""

    pass


class ArchiveNotFoundError(NotFoundError):
    """Raised when a release publishes no archive for the target platform."""

    def __init__(self, os_name: str, arch: str):
        self.os = os_name
        self.arch = arch
        super().__init__(f"target os {os_name} arch {arch} archive not found")


class BinaryReleaseNotFoundError(NotFoundError):
    """Raised when the download host answers 404 for an archive URL."""

    def __init__(self, version: str, os_name: str, arch: str, url: str):
        self.version = version
        self.url = url
        super().__init__(
            f"no binary release of {version} for {os_name}/{arch} at {url}"
        )


class ChangeListNotFoundError(NotFoundError):
    """Raised when no patch set exists upstream for a CL number."""

    def __init__(self, cl: str):
        self.cl = cl
        super().__init__(f"CL {cl} not found")


class VersionNotInstalledError(NotFoundError):
    """Raised when activating or removing a version that is not installed."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(
            f"Go version {version} is not installed. "
            "Install it with `goup install`."
        )


class NoMatchingReleaseError(NotFoundError):
    """No release (or tag) matched the requested version."""

    pass


class InvalidVersionError(GoupError, ValueError):
    """Version string is not a Go release version."""

    pass


# ============================================================================
# Integrity Exceptions
# ============================================================================


class IntegrityError(GoupError):
    """Base exception for size and digest mismatches."""

    pass


class SizeMismatchError(IntegrityError):
    """Downloaded file size does not match the size the server reported."""

    def __init__(self, path, actual: int, expected: int):
        self.path = path
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"downloaded file {path} size {actual} doesn't match "
            f"server size {expected}"
        )


class ChecksumMismatchError(IntegrityError):
    """File content does not hash to the expected SHA-256 digest."""

    def __init__(self, path, expected: str, actual: str):
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{path} corrupt? does not have expected SHA-256 of {expected} "
            f"(got {actual})"
        )


class ShortWriteError(IntegrityError):
    """Fewer bytes were extracted than the archive entry declared."""

    def __init__(self, path, written: int, expected: int):
        self.path = path
        self.written = written
        self.expected = expected
        super().__init__(f"only wrote {written} bytes to {path}; expected {expected}")


# ============================================================================
# Unsafe-input Exceptions
# ============================================================================


class UnsafeInputError(GoupError):
    """Base exception for archives that cannot be extracted safely."""

    pass


class UnsupportedArchiveError(UnsafeInputError):
    """Archive file name has no supported suffix."""

    pass


class UnsafeArchiveEntryError(UnsafeInputError):
    """Archive entry path is empty, absolute, or escapes the target."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"archive contained invalid name {name!r}")


class UnsupportedEntryTypeError(UnsafeInputError):
    """Archive entry is neither a regular file nor a directory."""

    def __init__(self, name: str, entry_type: str):
        self.name = name
        self.entry_type = entry_type
        super().__init__(
            f"archive entry {name} contained unsupported file type {entry_type}"
        )


class ExtractionError(GoupError):
    """Archive could not be read, or an entry could not be written."""

    pass


# ============================================================================
# Service Exceptions
# ============================================================================


class ReleaseServiceError(GoupError):
    """Release metadata lookup or archive probe failed."""

    pass


class DownloadError(GoupError):
    """Download failed after all retries."""

    pass


# ============================================================================
# Source Build Exceptions
# ============================================================================


class BuildStepError(GoupError):
    """A version-control or build step of the source workflow failed."""

    def __init__(self, step: str, message: str):
        self.step = step
        super().__init__(f"{step}: {message}")


class ConfirmationDeclinedError(GoupError):
    """The operator declined a risk confirmation prompt."""

    def __init__(self):
        super().__init__("interrupted")
