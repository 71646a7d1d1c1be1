"""
Release metadata model.

Mirrors the JSON published at https://<host>/dl/?mode=json:

    [{"version": "go1.21.5", "stable": true,
      "files": [{"filename": "go1.21.5.linux-amd64.tar.gz", "os": "linux",
                 "arch": "amd64", "version": "go1.21.5",
                 "sha256": "e2bc...", "size": 66618285, "kind": "archive"}]}]

Instances are immutable once decoded.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Tuple

from goup.core.exceptions import InvalidVersionError


class ArtifactKind(str, Enum):
    """Kinds of files published for a release."""

    ARCHIVE = "archive"
    INSTALLER = "installer"
    SOURCE = "source"


@dataclass(frozen=True)
class ReleaseFile:
    """A single downloadable file belonging to a release."""

    filename: str
    os: str
    arch: str
    version: str
    sha256: str
    size: int
    kind: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReleaseFile":
        return cls(
            filename=data.get("filename", ""),
            os=data.get("os", ""),
            arch=data.get("arch", ""),
            version=data.get("version", ""),
            sha256=data.get("sha256", ""),
            size=int(data.get("size") or 0),
            kind=data.get("kind", ""),
        )

    def url(self, host: str) -> str:
        """
        Download URL of this file on the given host.

        Example:
            >>> f.url("go.dev")
            'https://go.dev/dl/go1.21.5.linux-amd64.tar.gz'
        """
        return f"https://{host}/dl/{self.filename}"


@dataclass(frozen=True)
class Release:
    """A published Go release and its files."""

    version: str
    stable: bool
    files: Tuple[ReleaseFile, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Release":
        return cls(
            version=data.get("version", ""),
            stable=bool(data.get("stable", False)),
            files=tuple(ReleaseFile.from_dict(f) for f in data.get("files") or ()),
        )


_VERSION_RE = re.compile(
    r"^go(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:(beta|rc)(\d+))?$"
)
_STAGES = {"beta": 0, "rc": 1, None: 2}


class GoVersion:
    """
    Go release version parser and comparator.

    Supports 'go1', 'go1.21', 'go1.21.5', 'go1.21rc2' and 'go1.9beta1'.
    Pre-releases sort before the final release: beta < rc < final.

    Example:
        >>> GoVersion("go1.21rc2") < GoVersion("go1.21.0")
        True
    """

    def __init__(self, version_string: str):
        """
        Parse version string.

        Raises:
            InvalidVersionError: If format is invalid
        """
        self.original = version_string
        match = _VERSION_RE.match(normalize_version(version_string))
        if not match:
            raise InvalidVersionError(f"Invalid Go version: {version_string}")

        major, minor, patch, stage, number = match.groups()
        self.major = int(major)
        self.minor = int(minor or 0)
        self.patch = int(patch or 0)
        self.stage = stage
        self.number = int(number or 0)

    def _key(self) -> Tuple[int, int, int, int, int]:
        return (self.major, self.minor, self.patch, _STAGES[self.stage], self.number)

    def __lt__(self, other: "GoVersion") -> bool:
        return self._key() < other._key()

    def __le__(self, other: "GoVersion") -> bool:
        return self._key() <= other._key()

    def __gt__(self, other: "GoVersion") -> bool:
        return self._key() > other._key()

    def __ge__(self, other: "GoVersion") -> bool:
        return self._key() >= other._key()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GoVersion):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.original

    def __repr__(self) -> str:
        return f"GoVersion('{self.original}')"


def normalize_version(version: str) -> str:
    """
    Return the canonical 'go'-prefixed form of a version string.

    Example:
        >>> normalize_version("1.21.5")
        'go1.21.5'
        >>> normalize_version("tip")
        'gotip'
    """
    version = version.strip()
    if not version.startswith("go"):
        version = "go" + version
    return version


def version_sort_key(version: str) -> Tuple:
    """
    Sort key placing parseable Go versions in release order.

    Unparseable strings sort first, lexically among themselves.
    """
    try:
        return (1, GoVersion(version)._key())
    except InvalidVersionError:
        return (0, version)
