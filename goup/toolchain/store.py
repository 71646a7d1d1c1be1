"""
On-disk layout of installed Go versions.

Each version lives in its own directory under the goup directory. A
directory only counts as installed once the zero-byte completion marker
has been written, which happens after the archive was verified and fully
extracted. A directory left behind by a failed attempt has no marker and
is simply installed over on the next run.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from goup.core.directory import CURRENT_LINK_NAME, TIP_DIR_NAME, get_version_dir
from goup.core.exceptions import GoupError, VersionNotInstalledError
from .models import normalize_version, version_sort_key

logger = logging.getLogger(__name__)

# Sentinel zero-byte file marking a successfully unpacked version.
INSTALLED_MARKER = ".unpacked-success"


@dataclass(frozen=True)
class InstalledVersion:
    """An installed (or partially installed) Go version."""

    version: str
    path: Path
    complete: bool


class InstallationStore:
    """
    Manages version directories and completion markers.

    Example:
        >>> store = InstallationStore(Path.home() / ".go")
        >>> target = store.version_dir("go1.21.5")
        >>> store.is_installed(target)
        False
    """

    def __init__(self, goup_dir: Path):
        self.goup_dir = Path(goup_dir)

    def version_dir(self, version: str) -> Path:
        """Installation directory for a version ('1.21.5' or 'go1.21.5')."""
        return get_version_dir(self.goup_dir, normalize_version(version))

    @staticmethod
    def is_installed(target_dir: Path) -> bool:
        """True iff the completion marker exists directly under target_dir."""
        return (Path(target_dir) / INSTALLED_MARKER).is_file()

    @staticmethod
    def ensure_dir(target_dir: Path) -> None:
        """Create target_dir and its parents if absent."""
        Path(target_dir).mkdir(parents=True, exist_ok=True)

    @staticmethod
    def mark_installed(target_dir: Path) -> None:
        """Write the completion marker. Call only after extraction succeeded."""
        (Path(target_dir) / INSTALLED_MARKER).touch()

    def installed_versions(self) -> List[InstalledVersion]:
        """
        List version directories under the goup directory.

        The gotip checkout counts as complete when it has a .git directory.

        Returns:
            Versions in release order
        """
        if not self.goup_dir.is_dir():
            return []

        versions = []
        for entry in self.goup_dir.iterdir():
            if entry.name == CURRENT_LINK_NAME or entry.is_symlink():
                continue
            if not entry.is_dir() or not entry.name.startswith("go"):
                continue

            if entry.name == TIP_DIR_NAME:
                complete = (entry / ".git").is_dir()
            else:
                complete = self.is_installed(entry)
            versions.append(InstalledVersion(entry.name, entry, complete))

        versions.sort(key=lambda v: version_sort_key(v.version))
        return versions

    def remove(self, version: str, active_dir: Optional[Path] = None) -> Path:
        """
        Delete an installed version directory.

        Args:
            version: Version to remove
            active_dir: Directory of the active version, which is refused

        Returns:
            The removed directory

        Raises:
            VersionNotInstalledError: If the directory does not exist
            GoupError: If the version is the active one
        """
        target = self.version_dir(version)
        if not target.is_dir() or target.is_symlink():
            raise VersionNotInstalledError(normalize_version(version))

        if active_dir is not None and target.resolve() == Path(active_dir).resolve():
            raise GoupError(
                f"{target.name} is the default Go version; "
                "switch to another version before removing it"
            )

        shutil.rmtree(target)
        logger.info(f"Removed {target.name} from {target}")
        return target
