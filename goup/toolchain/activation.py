"""
goup/toolchain/activation.py

Switching the default Go version.

The default version is whatever the '<goup_dir>/current' symlink points at.
Switching removes the existing link and then creates the new one. The two
steps are not atomic: if the process dies between them no version is
active until activation is run again.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from goup.core.directory import get_current_link
from goup.core.exceptions import VersionNotInstalledError
from .models import normalize_version
from .store import InstallationStore

logger = logging.getLogger(__name__)


class ActivationSwitch:
    """Manages the 'current' symlink of a goup directory."""

    def __init__(self, store: InstallationStore, link_path: Optional[Path] = None):
        """
        Initialize the switch.

        Args:
            store: Installation store resolving version directories
            link_path: Symlink location (default: <goup_dir>/current)
        """
        self.store = store
        self.link_path = link_path or get_current_link(store.goup_dir)

    def activate(self, version: str) -> Path:
        """
        Make version the default Go.

        Args:
            version: '1.21.5', 'go1.21.5' or 'tip'

        Returns:
            The version directory the link now points at

        Raises:
            VersionNotInstalledError: If the version directory does not
                exist; any existing link is left untouched
            OSError: If the link cannot be replaced
        """
        version = normalize_version(version)
        target = self.store.version_dir(version)

        if not target.exists():
            raise VersionNotInstalledError(version)

        self.remove_link()
        self.link_path.parent.mkdir(parents=True, exist_ok=True)
        os.symlink(target.absolute(), self.link_path, target_is_directory=True)

        logger.info(f"Default Go is set to '{version}'")
        return target

    def remove_link(self) -> bool:
        """
        Remove the current link, like 'rm -f'.

        Returns:
            True if a link was removed
        """
        try:
            self.link_path.unlink()
        except FileNotFoundError:
            return False

        logger.debug(f"Removed link: {self.link_path}")
        return True

    def resolve_link(self) -> Optional[Path]:
        """
        Resolve the current link to its absolute target.

        Returns:
            Target path, or None if there is no link
        """
        if not self.link_path.is_symlink():
            return None

        target = Path(os.readlink(self.link_path))
        if not target.is_absolute():
            target = (self.link_path.parent / target).resolve()
        return target

    def current_version(self) -> Optional[str]:
        """Name of the active version, or None if no valid link exists."""
        target = self.resolve_link()
        if target is None or not target.exists():
            return None
        return target.name
