"""
Directory layout for goup.

Directory Structure (~/.go/ or %USERPROFILE%\\.go\\, overridable with
GOUP_HOME):
    - go1.21.5/           : One directory per installed release
      - .unpacked-success : Zero-byte marker written after a complete install
    - gotip/              : Git checkout used to build Go from source
    - current             : Symlink to the active version directory
    - goup.yaml           : Optional configuration file
"""

import os
from pathlib import Path

from .exceptions import ConfigError

CURRENT_LINK_NAME = "current"
TIP_DIR_NAME = "gotip"
CONFIG_FILE_NAME = "goup.yaml"


def get_goup_dir() -> Path:
    """
    Get the platform-specific goup home directory path.

    Returns:
        Path: The goup home directory.
            - Windows: %USERPROFILE%\\.go
            - Linux/macOS: ~/.go/

    Raises:
        ConfigError: If USERPROFILE is unset on Windows
    """
    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise ConfigError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine goup directory."
            )
        return Path(user_profile) / ".go"
    else:
        return Path.home() / ".go"


def get_current_link(goup_dir: Path) -> Path:
    """Path of the symlink that points at the active version."""
    return goup_dir / CURRENT_LINK_NAME


def get_version_dir(goup_dir: Path, version: str) -> Path:
    """Path of the installation directory for a canonical version string."""
    return goup_dir / version


def get_config_file(goup_dir: Path) -> Path:
    return goup_dir / CONFIG_FILE_NAME
