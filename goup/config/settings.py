"""
goup configuration.

Settings are resolved once per invocation into an immutable GoupConfig
value that is handed to every component, so nothing below the CLI reads
the process environment directly.

Precedence (lowest to highest):
    1. Built-in defaults
    2. YAML configuration file (<goup_dir>/goup.yaml or --config PATH)
    3. GOUP_* environment variables
    4. Explicit overrides (CLI flags)

Example goup.yaml:
    host: go.dev
    arch: arm64
    source_git_url: https://github.com/golang/go
    upstream_git_url: https://go.googlesource.com/go
    assume_yes: false
"""

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from goup.core.directory import get_config_file, get_goup_dir
from goup.core.exceptions import ConfigError
from goup.core.platform import detect_platform

logger = logging.getLogger(__name__)

DEFAULT_GO_HOST = "golang.google.cn"
DEFAULT_SOURCE_GIT_URL = "https://github.com/golang/go"
DEFAULT_UPSTREAM_GIT_URL = "https://go.googlesource.com/go"

# Environment variable -> GoupConfig field
ENV_OVERRIDES = {
    "GOUP_HOME": "goup_dir",
    "GOUP_GO_HOST": "host",
    "GOUP_GO_ARCH": "arch",
    "GOUP_GO_SOURCE_GIT_URL": "source_git_url",
    "GOUP_GO_SOURCE_UPSTREAM_GIT_URL": "upstream_git_url",
}


def _default_os() -> str:
    return detect_platform().os


def _default_arch() -> str:
    return detect_platform().arch


@dataclass(frozen=True)
class GoupConfig:
    """
    Resolved goup settings.

    Attributes:
        goup_dir: Root holding version directories and the current link
        host: Host serving release metadata and archives
        os: Target GOOS used to select archives and the build script
        arch: Target GOARCH used to select archives
        source_git_url: Canonical Go source repository (origin)
        upstream_git_url: Gerrit repository used to resolve CL patch sets
        assume_yes: Pre-answer interactive prompts for unattended runs.
            Confirms CL builds and skips the interactive 'git clean -i'.
    """

    goup_dir: Path = field(default_factory=get_goup_dir)
    host: str = DEFAULT_GO_HOST
    os: str = field(default_factory=_default_os)
    arch: str = field(default_factory=_default_arch)
    source_git_url: str = DEFAULT_SOURCE_GIT_URL
    upstream_git_url: str = DEFAULT_UPSTREAM_GIT_URL
    assume_yes: bool = False

    def with_overrides(self, **overrides: Any) -> "GoupConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if "goup_dir" in values:
            values["goup_dir"] = Path(values["goup_dir"]).expanduser().absolute()
        return replace(self, **values)


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty if file doesn't exist and not required)

    Raises:
        ConfigError: If the file is required but missing, is not valid YAML,
            or is not a mapping
    """
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        return {}

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {config_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {config_file} must be a mapping")
    return data


def _from_file(data: Mapping[str, Any], config_file: Path) -> Dict[str, Any]:
    known = {f.name for f in fields(GoupConfig)}
    values = {}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown key '{key}' in {config_file}")
            continue
        if key == "assume_yes" and not isinstance(value, bool):
            raise ConfigError(f"'assume_yes' in {config_file} must be true or false")
        values[key] = value
    return values


def load_config(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> GoupConfig:
    """
    Resolve the effective configuration.

    Args:
        config_file: Explicit YAML file (must exist). Defaults to the
            optional <goup_dir>/goup.yaml
        environ: Environment mapping (defaults to os.environ)
        **overrides: Highest-precedence values; None entries are ignored

    Returns:
        GoupConfig

    Example:
        >>> config = load_config(environ={"GOUP_GO_HOST": "go.dev"})
        >>> config.host
        'go.dev'
    """
    environ = os.environ if environ is None else environ

    env_values = {
        attr: environ[name] for name, attr in ENV_OVERRIDES.items() if environ.get(name)
    }

    config = GoupConfig()
    goup_dir = overrides.get("goup_dir") or env_values.get("goup_dir")
    if goup_dir:
        config = config.with_overrides(goup_dir=goup_dir)

    if config_file is not None:
        file_path = Path(config_file)
        data = load_yaml_config(file_path, required=True)
    else:
        file_path = get_config_file(config.goup_dir)
        data = load_yaml_config(file_path)

    config = config.with_overrides(**_from_file(data, file_path))
    config = config.with_overrides(**env_values)
    config = config.with_overrides(**overrides)

    logger.debug(f"Resolved configuration: {config}")
    return config
