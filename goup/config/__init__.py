"""
Configuration for goup.

Resolves defaults, the optional YAML file, GOUP_* environment variables
and CLI overrides into a single GoupConfig value.
"""

from .settings import (
    GoupConfig,
    load_config,
    load_yaml_config,
    DEFAULT_GO_HOST,
    DEFAULT_SOURCE_GIT_URL,
    DEFAULT_UPSTREAM_GIT_URL,
    ENV_OVERRIDES,
)

__all__ = [
    "GoupConfig",
    "load_config",
    "load_yaml_config",
    "DEFAULT_GO_HOST",
    "DEFAULT_SOURCE_GIT_URL",
    "DEFAULT_UPSTREAM_GIT_URL",
    "ENV_OVERRIDES",
]
