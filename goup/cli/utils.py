"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import logging
import sys
from typing import Any

from goup.config import GoupConfig, load_config

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================


def load_cli_config(args, **overrides: Any) -> GoupConfig:
    """
    Resolve configuration for a command from its parsed arguments.

    Global flags (--config, --yes) and the given overrides take precedence
    over the YAML file and GOUP_* environment variables.

    Args:
        args: Parsed command-line arguments
        **overrides: Command-specific overrides; None entries are ignored

    Returns:
        GoupConfig
    """
    assume_yes = True if getattr(args, "yes", False) else None
    return load_config(
        config_file=getattr(args, "config", None),
        assume_yes=assume_yes,
        **overrides,
    )


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for limited consoles.

    Args:
        message: Message to print
        file: Output file (default: stdout)
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        stream = file or sys.stdout
        encoding = getattr(stream, "encoding", None) or "ascii"
        print(message.encode(encoding, errors="replace").decode(encoding), file=file)
