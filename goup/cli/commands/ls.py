"""
Ls command implementation.

Lists installed Go versions, marking the default one.
"""

import logging

from goup.cli.utils import load_cli_config, safe_print
from goup.toolchain import ActivationSwitch, InstallationStore

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the ls command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_cli_config(args)
    store = InstallationStore(config.goup_dir)
    current = ActivationSwitch(store).current_version()

    installed = store.installed_versions()
    if not installed:
        logger.info(f"No Go version installed in {config.goup_dir}")
        return 0

    for entry in installed:
        marker = "*" if entry.version == current else " "
        suffix = "" if entry.complete else " (incomplete)"
        safe_print(f"{marker} {entry.version}{suffix}")

    return 0
