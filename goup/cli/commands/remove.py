"""
Remove command implementation.

Deletes an installed Go version; the default version is refused.
"""

import logging

from goup.cli.utils import load_cli_config
from goup.toolchain import ActivationSwitch, InstallationStore

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the remove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_cli_config(args)
    store = InstallationStore(config.goup_dir)
    active_dir = ActivationSwitch(store).resolve_link()

    store.remove(args.go_version, active_dir=active_dir)
    return 0
