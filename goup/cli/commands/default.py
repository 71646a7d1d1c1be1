"""
Default command implementation.

Sets the default Go version by repointing the 'current' link.
"""

import logging

from goup.cli.utils import load_cli_config
from goup.toolchain import ActivationSwitch, InstallationStore

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the default command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_cli_config(args)
    ActivationSwitch(InstallationStore(config.goup_dir)).activate(args.go_version)
    return 0
