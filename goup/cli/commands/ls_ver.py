"""
Ls-ver command implementation.

Lists Go versions available on the download host.
"""

import logging

from goup.cli.utils import load_cli_config, safe_print
from goup.toolchain import GoReleaseService

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the ls-ver command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_cli_config(args)
    releases = GoReleaseService(config.host).search(args.filter or "")

    for release in releases:
        version = release.version
        safe_print(version[2:] if version.startswith("go") else version)

    return 0
