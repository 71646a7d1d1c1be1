"""
Search command implementation.

Lists Go versions tagged in the source repository.
"""

import logging

from goup.cli.utils import load_cli_config, safe_print
from goup.core.git import list_tag_versions

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the search command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_cli_config(args)

    for version in list_tag_versions(args.regexp or "", config.source_git_url):
        safe_print(version)

    return 0
