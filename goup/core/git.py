"""
Thin wrapper around the git command line.

Interactive commands inherit the caller's stdin/stdout/stderr so that
prompts (for example 'git clean -i') are visible and answerable. Query
commands capture stdout instead.
"""

import logging
import re
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from .exceptions import NoMatchingReleaseError

logger = logging.getLogger(__name__)


class Git:
    """
    Runs git commands in a working directory.

    Example:
        >>> git = Git(Path("~/.go/gotip"))
        >>> git.run("fetch", "origin", "master")
        >>> refs = git.output("ls-remote", "upstream")
    """

    def __init__(self, cwd: Optional[Union[str, Path]] = None, executable: str = "git"):
        self.cwd = Path(cwd) if cwd is not None else None
        self.executable = executable

    def run(self, *args: str) -> None:
        """
        Run a git command with inherited standard streams.

        Raises:
            subprocess.CalledProcessError: If git exits non-zero
            FileNotFoundError: If git is not installed
        """
        cmd = [self.executable, *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        subprocess.run(cmd, cwd=self.cwd, check=True)

    def output(self, *args: str) -> str:
        """
        Run a git command and return its stdout.

        Raises:
            subprocess.CalledProcessError: If git exits non-zero
            FileNotFoundError: If git is not installed
        """
        cmd = [self.executable, *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        result = subprocess.run(
            cmd, cwd=self.cwd, check=True, stdout=subprocess.PIPE, text=True
        )
        return result.stdout


def list_tag_versions(
    pattern: str = "", source_url: str = "", git: Optional[Git] = None
) -> List[str]:
    """
    List Go versions tagged in the source repository.

    Args:
        pattern: Regular expression matched inside the version; empty
            matches every tag
        source_url: Repository to query
        git: Git runner (defaults to one without a working directory)

    Returns:
        Versions without the 'go' prefix, in git's version order

    Raises:
        NoMatchingReleaseError: If no tag matches

    Example:
        >>> list_tag_versions("1.21", "https://github.com/golang/go")
        ['1.21.0', '1.21.1', ...]
    """
    git = git or Git()
    expr = f".*{pattern}.*" if pattern else ".+"

    refs = git.output("ls-remote", "--sort=version:refname", "--tags", source_url)
    versions = [
        m.group(1)
        for m in re.finditer(rf"refs/tags/go({expr})$", refs, re.MULTILINE)
        if not m.group(1).endswith("^{}")
    ]
    if not versions:
        raise NoMatchingReleaseError("No Go version found")
    return versions
