"""
Building Go from source ("tip" or a pending CL).

The checkout lives in <goup_dir>/gotip and is reused across runs. Its
'origin' remote is the canonical Go repository; the 'upstream' remote
points at Gerrit, which is where CL patch sets are published as
refs/changes/<shard>/<CL>/<patch set>.

Workflow:
    1. Init: shallow clone on first use, add the 'upstream' remote
    2. Resolve: the newest patch set of a CL, or origin/master
    3. Sync: fetch the ref, check out FETCH_HEAD as a detached HEAD
    4. Clean: interactive clean of untracked files, then a quiet clean of
       ignored files
    5. Build: run make.bash / make.bat / make.rc from src/

Any failing step raises BuildStepError naming the step. A checkout created
by a failed first clone is removed; otherwise the checkout is left where
git left it.
"""

import logging
import os
import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from goup.config import GoupConfig
from goup.core.exceptions import (
    BuildStepError,
    ChangeListNotFoundError,
    ConfirmationDeclinedError,
    GoupError,
)
from goup.core.git import Git
from .store import InstallationStore

logger = logging.getLogger(__name__)

TIP_VERSION = "gotip"


@dataclass(frozen=True)
class PatchSetRef:
    """A resolved CL patch set."""

    cl: str
    patch_set: int
    ref: str


def select_patch_set(ls_remote_output: str, cl: str) -> PatchSetRef:
    """
    Pick the newest patch set of a CL from 'git ls-remote' output.

    ls-remote prints lines like:
        2621ba2c60d05ec0b9ef37cd71e45047b004cead	refs/changes/37/227037/1
        af1f3b008281c61c54a5d203ffb69334b7af007c	refs/changes/37/227037/3
        6a10ebae05ce4b01cb93b73c47bef67c0f5c5f2a	refs/changes/37/227037/meta

    Args:
        ls_remote_output: Output of 'git ls-remote upstream'
        cl: CL number

    Returns:
        The ref with the numerically highest patch set

    Raises:
        ChangeListNotFoundError: If no patch set of the CL is listed
    """
    pattern = re.compile(
        rf"refs/changes/\d\d/{re.escape(cl)}/(\d+)$", re.MULTILINE
    )

    selected = None
    for match in pattern.finditer(ls_remote_output):
        patch_set = int(match.group(1))
        if selected is None or patch_set >= selected.patch_set:
            selected = PatchSetRef(cl=cl, patch_set=patch_set, ref=match.group(0))

    if selected is None:
        raise ChangeListNotFoundError(cl)
    return selected


def make_script(os_name: str) -> str:
    """Name of the Go build script for a GOOS."""
    if os_name == "windows":
        return "make.bat"
    if os_name == "plan9":
        return "make.rc"
    return "make.bash"


def prompt_confirm(label: str) -> bool:
    """Ask a yes/no question on the terminal; anything but yes declines."""
    try:
        response = input(f"{label} [y/N] ").strip().lower()
    except EOFError:
        return False
    return response in ("y", "yes")


class SourceBuilder:
    """
    Builds Go tip or a CL in the persistent gotip checkout.

    Example:
        >>> builder = SourceBuilder(load_config())
        >>> builder.install()          # Go tip
        >>> builder.install("227037")  # newest patch set of CL 227037
    """

    def __init__(
        self,
        config: GoupConfig,
        store: Optional[InstallationStore] = None,
        git: Optional[Git] = None,
        confirm: Optional[Callable[[str], bool]] = None,
    ):
        """
        Initialize the builder.

        Args:
            config: Resolved goup configuration
            store: Installation store (default: one rooted at config.goup_dir)
            git: Git runner bound to the checkout (default: Git(root))
            confirm: Yes/no prompt used before building a CL
        """
        self.config = config
        self.store = store or InstallationStore(config.goup_dir)
        self.root = self.store.version_dir(TIP_VERSION)
        self.git = git or Git(self.root)
        self.confirm = confirm or prompt_confirm

    def install(self, cl: Optional[str] = None) -> Path:
        """
        Sync the checkout to tip (or to a CL) and build it.

        Args:
            cl: Optional CL number

        Returns:
            The checkout directory

        Raises:
            ConfirmationDeclinedError: The operator declined to build the CL
            ChangeListNotFoundError: The CL has no patch set upstream
            BuildStepError: A git or build step failed
        """
        if cl and not re.fullmatch(r"[0-9]+", cl):
            raise GoupError(f"invalid CL number: {cl!r}")

        self.ensure_checkout()

        if cl:
            self._confirm_change_list(cl)
            patch_set = self.resolve_change_list(cl)
            logger.info(f"Fetching CL {cl}, Patch Set {patch_set.patch_set}...")
            self._git("fetch", "fetch", "upstream", patch_set.ref)
        else:
            logger.info("Updating the go development tree...")
            self._git("fetch", "fetch", "origin", "master")

        self.checkout()
        self.clean()
        self.build()
        return self.root

    def ensure_checkout(self) -> None:
        """Clone the source repository on first use."""
        if (self.root / ".git").exists():
            return

        created = not self.root.exists()
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BuildStepError("init", f"failed to create repository: {e}") from e

        try:
            self._git(
                "init", "clone", "--depth=1", self.config.source_git_url, str(self.root)
            )
            self._git("init", "remote", "add", "upstream", self.config.upstream_git_url)
        except BuildStepError:
            if created:
                self._discard_checkout()
            raise

        logger.info(f"Cloned {self.config.source_git_url} into {self.root}")

    def resolve_change_list(self, cl: str) -> PatchSetRef:
        """Find the newest patch set of a CL on the upstream remote."""
        try:
            refs = self.git.output("ls-remote", "upstream")
        except (subprocess.CalledProcessError, OSError) as e:
            raise BuildStepError("resolve", f"failed to list remotes: {e}") from e
        return select_patch_set(refs, cl)

    def checkout(self) -> None:
        """
        Check out FETCH_HEAD as a detached HEAD.

        A detached checkout refuses to overwrite local changes but does not
        mind upstream history being force-pushed.
        """
        self._git(
            "checkout", "-c", "advice.detachedHead=false", "checkout", "FETCH_HEAD"
        )

    def clean(self) -> None:
        """
        Remove stale build artifacts.

        Untracked files that are not ignored may be precious uncommitted
        work, so the user is asked about them; ignored files are removed
        silently. With assume_yes the interactive pass is skipped and
        untracked files are left alone.
        """
        if self.config.assume_yes:
            logger.info("Skipping interactive clean of untracked files")
        else:
            self._git("clean", "clean", "-i", "-d")
        self._git("clean", "clean", "-q", "-f", "-d", "-X")

    def build(self) -> None:
        """Run the platform build script from the checkout's src directory."""
        src_dir = self.root / "src"
        script = src_dir / make_script(self.config.os)

        env = None
        if self.config.os == "windows":
            # make.bat does not autodetect GOROOT_BOOTSTRAP
            env = dict(os.environ, GOROOT_BOOTSTRAP=self._bootstrap_goroot())

        logger.info(f"Building Go in {src_dir}")
        try:
            subprocess.run([str(script)], cwd=src_dir, env=env, check=True)
        except (subprocess.CalledProcessError, OSError) as e:
            raise BuildStepError("build", f"failed to build go: {e}") from e

    def _bootstrap_goroot(self) -> str:
        try:
            result = subprocess.run(
                ["go", "env", "GOROOT"],
                stdout=subprocess.PIPE,
                text=True,
                check=True,
            )
        except (subprocess.CalledProcessError, OSError) as e:
            raise BuildStepError(
                "build",
                f"failed to detect an existing go installation for bootstrap: {e}",
            ) from e
        return result.stdout.strip()

    def _confirm_change_list(self, cl: str) -> None:
        if self.config.assume_yes:
            logger.info(f"Building unreviewed code from go.dev/cl/{cl}")
            return

        label = f"This will download and execute code from go.dev/cl/{cl}, continue"
        if not self.confirm(label):
            raise ConfirmationDeclinedError()

    def _git(self, step: str, *args: str) -> None:
        try:
            self.git.run(*args)
        except (subprocess.CalledProcessError, OSError) as e:
            raise BuildStepError(step, f"git {' '.join(args)} failed: {e}") from e

    def _discard_checkout(self) -> None:
        try:
            shutil.rmtree(self.root)
            logger.debug(f"Removed incomplete checkout: {self.root}")
        except OSError as e:
            logger.warning(f"Failed to remove incomplete checkout {self.root}: {e}")
