"""
Install command implementation.

Installs the latest Go release, a release matching a version prefix, or
Go tip (optionally with a CL) built from source, and makes it the default.
"""

import logging
from typing import Optional

from goup.cli.utils import load_cli_config
from goup.core.exceptions import GoupError, NoMatchingReleaseError
from goup.toolchain import (
    TIP_VERSION,
    ActivationSwitch,
    GoReleaseService,
    InstallationStore,
    Release,
    ReleaseInstaller,
    SourceBuilder,
    normalize_version,
)
from goup.toolchain.models import version_sort_key

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_cli_config(args, host=getattr(args, "host", None))
    requested = (args.go_version or "").strip()
    cl: Optional[str] = args.cl

    logger.debug(f"Install requested: version={requested!r} cl={cl!r}")

    if requested in ("tip", TIP_VERSION):
        SourceBuilder(config).install(cl)
        version = TIP_VERSION
    else:
        if cl:
            raise GoupError("a CL number can only be given with 'tip'")
        service = GoReleaseService(config.host)
        release = resolve_release(service, requested)
        ReleaseInstaller(config, service=service).install(release)
        version = release.version

    ActivationSwitch(InstallationStore(config.goup_dir)).activate(version)
    return 0


def resolve_release(service: GoReleaseService, requested: str) -> Release:
    """
    Pick the release to install for a user-supplied version.

    An empty request selects the latest stable release. Otherwise an exact
    match wins, and failing that the newest release whose version continues
    the requested one at a component boundary: '1.2' may pick go1.2.2 or
    go1.2rc1 but never go1.20 or go1.25.0.

    Raises:
        NoMatchingReleaseError: If no release matches
    """
    if not requested:
        return service.latest()

    matches = service.filter(requested)
    if not matches:
        raise NoMatchingReleaseError("no matched go version found")

    wanted = normalize_version(requested)
    for release in matches:
        if release.version == wanted:
            return release

    candidates = [r for r in matches if _continues(r.version, wanted)]
    if not candidates:
        raise NoMatchingReleaseError("no matched go version found")
    return max(candidates, key=lambda r: version_sort_key(r.version))


def _continues(version: str, prefix: str) -> bool:
    rest = version[len(prefix):]
    if prefix.endswith(".") or not rest:
        return True
    return rest.startswith((".", "rc", "beta"))
