"""
Release metadata lookup against the Go download host.

The host serves its release index at https://<host>/dl/?mode=json. With
include=all the index lists every published release, otherwise only the
current stable ones.
"""

import logging
from typing import List, Optional

import requests

from goup.core.download import create_session
from goup.core.exceptions import NoMatchingReleaseError, ReleaseServiceError
from .models import Release, ReleaseFile, normalize_version, version_sort_key

logger = logging.getLogger(__name__)


class GoReleaseService:
    """
    Lists Go releases published on a download host.

    Example:
        >>> service = GoReleaseService("go.dev")
        >>> service.latest().version
        'go1.21.5'
    """

    def __init__(
        self,
        host: str,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ):
        self.host = host
        self.session = session or create_session()
        self.timeout = timeout

    @property
    def index_url(self) -> str:
        # the trailing slash is required by the JSON endpoint
        return f"https://{self.host}/dl/"

    def list_releases(self, include_all: bool = False) -> List[Release]:
        """
        Fetch the release index.

        Args:
            include_all: Include every historical and unstable release

        Returns:
            Releases sorted from oldest to newest

        Raises:
            ReleaseServiceError: If the index cannot be fetched or decoded
        """
        params = {"mode": "json", "include": "all" if include_all else ""}

        try:
            response = self.session.get(
                self.index_url, params=params, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.JSONDecodeError as e:
            raise ReleaseServiceError(
                f"invalid release list from {self.index_url}: {e}"
            ) from e
        except requests.RequestException as e:
            raise ReleaseServiceError(
                f"failed to fetch release list from {self.index_url}: {e}"
            ) from e

        if not isinstance(data, list):
            raise ReleaseServiceError(
                f"invalid release list from {self.index_url}: expected a JSON array"
            )

        releases = [Release.from_dict(item) for item in data]
        releases.sort(key=lambda r: version_sort_key(r.version))
        logger.debug(f"Fetched {len(releases)} releases from {self.index_url}")
        return releases

    def latest(self) -> Release:
        """
        Newest release from the default (stable) index.

        Raises:
            NoMatchingReleaseError: If the index is empty
        """
        releases = self.list_releases()
        if not releases:
            raise NoMatchingReleaseError(f"no Go release listed at {self.index_url}")
        return releases[-1]

    def filter(self, prefix: str) -> List[Release]:
        """
        Releases whose version starts with prefix ('1.21' and 'go1.21' match
        'go1.21', 'go1.21.5' and 'go1.21rc2').
        """
        prefix = normalize_version(prefix)
        return [r for r in self.list_releases(True) if r.version.startswith(prefix)]

    def search(self, substring: str = "") -> List[Release]:
        """All releases whose version contains substring."""
        substring = substring.strip()
        return [r for r in self.list_releases(True) if substring in r.version]

    def archive_url(self, release_file: ReleaseFile) -> str:
        return release_file.url(self.host)
