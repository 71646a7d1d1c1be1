"""
HTTP download service for release archives.

This module provides:
- HEAD probing of archive URLs (status code and content length)
- Streaming downloads to a local file
- Progress reporting at most once per second
- Retry logic with exponential backoff for transient failures

Retries live here and only here: the install pipeline never retries.
"""

import logging
import sys
import time
from pathlib import Path
from typing import Callable, Optional, TextIO, Tuple

import requests
from requests.exceptions import ConnectionError, RequestException, Timeout

from .exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192

try:
    from importlib.metadata import version

    __version__ = version("goup")
except Exception:
    __version__ = "devel"

USER_AGENT = f"goup/{__version__}"


def create_session() -> requests.Session:
    """Create an HTTP session carrying the goup User-Agent."""
    session = requests.Session()
    session.headers["User-Agent"] = USER_AGENT
    return session


class ProgressWriter:
    """
    File wrapper that counts bytes written and reports progress.

    The report callback receives (bytes_written, total_bytes) at most once
    per wall-clock second; call update() to force a final report. Without
    a callback, a status line is printed to stderr.

    Example:
        >>> with open(path, "wb") as f:
        ...     writer = ProgressWriter(f, total=1024)
        ...     writer.write(b"...")
        ...     writer.update()
    """

    def __init__(
        self,
        stream,
        total: int,
        report: Optional[Callable[[int, int], None]] = None,
        output: Optional[TextIO] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.stream = stream
        self.total = total
        self.written = 0
        self._report = report
        self._output = output
        self._clock = clock
        self._last_second: Optional[int] = None

    def write(self, data: bytes) -> int:
        n = self.stream.write(data)
        if n is None:
            n = len(data)
        self.written += n

        now = int(self._clock())
        if now != self._last_second:
            self.update()
            self._last_second = now
        return n

    def update(self) -> None:
        """Emit a progress report for the current byte count."""
        if self._report:
            self._report(self.written, self.total)
        else:
            print(format_progress(self.written, self.total), file=self._output or sys.stderr)


def format_progress(written: int, total: int) -> str:
    """
    Format a progress line.

    Example:
        >>> format_progress(512, 1024)
        'Downloaded  50.0% ( 512 / 1024 bytes) ...'
    """
    if total <= 0:
        return f"Downloaded {written} bytes ..."

    end = "" if written == total else " ..."
    width = len(str(total))
    percentage = 100.0 * written / total
    return f"Downloaded {percentage:5.1f}% ({written:{width}d} / {total} bytes){end}"


class DownloadService:
    """
    Fetches release archives over HTTP(S).

    Example:
        >>> service = DownloadService()
        >>> status, size = service.head_size(url)
        >>> service.download(url, Path("go1.21.5.linux-amd64.tar.gz"))
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        max_retries: int = 3,
        backoff_base: float = 1.0,
    ):
        """
        Initialize download service.

        Args:
            session: Optional requests session (created if None)
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts per request
            backoff_base: First backoff delay in seconds, doubled per attempt
        """
        self.session = session or create_session()
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_base = backoff_base

    def head_size(self, url: str) -> Tuple[int, int]:
        """
        Probe an archive URL.

        Returns:
            (status_code, content_length); content_length is -1 if unknown

        Raises:
            DownloadError: If the request fails after retries
        """
        response = self._with_retries(
            url,
            lambda: self.session.head(url, timeout=self.timeout, allow_redirects=True),
        )
        content_length = response.headers.get("content-length")
        return response.status_code, int(content_length) if content_length else -1

    def download(
        self,
        url: str,
        destination: Path,
        progress: Optional[Callable[[int, int], None]] = None,
    ) -> int:
        """
        Stream url into destination, replacing any existing file.

        Args:
            url: URL to download
            destination: Local file path
            progress: Optional byte-count sink (bytes_written, total_bytes)

        Returns:
            Number of bytes written

        Raises:
            DownloadError: If the download fails after retries, or the byte
                count differs from the response content length
        """
        destination = Path(destination)
        logger.info(f"Downloading {url}")

        def attempt() -> int:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                content_length = int(response.headers.get("content-length") or -1)

                with open(destination, "wb") as f:
                    writer = ProgressWriter(f, content_length, report=progress)
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            writer.write(chunk)
                    writer.update()

                if content_length != -1 and writer.written != content_length:
                    raise DownloadError(
                        f"copied {writer.written} bytes; expected {content_length}"
                    )
                return writer.written

        return self._with_retries(url, attempt)

    def _with_retries(self, url: str, request):
        for attempt in range(self.max_retries):
            try:
                result = request()
                status = getattr(result, "status_code", 200)
                if status >= 500 and attempt < self.max_retries - 1:
                    raise requests.HTTPError(f"server returned {status}")
                return result
            except (Timeout, ConnectionError, RequestException) as e:
                if (
                    isinstance(e, requests.HTTPError)
                    and e.response is not None
                    and e.response.status_code < 500
                ):
                    raise DownloadError(f"{url}: {e}") from e

                if attempt == self.max_retries - 1:
                    raise DownloadError(
                        f"{url}: failed after {self.max_retries} attempts: {e}"
                    ) from e

                backoff_seconds = self.backoff_base * 2**attempt
                logger.warning(
                    f"Request attempt {attempt + 1} for {url} failed: {e}. "
                    f"Retrying in {backoff_seconds}s..."
                )
                time.sleep(backoff_seconds)

        raise DownloadError(f"{url}: failed for unknown reason")
