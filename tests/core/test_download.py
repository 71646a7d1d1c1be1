"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import io
from unittest.mock import Mock, patch

import pytest
import requests
import responses

from goup.core.download import (
    USER_AGENT,
    DownloadService,
    ProgressWriter,
    create_session,
    format_progress,
)
from goup.core.exceptions import DownloadError

URL = "https://dl.example.test/dl/go1.21.5.linux-amd64.tar.gz"


class FakeClock:
    """Clock returning preset timestamps."""

    def __init__(self, *times):
        self.times = list(times)

    def __call__(self):
        return self.times.pop(0) if len(self.times) > 1 else self.times[0]


class TestFormatProgress:
    """Test format_progress function."""

    def test_partial(self):
        """Test an incomplete download ends with an ellipsis."""
        assert format_progress(512, 1024) == "Downloaded  50.0% ( 512 / 1024 bytes) ..."

    def test_complete(self):
        """Test a complete download has no ellipsis."""
        assert format_progress(1024, 1024) == "Downloaded 100.0% (1024 / 1024 bytes)"

    def test_unknown_total(self):
        """Test progress without a known size."""
        assert format_progress(42, -1) == "Downloaded 42 bytes ..."


class TestProgressWriter:
    """Test ProgressWriter class."""

    def test_counts_bytes(self):
        """Test written bytes pass through and are counted."""
        sink = io.BytesIO()
        writer = ProgressWriter(sink, total=6, report=lambda *a: None)

        writer.write(b"abc")
        writer.write(b"def")

        assert writer.written == 6
        assert sink.getvalue() == b"abcdef"

    def test_reports_once_per_second(self):
        """Test reports are throttled to one per wall-clock second."""
        reports = []
        clock = FakeClock(100.1, 100.5, 100.9, 101.2)
        writer = ProgressWriter(
            io.BytesIO(), total=4, report=lambda n, t: reports.append((n, t)), clock=clock
        )

        for _ in range(4):
            writer.write(b"x")

        assert reports == [(1, 4), (4, 4)]

    def test_update_forces_report(self):
        """Test update() always reports the current count."""
        reports = []
        writer = ProgressWriter(
            io.BytesIO(),
            total=2,
            report=lambda n, t: reports.append(n),
            clock=FakeClock(5.0),
        )

        writer.write(b"a")
        writer.write(b"b")
        writer.update()

        assert reports == [1, 2]

    def test_prints_to_output_without_callback(self):
        """Test the default report prints a status line."""
        output = io.StringIO()
        writer = ProgressWriter(io.BytesIO(), total=2, output=output, clock=FakeClock(1.0))

        writer.write(b"ab")

        assert output.getvalue() == "Downloaded 100.0% (2 / 2 bytes)\n"


class TestCreateSession:
    """Test HTTP session creation."""

    def test_user_agent(self):
        """Test the session identifies as goup."""
        session = create_session()
        assert session.headers["User-Agent"] == USER_AGENT
        assert USER_AGENT.startswith("goup/")


class TestHeadSize:
    """Test DownloadService.head_size."""

    def test_returns_status_and_length(self):
        """Test status code and content length are reported."""
        session = Mock()
        session.head.return_value = Mock(status_code=200, headers={"content-length": "1024"})

        service = DownloadService(session=session)

        assert service.head_size(URL) == (200, 1024)
        session.head.assert_called_once_with(URL, timeout=30, allow_redirects=True)

    def test_unknown_length(self):
        """Test a missing content length is reported as -1."""
        session = Mock()
        session.head.return_value = Mock(status_code=200, headers={})

        assert DownloadService(session=session).head_size(URL) == (200, -1)

    def test_not_found_is_returned(self):
        """Test a 404 is returned to the caller, not raised."""
        session = Mock()
        session.head.return_value = Mock(status_code=404, headers={})

        assert DownloadService(session=session).head_size(URL) == (404, -1)

    @patch("time.sleep")
    def test_server_error_retried(self, mock_sleep):
        """Test 5xx answers are retried before being returned."""
        session = Mock()
        session.head.side_effect = [
            Mock(status_code=503, headers={}),
            Mock(status_code=200, headers={"content-length": "7"}),
        ]

        assert DownloadService(session=session).head_size(URL) == (200, 7)
        mock_sleep.assert_called_once_with(1.0)


class TestDownload:
    """Test DownloadService.download."""

    @responses.activate
    def test_simple_download(self, tmp_path):
        """Test the body is streamed into the destination."""
        content = b"go archive" * 1000
        destination = tmp_path / "go.tar.gz"

        responses.add(
            responses.GET,
            URL,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        written = DownloadService().download(URL, destination)

        assert written == len(content)
        assert destination.read_bytes() == content

    @responses.activate
    def test_replaces_existing_file(self, tmp_path):
        """Test an existing partial file is overwritten."""
        destination = tmp_path / "go.tar.gz"
        destination.write_bytes(b"stale partial download")

        responses.add(responses.GET, URL, body=b"fresh", status=200)

        DownloadService().download(URL, destination)

        assert destination.read_bytes() == b"fresh"

    @responses.activate
    def test_progress_callback(self, tmp_path):
        """Test the last progress report covers the whole body."""
        content = b"x" * 100000
        responses.add(
            responses.GET,
            URL,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        reports = []
        DownloadService().download(
            URL, tmp_path / "go.tar.gz", progress=lambda n, t: reports.append((n, t))
        )

        assert reports
        assert reports[-1] == (len(content), len(content))

    @responses.activate
    def test_not_found_not_retried(self, tmp_path):
        """Test client errors fail immediately."""
        responses.add(responses.GET, URL, status=404)

        with pytest.raises(DownloadError):
            DownloadService().download(URL, tmp_path / "go.tar.gz")

        assert len(responses.calls) == 1

    @responses.activate
    @patch("time.sleep")  # Mock sleep to speed up test
    def test_exponential_backoff(self, mock_sleep, tmp_path):
        """Test uses exponential backoff between retries."""
        content = b"test content"

        responses.add(responses.GET, URL, status=500)
        responses.add(responses.GET, URL, status=503)
        responses.add(
            responses.GET,
            URL,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        DownloadService(max_retries=3).download(URL, tmp_path / "go.tar.gz")

        assert mock_sleep.call_count == 2
        mock_sleep.assert_any_call(1.0)
        mock_sleep.assert_any_call(2.0)

    @responses.activate
    @patch("time.sleep")
    def test_gives_up_after_retries(self, mock_sleep, tmp_path):
        """Test connection failures raise DownloadError after max_retries."""
        responses.add(responses.GET, URL, body=requests.ConnectionError("refused"))

        with pytest.raises(DownloadError, match="failed after 3 attempts"):
            DownloadService(max_retries=3).download(URL, tmp_path / "go.tar.gz")

        assert len(responses.calls) == 3
        assert mock_sleep.call_count == 2
