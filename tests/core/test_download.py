"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import hashlib
import os
import threading

import pytest
import requests
import responses

from tailbreeze.core.download import (
    ChecksumError,
    DownloadCancelled,
    DownloadError,
    DownloadProgress,
    download_file,
    format_progress,
    partial_path,
)

URL = "https://example.com/tailwindcss-linux-x64"


class CancelAfter(threading.Event):
    """Event that reports set once it has been polled ``checks`` times."""

    def __init__(self, checks):
        super().__init__()
        self.remaining = checks

    def is_set(self):
        self.remaining -= 1
        return self.remaining < 0


class TestFormatProgress:
    """Test format_progress function."""

    def test_format_with_known_size(self):
        """Test formatting progress with known total size."""
        progress = DownloadProgress(
            bytes_downloaded=10485760,  # 10 MB
            total_bytes=104857600,  # 100 MB
            percentage=10.0,
            speed_bps=2097152,  # 2 MB/s
            eta_seconds=45,
        )

        result = format_progress(progress)

        assert "10.0/100.0 MB" in result
        assert "(10.0%)" in result
        assert "2.0 MB/s" in result
        assert "ETA: 45s" in result
        assert str(progress) == result

    def test_format_with_unknown_size(self):
        """Test formatting progress with unknown total size."""
        progress = DownloadProgress(
            bytes_downloaded=10485760,
            total_bytes=0,
            percentage=0.0,
            speed_bps=1048576,
            eta_seconds=0,
        )

        result = format_progress(progress)

        assert "10.0 MB" in result
        assert "ETA" not in result


class TestDownloadFile:
    """Test download_file function."""

    @responses.activate
    def test_successful_download(self, tmp_path):
        """Test body is written to the destination and no .part remains."""
        responses.add(responses.GET, URL, body=b"binary content", status=200)
        dest = tmp_path / "bin" / "tailwindcss"

        result = download_file(URL, dest)

        assert result == dest
        assert dest.read_bytes() == b"binary content"
        assert not partial_path(dest).exists()

    @responses.activate
    def test_checksum_verified(self, tmp_path):
        content = b"verified content"
        responses.add(responses.GET, URL, body=content, status=200)
        dest = tmp_path / "tailwindcss"

        download_file(URL, dest, expected_sha256=hashlib.sha256(content).hexdigest())

        assert dest.read_bytes() == content

    @responses.activate
    def test_checksum_mismatch(self, tmp_path):
        """Test mismatching checksum raises and leaves nothing behind."""
        responses.add(responses.GET, URL, body=b"tampered", status=200)
        dest = tmp_path / "tailwindcss"

        with pytest.raises(ChecksumError):
            download_file(URL, dest, expected_sha256="a" * 64)

        assert not dest.exists()
        assert not partial_path(dest).exists()

    @responses.activate
    def test_http_error_status(self, tmp_path):
        """Test 404 raises DownloadError."""
        responses.add(responses.GET, URL, status=404)

        with pytest.raises(DownloadError, match="404"):
            download_file(URL, tmp_path / "tailwindcss")

    @responses.activate
    def test_connection_error(self, tmp_path):
        """Test transport failures raise DownloadError with the cause attached."""
        responses.add(
            responses.GET, URL, body=requests.exceptions.ConnectionError("refused")
        )

        with pytest.raises(DownloadError) as exc_info:
            download_file(URL, tmp_path / "tailwindcss")

        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    def test_cancelled_before_start(self, tmp_path):
        """Test a pre-set cancel event aborts without any request."""
        cancel = threading.Event()
        cancel.set()

        with responses.RequestsMock() as rsps:
            with pytest.raises(DownloadCancelled):
                download_file(URL, tmp_path / "tailwindcss", cancel_event=cancel)
            assert len(rsps.calls) == 0

    @responses.activate
    def test_cancelled_mid_transfer_removes_partial(self, tmp_path):
        """Test cancelling between chunks discards the partial file."""
        responses.add(responses.GET, URL, body=b"x" * (256 * 1024), status=200)
        dest = tmp_path / "tailwindcss"

        with pytest.raises(DownloadCancelled):
            download_file(URL, dest, cancel_event=CancelAfter(checks=2))

        assert not dest.exists()
        assert not partial_path(dest).exists()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    @responses.activate
    def test_mode_applied(self, tmp_path):
        """Test permission bits are set before the file appears."""
        responses.add(responses.GET, URL, body=b"#!/bin/sh\n", status=200)
        dest = tmp_path / "tailwindcss"

        download_file(URL, dest, mode=0o755)

        assert dest.stat().st_mode & 0o777 == 0o755

    @responses.activate
    def test_progress_reported(self, tmp_path):
        responses.add(
            responses.GET,
            URL,
            body=b"y" * 1000,
            status=200,
            headers={"Content-Length": "1000"},
        )
        updates = []

        download_file(URL, tmp_path / "tailwindcss", progress_callback=updates.append)

        assert updates
        assert updates[-1].bytes_downloaded == 1000

    def test_empty_url(self, tmp_path):
        with pytest.raises(ValueError, match="URL cannot be empty"):
            download_file("", tmp_path / "tailwindcss")
