"""
Network download manager with progress tracking, cancellation and checksum
verification.

This module provides the single download primitive used to fetch Tailwind
CLI binaries:
- HTTP/HTTPS downloads with TLS verification
- Streaming to a temporary ``.part`` file, renamed into place on success
- Progress reporting (bytes, percentage, speed, ETA)
- Cooperative cancellation through a ``threading.Event``
- Optional SHA256 verification during download
- Timeout handling
"""

import hashlib
import logging
import os
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


class DownloadError(Exception):
    """Exception raised when download fails."""

    pass


class ChecksumError(DownloadError):
    """Exception raised when checksum verification fails."""

    pass


class DownloadCancelled(DownloadError):
    """Exception raised when the cancel event is set mid-transfer."""

    pass


def partial_path(destination: Path) -> Path:
    """Temporary path a download streams into before the final rename."""
    return destination.with_name(destination.name + ".part")


def download_file(
    url: str,
    destination: Path,
    expected_sha256: Optional[str] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: float = 30,
    cancel_event: Optional[threading.Event] = None,
    mode: Optional[int] = None,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download file from URL to destination.

    The body is streamed into ``<destination>.part`` and only renamed to
    ``destination`` once fully written (and verified, when a checksum is
    given), so a reader never sees a truncated file at ``destination``.
    There is no retry: callers decide their own retry policy.

    Args:
        url: URL to download from
        destination: Local path to save file
        expected_sha256: Expected SHA256 hash (verified during download)
        progress_callback: Optional callback for progress updates
        timeout: Connect/read timeout in seconds
        cancel_event: When set, the transfer is aborted between chunks
        mode: Optional permission bits applied before the rename
        session: Optional requests session (default: module-level requests)

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request fails or returns an error status
        ChecksumError: If checksum doesn't match expected value
        DownloadCancelled: If cancel_event is set during the transfer
        OSError: If the file cannot be written
        ValueError: If URL or destination is invalid

    Example:
        >>> from tailbreeze.core.download import download_file
        >>> url = "https://example.com/tailwindcss-linux-x64"
        >>> download_file(url, Path("cache/tailwindcss"), mode=0o755)
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    temp_path = partial_path(destination)

    _check_cancelled(cancel_event, url)
    logger.info(f"Downloading from {url}")

    http = session or requests
    try:
        response = http.get(url, stream=True, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
    except RequestException as e:
        raise DownloadError(f"Download failed: {e}") from e

    try:
        _stream_to_file(
            response, temp_path, expected_sha256, progress_callback, cancel_event, url
        )
        if mode is not None:
            os.chmod(temp_path, mode)
        os.replace(temp_path, destination)
    except RequestException as e:
        _discard(temp_path)
        raise DownloadError(f"Download interrupted: {e}") from e
    except BaseException:
        _discard(temp_path)
        raise
    finally:
        response.close()

    logger.info(f"Download complete: {destination}")
    return destination


def _stream_to_file(
    response,
    temp_path: Path,
    expected_sha256: Optional[str],
    progress_callback: Optional[Callable[[DownloadProgress], None]],
    cancel_event: Optional[threading.Event],
    url: str,
) -> None:
    """Write the response body to ``temp_path`` and verify its checksum."""
    content_length = response.headers.get("content-length")
    total_size = int(content_length) if content_length else 0

    hasher = hashlib.sha256() if expected_sha256 else None
    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    with open(temp_path, "wb") as f:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            _check_cancelled(cancel_event, url)
            if not chunk:
                continue

            f.write(chunk)
            downloaded += len(chunk)
            if hasher:
                hasher.update(chunk)

            # Report progress (max once per 0.5 seconds to avoid spam)
            current_time = time.time()
            if progress_callback and (
                current_time - last_progress_time >= 0.5 or downloaded == total_size
            ):
                elapsed = current_time - start_time
                speed = downloaded / elapsed if elapsed > 0 else 0
                remaining = total_size - downloaded if total_size > 0 else 0
                progress_callback(
                    DownloadProgress(
                        bytes_downloaded=downloaded,
                        total_bytes=total_size if total_size > 0 else downloaded,
                        percentage=(downloaded / total_size * 100)
                        if total_size > 0
                        else 0,
                        speed_bps=speed,
                        eta_seconds=remaining / speed if speed > 0 else 0,
                    )
                )
                last_progress_time = current_time

    if total_size and downloaded != total_size:
        raise DownloadError(
            f"Incomplete download from {url}: got {downloaded} of {total_size} bytes"
        )

    if hasher:
        actual_hash = hasher.hexdigest()
        if actual_hash.lower() != expected_sha256.lower():
            raise ChecksumError(
                f"Checksum mismatch for {url}: "
                f"expected {expected_sha256}, got {actual_hash}"
            )
        logger.info("Checksum verified successfully")


def _check_cancelled(cancel_event: Optional[threading.Event], url: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise DownloadCancelled(f"Download cancelled: {url}")


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove partial download {path}: {e}")


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB " f"at {speed_mbps:.1f} MB/s"


__all__ = [
    "DownloadProgress",
    "DownloadError",
    "ChecksumError",
    "DownloadCancelled",
    "download_file",
    "partial_path",
    "format_progress",
]
