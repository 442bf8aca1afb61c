"""
Tailwind CLI provisioner.

Guarantees a runnable Tailwind CLI binary exists in the local tool cache for
a requested version, downloading it at most once even when several callers
ask concurrently.

An installation is only considered valid when the binary answers a
``--version`` self-check; a file that merely exists (for example a
truncated download) is not enough.
"""

import logging
import os
import subprocess
import threading
from pathlib import Path
from typing import Optional, Sequence

from tailbreeze.core.directory import (
    DirectoryError,
    ensure_cache_structure,
    get_global_cache_dir,
)
from tailbreeze.core.download import (
    DownloadCancelled,
    DownloadError,
    DownloadProgress,
    download_file,
)
from tailbreeze.core.exceptions import (
    InstallationFailed,
    OperationCancelled,
    UnsupportedPlatform,
)
from tailbreeze.core.locking import LockManager, LockTimeout
from tailbreeze.core.platform import PlatformInfo, detect_platform, platform_identifier
from tailbreeze.core.process import OutputSink, ProcessRunner
from tailbreeze.tailwind.resolver import ReleaseResolver
from tailbreeze.tailwind.version import VersionSpec

logger = logging.getLogger(__name__)

SELF_CHECK_TIMEOUT = 30


class Provisioner:
    """
    Download and manage Tailwind CLI binaries.

    Binaries live at ``<cache_dir>/<version>/<tailwindcss[.exe]>``.

    Attributes:
        cache_dir: Root of the tool cache
        resolver: Builds release download URLs
        runner: Runs the installed binary
        lock_manager: Owns the installation lock
        platform: Platform the binary is provisioned for
        download_timeout: Network timeout in seconds
    """

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        resolver: Optional[ReleaseResolver] = None,
        runner: Optional[ProcessRunner] = None,
        lock_manager: Optional[LockManager] = None,
        platform: Optional[PlatformInfo] = None,
        download_timeout: float = 300,
    ):
        self.cache_dir = Path(cache_dir) if cache_dir else get_global_cache_dir()
        self.resolver = resolver or ReleaseResolver()
        self.runner = runner or ProcessRunner()
        self.platform = platform or detect_platform()
        self.download_timeout = download_timeout
        self._lock_manager = lock_manager

    @property
    def lock_manager(self) -> LockManager:
        if self._lock_manager is None:
            ensure_cache_structure(self.cache_dir)
            self._lock_manager = LockManager(self.cache_dir / "lock")
        return self._lock_manager

    def local_path(self, spec: VersionSpec) -> Path:
        """
        Path where the binary for ``spec`` lives.

        Creates the version directory but never downloads anything.
        """
        version_dir = self.cache_dir / str(spec)
        version_dir.mkdir(parents=True, exist_ok=True)
        return version_dir / self.platform.executable_name()

    def is_installed(self, spec: VersionSpec) -> bool:
        """
        Check whether a working binary is installed for ``spec``.

        Returns:
            True only if the file exists, is executable and its
            ``--version`` self-check exits with code 0
        """
        try:
            cli_path = self.local_path(spec)
        except OSError as e:
            logger.debug(f"Cannot use cache directory for Tailwind CLI {spec}: {e}")
            return False
        return self._self_check(cli_path)

    def ensure_installed(
        self,
        spec: VersionSpec,
        cancel_event: Optional[threading.Event] = None,
    ) -> Path:
        """
        Install the CLI for ``spec`` unless a working copy already exists.

        Concurrent callers are serialized on a single installation lock;
        whoever acquires it second re-checks and reuses the first
        caller's download.

        Args:
            spec: Version to provision
            cancel_event: When set, an in-flight download is aborted

        Returns:
            Path to the installed binary

        Raises:
            InstallationFailed: On network, HTTP status, platform or disk errors
            OperationCancelled: If cancel_event is set during the download
        """
        try:
            cli_path = self.local_path(spec)
            if self._self_check(cli_path):
                logger.debug(f"Tailwind CLI {spec} is already installed at {cli_path}")
                return cli_path

            with self.lock_manager.install_lock(timeout=self.download_timeout):
                if self._self_check(cli_path):
                    logger.info(f"Another caller completed install: {cli_path}")
                    return cli_path

                logger.info(f"Installing Tailwind CLI {spec}...")
                self._download(spec, cli_path, cancel_event)

                if not self._self_check(cli_path):
                    raise InstallationFailed(
                        str(spec), f"downloaded binary at {cli_path} failed self-check"
                    )

                logger.info(f"Tailwind CLI {spec} installed successfully")
                return cli_path
        except (LockTimeout, DirectoryError, OSError) as e:
            raise InstallationFailed(str(spec), str(e)) from e

    def execute(
        self,
        spec: VersionSpec,
        args: Sequence[str],
        sink: Optional[OutputSink] = None,
        cwd: Optional[Path] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> int:
        """
        Provision ``spec`` and run it to completion.

        Returns:
            The CLI's exit code
        """
        cli_path = self.ensure_installed(spec, cancel_event=cancel_event)
        return self.runner.run(
            cli_path, args, sink=sink, cwd=cwd, cancel_event=cancel_event
        )

    def _download(
        self,
        spec: VersionSpec,
        cli_path: Path,
        cancel_event: Optional[threading.Event],
    ) -> None:
        try:
            os_name, arch = platform_identifier(self.platform)
            url = self.resolver.download_url(spec, os_name, arch)
            logger.debug(f"Tailwind CLI download URL: {url}")

            download_file(
                url,
                cli_path,
                progress_callback=_log_progress,
                timeout=self.download_timeout,
                cancel_event=cancel_event,
                mode=None if self.platform.is_windows else 0o755,
            )
        except DownloadCancelled as e:
            raise OperationCancelled(str(e)) from e
        except (DownloadError, UnsupportedPlatform, OSError) as e:
            logger.error(f"Failed to download Tailwind CLI {spec}: {e}")
            raise InstallationFailed(str(spec), str(e)) from e

    def _self_check(self, cli_path: Path) -> bool:
        """Run ``<cli> --version`` and report whether it succeeded."""
        try:
            if not cli_path.is_file() or cli_path.stat().st_size == 0:
                return False
        except OSError:
            return False

        if not self.platform.is_windows and not os.access(cli_path, os.X_OK):
            logger.debug(f"Tailwind CLI at {cli_path} is not executable")
            return False

        try:
            result = subprocess.run(
                [str(cli_path), "--version"],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=SELF_CHECK_TIMEOUT,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"Self-check of {cli_path} failed: {e}")
            return False

        if result.returncode != 0:
            logger.debug(
                f"Self-check of {cli_path} exited with {result.returncode}: "
                f"{result.stderr.strip()}"
            )
            return False

        return True


def _log_progress(progress: DownloadProgress) -> None:
    logger.debug(f"Downloading Tailwind CLI: {progress}")


__all__ = ["Provisioner", "SELF_CHECK_TIMEOUT"]
