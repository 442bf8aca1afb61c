"""
Concurrent access control for Tailbreeze installations.

Installing the Tailwind CLI must happen at most once even when several
threads (request handlers, the lifecycle supervisor) or several worker
processes ask for it at the same time. The lock here combines:

- an in-process ``threading.Lock`` owned by the LockManager instance, and
- a cross-process ``filelock.FileLock`` in the cache's ``lock/`` directory.

The lock is deliberately scoped to the whole cache, not to a version:
installs are rare and I/O bound, so serializing them is acceptable.

Usage:
    from tailbreeze.core.locking import LockManager

    lock_manager = LockManager(cache_dir / "lock")
    with lock_manager.install_lock(timeout=300):
        # Re-check and download
        pass
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout as LockTimeout

from tailbreeze.core.directory import get_global_cache_dir

logger = logging.getLogger(__name__)


class LockManager:
    """
    Manages the installation lock for a tool cache.

    Attributes:
        lock_dir: Directory where lock files are stored
    """

    def __init__(self, lock_dir: Optional[Path] = None):
        """
        Initialize lock manager.

        Args:
            lock_dir: Directory for lock files (default: global cache/lock/)
        """
        if lock_dir is None:
            lock_dir = get_global_cache_dir() / "lock"

        self.lock_dir = Path(lock_dir)
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        self._thread_lock = threading.Lock()

    @property
    def install_lock_path(self) -> Path:
        return self.lock_dir / "install.lock"

    @contextmanager
    def install_lock(self, timeout: float = 300):
        """
        Acquire the installation lock.

        The in-process lock is taken first so concurrent threads queue
        without hammering the lock file, then the file lock guards
        against other processes sharing the same cache.

        Args:
            timeout: Maximum wait time in seconds for each stage

        Yields:
            None

        Raises:
            LockTimeout: If the lock can't be acquired within timeout
        """
        lock_path = self.install_lock_path
        message = (
            f"Could not acquire install lock after {timeout}s. "
            "Another process may be installing the Tailwind CLI."
        )

        if not self._thread_lock.acquire(timeout=timeout):
            logger.error(message)
            raise LockTimeout(message)

        try:
            try:
                with FileLock(lock_path, timeout=timeout):
                    logger.debug(f"Acquired install lock: {lock_path}")
                    yield
                    logger.debug(f"Released install lock: {lock_path}")
            except LockTimeout as e:
                logger.error(message)
                raise LockTimeout(message) from e
        finally:
            self._thread_lock.release()

    def is_locked(self) -> bool:
        """Whether a thread of this process currently holds the lock."""
        return self._thread_lock.locked()


__all__ = [
    "LockManager",
    "LockTimeout",
]
