"""
Unit tests for the locking module.

Tests cover:
- Lock acquisition and release
- Timeout behavior
- Exception handling and cleanup
"""

import threading
import time
from unittest.mock import patch

import pytest

from tailbreeze.core.locking import LockManager, LockTimeout


class TestLockManager:
    """Tests for LockManager class."""

    def test_init_default_lock_dir(self, tmp_path):
        """Test initialization with default lock directory."""
        with patch(
            "tailbreeze.core.locking.get_global_cache_dir", return_value=tmp_path
        ):
            manager = LockManager()

        assert manager.lock_dir == tmp_path / "lock"
        assert (tmp_path / "lock").is_dir()

    def test_install_lock_acquire_and_release(self, tmp_path):
        """Test acquiring and releasing the install lock."""
        manager = LockManager(lock_dir=tmp_path)

        with manager.install_lock(timeout=5):
            assert manager.is_locked()
            assert manager.install_lock_path.exists()

        assert not manager.is_locked()

    def test_lock_released_on_exception(self, tmp_path):
        """Test the lock is released when the body raises."""
        manager = LockManager(lock_dir=tmp_path)

        with pytest.raises(RuntimeError):
            with manager.install_lock(timeout=5):
                raise RuntimeError("boom")

        assert not manager.is_locked()
        with manager.install_lock(timeout=1):
            pass

    def test_thread_timeout(self, tmp_path):
        """Test a second thread times out with a descriptive message."""
        manager = LockManager(lock_dir=tmp_path)
        acquired = threading.Event()
        release = threading.Event()

        def holder():
            with manager.install_lock(timeout=5):
                acquired.set()
                release.wait(5)

        thread = threading.Thread(target=holder)
        thread.start()
        try:
            assert acquired.wait(5)
            with pytest.raises(LockTimeout, match="Could not acquire install lock"):
                with manager.install_lock(timeout=0.1):
                    pass
        finally:
            release.set()
            thread.join(5)

    def test_cross_process_timeout(self, tmp_path):
        """Test a file lock held elsewhere surfaces as LockTimeout."""
        from filelock import FileLock

        manager = LockManager(lock_dir=tmp_path)

        with FileLock(manager.install_lock_path):
            # Held through a separate handle, as another process would
            with pytest.raises(LockTimeout):
                with manager.install_lock(timeout=0.1):
                    pass

        assert not manager.is_locked()

    def test_serializes_threads(self, tmp_path):
        """Test critical sections never overlap."""
        manager = LockManager(lock_dir=tmp_path)
        active = []
        overlaps = []

        def worker():
            with manager.install_lock(timeout=10):
                active.append(1)
                if len(active) > 1:
                    overlaps.append(True)
                time.sleep(0.05)
                active.pop()

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(10)

        assert overlaps == []
