"""
Unit tests for source working directory locks.
"""

import pytest
from filelock import FileLock

from syslibkit.core.locking import LockManager, LockTimeout


class TestLockManager:
    """Test LockManager."""

    def test_creates_lock_dir(self, tmp_path):
        lock_dir = tmp_path / "locks"
        manager = LockManager(lock_dir)
        assert manager.lock_dir == lock_dir
        assert lock_dir.is_dir()

    def test_source_lock_creates_lock_file(self, tmp_path):
        manager = LockManager(tmp_path)
        with manager.source_lock("zlib-abc123"):
            assert (tmp_path / "source-zlib-abc123.lock").exists()

    def test_key_is_sanitized(self, tmp_path):
        manager = LockManager(tmp_path)
        with manager.source_lock("a/b:c"):
            assert (tmp_path / "source-a-b-c.lock").exists()

    def test_timeout_when_held_elsewhere(self, tmp_path):
        manager = LockManager(tmp_path)
        # A separate FileLock object on the same path simulates another process
        other = FileLock(tmp_path / "source-foo.lock")
        other.acquire()
        try:
            with pytest.raises(LockTimeout):
                with manager.source_lock("foo", timeout=0.1):
                    pass
        finally:
            other.release()
