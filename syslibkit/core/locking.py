"""
Concurrent access control for SysLibKit.

Git working directories live in a shared cache, so two build processes
resolving the same repository must not clone or reset it at the same time.
Locks are file-based (``filelock``) and therefore cross-process.

Usage:
    from syslibkit.core.locking import LockManager

    lock_manager = LockManager(lock_dir)
    with lock_manager.source_lock("zlib-1a2b3c"):
        # Safely clone or refresh the checkout
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout as LockTimeout

from syslibkit.core.directory import get_lock_dir

logger = logging.getLogger(__name__)


class LockManager:
    """
    Manages locks for SysLibKit resources.

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
            lock_dir = get_lock_dir()

        self.lock_dir = Path(lock_dir)
        self.lock_dir.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def source_lock(self, key: str, timeout: int = 300):
        """
        Acquire lock for a source working directory.

        Args:
            key: Working directory identifier
            timeout: Maximum wait time in seconds (default: 300 for long clones)

        Yields:
            None

        Raises:
            LockTimeout: If lock can't be acquired within timeout
        """
        safe_key = key.replace("/", "-").replace("\\", "-").replace(":", "-")
        lock_path = self.lock_dir / f"source-{safe_key}.lock"
        lock = FileLock(lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired source lock: {lock_path}")
                yield
                logger.debug(f"Released source lock: {lock_path}")
        except LockTimeout as e:
            logger.error(
                f"Could not acquire source lock for {key} after {timeout}s. "
                "Another process may be fetching this repository."
            )
            raise LockTimeout(
                f"Could not acquire source lock for {key} after {timeout}s. "
                "Another process may be fetching this repository."
            ) from e


__all__ = ["LockManager", "LockTimeout"]
