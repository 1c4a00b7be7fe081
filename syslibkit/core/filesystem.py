"""
File system helpers for git working directories and tool lookup.
"""

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)


class FilesystemError(Exception):
    """Base exception for filesystem errors."""

    pass


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check whether ``path`` is inside ``parent``.

    Example:
        >>> is_relative_to(Path('/a/b/c'), Path('/a'))
        True
    """
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


def find_executable(
    name: str, search_paths: Optional[List[Path]] = None
) -> Optional[Path]:
    """
    Look up a tool such as ``vcpkg`` or ``pkg-config``.

    Args:
        name: Executable name
        search_paths: Directories to search instead of PATH

    Returns:
        Path to the executable, or None
    """
    path = None
    if search_paths is not None:
        path = os.pathsep.join(str(p) for p in search_paths)
    found = shutil.which(name, path=path)
    return Path(found) if found else None


def _make_writable_and_retry(func, path, _exc_info):
    # git marks pack and object files read-only
    os.chmod(path, stat.S_IWRITE | stat.S_IREAD)
    func(path)


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Remove a directory tree, including read-only git objects.

    Args:
        path: Directory to remove (missing directories are ignored)
        require_prefix: Refuse to remove anything outside this directory

    Raises:
        ValueError: If path is outside require_prefix
        FilesystemError: If path is not a directory or removal fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        prefix = Path(require_prefix).resolve()
        if path == prefix or not is_relative_to(path, prefix):
            raise ValueError(f"Refusing to delete '{path}': not inside '{prefix}'")

    if not path.exists():
        return
    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    logger.debug(f"Removing {path}")
    try:
        shutil.rmtree(path, onerror=_make_writable_and_retry)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


__all__ = ["FilesystemError", "is_relative_to", "find_executable", "safe_rmtree"]
