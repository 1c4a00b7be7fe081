"""
Directory structure management for SysLibKit.

Directory Structure:
    Global Cache (~/.syslibkit/ or %USERPROFILE%\\.syslibkit\\):
        - sources/    : Git working directories for remote sources
        - build/      : Per-library build output (install prefixes)
        - lock/       : Concurrent access control files
"""

import os
from pathlib import Path
from typing import Optional


class DirectoryError(Exception):
    """Base exception for directory-related errors."""

    pass


def get_global_cache_dir(override: Optional[Path] = None) -> Path:
    """
    Get the platform-specific global cache directory path.

    Args:
        override: Explicit cache directory, returned as-is when given

    Returns:
        Path: The global cache directory path.
            - Windows: %USERPROFILE%\\.syslibkit
            - Linux/macOS: ~/.syslibkit/

    Raises:
        DirectoryError: If USERPROFILE is not set on Windows
    """
    if override is not None:
        return Path(override)

    if os.name == "nt":  # Windows
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise DirectoryError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine global cache directory."
            )
        return Path(user_profile) / ".syslibkit"
    else:  # Linux/macOS
        return Path.home() / ".syslibkit"


def get_sources_dir(cache_dir: Optional[Path] = None) -> Path:
    """Directory holding git working directories."""
    return get_global_cache_dir(cache_dir) / "sources"


def get_build_root(cache_dir: Optional[Path] = None) -> Path:
    """Directory holding per-library build output."""
    return get_global_cache_dir(cache_dir) / "build"


def get_lock_dir(cache_dir: Optional[Path] = None) -> Path:
    """Directory holding lock files."""
    return get_global_cache_dir(cache_dir) / "lock"


def ensure_directory(path: Path) -> Path:
    """
    Create a directory (and parents) if it doesn't exist.

    Raises:
        DirectoryError: If the directory cannot be created
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryError(f"Failed to create directory {path}: {e}") from e
    return path


__all__ = [
    "DirectoryError",
    "get_global_cache_dir",
    "get_sources_dir",
    "get_build_root",
    "get_lock_dir",
    "ensure_directory",
]
