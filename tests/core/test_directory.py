"""
Unit tests for cache directory layout.
"""

import os
from pathlib import Path

import pytest

from syslibkit.core.directory import (
    DirectoryError,
    ensure_directory,
    get_build_root,
    get_global_cache_dir,
    get_lock_dir,
    get_sources_dir,
)


class TestGlobalCacheDir:
    """Test cache directory resolution."""

    def test_override_returned_as_is(self, tmp_path):
        assert get_global_cache_dir(tmp_path / "c") == tmp_path / "c"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX home layout")
    def test_default_under_home(self, isolated_home):
        assert get_global_cache_dir() == Path.home() / ".syslibkit"

    def test_layout(self, tmp_path):
        assert get_sources_dir(tmp_path) == tmp_path / "sources"
        assert get_build_root(tmp_path) == tmp_path / "build"
        assert get_lock_dir(tmp_path) == tmp_path / "lock"


class TestEnsureDirectory:
    """Test directory creation."""

    def test_creates_parents(self, tmp_path):
        target = tmp_path / "a" / "b" / "c"
        assert ensure_directory(target) == target
        assert target.is_dir()

    def test_existing_directory(self, tmp_path):
        assert ensure_directory(tmp_path) == tmp_path

    def test_file_in_the_way(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(DirectoryError, match="Failed to create directory"):
            ensure_directory(blocker / "child")
