"""
Pytest configuration and shared fixtures for SysLibKit tests.
"""

import pytest
import tempfile
from pathlib import Path
from typing import Generator

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.source_trees import (
    c_source_tree,
    cmake_source_tree,
    autotools_source_tree,
)
from tests.fixtures.vcpkg_trees import vcpkg_root

from syslibkit.core.capabilities import Capabilities
from syslibkit.core.platform import clear_platform_cache


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that invoke real compilers and git",
    )


def pytest_collection_modifyitems(config, items):
    """
    Skip integration tests unless --integration flag is provided.
    """
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def isolated_home(temp_dir: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = temp_dir / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture
def clean_env(monkeypatch):
    """Remove SYSLIBKIT_* and tool override variables from the environment."""
    import os

    for key in list(os.environ):
        if key.startswith("SYSLIBKIT_"):
            monkeypatch.delenv(key, raising=False)
    for key in ("PKG_CONFIG", "VCPKG_ROOT", "VCPKG_DEFAULT_TRIPLET", "CC", "CXX", "AR"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def offline_caps(tmp_path) -> Capabilities:
    """Capabilities with every source enabled and all state under tmp_path."""
    return Capabilities(
        use_pkgconfig=True,
        use_vcpkg=False,
        source_dir=True,
        git=True,
        cache_dir=tmp_path / "cache",
        out_dir=tmp_path / "out",
    )


@pytest.fixture(autouse=True)
def reset_platform_cache():
    """Platform detection is cached per process; tests may patch it."""
    clear_platform_cache()
    yield
    clear_platform_cache()
