"""
Unit tests for capability flags.
"""

from pathlib import Path

import pytest

from syslibkit.core.capabilities import Capabilities, parse_bool


class TestParseBool:
    """Test environment boolean parsing."""

    @pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes", "on", " On "])
    def test_true_values(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["0", "false", "no", "off", ""])
    def test_false_values(self, value):
        assert parse_bool(value) is False

    def test_invalid_value(self):
        with pytest.raises(ValueError, match="Not a boolean"):
            parse_bool("maybe")


class TestCapabilities:
    """Test Capabilities defaults and helpers."""

    def test_defaults(self):
        caps = Capabilities()
        assert caps.use_pkgconfig is True
        assert caps.use_vcpkg is False
        assert caps.source_dir is True
        assert caps.git is True
        assert caps.static_linking is False
        assert caps.source_fallback is False
        assert caps.persist_checkouts is False
        assert caps.cache_dir is None
        assert caps.out_dir is None

    def test_system_probing(self):
        assert Capabilities().system_probing is True
        assert Capabilities(use_pkgconfig=False).system_probing is False
        assert Capabilities(use_pkgconfig=False, use_vcpkg=True).system_probing is True

    def test_with_flags_returns_copy(self):
        caps = Capabilities()
        changed = caps.with_flags(git=False)
        assert changed.git is False
        assert caps.git is True

    def test_frozen(self):
        with pytest.raises(Exception):
            Capabilities().git = False


class TestCapabilitiesFromEnv:
    """Test reading capabilities from environment variables."""

    def test_empty_environment_gives_defaults(self):
        assert Capabilities.from_env({}) == Capabilities()

    def test_boolean_variables(self):
        caps = Capabilities.from_env(
            {
                "SYSLIBKIT_USE_PKGCONFIG": "0",
                "SYSLIBKIT_USE_VCPKG": "1",
                "SYSLIBKIT_STATIC_LINKING": "yes",
                "SYSLIBKIT_SOURCE_FALLBACK": "true",
            }
        )
        assert caps.use_pkgconfig is False
        assert caps.use_vcpkg is True
        assert caps.static_linking is True
        assert caps.source_fallback is True

    def test_path_variables(self):
        caps = Capabilities.from_env(
            {"SYSLIBKIT_CACHE_DIR": "/tmp/cache", "SYSLIBKIT_OUT_DIR": ""}
        )
        assert caps.cache_dir == Path("/tmp/cache")
        assert caps.out_dir is None

    def test_custom_prefix(self):
        caps = Capabilities.from_env({"MYLIB_GIT": "off"}, prefix="MYLIB_")
        assert caps.git is False

    def test_invalid_boolean_names_variable(self):
        with pytest.raises(ValueError, match="SYSLIBKIT_GIT"):
            Capabilities.from_env({"SYSLIBKIT_GIT": "sometimes"})

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("SYSLIBKIT_USE_VCPKG", "1")
        assert Capabilities.from_env().use_vcpkg is True
