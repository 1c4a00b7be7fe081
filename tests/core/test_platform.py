"""
Unit tests for platform detection.
"""

from unittest.mock import patch

import pytest

from syslibkit.core.platform import PlatformInfo, detect_platform


class TestPlatformInfo:
    """Test PlatformInfo helpers."""

    def test_platform_string(self):
        assert PlatformInfo("linux", "x64").platform_string() == "linux-x64"
        assert str(PlatformInfo("macos", "arm64")) == "macos-arm64"

    @pytest.mark.parametrize(
        "os_name,static,expected",
        [
            ("linux", False, (".so", ".a")),
            ("linux", True, (".a",)),
            ("macos", False, (".dylib", ".a")),
            ("macos", True, (".a",)),
            ("windows", False, (".lib",)),
            ("windows", True, (".lib",)),
        ],
    )
    def test_library_suffixes(self, os_name, static, expected):
        assert PlatformInfo(os_name, "x64").library_suffixes(static) == expected


class TestDetectPlatform:
    """Test host detection."""

    @patch("syslibkit.core.platform.platform.machine", return_value="x86_64")
    @patch("syslibkit.core.platform.platform.platform", return_value="Linux-6.1-x86_64")
    @patch("syslibkit.core.platform.platform.system", return_value="Linux")
    def test_linux_x64(self, *_mocks):
        assert detect_platform() == PlatformInfo("linux", "x64")

    @patch("syslibkit.core.platform.platform.machine", return_value="arm64")
    @patch("syslibkit.core.platform.platform.platform", return_value="macOS-14.0-arm64")
    @patch("syslibkit.core.platform.platform.system", return_value="Darwin")
    def test_macos_arm64(self, *_mocks):
        assert detect_platform() == PlatformInfo("macos", "arm64")

    @patch("syslibkit.core.platform.platform.machine", return_value="AMD64")
    @patch("syslibkit.core.platform.platform.platform", return_value="Windows-10")
    @patch("syslibkit.core.platform.platform.system", return_value="Windows")
    def test_windows_x64(self, *_mocks):
        assert detect_platform() == PlatformInfo("windows", "x64")

    @patch("syslibkit.core.platform.platform.system", return_value="Plan9")
    def test_unsupported_os(self, _mock):
        with pytest.raises(RuntimeError, match="Unsupported operating system"):
            detect_platform()

    def test_result_is_cached(self):
        assert detect_platform() is detect_platform()

    @patch("syslibkit.core.platform.platform.machine", return_value="armv7l")
    @patch("syslibkit.core.platform.platform.platform", return_value="Linux-4.19-android-armv7l")
    @patch("syslibkit.core.platform.platform.system", return_value="Linux")
    def test_android_arm(self, *_mocks):
        assert detect_platform() == PlatformInfo("android", "arm")
