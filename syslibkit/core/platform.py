"""
Platform detection for SysLibKit.

Detects the host operating system and CPU architecture so probes can pick
the right package layout (e.g., the vcpkg triplet) and backends can pick
library file extensions.

Usage:
    from syslibkit.core.platform import detect_platform

    info = detect_platform()
    print(info.platform_string())  # 'linux-x64'
"""

import functools
import platform
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos', 'android', 'ios')
        arch: CPU architecture ('x64', 'arm64', 'x86', 'arm', ...)
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'macos-arm64').

        Example:
            >>> PlatformInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    def library_suffixes(self, static: bool) -> Tuple[str, ...]:
        """
        File suffixes of linkable libraries on this platform.

        Args:
            static: Whether static archives are wanted

        Returns:
            Tuple of suffixes, preferred first
        """
        if self.os == "windows":
            return (".lib",)
        if static:
            return (".a",)
        if self.os in ("macos", "ios"):
            return (".dylib", ".a")
        return (".so", ".a")

    def __str__(self) -> str:
        return self.platform_string()


_OS_NAMES = {"windows": "windows", "linux": "linux", "darwin": "macos"}

_ARCH_NAMES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "x86",
    "i686": "x86",
    "x86": "x86",
}


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect the host platform once per process.

    Raises:
        RuntimeError: If the operating system is not supported
    """
    system = platform.system().lower()
    os_name = _OS_NAMES.get(system)
    if os_name is None:
        raise RuntimeError(f"Unsupported operating system: {system}")

    # Android reports Linux and iOS reports Darwin
    details = platform.platform().lower()
    if os_name == "linux" and "android" in details:
        os_name = "android"
    elif os_name == "macos" and ("iphone" in details or "ios" in details):
        os_name = "ios"

    machine = platform.machine().lower()
    arch = _ARCH_NAMES.get(machine)
    if arch is None:
        arch = "arm" if machine.startswith("arm") else machine

    return PlatformInfo(os=os_name, arch=arch)


def clear_platform_cache() -> None:
    """Clear the cached detection result (used by tests)."""
    detect_platform.cache_clear()


__all__ = ["PlatformInfo", "detect_platform", "clear_platform_cache"]
