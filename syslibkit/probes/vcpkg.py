"""
vcpkg system probe.

Looks up libraries that vcpkg has already installed, without running
vcpkg itself: the probe reads the installed-package database
(``installed/vcpkg/status`` plus incremental ``updates/``) and the per-port
file lists under ``installed/vcpkg/info``.

Example:
    from syslibkit.probes.vcpkg import VcpkgProbe
    from syslibkit.core.types import LibraryDescriptor

    probe = VcpkgProbe()
    info = probe.probe(LibraryDescriptor("zlib", "1.2.11"))
    if info:
        print(info.link_flags())
"""

import logging
import os
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from packaging.version import InvalidVersion, Version

from syslibkit.backends.base import library_name_from_file
from syslibkit.core.exceptions import ProbeError
from syslibkit.core.filesystem import find_executable
from syslibkit.core.platform import PlatformInfo, detect_platform
from syslibkit.core.types import LibraryDescriptor, LinkInfo
from syslibkit.probes.base import SystemProbe

logger = logging.getLogger(__name__)


def get_triplet(platform: PlatformInfo, static: bool = False) -> str:
    """
    Get vcpkg triplet for platform.

    Args:
        platform: Platform information with os and arch
        static: Request the static-CRT triplet on Windows

    Returns:
        vcpkg triplet string (e.g., 'x64-linux', 'x64-windows-static')
    """
    os_lower = platform.os.lower()
    arch_lower = platform.arch.lower()

    # Map architecture
    if arch_lower in ("x86_64", "x64", "amd64"):
        arch_part = "x64"
    elif arch_lower in ("arm64", "aarch64"):
        arch_part = "arm64"
    elif arch_lower in ("x86", "i686"):
        arch_part = "x86"
    elif arch_lower in ("arm", "armv7"):
        arch_part = "arm"
    else:
        arch_part = "x64"  # Default

    # Map OS
    if os_lower == "linux":
        os_part = "linux"
    elif os_lower in ("macos", "darwin"):
        os_part = "osx"
    elif os_lower == "windows":
        os_part = "windows"
    elif os_lower == "android":
        os_part = "android"
    elif os_lower == "ios":
        os_part = "ios"
    else:
        os_part = "linux"  # Default

    triplet = f"{arch_part}-{os_part}"
    if static and os_part == "windows":
        triplet += "-static"
    return triplet


def parse_status_paragraphs(text: str) -> Iterator[Dict[str, str]]:
    """
    Parse a vcpkg status database (RFC 822 style paragraphs).

    Continuation lines (starting with whitespace) are appended to the
    previous field.
    """
    paragraph: Dict[str, str] = {}
    last_key: Optional[str] = None

    for line in text.splitlines():
        if not line.strip():
            if paragraph:
                yield paragraph
            paragraph = {}
            last_key = None
            continue
        if line[0] in " \t" and last_key:
            paragraph[last_key] += "\n" + line.strip()
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        last_key = key.strip()
        paragraph[last_key] = value.strip()

    if paragraph:
        yield paragraph


def _read_database_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ProbeError(f"Cannot read vcpkg database file {path}: {e}") from e


class VcpkgProbe(SystemProbe):
    """
    Probe system libraries installed by vcpkg.

    Attributes:
        custom_vcpkg_path: Optional custom path to vcpkg root directory
        platform: Target platform (default: detected host platform)
        vcpkg_root: Located vcpkg root, or None
    """

    name = "vcpkg"

    def __init__(
        self,
        custom_vcpkg_path: Optional[Path] = None,
        platform: Optional[PlatformInfo] = None,
    ):
        self.custom_vcpkg_path = Path(custom_vcpkg_path) if custom_vcpkg_path else None
        self.platform = platform or detect_platform()
        self.vcpkg_root = self._find_vcpkg_root()

    def _find_vcpkg_root(self) -> Optional[Path]:
        """
        Find vcpkg installation directory.

        Searches for vcpkg installation in:
        1. Custom path (if specified)
        2. VCPKG_ROOT environment variable
        3. vcpkg executable on PATH
        4. Common locations

        Returns:
            Path to vcpkg root directory, or None if not found
        """
        if self.custom_vcpkg_path:
            if self.custom_vcpkg_path.exists():
                return self.custom_vcpkg_path
            return None

        vcpkg_root_env = os.getenv("VCPKG_ROOT")
        if vcpkg_root_env:
            vcpkg_path = Path(vcpkg_root_env)
            if vcpkg_path.exists():
                return vcpkg_path

        system_vcpkg = find_executable("vcpkg")
        if system_vcpkg:
            return system_vcpkg.parent

        common_paths = [
            Path.home() / "vcpkg",
            Path("C:/vcpkg"),
            Path("/usr/local/vcpkg"),
            Path("/opt/vcpkg"),
        ]

        for path in common_paths:
            if (path / "vcpkg").exists() or (path / "vcpkg.exe").exists():
                return path

        return None

    def get_triplet(self, static: bool = False) -> str:
        """Triplet to look up, honouring VCPKG_DEFAULT_TRIPLET."""
        override = os.getenv("VCPKG_DEFAULT_TRIPLET")
        if override:
            return override
        return get_triplet(self.platform, static)

    def probe(
        self, descriptor: LibraryDescriptor, static: bool = False
    ) -> Optional[LinkInfo]:
        """
        Find a library installed by vcpkg.

        Args:
            descriptor: Port name and optional minimum version
            static: Prefer static libraries / static triplet

        Returns:
            LinkInfo on success, None if vcpkg, the port or a recent
            enough version is missing

        Raises:
            ProbeError: If the installed-package database cannot be read
        """
        if not self.vcpkg_root:
            logger.info("vcpkg not found, set VCPKG_ROOT to enable the vcpkg probe")
            return None

        installed = self.vcpkg_root / "installed"
        triplet = self.get_triplet(static)

        entry = self._find_installed_port(installed, descriptor.name, triplet)
        if entry is None:
            logger.info(f"vcpkg failed to find library {descriptor.name} ({triplet})")
            return None

        version = entry.get("Version", "")
        if descriptor.version and not self._version_satisfies(version, descriptor):
            logger.info(
                f"vcpkg has {descriptor.name} {version}, "
                f"but at least {descriptor.version} is required"
            )
            return None

        libraries = self._library_names(installed, descriptor.name, triplet, static)
        if not libraries:
            logger.info(
                f"vcpkg port {descriptor.name} ({triplet}) installs no linkable libraries"
            )

        triplet_dir = installed / triplet
        include_dir = triplet_dir / "include"
        info = LinkInfo(
            include_dirs=[include_dir] if include_dir.is_dir() else [],
            link_dirs=[triplet_dir / "lib"],
            libraries=libraries,
            origin=self.name,
        )
        logger.info(f"vcpkg found library {descriptor.name} {version}: {libraries}")
        return info

    def _find_installed_port(
        self, installed: Path, port: str, triplet: str
    ) -> Optional[Dict[str, str]]:
        """Latest status entry for an installed port, or None."""
        db_dir = installed / "vcpkg"
        status_files: List[Path] = []
        if (db_dir / "status").is_file():
            status_files.append(db_dir / "status")
        updates = db_dir / "updates"
        if updates.is_dir():
            try:
                status_files.extend(sorted(p for p in updates.iterdir() if p.is_file()))
            except OSError as e:
                raise ProbeError(f"Cannot list vcpkg status updates in {updates}: {e}") from e

        found: Optional[Dict[str, str]] = None
        for status_file in status_files:
            for paragraph in parse_status_paragraphs(_read_database_file(status_file)):
                if paragraph.get("Package") != port:
                    continue
                if paragraph.get("Architecture") != triplet:
                    continue
                if "Feature" in paragraph:
                    continue
                # Later entries override earlier ones
                if paragraph.get("Status", "").endswith(" installed"):
                    found = paragraph
                else:
                    found = None
        return found

    def _version_satisfies(self, installed: str, descriptor: LibraryDescriptor) -> bool:
        installed = installed.split("#", 1)[0]
        try:
            return Version(installed) >= Version(descriptor.version)
        except InvalidVersion:
            logger.warning(
                f"Cannot compare vcpkg version '{installed}' of {descriptor.name}, "
                "accepting it"
            )
            return True

    def _library_names(
        self, installed: Path, port: str, triplet: str, static: bool
    ) -> List[str]:
        """Library names from the port's installed file list."""
        info_dir = installed / "vcpkg" / "info"
        lists = sorted(info_dir.glob(f"{port}_*_{triplet}.list")) if info_dir.is_dir() else []
        if not lists:
            return []

        prefix = f"{triplet}/lib/"
        suffixes = self.platform.library_suffixes(static)
        names: List[str] = []
        for line in _read_database_file(lists[-1]).splitlines():
            line = line.strip()
            if not line.startswith(prefix):
                continue
            filename = line[len(prefix):]
            if "/" in filename:
                continue
            lib_name = library_name_from_file(filename, suffixes)
            if lib_name and lib_name not in names:
                names.append(lib_name)
        return names


__all__ = ["VcpkgProbe", "get_triplet", "parse_status_paragraphs"]
