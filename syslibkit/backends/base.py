"""
Build backend interface for SysLibKit.

This module defines the abstract base class for build backends and the
tagged ``BackendKind`` used to dispatch to one of them.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from syslibkit.core.exceptions import BackendExecutionFailed, CommandError, ConfigError
from syslibkit.core.filesystem import FilesystemError, safe_rmtree
from syslibkit.core.platform import detect_platform
from syslibkit.core.process import run_command
from syslibkit.core.types import LinkInfo

logger = logging.getLogger(__name__)


class BackendKind(Enum):
    """Supported native build drivers."""

    CC = "cc"
    AUTOTOOLS = "autotools"
    CMAKE = "cmake"

    @classmethod
    def parse(cls, value: Any) -> "BackendKind":
        """
        Convert a string (or BackendKind) to BackendKind.

        Raises:
            ConfigError: If the value names no known backend
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as e:
            raise ConfigError(
                f"Unknown backend: {value} (expected one of "
                f"{[kind.value for kind in cls]})"
            ) from e


def detect_backend_kind(source_dir: Path) -> BackendKind:
    """
    Detect the build system of a source tree.

    CMakeLists.txt wins over autotools files; trees with neither are
    compiled directly.

    Args:
        source_dir: Root of the source tree

    Returns:
        Detected backend kind
    """
    if (source_dir / "CMakeLists.txt").exists():
        logger.info("Found 'CMakeLists.txt', using cmake backend")
        return BackendKind.CMAKE
    for marker in ("configure", "configure.ac", "configure.in"):
        if (source_dir / marker).exists():
            logger.info(f"Found '{marker}', using autotools backend")
            return BackendKind.AUTOTOOLS
    logger.info("No build system detected, compiling sources directly")
    return BackendKind.CC


class BuildBackend(ABC):
    """
    Abstract base class for build backends.

    A build backend builds a library from a resolved source directory into
    an output directory and describes the result as LinkInfo.
    """

    kind: BackendKind

    @abstractmethod
    def build(
        self,
        name: str,
        source_dir: Path,
        out_dir: Path,
        options: Any,
        static: bool = False,
    ) -> LinkInfo:
        """
        Build the library.

        Args:
            name: Library base name
            source_dir: Existing source directory
            out_dir: Directory for build and install output
            options: Backend-specific option bag
            static: Prefer a static library

        Returns:
            LinkInfo describing the built library

        Raises:
            BackendExecutionFailed: If the build fails or produces nothing usable
        """
        pass

    def run(
        self,
        name: str,
        command: Sequence[Any],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Run one build step, translating failures to BackendExecutionFailed.
        """
        try:
            run_command(command, cwd=cwd, env=env)
        except CommandError as e:
            if e.returncode is None:
                reason = f"could not run '{e.command[0]}'"
            else:
                reason = f"'{e.command[0]}' step failed"
            logger.error(f"{self.kind.value} build of {name} failed: {e}")
            raise BackendExecutionFailed(
                name,
                self.kind.value,
                reason,
                command=e.command,
                returncode=e.returncode,
                output=e.output,
            ) from e

    def clear_install_tree(self, name: str, prefix: Path, *extra: str) -> None:
        """
        Remove install directories left in ``prefix`` by an earlier build.

        ``include``, ``lib`` and ``lib64`` are always removed, plus any
        ``extra`` subdirectories.

        Raises:
            BackendExecutionFailed: If a directory cannot be removed
        """
        for subdir in ("include", "lib", "lib64") + extra:
            try:
                safe_rmtree(prefix / subdir, require_prefix=prefix)
            except (FilesystemError, ValueError) as e:
                raise BackendExecutionFailed(name, self.kind.value, str(e)) from e

    def collect_install_tree(self, name: str, prefix: Path, static: bool) -> LinkInfo:
        """
        Describe an install prefix (``include/`` and ``lib/``) as LinkInfo.

        Library names come from the installed library files. If the lib
        directory exists but holds none, ``name`` is assumed.

        Raises:
            BackendExecutionFailed: If no lib directory was installed
        """
        lib_dirs = [d for d in (prefix / "lib", prefix / "lib64") if d.is_dir()]
        if not lib_dirs:
            raise BackendExecutionFailed(
                name,
                self.kind.value,
                f"no library directory installed under {prefix}",
            )

        suffixes = detect_platform().library_suffixes(static)
        libraries: List[str] = []
        for lib_dir in lib_dirs:
            for entry in sorted(lib_dir.iterdir()):
                lib_name = library_name_from_file(entry.name, suffixes)
                if lib_name and lib_name not in libraries:
                    libraries.append(lib_name)

        if not libraries:
            logger.warning(
                f"No library files found in {prefix}, assuming '{name}'"
            )
            libraries = [name]

        include_dirs = [prefix / "include"] if (prefix / "include").is_dir() else []

        return LinkInfo(
            include_dirs=include_dirs,
            link_dirs=lib_dirs,
            libraries=libraries,
            origin=self.kind.value,
        )


def library_name_from_file(filename: str, suffixes: Sequence[str]) -> Optional[str]:
    """
    Get the link name of a library file.

    Example:
        >>> library_name_from_file("libz.so.1.3", (".so", ".a"))
        'z'
        >>> library_name_from_file("zlib.lib", (".lib",))
        'zlib'
    """
    if filename.endswith(".la"):
        # libtool archives describe a library, they are not one
        return None
    for suffix in suffixes:
        if filename.endswith(suffix):
            stem = filename[: -len(suffix)]
        elif suffix == ".so" and ".so." in filename:
            # Versioned shared objects (libfoo.so.1.2)
            stem = filename.split(".so.", 1)[0]
        else:
            continue
        if suffix != ".lib":
            if not stem.startswith("lib"):
                continue
            stem = stem[3:]
        if stem:
            return stem
    return None


__all__ = [
    "BackendKind",
    "BuildBackend",
    "detect_backend_kind",
    "library_name_from_file",
]
