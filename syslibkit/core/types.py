"""
Value types shared by probes, source locators and build backends.

Classes:
    LibraryDescriptor: Candidate system library (name + minimum version)
    LocalSource: Source tree in a local directory
    GitSource: Source tree in a git repository
    LinkInfo: Normalized link/include information handed to the caller
"""

import json
import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)


# =============================================================================
# Descriptors
# =============================================================================


@dataclass(frozen=True)
class LibraryDescriptor:
    """
    External (system) library.

    Attributes:
        name: Library name as known to pkg-config / vcpkg
        version: Optional minimum version (inclusive)

    Example:
        lib = LibraryDescriptor("zlib", "1.2.11")
    """

    name: str
    version: Optional[str] = None

    def __post_init__(self):
        """Validate descriptor after initialization."""
        if not self.name:
            raise ValueError("Library name cannot be empty")
        if self.version is not None:
            try:
                Version(self.version)
            except InvalidVersion as e:
                raise ValueError(
                    f"Invalid minimum version for {self.name}: {self.version}"
                ) from e

    def __str__(self) -> str:
        if self.version:
            return f"{self.name}>={self.version}"
        return self.name


@dataclass(frozen=True)
class LocalSource:
    """Local directory source for a library."""

    path: Path

    def __post_init__(self):
        if not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path))

    def __str__(self) -> str:
        return f"source_dir {self.path}"


@dataclass(frozen=True)
class GitSource:
    """
    Git repository source for a library.

    Attributes:
        repo: Repository URL (or local path git understands)
        reference: Optional branch, tag or commit; default branch if None
    """

    repo: str
    reference: Optional[str] = None

    def __post_init__(self):
        if not self.repo:
            raise ValueError("Git repository URL cannot be empty")

    def __str__(self) -> str:
        if self.reference:
            return f"git_repo {self.repo}@{self.reference}"
        return f"git_repo {self.repo}"


SourceDescriptor = Union[LocalSource, GitSource]


# =============================================================================
# LinkInfo
# =============================================================================


def _extend_unique(target: List[Any], values: Iterable[Any]) -> None:
    for value in values:
        if value not in target:
            target.append(value)


@dataclass
class LinkInfo:
    """
    Information required to compile and link against a library.

    Field order is part of the output contract: downstream tooling reads
    ``to_dict()`` / ``to_json()`` programmatically.

    Attributes:
        include_dirs: Ordered include directories
        link_dirs: Ordered library search directories
        libraries: Ordered library names to link (without 'lib' prefix)
        defines: Preprocessor defines, value None for bare defines
        origin: Which probe or backend produced this information
    """

    include_dirs: List[Path] = field(default_factory=list)
    link_dirs: List[Path] = field(default_factory=list)
    libraries: List[str] = field(default_factory=list)
    defines: Dict[str, Optional[str]] = field(default_factory=dict)
    origin: str = ""

    def __post_init__(self):
        self.include_dirs = [Path(p) for p in self.include_dirs]
        self.link_dirs = [Path(p) for p in self.link_dirs]
        self.libraries = list(self.libraries)
        self.defines = dict(self.defines)

    @classmethod
    def from_flags(
        cls, cflags: Sequence[str], libs: Sequence[str], origin: str = ""
    ) -> "LinkInfo":
        """
        Build LinkInfo from compiler and linker flags.

        Recognizes ``-I``, ``-D``, ``-L`` and ``-l``; anything else is
        dropped because it has no place in the normalized contract.

        Args:
            cflags: Compile flags (e.g., output of ``pkg-config --cflags``)
            libs: Link flags (e.g., output of ``pkg-config --libs``)
            origin: Producer name

        Returns:
            Parsed LinkInfo
        """
        info = cls(origin=origin)

        for flag in list(cflags) + list(libs):
            if flag.startswith("-I") and len(flag) > 2:
                _extend_unique(info.include_dirs, [Path(flag[2:])])
            elif flag.startswith("-D") and len(flag) > 2:
                key, sep, value = flag[2:].partition("=")
                info.defines[key] = value if sep else None
            elif flag.startswith("-L") and len(flag) > 2:
                _extend_unique(info.link_dirs, [Path(flag[2:])])
            elif flag.startswith("-l") and len(flag) > 2:
                _extend_unique(info.libraries, [flag[2:]])
            else:
                logger.debug(f"Ignoring unsupported flag: {flag}")

        return info

    @classmethod
    def from_flag_string(
        cls, cflags: str, libs: str, origin: str = ""
    ) -> "LinkInfo":
        """Same as from_flags but splits shell-quoted strings first."""
        return cls.from_flags(shlex.split(cflags), shlex.split(libs), origin)

    def merge(self, other: "LinkInfo") -> "LinkInfo":
        """
        Combine two LinkInfo values, keeping order and dropping duplicates.

        Defines from ``other`` win on key conflicts.
        """
        merged = LinkInfo(
            include_dirs=self.include_dirs,
            link_dirs=self.link_dirs,
            libraries=self.libraries,
            defines=self.defines,
            origin=self.origin or other.origin,
        )
        _extend_unique(merged.include_dirs, other.include_dirs)
        _extend_unique(merged.link_dirs, other.link_dirs)
        _extend_unique(merged.libraries, other.libraries)
        merged.defines.update(other.defines)
        return merged

    def compile_flags(self) -> List[str]:
        """Render include directories and defines as compiler flags."""
        flags = [f"-I{path}" for path in self.include_dirs]
        for key, value in self.defines.items():
            flags.append(f"-D{key}" if value is None else f"-D{key}={value}")
        return flags

    def link_flags(self) -> List[str]:
        """Render search directories and libraries as linker flags."""
        flags = [f"-L{path}" for path in self.link_dirs]
        flags.extend(f"-l{name}" for name in self.libraries)
        return flags

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a plain dictionary with a stable key order.

        Returns:
            Dictionary with keys include_dirs, link_dirs, libraries,
            defines, origin
        """
        return {
            "include_dirs": [str(p) for p in self.include_dirs],
            "link_dirs": [str(p) for p in self.link_dirs],
            "libraries": list(self.libraries),
            "defines": dict(self.defines),
            "origin": self.origin,
        }

    def to_json(self) -> str:
        """Serialize to deterministic JSON."""
        return json.dumps(self.to_dict(), indent=2)


__all__ = [
    "LibraryDescriptor",
    "LocalSource",
    "GitSource",
    "SourceDescriptor",
    "LinkInfo",
]
