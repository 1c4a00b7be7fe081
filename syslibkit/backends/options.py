"""
Backend option bags.

Each build backend accepts its own option dataclass. Fields are additive
only: every field has a safe default, so existing ``Config`` construction
keeps working when new options appear.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional, Type, TypeVar

from syslibkit.core.exceptions import ConfigError

T = TypeVar("T")


def options_from_dict(cls: Type[T], data: Optional[Dict[str, Any]]) -> T:
    """
    Create an option bag from a plain dictionary.

    Args:
        cls: Option dataclass
        data: Field values (None gives defaults)

    Returns:
        Option bag instance

    Raises:
        ConfigError: If data has keys the option bag doesn't know
    """
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"{cls.__name__} must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(
            f"Unknown {cls.__name__} option(s): {', '.join(unknown)} "
            f"(expected one of {sorted(known)})"
        )
    return cls(**data)


@dataclass(frozen=True)
class CcOptions:
    """
    Options for direct compiler invocation.

    Attributes:
        files: Source globs relative to the source directory
        include_dirs: Extra include directories (relative to source)
        defines: Preprocessor defines, value None for bare defines
        flags: Extra compiler flags
        compiler: Compiler executable (default: $CC or cc/c++)
        archiver: Archiver executable (default: $AR or ar)
        cpp: Compile as C++ (default glob becomes **/*.cpp)
    """

    files: List[str] = field(default_factory=list)
    include_dirs: List[str] = field(default_factory=list)
    defines: Dict[str, Optional[str]] = field(default_factory=dict)
    flags: List[str] = field(default_factory=list)
    compiler: Optional[str] = None
    archiver: Optional[str] = None
    cpp: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AutotoolsOptions:
    """
    Options for autotools builds.

    Attributes:
        configure_args: Extra arguments for ./configure
        make_args: Extra arguments for make
        env: Extra environment variables (e.g., CFLAGS)
        autoreconf: Run ``autoreconf -fi`` when no configure script exists
        jobs: Parallel make jobs (None lets make decide)
    """

    configure_args: List[str] = field(default_factory=list)
    make_args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    autoreconf: bool = True
    jobs: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CMakeOptions:
    """
    Options for CMake builds.

    Attributes:
        defines: Cache variables passed as -D<key>=<value>
        build_type: CMAKE_BUILD_TYPE / --config value
        generator: Optional generator name (e.g., 'Ninja')
        target: Optional build target
        configure_args: Extra arguments for the configure step
        jobs: Parallel build jobs
    """

    defines: Dict[str, str] = field(default_factory=dict)
    build_type: str = "Release"
    generator: Optional[str] = None
    target: Optional[str] = None
    configure_args: List[str] = field(default_factory=list)
    jobs: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["CcOptions", "AutotoolsOptions", "CMakeOptions", "options_from_dict"]
