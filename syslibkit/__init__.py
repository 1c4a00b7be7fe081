"""
SysLibKit - link against a system library or build one from source.

Usage:
    from syslibkit import Capabilities, Config, build

    info = build(
        Config.new("zlib", "1.2.11").git_repo("https://github.com/madler/zlib.git", "v1.3.1"),
        Capabilities(use_pkgconfig=True),
    )
    print(info.compile_flags(), info.link_flags())
"""

from syslibkit.backends.options import AutotoolsOptions, CcOptions, CMakeOptions
from syslibkit.config.config import Config
from syslibkit.core.capabilities import Capabilities
from syslibkit.core.exceptions import (
    BackendExecutionFailed,
    ConfigError,
    NoSourceAvailable,
    ResolutionError,
    SourceResolutionFailed,
    SysLibKitError,
)
from syslibkit.core.types import GitSource, LibraryDescriptor, LinkInfo, LocalSource
from syslibkit.engine import ResolutionEngine, build

__version__ = "0.1.0"

__all__ = [
    "AutotoolsOptions",
    "CcOptions",
    "CMakeOptions",
    "Config",
    "Capabilities",
    "BackendExecutionFailed",
    "ConfigError",
    "NoSourceAvailable",
    "ResolutionError",
    "SourceResolutionFailed",
    "SysLibKitError",
    "GitSource",
    "LibraryDescriptor",
    "LinkInfo",
    "LocalSource",
    "ResolutionEngine",
    "build",
]
