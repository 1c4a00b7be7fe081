"""
Core functionality for SysLibKit.

This package contains the foundational modules that other components depend on.
"""

from .capabilities import Capabilities

from .exceptions import (
    SysLibKitError,
    ConfigError,
    CommandError,
    ProbeError,
    ResolutionError,
    NoSourceAvailable,
    SourceResolutionFailed,
    BackendExecutionFailed,
)

from .platform import PlatformInfo, detect_platform

from .types import (
    LibraryDescriptor,
    LocalSource,
    GitSource,
    LinkInfo,
)

__all__ = [
    "Capabilities",
    "SysLibKitError",
    "ConfigError",
    "CommandError",
    "ProbeError",
    "ResolutionError",
    "NoSourceAvailable",
    "SourceResolutionFailed",
    "BackendExecutionFailed",
    "PlatformInfo",
    "detect_platform",
    "LibraryDescriptor",
    "LocalSource",
    "GitSource",
    "LinkInfo",
]
