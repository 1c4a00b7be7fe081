"""
Capability flags that select resolution code paths at runtime.

Every branch of the resolution engine is gated by one of these flags so
that each path can be exercised without rebuilding anything.

Usage:
    from syslibkit.core.capabilities import Capabilities

    caps = Capabilities.from_env()
    caps = caps.with_flags(use_vcpkg=True, static_linking=True)
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def parse_bool(value: str) -> bool:
    """
    Parse a boolean from an environment-style string.

    Raises:
        ValueError: If the value is not a recognized boolean
    """
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


@dataclass(frozen=True)
class Capabilities:
    """
    Enabled resolution capabilities.

    Attributes:
        use_pkgconfig: Probe system libraries with pkg-config
        use_vcpkg: Probe system libraries with vcpkg
        source_dir: Allow building from a local source directory
        git: Allow building from a git repository
        static_linking: Prefer static libraries from probes and backends
        source_fallback: Try the next configured source when one fails
        persist_checkouts: Keep git working directories between builds
        cache_dir: Override for the SysLibKit cache directory
        out_dir: Override for the build output root
    """

    use_pkgconfig: bool = True
    use_vcpkg: bool = False
    source_dir: bool = True
    git: bool = True
    static_linking: bool = False
    source_fallback: bool = False
    persist_checkouts: bool = False
    cache_dir: Optional[Path] = None
    out_dir: Optional[Path] = None

    @property
    def system_probing(self) -> bool:
        """Whether any system library probe is enabled."""
        return self.use_pkgconfig or self.use_vcpkg

    def with_flags(self, **changes) -> "Capabilities":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, prefix: str = "SYSLIBKIT_"
    ) -> "Capabilities":
        """
        Build capabilities from environment variables.

        Each field maps to ``<prefix><FIELD_NAME>``, for example
        ``SYSLIBKIT_USE_VCPKG=1`` or ``SYSLIBKIT_CACHE_DIR=/tmp/cache``.
        Unset variables keep their defaults.

        Args:
            environ: Environment mapping (default: os.environ)
            prefix: Variable name prefix

        Returns:
            Capabilities instance

        Raises:
            ValueError: If a boolean variable has an unrecognized value
        """
        if environ is None:
            environ = os.environ

        values = {}
        for f in fields(cls):
            key = f"{prefix}{f.name.upper()}"
            if key not in environ:
                continue
            raw = environ[key]
            if f.name in ("cache_dir", "out_dir"):
                values[f.name] = Path(raw) if raw else None
            else:
                try:
                    values[f.name] = parse_bool(raw)
                except ValueError as e:
                    raise ValueError(f"{key}: {e}") from e
            logger.debug(f"Capability {f.name} set from {key}={raw!r}")

        return cls(**values)


__all__ = ["Capabilities", "parse_bool"]
