"""
Configuration for SysLibKit library requests.
"""

from syslibkit.config.config import Config
from syslibkit.config.overrides import (
    apply_overrides,
    find_overrides_file,
    load_overrides,
)

__all__ = [
    "Config",
    "apply_overrides",
    "find_overrides_file",
    "load_overrides",
]
