"""YAML override parser for SysLibKit.

Project-level metadata can override any Config field by library name
before resolution runs. Overrides live in ``syslibkit.yaml``:

    version: 1
    libraries:
      zlib:
        library:
          version: "1.2.11"
        git_repo:
          repo: https://github.com/madler/zlib.git
          reference: v1.3.1
        backend: cmake
        cmake:
          defines:
            ZLIB_BUILD_EXAMPLES: "OFF"
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from syslibkit.config.config import OVERRIDE_KEYS, Config
from syslibkit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_OVERRIDES_FILE = "syslibkit.yaml"


def find_overrides_file(project_root: Path) -> Optional[Path]:
    """
    Locate the overrides file in a project root.

    Returns:
        Path to syslibkit.yaml, or None if the project has none
    """
    candidate = project_root / DEFAULT_OVERRIDES_FILE
    return candidate if candidate.is_file() else None


def load_overrides(path: Path) -> Dict[str, Dict[str, Any]]:
    """
    Parse an overrides file.

    Args:
        path: Path to YAML overrides file

    Returns:
        Mapping of library name to partial Config patch

    Raises:
        ConfigError: If the file is missing, not valid YAML, or malformed
    """
    if not path.exists():
        raise ConfigError(f"Overrides file not found: {path}")

    logger.debug(f"Loading overrides from {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}

    return parse_overrides(data, source=str(path))


def parse_overrides(data: Any, source: str = "<overrides>") -> Dict[str, Dict[str, Any]]:
    """
    Validate already-loaded override data.

    Raises:
        ConfigError: If the structure is invalid
    """
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: top level must be a mapping")

    version = data.get("version", 1)
    if version != 1:
        raise ConfigError(f"{source}: unsupported version {version} (expected 1)")

    libraries = data.get("libraries") or {}
    if not isinstance(libraries, dict):
        raise ConfigError(f"{source}: 'libraries' must be a mapping")

    overrides: Dict[str, Dict[str, Any]] = {}
    for name, patch in libraries.items():
        if patch is None:
            patch = {}
        if not isinstance(patch, dict):
            raise ConfigError(f"{source}: override for {name} must be a mapping")
        unknown = sorted(set(patch) - set(OVERRIDE_KEYS))
        if unknown:
            raise ConfigError(
                f"{source}: unknown key(s) for {name}: {', '.join(unknown)} "
                f"(expected one of {list(OVERRIDE_KEYS)})"
            )
        overrides[str(name)] = patch

    return overrides


def apply_overrides(config: Config, overrides: Dict[str, Dict[str, Any]]) -> Config:
    """
    Apply the override entry for ``config.name``, if any.

    Returns:
        The patched Config (or the same Config when nothing matches)
    """
    patch = overrides.get(config.name)
    if not patch:
        return config
    logger.info(f"Applying overrides for {config.name}: {', '.join(sorted(patch))}")
    return config.with_overrides(patch)


__all__ = [
    "DEFAULT_OVERRIDES_FILE",
    "find_overrides_file",
    "load_overrides",
    "parse_overrides",
    "apply_overrides",
]
