"""
Shared utilities for CLI commands.

Turns parsed arguments into a Config and Capabilities pair and renders
the resulting LinkInfo.
"""

import logging
import shlex
from pathlib import Path
from typing import Optional

from syslibkit.config import Config, apply_overrides, find_overrides_file, load_overrides
from syslibkit.core.capabilities import Capabilities
from syslibkit.core.exceptions import ConfigError
from syslibkit.core.types import LinkInfo

logger = logging.getLogger(__name__)


# ============================================================================
# Request construction
# ============================================================================


def build_capabilities(args) -> Capabilities:
    """
    Capabilities from the environment, narrowed by command-line flags.

    Flags only ever change a capability away from its environment value
    when they are given.

    Raises:
        ConfigError: If a SYSLIBKIT_* variable is malformed
    """
    try:
        caps = Capabilities.from_env()
    except ValueError as e:
        raise ConfigError(str(e)) from e

    changes = {}
    if args.no_pkgconfig:
        changes["use_pkgconfig"] = False
    if args.vcpkg:
        changes["use_vcpkg"] = True
    if args.static:
        changes["static_linking"] = True
    if getattr(args, "no_system", False):
        changes["use_pkgconfig"] = False
        changes["use_vcpkg"] = False
    if getattr(args, "no_source_dir", False):
        changes["source_dir"] = False
    if getattr(args, "no_git", False):
        changes["git"] = False
    if getattr(args, "fallback", False):
        changes["source_fallback"] = True
    if getattr(args, "keep_checkout", False):
        changes["persist_checkouts"] = True
    if getattr(args, "out_dir", None) is not None:
        changes["out_dir"] = args.out_dir
    if getattr(args, "cache_dir", None) is not None:
        changes["cache_dir"] = args.cache_dir

    return caps.with_flags(**changes) if changes else caps


def build_config(args, project_root: Optional[Path] = None) -> Config:
    """
    Config for the requested library, with overrides applied last.

    Args:
        args: Parsed command-line arguments
        project_root: Where to look for syslibkit.yaml (default: cwd)

    Raises:
        ConfigError: If arguments or the overrides file are invalid
    """
    config = Config.new(args.name, args.min_version)

    source_dir = getattr(args, "source_dir", None)
    if source_dir:
        config = config.source_dir(source_dir)

    git_repo = getattr(args, "git_repo", None)
    if git_repo:
        config = config.git_repo(git_repo, getattr(args, "reference", None))
    elif getattr(args, "reference", None):
        raise ConfigError("--reference requires --git-repo")

    backend = getattr(args, "backend", None)
    if backend:
        config = config.with_backend(backend)

    overrides_path = args.overrides
    if overrides_path is None:
        overrides_path = find_overrides_file(project_root or Path.cwd())
    if overrides_path is not None:
        config = apply_overrides(config, load_overrides(overrides_path))

    return config


# ============================================================================
# Output
# ============================================================================


def format_link_info(info: LinkInfo, output_format: str = "json") -> str:
    """
    Render LinkInfo for stdout.

    ``json`` prints the stable dictionary form; ``flags`` prints two lines,
    compile flags then link flags, shell-quoted.
    """
    if output_format == "flags":
        compile_line = " ".join(shlex.quote(flag) for flag in info.compile_flags())
        link_line = " ".join(shlex.quote(flag) for flag in info.link_flags())
        return f"{compile_line}\n{link_line}"
    return info.to_json()


__all__ = ["build_capabilities", "build_config", "format_link_info"]
