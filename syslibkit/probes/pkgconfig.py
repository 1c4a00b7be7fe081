"""
pkg-config system probe.

Runs the ``pkg-config`` tool to check that a library is installed (with an
optional minimum version) and translates its ``--cflags --libs`` output
into LinkInfo.
"""

import logging
import os
import shlex
from typing import List, Optional

from syslibkit.core.exceptions import CommandError, ProbeError
from syslibkit.core.process import run_command
from syslibkit.core.types import LibraryDescriptor, LinkInfo
from syslibkit.probes.base import SystemProbe

logger = logging.getLogger(__name__)


def split_flags(output: str, posix: Optional[bool] = None) -> List[str]:
    """
    Split pkg-config output into separate flags.

    Windows paths carry backslashes, so on Windows the output is split
    without POSIX escape handling and only surrounding quotes are removed.

    Raises:
        ValueError: If the output has unbalanced quotes
    """
    if posix is None:
        posix = os.name != "nt"
    flags = shlex.split(output.strip(), posix=posix)
    if not posix:
        flags = [f[1:-1] if len(f) > 1 and f[0] == f[-1] == '"' else f for f in flags]
    return flags


class PkgConfigProbe(SystemProbe):
    """
    Probe system libraries through package metadata (pkg-config).

    Attributes:
        executable: pkg-config executable (default: $PKG_CONFIG or pkg-config)
    """

    name = "pkg-config"

    def __init__(self, executable: Optional[str] = None):
        self.executable = executable or os.environ.get("PKG_CONFIG", "pkg-config")

    def probe(
        self, descriptor: LibraryDescriptor, static: bool = False
    ) -> Optional[LinkInfo]:
        """
        Find a library with pkg-config.

        Args:
            descriptor: Library name and optional minimum version
            static: Include private dependencies (``--static``)

        Returns:
            LinkInfo on success, None if missing or too old
        """
        exists_cmd = [self.executable, "--exists"]
        if descriptor.version:
            exists_cmd.append(f"--atleast-version={descriptor.version}")
        exists_cmd.append(descriptor.name)

        try:
            run_command(exists_cmd)
        except CommandError as e:
            if e.returncode is None:
                logger.info(f"pkg-config is not available ({self.executable})")
            else:
                logger.info(f"pkg-config failed to find library {descriptor}")
            return None

        try:
            cflags = self._query(["--cflags"], descriptor.name, static)
            libs = self._query(["--libs"], descriptor.name, static)
        except CommandError as e:
            logger.warning(
                f"pkg-config found {descriptor.name} but could not read its flags: "
                f"{e.stderr.strip()}"
            )
            return None

        info = LinkInfo.from_flags(cflags, libs, origin=self.name)
        version = self.modversion(descriptor.name) or "unknown version"
        logger.info(
            f"pkg-config found library {descriptor.name} {version}: {info.libraries}"
        )
        return info

    def _query(self, args: List[str], name: str, static: bool) -> List[str]:
        cmd = [self.executable] + args
        if static:
            cmd.append("--static")
        cmd.append(name)
        result = run_command(cmd)
        try:
            return split_flags(result.stdout)
        except ValueError as e:
            raise ProbeError(
                f"Cannot parse pkg-config output for {name}: {result.stdout.strip()!r}"
            ) from e

    def modversion(self, name: str) -> Optional[str]:
        """Installed version of a package, or None if not installed."""
        try:
            result = run_command([self.executable, "--modversion", name])
        except CommandError:
            return None
        return result.stdout.strip() or None


__all__ = ["PkgConfigProbe", "split_flags"]
