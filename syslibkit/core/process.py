"""
External process execution for SysLibKit.

All probes, source locators and build backends run their external tools
through ``run_command`` so that output capture, environment handling and
failure reporting behave the same everywhere. Commands always run to
completion before control returns.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from syslibkit.core.exceptions import CommandError

logger = logging.getLogger(__name__)


def run_command(
    command: Sequence[Union[str, Path]],
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """
    Run an external command and capture its output.

    Args:
        command: Command and arguments
        cwd: Working directory
        env: Variables layered over the current environment
        timeout: Maximum run time in seconds (None waits forever)
        check: If True, raise CommandError on non-zero exit

    Returns:
        CompletedProcess with text stdout/stderr

    Raises:
        CommandError: If the executable is missing, times out, or (with
            check=True) exits with a non-zero status

    Example:
        >>> result = run_command(["pkg-config", "--modversion", "zlib"])
        >>> result.stdout.strip()
        '1.3'
    """
    cmd = [str(part) for part in command]
    full_env = None
    if env:
        full_env = dict(os.environ)
        full_env.update(env)

    logger.debug(f"Running: {' '.join(cmd)}" + (f" (cwd={cwd})" if cwd else ""))

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            env=full_env,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        logger.debug(f"Command not found: {cmd[0]}")
        raise CommandError(cmd, None, stderr=str(e)) from e
    except subprocess.TimeoutExpired as e:
        logger.error(f"Command timed out after {timeout}s: {' '.join(cmd)}")
        raise CommandError(
            cmd, None, stderr=f"Timed out after {timeout}s"
        ) from e

    if check and result.returncode != 0:
        logger.debug(f"Command exited with {result.returncode}: {result.stderr.strip()}")
        raise CommandError(cmd, result.returncode, result.stdout, result.stderr)

    return result


__all__ = ["run_command"]
