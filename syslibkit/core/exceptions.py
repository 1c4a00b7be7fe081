"""
Centralized exception hierarchy for SysLibKit.

This module defines all custom exceptions used across the codebase
so that callers can tell apart which resolution step failed.
"""

from typing import List, Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class SysLibKitError(Exception):
    """Base exception for all SysLibKit errors."""

    pass


class ConfigError(SysLibKitError):
    """Configuration or override data is invalid."""

    pass


# ============================================================================
# Process Exceptions
# ============================================================================


class CommandError(SysLibKitError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int],
        stdout: str = "",
        stderr: str = "",
    ):
        self.command: List[str] = [str(part) for part in command]
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        if returncode is None:
            msg = f"Command could not be executed: {' '.join(self.command)}"
        else:
            msg = (
                f"Command failed with exit code {returncode}: "
                f"{' '.join(self.command)}"
            )
        super().__init__(msg)

    @property
    def output(self) -> str:
        """Combined stdout and stderr of the failed command."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


# ============================================================================
# System Probe Exceptions
# ============================================================================


class ProbeError(SysLibKitError):
    """A system probe malfunctioned (not the same as "library not found")."""

    pass


# ============================================================================
# Resolution Exceptions
# ============================================================================


class ResolutionError(SysLibKitError):
    """
    Base exception for terminal resolution failures.

    Attributes:
        library: Library base name of the failed request
        step: Name of the resolution step that failed
    """

    step = "resolve"

    def __init__(self, library: str, message: str):
        self.library = library
        super().__init__(f"[{library}] {self.step}: {message}")


class NoSourceAvailable(ResolutionError):
    """No enabled source configuration is present."""

    step = "select-source"

    def __init__(self, library: str, reason: str = ""):
        message = (
            "No sources available, ensure a source is configured with "
            "`source_dir` or `git_repo` and enabled with the matching "
            "`source_dir` or `git` capability flag"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(library, message)


class SourceResolutionFailed(ResolutionError):
    """A configured source could not be validated or materialized."""

    step = "locate-source"

    def __init__(self, library: str, descriptor, reason: str = ""):
        self.descriptor = descriptor
        message = f"Could not resolve source {descriptor}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(library, message)


class BackendExecutionFailed(ResolutionError):
    """
    A build backend process failed or produced no usable artifact.

    Attributes:
        backend: Backend name (e.g., 'cmake')
        command: Command line that failed, if any
        returncode: Exit status of the failed process, if any
        output: Captured diagnostic output
    """

    step = "build"

    def __init__(
        self,
        library: str,
        backend: str,
        reason: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        output: str = "",
    ):
        self.backend = backend
        self.command = [str(part) for part in command] if command else []
        self.returncode = returncode
        self.output = output
        message = f"{backend} backend failed: {reason}"
        if returncode is not None:
            message += f" (exit code {returncode})"
        if output:
            message += f"\n{output.rstrip()}"
        super().__init__(library, message)


__all__ = [
    "SysLibKitError",
    "ConfigError",
    "CommandError",
    "ProbeError",
    "ResolutionError",
    "NoSourceAvailable",
    "SourceResolutionFailed",
    "BackendExecutionFailed",
]
