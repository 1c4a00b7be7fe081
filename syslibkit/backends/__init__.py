"""
Build backends for SysLibKit.

Backends are registered by ``BackendKind``; the resolution engine looks
them up through ``get_backend``. Adding a backend means adding a kind and
registering an implementation.
"""

from typing import Dict, List

from syslibkit.backends.autotools import AutotoolsBackend
from syslibkit.backends.base import (
    BackendKind,
    BuildBackend,
    detect_backend_kind,
)
from syslibkit.backends.cc import CcBackend
from syslibkit.backends.cmake import CMakeBackend
from syslibkit.backends.options import AutotoolsOptions, CcOptions, CMakeOptions

_BACKENDS: Dict[BackendKind, BuildBackend] = {
    BackendKind.CC: CcBackend(),
    BackendKind.AUTOTOOLS: AutotoolsBackend(),
    BackendKind.CMAKE: CMakeBackend(),
}


def register_backend(kind: BackendKind, backend: BuildBackend) -> None:
    """
    Register (or replace) the backend for a kind.

    Raises:
        TypeError: If backend is not a BuildBackend
    """
    if not isinstance(backend, BuildBackend):
        raise TypeError(f"backend must be BuildBackend instance, got {type(backend)}")
    _BACKENDS[kind] = backend


def get_backend(kind: BackendKind) -> BuildBackend:
    """
    Get the registered backend for a kind.

    Raises:
        KeyError: If no backend is registered for the kind
    """
    if kind not in _BACKENDS:
        raise KeyError(f"Build backend '{kind.value}' not found in registry")
    return _BACKENDS[kind]


def list_backends() -> List[str]:
    """List registered backend names."""
    return [kind.value for kind in _BACKENDS]


__all__ = [
    "BackendKind",
    "BuildBackend",
    "detect_backend_kind",
    "register_backend",
    "get_backend",
    "list_backends",
    "CcBackend",
    "AutotoolsBackend",
    "CMakeBackend",
    "CcOptions",
    "AutotoolsOptions",
    "CMakeOptions",
]
