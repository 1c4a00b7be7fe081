"""
System library probes for SysLibKit.

Available Components:
--------------------
- SystemProbe: Abstract base class for probe implementations
- PkgConfigProbe: Package metadata probe (pkg-config)
- VcpkgProbe: Platform package manager probe (vcpkg)

Probes are always consulted in this priority order: pkg-config, then vcpkg.
"""

from syslibkit.probes.base import SystemProbe
from syslibkit.probes.pkgconfig import PkgConfigProbe
from syslibkit.probes.vcpkg import VcpkgProbe

__all__ = [
    "SystemProbe",
    "PkgConfigProbe",
    "VcpkgProbe",
]
