"""
Base system probe abstraction for SysLibKit.

A system probe asks one external discovery mechanism (package metadata,
a platform package manager) whether a library is installed. Absence is a
normal outcome and is reported as ``None``, never as an exception.

Classes:
    SystemProbe: Abstract base class for probe implementations
"""

from abc import ABC, abstractmethod
from typing import Optional

from syslibkit.core.types import LibraryDescriptor, LinkInfo


class SystemProbe(ABC):
    """
    Abstract base class for system library probes.

    Example:
        class MyProbe(SystemProbe):
            name = "mypm"

            def probe(self, descriptor, static=False):
                if not installed(descriptor.name):
                    return None
                return LinkInfo(libraries=[descriptor.name], origin=self.name)
    """

    name: str = ""

    @abstractmethod
    def probe(
        self, descriptor: LibraryDescriptor, static: bool = False
    ) -> Optional[LinkInfo]:
        """
        Look for an installed library.

        Args:
            descriptor: Library name and optional minimum version
            static: Prefer static linking

        Returns:
            Normalized LinkInfo, or None if the library is not available

        Raises:
            ProbeError: If the probe itself malfunctions
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


__all__ = ["SystemProbe"]
