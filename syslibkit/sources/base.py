"""
Source locator interface for SysLibKit.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from syslibkit.core.types import SourceDescriptor


class SourceLocator(ABC):
    """
    Abstract base class for source locators.

    A source locator turns a source descriptor into an existing directory
    the build backends can work in.
    """

    @abstractmethod
    def locate(self, descriptor: SourceDescriptor) -> Optional[Path]:
        """
        Resolve a source descriptor to a directory.

        Args:
            descriptor: Source descriptor handled by this locator

        Returns:
            Existing directory, or None if the source cannot be resolved
        """
        pass

    @contextmanager
    def checkout(self, descriptor: SourceDescriptor) -> Iterator[Optional[Path]]:
        """
        Scoped variant of ``locate``.

        Locators that create working directories override this to clean
        them up when the scope exits.
        """
        yield self.locate(descriptor)


__all__ = ["SourceLocator"]
