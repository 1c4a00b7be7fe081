"""
Source locators for SysLibKit.

Available Components:
--------------------
- SourceLocator: Abstract base class
- LocalSourceLocator: Validates a local source directory
- GitSourceLocator: Clones or refreshes a git repository
"""

from syslibkit.sources.base import SourceLocator
from syslibkit.sources.git import GitSourceLocator
from syslibkit.sources.local import LocalSourceLocator

__all__ = [
    "SourceLocator",
    "LocalSourceLocator",
    "GitSourceLocator",
]
