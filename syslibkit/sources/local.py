"""
Local directory source locator.
"""

import logging
from pathlib import Path
from typing import Optional

from syslibkit.core.types import LocalSource
from syslibkit.sources.base import SourceLocator

logger = logging.getLogger(__name__)


class LocalSourceLocator(SourceLocator):
    """
    Find source in an existing directory.

    Existence of the directory is the entire validation.

    Attributes:
        base_dir: Directory relative paths are resolved against
            (default: current working directory at lookup time)
    """

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir) if base_dir else None

    def locate(self, descriptor: LocalSource) -> Optional[Path]:
        path = descriptor.path
        if not path.is_absolute():
            path = (self.base_dir or Path.cwd()) / path

        if path.is_dir():
            resolved = path.resolve()
            logger.info(f"Located source directory {resolved}")
            return resolved

        if path.exists():
            logger.info(f"Source path is not a directory: {path}")
        else:
            logger.info(f"Source directory does not exist: {path}")
        return None


__all__ = ["LocalSourceLocator"]
