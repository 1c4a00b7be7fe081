"""
Git repository source locator.

Materializes a repository at a given reference into a working directory
under the SysLibKit cache. The working directory name is derived from the
repository URL and reference, so repeated lookups reuse (and refresh) the
same checkout instead of accumulating copies.

Usage:
    from syslibkit.sources.git import GitSourceLocator
    from syslibkit.core.types import GitSource

    locator = GitSourceLocator()
    with locator.checkout(GitSource("https://github.com/madler/zlib.git", "v1.3.1")) as path:
        if path:
            build(path)
    # The working directory is removed here unless persist=True
"""

import hashlib
import logging
import re
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from syslibkit.core.directory import DirectoryError, ensure_directory, get_sources_dir
from syslibkit.core.exceptions import CommandError
from syslibkit.core.filesystem import FilesystemError, safe_rmtree
from syslibkit.core.locking import LockManager, LockTimeout
from syslibkit.core.process import run_command
from syslibkit.core.types import GitSource
from syslibkit.sources.base import SourceLocator

logger = logging.getLogger(__name__)


class GitSourceLocator(SourceLocator):
    """
    Find source by cloning a git repository.

    Attributes:
        sources_dir: Directory holding working directories
        lock_manager: Lock manager guarding working directories
        persist: Keep working directories when a checkout scope exits
        git: git executable
        timeout: Per-command timeout in seconds (None waits forever)
    """

    def __init__(
        self,
        sources_dir: Optional[Path] = None,
        lock_manager: Optional[LockManager] = None,
        persist: bool = False,
        git: str = "git",
        timeout: Optional[float] = None,
    ):
        self.sources_dir = Path(sources_dir) if sources_dir else get_sources_dir()
        self._lock_manager = lock_manager
        self.persist = persist
        self.git = git
        self.timeout = timeout

    @property
    def lock_manager(self) -> LockManager:
        if self._lock_manager is None:
            self._lock_manager = LockManager(self.sources_dir.parent / "lock")
        return self._lock_manager

    def work_dir(self, descriptor: GitSource) -> Path:
        """
        Deterministic working directory for a repository and reference.

        The name is ``<repo basename>-<first 12 hex of sha256(repo|ref)>``,
        e.g. ``bar-<hash>`` for ``https://example/bar.git``.
        """
        key = f"{descriptor.repo}|{descriptor.reference or ''}"
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:12]
        basename = descriptor.repo.rstrip("/").rsplit("/", 1)[-1]
        if basename.endswith(".git"):
            basename = basename[:-4]
        slug = re.sub(r"[^A-Za-z0-9_.-]", "_", basename) or "repo"
        return self.sources_dir / f"{slug}-{digest}"

    def locate(self, descriptor: GitSource) -> Optional[Path]:
        """
        Clone or refresh the repository.

        Returns:
            Working directory, or None if git failed or the working
            directory could not be locked
        """
        with ExitStack() as stack:
            return self._acquire(stack, descriptor)

    @contextmanager
    def checkout(self, descriptor: GitSource) -> Iterator[Optional[Path]]:
        """
        Locate the repository and clean up the working directory on exit.

        The working directory stays locked for the whole scope, so another
        process cannot refresh or remove it mid-build. It is kept when
        ``persist`` is True.
        """
        with ExitStack() as stack:
            path = self._acquire(stack, descriptor)
            try:
                yield path
            finally:
                if path is not None and not self.persist:
                    self.remove(path)

    def _acquire(self, stack: ExitStack, descriptor: GitSource) -> Optional[Path]:
        """Lock the working directory on ``stack``, then clone or refresh it."""
        target = self.work_dir(descriptor)
        try:
            ensure_directory(self.sources_dir)
            stack.enter_context(self.lock_manager.source_lock(target.name))
        except (LockTimeout, DirectoryError, OSError) as e:
            logger.error(f"Failed to lock working directory for {descriptor}: {e}")
            return None

        try:
            if (target / ".git").is_dir():
                self._refresh(descriptor, target)
            else:
                self._clone(descriptor, target)
        except CommandError as e:
            logger.error(f"Failed to fetch {descriptor}: {e}\n{e.stderr.strip()}")
            return None
        except (FilesystemError, OSError) as e:
            logger.error(f"Failed to fetch {descriptor}: {e}")
            return None

        logger.info(f"Located git source {descriptor} at {target}")
        return target

    def remove(self, path: Path) -> None:
        """Remove a working directory created by this locator."""
        try:
            safe_rmtree(path, require_prefix=self.sources_dir)
            logger.debug(f"Removed git working directory {path}")
        except (FilesystemError, ValueError) as e:
            logger.warning(f"Could not remove git working directory {path}: {e}")

    def _git(self, args: List[str], cwd: Optional[Path] = None) -> None:
        run_command([self.git] + args, cwd=cwd, timeout=self.timeout)

    def _clone(self, descriptor: GitSource, target: Path) -> None:
        """Fresh clone, shallow when possible."""
        if target.exists():
            # Leftover from an interrupted clone
            safe_rmtree(target, require_prefix=self.sources_dir)

        logger.info(f"Cloning {descriptor}")
        if descriptor.reference is None:
            self._git(["clone", "--depth", "1", descriptor.repo, str(target)])
            return

        try:
            self._git(
                [
                    "clone",
                    "--depth",
                    "1",
                    "--branch",
                    descriptor.reference,
                    descriptor.repo,
                    str(target),
                ]
            )
        except CommandError:
            # --branch only accepts branches and tags; commits need a full clone
            logger.debug(
                f"Shallow clone of {descriptor.reference} failed, retrying with full clone"
            )
            if target.exists():
                safe_rmtree(target, require_prefix=self.sources_dir)
            self._git(["clone", descriptor.repo, str(target)])
            self._git(["checkout", "--force", descriptor.reference], cwd=target)

    def _refresh(self, descriptor: GitSource, target: Path) -> None:
        """Bring an existing working directory to the requested reference."""
        logger.info(f"Refreshing {descriptor} in {target}")
        ref = descriptor.reference or "HEAD"
        try:
            self._git(["fetch", "--depth", "1", "origin", ref], cwd=target)
            self._git(["checkout", "--force", "FETCH_HEAD"], cwd=target)
        except CommandError:
            logger.debug(f"Shallow fetch of {ref} failed, fetching all refs")
            self._git(["fetch", "--tags", "origin"], cwd=target)
            self._git(["checkout", "--force", ref], cwd=target)
        self._git(["clean", "-fdx"], cwd=target)


__all__ = ["GitSourceLocator"]
