"""
Resolution engine for SysLibKit.

The engine decides, for one library request, whether a system library
satisfies it or which source to build and how:

1. System probes in fixed priority order (pkg-config, then vcpkg). The first
   probe that finds the library wins and nothing is built.
2. Source selection: local source directory before git repository.
3. Source location (directory check, or clone/refresh of the repository).
4. Exactly one build backend (explicit, or detected from the source tree).

Every step is gated by a ``Capabilities`` flag and every skipped step is
logged. Absence at the probe layer falls through to the source build;
failures after that are terminal, unless ``source_fallback`` allows the
next configured source to be tried.

Example:
    from syslibkit import Capabilities, Config, ResolutionEngine

    engine = ResolutionEngine(Capabilities(use_vcpkg=True))
    info = engine.build(Config.new("zlib", "1.2.11").source_dir("vendor/zlib"))
    print(info.to_json())
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from syslibkit.backends import BackendKind, BuildBackend, detect_backend_kind, get_backend
from syslibkit.config.config import Config
from syslibkit.core.capabilities import Capabilities
from syslibkit.core.directory import (
    DirectoryError,
    ensure_directory,
    get_build_root,
    get_sources_dir,
)
from syslibkit.core.exceptions import (
    BackendExecutionFailed,
    NoSourceAvailable,
    ProbeError,
    SourceResolutionFailed,
)
from syslibkit.core.filesystem import FilesystemError, is_relative_to, safe_rmtree
from syslibkit.core.types import LinkInfo, LocalSource, SourceDescriptor
from syslibkit.probes import PkgConfigProbe, SystemProbe, VcpkgProbe
from syslibkit.sources import GitSourceLocator, LocalSourceLocator, SourceLocator

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """
    Orchestrates system probes, source locators and build backends.

    The engine holds no per-request state, so one engine can resolve any
    number of requests and resolving the same Config twice is safe.

    Attributes:
        capabilities: Enabled resolution capabilities
    """

    def __init__(
        self,
        capabilities: Optional[Capabilities] = None,
        pkgconfig_probe: Optional[SystemProbe] = None,
        vcpkg_probe: Optional[SystemProbe] = None,
        local_locator: Optional[SourceLocator] = None,
        git_locator: Optional[SourceLocator] = None,
        backends: Optional[Dict[BackendKind, BuildBackend]] = None,
    ):
        """
        Initialize the engine.

        Args:
            capabilities: Enabled capabilities (default: Capabilities())
            pkgconfig_probe: Package-metadata probe (default: PkgConfigProbe)
            vcpkg_probe: Package-manager probe (default: VcpkgProbe)
            local_locator: Local directory locator
            git_locator: Git repository locator
            backends: Backend overrides by kind (default: global registry)
        """
        self.capabilities = capabilities or Capabilities()
        self._pkgconfig_probe = pkgconfig_probe
        self._vcpkg_probe = vcpkg_probe
        self._local_locator = local_locator
        self._git_locator = git_locator
        self._backends = dict(backends) if backends else {}

    # ------------------------------------------------------------------
    # Collaborators (created lazily so disabled ones are never touched)
    # ------------------------------------------------------------------

    def _probe_chain(self) -> List[Tuple[str, str, Callable[[], SystemProbe]]]:
        return [
            ("use_pkgconfig", "pkg-config", self._get_pkgconfig_probe),
            ("use_vcpkg", "vcpkg", self._get_vcpkg_probe),
        ]

    def _get_pkgconfig_probe(self) -> SystemProbe:
        if self._pkgconfig_probe is None:
            self._pkgconfig_probe = PkgConfigProbe()
        return self._pkgconfig_probe

    def _get_vcpkg_probe(self) -> SystemProbe:
        if self._vcpkg_probe is None:
            self._vcpkg_probe = VcpkgProbe()
        return self._vcpkg_probe

    @property
    def local_locator(self) -> SourceLocator:
        if self._local_locator is None:
            self._local_locator = LocalSourceLocator()
        return self._local_locator

    @property
    def git_locator(self) -> SourceLocator:
        if self._git_locator is None:
            self._git_locator = GitSourceLocator(
                sources_dir=get_sources_dir(self.capabilities.cache_dir),
                persist=self.capabilities.persist_checkouts,
            )
        return self._git_locator

    def get_backend(self, kind: BackendKind) -> BuildBackend:
        """Backend for a kind, preferring engine-level overrides."""
        if kind in self._backends:
            return self._backends[kind]
        return get_backend(kind)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def build(self, config: Config) -> LinkInfo:
        """
        Resolve a library request.

        Args:
            config: Library request

        Returns:
            LinkInfo from the first successful probe or from the source build

        Raises:
            NoSourceAvailable: No system library and no enabled source
            SourceResolutionFailed: The selected source could not be located
            BackendExecutionFailed: The build backend failed
        """
        logger.info(f"Resolving library {config.name}")

        info = self.probe_system(config)
        if info is not None:
            return info

        candidates = self.select_sources(config)

        for descriptor, locator in candidates[:-1]:
            try:
                return self.build_from_source(config, descriptor, locator)
            except (SourceResolutionFailed, BackendExecutionFailed) as e:
                if not self.capabilities.source_fallback:
                    raise
                logger.warning(str(e))
                logger.warning(
                    f"Source fallback enabled, trying next source for {config.name}"
                )

        descriptor, locator = candidates[-1]
        return self.build_from_source(config, descriptor, locator)

    def probe_system(self, config: Config) -> Optional[LinkInfo]:
        """
        Run enabled system probes in priority order.

        Returns:
            LinkInfo from the first probe that finds the library, else None
        """
        if config.library is None:
            logger.info(f"No system library configured for {config.name}, skipping probes")
            return None
        if not self.capabilities.system_probing:
            logger.info("System library probing is disabled")
            return None

        for flag, probe_name, factory in self._probe_chain():
            if not getattr(self.capabilities, flag):
                logger.info(f"{probe_name} probe disabled ({flag}=False)")
                continue

            probe = factory()
            try:
                info = probe.probe(config.library, static=self.capabilities.static_linking)
            except ProbeError as e:
                logger.warning(f"{probe_name} probe failed for {config.library}: {e}")
                continue

            if info is not None:
                if not info.origin:
                    info.origin = probe_name
                logger.info(f"Using system library {config.library} from {probe_name}")
                return info

            logger.info(f"{probe_name} did not find {config.library}, continuing")

        return None

    def select_sources(
        self, config: Config
    ) -> List[Tuple[SourceDescriptor, SourceLocator]]:
        """
        Enabled source candidates in priority order (local, then git).

        Raises:
            NoSourceAvailable: If no source is both configured and enabled
        """
        candidates: List[Tuple[SourceDescriptor, SourceLocator]] = []
        disabled: List[str] = []

        if config.local_source is not None:
            if self.capabilities.source_dir:
                candidates.append((config.local_source, self.local_locator))
            else:
                logger.info(f"Ignoring {config.local_source}: source_dir capability disabled")
                disabled.append("source_dir")

        if config.git_source is not None:
            if self.capabilities.git:
                candidates.append((config.git_source, self.git_locator))
            else:
                logger.info(f"Ignoring {config.git_source}: git capability disabled")
                disabled.append("git")

        if not candidates:
            if disabled:
                reason = f"configured sources are disabled: {', '.join(disabled)}"
            else:
                reason = "no source_dir or git_repo configured"
            logger.error(f"No sources available for {config.name} ({reason})")
            raise NoSourceAvailable(config.name, reason)

        return candidates

    def build_from_source(
        self, config: Config, descriptor: SourceDescriptor, locator: SourceLocator
    ) -> LinkInfo:
        """
        Locate one source and build it with exactly one backend.

        Working directories created by the locator are released before
        this method returns, on success and on failure.
        """
        with locator.checkout(descriptor) as source_path:
            if source_path is None:
                if isinstance(descriptor, LocalSource):
                    reason = "path is missing or not a directory"
                else:
                    reason = "clone or checkout failed"
                raise SourceResolutionFailed(config.name, descriptor, reason)

            kind = config.backend or detect_backend_kind(source_path)
            backend = self.get_backend(kind)
            out_dir = self.fresh_output_dir(config, source_path)

            logger.info(
                f"Building {config.name} from {descriptor} with {kind.value} backend"
            )
            try:
                info = backend.build(
                    config.name,
                    source_path,
                    out_dir,
                    config.options_for(kind),
                    static=self.capabilities.static_linking,
                )
            except OSError as e:
                raise BackendExecutionFailed(config.name, kind.value, str(e)) from e

        if not info.origin:
            info.origin = kind.value
        logger.info(f"Built {config.name}: {info.libraries}")
        return info

    def output_dir(self, config: Config) -> Path:
        """Per-library build output directory."""
        if self.capabilities.out_dir is not None:
            root = Path(self.capabilities.out_dir)
        else:
            root = get_build_root(self.capabilities.cache_dir)
        try:
            return ensure_directory(root / config.name)
        except DirectoryError as e:
            raise BackendExecutionFailed(config.name, "output", str(e)) from e

    def fresh_output_dir(self, config: Config, source_path: Path) -> Path:
        """
        Empty per-library output directory for one build attempt.

        Build trees and install prefixes left by an earlier build, of this
        or another source, are removed first.

        Raises:
            BackendExecutionFailed: If the directory cannot be reset, or if
                the source tree lives inside it
        """
        out_dir = self.output_dir(config)
        if is_relative_to(source_path.resolve(), out_dir.resolve()):
            raise BackendExecutionFailed(
                config.name,
                "output",
                f"source tree {source_path} is inside output directory {out_dir}",
            )
        try:
            safe_rmtree(out_dir, require_prefix=out_dir.parent)
        except (FilesystemError, ValueError) as e:
            raise BackendExecutionFailed(config.name, "output", str(e)) from e
        return self.output_dir(config)


def build(config: Config, capabilities: Optional[Capabilities] = None) -> LinkInfo:
    """
    Resolve a library request with a fresh engine.

    Args:
        config: Library request
        capabilities: Enabled capabilities (default: from environment)

    Returns:
        LinkInfo for the resolved library
    """
    if capabilities is None:
        capabilities = Capabilities.from_env()
    return ResolutionEngine(capabilities).build(config)


__all__ = ["ResolutionEngine", "build"]
