"""
Library build request configuration.

``Config`` is an immutable builder: every setter returns a new Config, so
partially built configurations can be shared, copied and compared safely.

Example:
    from syslibkit.config import Config
    from syslibkit.backends.options import CMakeOptions

    config = (
        Config.new("zlib", "1.2.11")
        .source_dir("vendor/zlib")
        .git_repo("https://github.com/madler/zlib.git", "v1.3.1")
        .cmake(CMakeOptions(defines={"ZLIB_BUILD_EXAMPLES": "OFF"}))
    )
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from syslibkit.backends.base import BackendKind
from syslibkit.backends.options import (
    AutotoolsOptions,
    CcOptions,
    CMakeOptions,
    options_from_dict,
)
from syslibkit.core.exceptions import ConfigError
from syslibkit.core.types import GitSource, LibraryDescriptor, LocalSource

OVERRIDE_KEYS = ("library", "source_dir", "git_repo", "backend", "cc", "autotools", "cmake")


@dataclass(frozen=True)
class Config:
    """
    Configuration for a single library request.

    Attributes:
        name: Library base name (used for output naming and diagnostics)
        library: System library candidate, None to skip system probes
        local_source: Local source directory candidate
        git_source: Git repository candidate
        backend: Explicit backend, None to detect from the source tree
        cc_options: Options for the compiler-direct backend
        autotools_options: Options for the autotools backend
        cmake_options: Options for the CMake backend
    """

    name: str
    library: Optional[LibraryDescriptor] = None
    local_source: Optional[LocalSource] = None
    git_source: Optional[GitSource] = None
    backend: Optional[BackendKind] = None
    cc_options: CcOptions = field(default_factory=CcOptions)
    autotools_options: AutotoolsOptions = field(default_factory=AutotoolsOptions)
    cmake_options: CMakeOptions = field(default_factory=CMakeOptions)

    def __post_init__(self):
        if not self.name:
            raise ConfigError("Library base name cannot be empty")

    @classmethod
    def new(cls, name: str, version: Optional[str] = None) -> "Config":
        """
        Create a request whose system library candidate shares its name.

        Args:
            name: Library base name
            version: Optional minimum system library version

        Raises:
            ConfigError: If name is empty or version is invalid
        """
        if not name:
            raise ConfigError("Library base name cannot be empty")
        try:
            library = LibraryDescriptor(name, version)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        return cls(name=name, library=library)

    # ------------------------------------------------------------------
    # Builder methods
    # ------------------------------------------------------------------

    def source_dir(self, path: Union[str, Path]) -> "Config":
        """Use a local source directory."""
        return replace(self, local_source=LocalSource(Path(path)))

    def git_repo(self, repo: str, reference: Optional[str] = None) -> "Config":
        """Use a git repository, optionally at a branch, tag or commit."""
        try:
            source = GitSource(repo, reference)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        return replace(self, git_source=source)

    def with_library(
        self, name: Optional[str] = None, version: Optional[str] = None
    ) -> "Config":
        """Set the system library candidate (name defaults to the base name)."""
        try:
            library = LibraryDescriptor(name or self.name, version)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        return replace(self, library=library)

    def without_library(self) -> "Config":
        """Never look for a system library."""
        return replace(self, library=None)

    def with_backend(self, backend: Union[str, BackendKind, None]) -> "Config":
        """Select a backend explicitly (None restores detection)."""
        kind = BackendKind.parse(backend) if backend is not None else None
        return replace(self, backend=kind)

    def cc(self, opts: Optional[CcOptions] = None) -> "Config":
        """Build with direct compiler invocation."""
        return replace(self, backend=BackendKind.CC, cc_options=opts or CcOptions())

    def autotools(self, opts: Optional[AutotoolsOptions] = None) -> "Config":
        """Build with autotools."""
        return replace(
            self,
            backend=BackendKind.AUTOTOOLS,
            autotools_options=opts or AutotoolsOptions(),
        )

    def cmake(self, opts: Optional[CMakeOptions] = None) -> "Config":
        """Build with CMake."""
        return replace(self, backend=BackendKind.CMAKE, cmake_options=opts or CMakeOptions())

    def options_for(self, kind: BackendKind) -> Any:
        """Option bag matching a backend kind."""
        return {
            BackendKind.CC: self.cc_options,
            BackendKind.AUTOTOOLS: self.autotools_options,
            BackendKind.CMAKE: self.cmake_options,
        }[kind]

    # ------------------------------------------------------------------
    # Overrides and serialization
    # ------------------------------------------------------------------

    def with_overrides(self, patch: Dict[str, Any]) -> "Config":
        """
        Apply a partial configuration patch.

        Recognized keys: library, source_dir, git_repo, backend, cc,
        autotools, cmake. A None value clears library, source_dir,
        git_repo or backend. Option patches replace the whole option bag
        and do not change the selected backend.

        Args:
            patch: Partial configuration

        Returns:
            New Config with the patch applied

        Raises:
            ConfigError: If the patch has unknown keys or invalid values
        """
        if not isinstance(patch, dict):
            raise ConfigError(f"Override for {self.name} must be a mapping")

        unknown = sorted(set(patch) - set(OVERRIDE_KEYS))
        if unknown:
            raise ConfigError(
                f"Unknown override key(s) for {self.name}: {', '.join(unknown)}"
            )

        config = self

        if "library" in patch:
            value = patch["library"]
            if value is None:
                config = config.without_library()
            elif isinstance(value, dict):
                config = config.with_library(value.get("name"), value.get("version"))
            else:
                raise ConfigError(f"library override for {self.name} must be a mapping or null")

        if "source_dir" in patch:
            value = patch["source_dir"]
            if value is None:
                config = replace(config, local_source=None)
            elif isinstance(value, dict):
                if "path" not in value:
                    raise ConfigError(f"source_dir override for {self.name} needs 'path'")
                config = config.source_dir(value["path"])
            else:
                config = config.source_dir(str(value))

        if "git_repo" in patch:
            value = patch["git_repo"]
            if value is None:
                config = replace(config, git_source=None)
            elif isinstance(value, dict):
                if "repo" not in value:
                    raise ConfigError(f"git_repo override for {self.name} needs 'repo'")
                config = config.git_repo(value["repo"], value.get("reference"))
            else:
                config = config.git_repo(str(value))

        if "backend" in patch:
            config = config.with_backend(patch["backend"])

        if "cc" in patch:
            config = replace(config, cc_options=options_from_dict(CcOptions, patch["cc"]))
        if "autotools" in patch:
            config = replace(
                config,
                autotools_options=options_from_dict(AutotoolsOptions, patch["autotools"]),
            )
        if "cmake" in patch:
            config = replace(
                config, cmake_options=options_from_dict(CMakeOptions, patch["cmake"])
            )

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary (round-trips through from_dict)."""
        return {
            "name": self.name,
            "library": (
                {"name": self.library.name, "version": self.library.version}
                if self.library
                else None
            ),
            "source_dir": (
                {"path": str(self.local_source.path)} if self.local_source else None
            ),
            "git_repo": (
                {"repo": self.git_source.repo, "reference": self.git_source.reference}
                if self.git_source
                else None
            ),
            "backend": self.backend.value if self.backend else None,
            "cc": self.cc_options.to_dict(),
            "autotools": self.autotools_options.to_dict(),
            "cmake": self.cmake_options.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """
        Create a Config from a plain dictionary.

        Raises:
            ConfigError: If 'name' is missing or any value is invalid
        """
        if not isinstance(data, dict) or not data.get("name"):
            raise ConfigError("Configuration requires a 'name'")
        patch = {key: value for key, value in data.items() if key != "name"}
        return cls(name=data["name"]).with_overrides(patch)


__all__ = ["Config", "OVERRIDE_KEYS"]
