"""
CMake build backend.
"""

import logging
from pathlib import Path
from typing import List, Optional

from syslibkit.backends.base import BackendKind, BuildBackend
from syslibkit.backends.options import CMakeOptions
from syslibkit.core.types import LinkInfo

logger = logging.getLogger(__name__)


class CMakeBackend(BuildBackend):
    """
    CMake build backend implementation.
    """

    kind = BackendKind.CMAKE

    def build(
        self,
        name: str,
        source_dir: Path,
        out_dir: Path,
        options: Optional[CMakeOptions] = None,
        static: bool = False,
    ) -> LinkInfo:
        """
        Configure, build and install the library into ``out_dir``.
        """
        options = options or CMakeOptions()
        build_dir = out_dir / "build"

        if _cached_source_dir(build_dir) not in (None, source_dir.resolve()):
            logger.info(f"Discarding CMake build tree {build_dir} of another source")
            self.clear_install_tree(name, out_dir, "build")
        else:
            self.clear_install_tree(name, out_dir)

        # 1. Configure
        self.run(name, self._configure_args(source_dir, build_dir, out_dir, options, static))

        # 2. Build
        logger.info(f"Building {name} with CMake")
        self.run(name, self._build_args(build_dir, options))

        # 3. Install
        self.run(
            name,
            ["cmake", "--install", str(build_dir), "--config", options.build_type],
        )

        info = self.collect_install_tree(name, out_dir, static)
        logger.info(f"Installed {name} to {out_dir}")
        return info

    def _configure_args(
        self,
        source_dir: Path,
        build_dir: Path,
        prefix: Path,
        options: CMakeOptions,
        static: bool,
    ) -> List[str]:
        """Assemble the CMake configuration command."""
        cmake_args = [
            "cmake",
            "-S",
            str(source_dir),
            "-B",
            str(build_dir),
            f"-DCMAKE_BUILD_TYPE={options.build_type}",
            f"-DCMAKE_INSTALL_PREFIX={prefix}",
        ]

        if options.generator:
            cmake_args.extend(["-G", options.generator])

        if static:
            cmake_args.append("-DBUILD_SHARED_LIBS=OFF")

        for key, value in options.defines.items():
            cmake_args.append(f"-D{key}={value}")

        cmake_args.extend(options.configure_args)

        logger.info("Running CMake configuration")
        logger.debug(f"CMake command: {' '.join(cmake_args)}")
        return cmake_args

    def _build_args(self, build_dir: Path, options: CMakeOptions) -> List[str]:
        """Assemble the CMake build command."""
        build_args = ["cmake", "--build", str(build_dir), "--config", options.build_type]
        if options.target:
            build_args.extend(["--target", options.target])
        if options.jobs:
            build_args.extend(["--parallel", str(options.jobs)])
        return build_args


def _cached_source_dir(build_dir: Path) -> Optional[Path]:
    """Source directory recorded in an existing CMakeCache.txt, if any."""
    cache = build_dir / "CMakeCache.txt"
    if not cache.is_file():
        return None
    for line in cache.read_text(encoding="utf-8", errors="replace").splitlines():
        if line.startswith("CMAKE_HOME_DIRECTORY:"):
            return Path(line.split("=", 1)[1].strip()).resolve()
    return None


__all__ = ["CMakeBackend"]
