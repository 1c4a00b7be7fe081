"""
Direct compiler build backend.

Compiles every matching source file into an object and archives them into
a static library ``lib<name>.a``. Used for source trees that ship no build
system of their own.
"""

import logging
import os
import re
import shutil
from pathlib import Path
from typing import List, Optional

from syslibkit.backends.base import BackendKind, BuildBackend
from syslibkit.backends.options import CcOptions
from syslibkit.core.exceptions import BackendExecutionFailed
from syslibkit.core.filesystem import is_relative_to
from syslibkit.core.types import LinkInfo

logger = logging.getLogger(__name__)

HEADER_PATTERNS = ("*.h", "*.hh", "*.hpp")


class CcBackend(BuildBackend):
    """
    Compiler-direct build backend implementation.
    """

    kind = BackendKind.CC

    def build(
        self,
        name: str,
        source_dir: Path,
        out_dir: Path,
        options: Optional[CcOptions] = None,
        static: bool = False,
    ) -> LinkInfo:
        """
        Compile and archive the library.
        """
        options = options or CcOptions()
        sources = self._collect_sources(source_dir, options)
        if not sources:
            raise BackendExecutionFailed(
                name,
                self.kind.value,
                f"no source files matching {self._patterns(options)} in {source_dir}",
            )

        compiler = self._compiler(options)
        archiver = options.archiver or os.environ.get("AR", "ar")
        include_dirs = [source_dir] + [
            source_dir / inc for inc in options.include_dirs
        ]

        self.clear_install_tree(name, out_dir, "obj")
        obj_dir = out_dir / "obj"
        lib_dir = out_dir / "lib"
        obj_dir.mkdir(parents=True, exist_ok=True)
        lib_dir.mkdir(parents=True, exist_ok=True)

        logger.info(f"Compiling {len(sources)} source file(s) for {name} with {compiler}")

        objects: List[Path] = []
        for source in sources:
            obj = obj_dir / (_object_stem(source.relative_to(source_dir)) + ".o")
            cmd = [compiler, "-c", "-fPIC"]
            cmd.extend(f"-I{inc}" for inc in include_dirs)
            for key, value in options.defines.items():
                cmd.append(f"-D{key}" if value is None else f"-D{key}={value}")
            cmd.extend(options.flags)
            cmd.extend([str(source), "-o", str(obj)])
            self.run(name, cmd, cwd=source_dir)
            objects.append(obj)

        library = lib_dir / f"lib{name}.a"
        self.run(name, [archiver, "rcs", str(library)] + [str(o) for o in objects])

        if not library.exists():
            raise BackendExecutionFailed(
                name, self.kind.value, f"archive {library} was not produced"
            )

        # Headers are copied so the result survives removal of the source tree
        header_dir = out_dir / "include"
        self._install_headers(include_dirs, header_dir)

        logger.info(f"Built {library}")
        return LinkInfo(
            include_dirs=[header_dir],
            link_dirs=[lib_dir],
            libraries=[name],
            defines=options.defines,
            origin=self.kind.value,
        )

    def _compiler(self, options: CcOptions) -> str:
        if options.compiler:
            return options.compiler
        if options.cpp:
            return os.environ.get("CXX", "c++")
        return os.environ.get("CC", "cc")

    def _patterns(self, options: CcOptions) -> List[str]:
        if options.files:
            return list(options.files)
        return ["**/*.cpp", "**/*.cc"] if options.cpp else ["**/*.c"]

    def _install_headers(self, include_dirs: List[Path], header_dir: Path) -> None:
        header_dir.mkdir(parents=True, exist_ok=True)
        installed = header_dir.resolve()
        for inc in include_dirs:
            for pattern in HEADER_PATTERNS:
                for header in list(inc.rglob(pattern)):
                    # The output directory may live inside the source tree
                    if is_relative_to(header.resolve(), installed):
                        continue
                    target = header_dir / header.relative_to(inc)
                    target.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(header, target)

    def _collect_sources(self, source_dir: Path, options: CcOptions) -> List[Path]:
        sources: List[Path] = []
        for pattern in self._patterns(options):
            for path in sorted(source_dir.glob(pattern)):
                if path.is_file() and path not in sources:
                    sources.append(path)
        return sources


def _object_stem(relative: Path) -> str:
    """Flatten a relative source path into a unique object file stem."""
    return re.sub(r"[^A-Za-z0-9_.-]", "_", relative.with_suffix("").as_posix())


__all__ = ["CcBackend"]
