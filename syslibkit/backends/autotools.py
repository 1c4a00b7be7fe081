"""
Autotools build backend.

Runs ``configure && make && make install`` out of tree, installing into the
output directory, and describes the install prefix as LinkInfo.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from syslibkit.backends.base import BackendKind, BuildBackend
from syslibkit.backends.options import AutotoolsOptions
from syslibkit.core.exceptions import BackendExecutionFailed
from syslibkit.core.types import LinkInfo

logger = logging.getLogger(__name__)


class AutotoolsBackend(BuildBackend):
    """
    Autotools build backend implementation.
    """

    kind = BackendKind.AUTOTOOLS

    def build(
        self,
        name: str,
        source_dir: Path,
        out_dir: Path,
        options: Optional[AutotoolsOptions] = None,
        static: bool = False,
    ) -> LinkInfo:
        """
        Configure, build and install the library into ``out_dir``.
        """
        options = options or AutotoolsOptions()
        env = dict(options.env)

        configure = source_dir / "configure"
        if not configure.exists():
            if not options.autoreconf:
                raise BackendExecutionFailed(
                    name,
                    self.kind.value,
                    f"no configure script in {source_dir} and autoreconf is disabled",
                )
            logger.info(f"Generating configure script for {name}")
            self.run(name, ["autoreconf", "-fi"], cwd=source_dir, env=env)
            if not configure.exists():
                raise BackendExecutionFailed(
                    name,
                    self.kind.value,
                    f"autoreconf did not produce {configure}",
                )

        if os.name != "nt":
            configure.chmod(configure.stat().st_mode | 0o111)

        build_dir = out_dir / "build"
        self.clear_install_tree(name, out_dir, "build")
        build_dir.mkdir(parents=True, exist_ok=True)

        configure_cmd = [str(configure), f"--prefix={out_dir}"]
        if static:
            configure_cmd.extend(["--enable-static", "--disable-shared"])
        configure_cmd.extend(options.configure_args)

        make_cmd = ["make"]
        if options.jobs:
            make_cmd.append(f"-j{options.jobs}")
        make_cmd.extend(options.make_args)

        logger.info(f"Running autotools build for {name}")
        self.run(name, configure_cmd, cwd=build_dir, env=env)
        self.run(name, make_cmd, cwd=build_dir, env=env)
        self.run(name, ["make", "install"] + list(options.make_args), cwd=build_dir, env=env)

        info = self.collect_install_tree(name, out_dir, static)
        logger.info(f"Installed {name} to {out_dir}")
        return info


__all__ = ["AutotoolsBackend"]
