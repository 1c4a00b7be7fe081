"""
SysLibKit CLI argument parser.

This module implements the command-line interface for SysLibKit using argparse.
"""

import argparse
import importlib
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

# Installed distribution version, if any
try:
    from importlib.metadata import version

    __version__ = version("syslibkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """SysLibKit command-line interface."""

    def __init__(self):
        """Build the parser once; it is reused across runs."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Assemble the top-level parser and the resolve/probe subcommands.

        Returns:
            ArgumentParser for the syslibkit command
        """
        parser = argparse.ArgumentParser(
            prog="syslibkit",
            description="SysLibKit - link against a system library or build it from source",
            epilog='Use "syslibkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"SysLibKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_resolve_command(subparsers)
        self._add_probe_command(subparsers)

        return parser

    def _add_request_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Arguments shared by commands that take a library request."""
        parser.add_argument("name", metavar="NAME", help="Library base name")
        parser.add_argument(
            "--min-version",
            metavar="VERSION",
            help="Minimum system library version",
        )
        parser.add_argument(
            "--overrides",
            type=Path,
            metavar="PATH",
            help="YAML overrides file (default: ./syslibkit.yaml if present)",
        )
        parser.add_argument(
            "--no-pkgconfig",
            action="store_true",
            help="Do not probe with pkg-config",
        )
        parser.add_argument(
            "--vcpkg", action="store_true", help="Probe with vcpkg"
        )
        parser.add_argument(
            "--static", action="store_true", help="Prefer static linking"
        )
        parser.add_argument(
            "--format",
            choices=["json", "flags"],
            default="json",
            help="Output format (default: json)",
        )

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Find or build a library",
            description="Probe for a system library, falling back to a source build",
        )
        self._add_request_arguments(parser)
        parser.add_argument(
            "--source-dir", metavar="DIR", help="Local source directory"
        )
        parser.add_argument("--git-repo", metavar="URL", help="Git repository")
        parser.add_argument(
            "--reference", metavar="REF", help="Git branch, tag or commit"
        )
        parser.add_argument(
            "--backend",
            choices=["cc", "autotools", "cmake"],
            help="Build backend (default: detect from source tree)",
        )
        parser.add_argument(
            "--no-system",
            action="store_true",
            help="Skip system probes and always build from source",
        )
        parser.add_argument(
            "--no-source-dir",
            action="store_true",
            help="Disable local source directories",
        )
        parser.add_argument(
            "--no-git", action="store_true", help="Disable git repositories"
        )
        parser.add_argument(
            "--fallback",
            action="store_true",
            help="Try the next configured source when one fails",
        )
        parser.add_argument(
            "--keep-checkout",
            action="store_true",
            help="Keep git working directories for later builds",
        )
        parser.add_argument(
            "--out-dir", type=Path, metavar="DIR", help="Build output root"
        )
        parser.add_argument(
            "--cache-dir", type=Path, metavar="DIR", help="SysLibKit cache directory"
        )

    def _add_probe_command(self, subparsers):
        """Add 'probe' subcommand."""
        parser = subparsers.add_parser(
            "probe",
            help="Look for a system library only",
            description="Run system probes without building anything",
        )
        self._add_request_arguments(parser)

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse arguments without running anything.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            argparse.Namespace for the selected command
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Parse arguments, configure logging and run the selected command.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Process exit code (0 success, 1 failure, 130 interrupted)
        """
        parsed_args = self.parse_args(args)
        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Interrupted")
            return 130
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Route log records to stderr at the level chosen by -v/-q.

        Logs go to stderr so stdout carries only the result.
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,
        )

    def _dispatch_command(self, args) -> int:
        """
        Import the command module and call its ``run(args)``.

        Returns:
            Exit code returned by the command
        """
        command_map = {
            "resolve": "syslibkit.cli.commands.resolve",
            "probe": "syslibkit.cli.commands.probe",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Console script entry point."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
