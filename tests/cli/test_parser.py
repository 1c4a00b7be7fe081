"""
Tests for CLI argument parser.
"""

import pytest
from unittest.mock import patch
from pathlib import Path

from syslibkit.cli.parser import CLI


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_creation(self):
        """Test CLI can be created."""
        cli = CLI()
        assert cli is not None
        assert cli.parser is not None

    def test_no_command_shows_help(self, capsys):
        """Test that running without command shows help."""
        cli = CLI()
        result = cli.run([])

        assert result == 1
        captured = capsys.readouterr()
        assert "usage:" in captured.out.lower() or "usage:" in captured.err.lower()

    def test_version_flag(self, capsys):
        """Test --version flag."""
        cli = CLI()

        with pytest.raises(SystemExit) as exc_info:
            cli.run(["--version"])

        assert exc_info.value.code == 0
        captured = capsys.readouterr()
        assert "SysLibKit" in captured.out


class TestResolveCommand:
    """Test resolve command parsing."""

    def test_resolve_basic(self):
        args = CLI().parse_args(["resolve", "zlib"])

        assert args.command == "resolve"
        assert args.name == "zlib"
        assert args.min_version is None
        assert args.source_dir is None
        assert args.git_repo is None
        assert args.backend is None
        assert args.format == "json"
        assert args.fallback is False

    def test_resolve_all_options(self):
        args = CLI().parse_args(
            [
                "resolve",
                "zlib",
                "--min-version",
                "1.2.11",
                "--source-dir",
                "vendor/zlib",
                "--git-repo",
                "https://github.com/madler/zlib.git",
                "--reference",
                "v1.3.1",
                "--backend",
                "cmake",
                "--no-pkgconfig",
                "--vcpkg",
                "--static",
                "--fallback",
                "--keep-checkout",
                "--out-dir",
                "out",
                "--format",
                "flags",
            ]
        )

        assert args.min_version == "1.2.11"
        assert args.source_dir == "vendor/zlib"
        assert args.reference == "v1.3.1"
        assert args.backend == "cmake"
        assert args.no_pkgconfig is True
        assert args.vcpkg is True
        assert args.static is True
        assert args.keep_checkout is True
        assert args.out_dir == Path("out")
        assert args.format == "flags"

    def test_invalid_backend(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["resolve", "zlib", "--backend", "meson"])

    def test_name_required(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["resolve"])


class TestProbeCommand:
    """Test probe command parsing."""

    def test_probe_basic(self):
        args = CLI().parse_args(["probe", "zlib", "--vcpkg"])
        assert args.command == "probe"
        assert args.vcpkg is True

    def test_probe_has_no_source_options(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["probe", "zlib", "--git-repo", "x"])


class TestDispatch:
    """Test command dispatch."""

    @patch("syslibkit.cli.commands.resolve.run", return_value=0)
    def test_dispatch_resolve(self, mock_run):
        assert CLI().run(["resolve", "zlib"]) == 0
        assert mock_run.call_args[0][0].name == "zlib"

    @patch("syslibkit.cli.commands.probe.run", side_effect=KeyboardInterrupt)
    def test_keyboard_interrupt(self, _mock_run):
        assert CLI().run(["probe", "zlib"]) == 130

    @patch("syslibkit.cli.commands.probe.run", side_effect=RuntimeError("boom"))
    def test_unexpected_error(self, _mock_run):
        assert CLI().run(["probe", "zlib"]) == 1
