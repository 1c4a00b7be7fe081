"""
Unit tests for external command execution.
"""

import subprocess
from unittest.mock import Mock, patch

import pytest

from syslibkit.core.exceptions import CommandError
from syslibkit.core.process import run_command


class TestRunCommand:
    """Test run_command wrapper."""

    @patch("syslibkit.core.process.subprocess.run")
    def test_success_returns_result(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="1.3\n", stderr="")

        result = run_command(["pkg-config", "--modversion", "zlib"])

        assert result.stdout == "1.3\n"
        call_args = mock_run.call_args
        assert call_args[0][0] == ["pkg-config", "--modversion", "zlib"]
        assert call_args[1]["capture_output"] is True
        assert call_args[1]["text"] is True
        assert call_args[1]["env"] is None

    @patch("syslibkit.core.process.subprocess.run")
    def test_paths_converted_to_strings(self, mock_run, tmp_path):
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")
        run_command(["ls", tmp_path], cwd=tmp_path)
        assert mock_run.call_args[0][0] == ["ls", str(tmp_path)]
        assert mock_run.call_args[1]["cwd"] == tmp_path

    @patch("syslibkit.core.process.subprocess.run")
    def test_env_layered_over_os_environ(self, mock_run, monkeypatch):
        monkeypatch.setenv("EXISTING_VAR", "kept")
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")

        run_command(["make"], env={"CFLAGS": "-O2"})

        env = mock_run.call_args[1]["env"]
        assert env["CFLAGS"] == "-O2"
        assert env["EXISTING_VAR"] == "kept"

    @patch("syslibkit.core.process.subprocess.run")
    def test_non_zero_exit_raises(self, mock_run):
        mock_run.return_value = Mock(returncode=2, stdout="out", stderr="err")

        with pytest.raises(CommandError) as exc_info:
            run_command(["make"])

        assert exc_info.value.returncode == 2
        assert exc_info.value.command == ["make"]
        assert exc_info.value.output == "out\nerr"

    @patch("syslibkit.core.process.subprocess.run")
    def test_non_zero_exit_without_check(self, mock_run):
        mock_run.return_value = Mock(returncode=1, stdout="", stderr="")
        result = run_command(["false"], check=False)
        assert result.returncode == 1

    @patch("syslibkit.core.process.subprocess.run")
    def test_missing_executable(self, mock_run):
        mock_run.side_effect = FileNotFoundError("no such file")

        with pytest.raises(CommandError) as exc_info:
            run_command(["does-not-exist"])

        assert exc_info.value.returncode is None
        assert "could not be executed" in str(exc_info.value)

    @patch("syslibkit.core.process.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["git"], timeout=5)

        with pytest.raises(CommandError) as exc_info:
            run_command(["git", "clone", "x"], timeout=5)

        assert exc_info.value.returncode is None
        assert "Timed out" in exc_info.value.stderr
