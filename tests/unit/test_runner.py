"""Unit tests for q_mcp_setup.runner."""

from __future__ import annotations

import logging
import subprocess
from unittest.mock import MagicMock, patch

from q_mcp_setup.runner import CommandResult, CommandRunner


def _completed(stdout="", returncode=0):
    cp = MagicMock(spec=subprocess.CompletedProcess)
    cp.stdout = stdout
    cp.returncode = returncode
    return cp


class TestRun:
    @patch("q_mcp_setup.runner.subprocess.run")
    def test_passes_argv_without_shell(self, mock_run) -> None:
        mock_run.return_value = _completed("ok\n")
        result = CommandRunner().run(["aws", "sts", "get-caller-identity"])
        assert result == CommandResult(0, "ok")
        args, kwargs = mock_run.call_args
        assert args[0] == ["aws", "sts", "get-caller-identity"]
        assert kwargs.get("shell") is not True

    @patch("q_mcp_setup.runner.subprocess.run", side_effect=FileNotFoundError)
    def test_missing_executable(self, _mock_run) -> None:
        result = CommandRunner().run(["nope"])
        assert result.returncode == 127
        assert result.ok is False

    @patch("q_mcp_setup.runner.subprocess.run")
    def test_failure_logs_description(self, mock_run, caplog) -> None:
        mock_run.return_value = _completed("denied", returncode=1)
        with caplog.at_level(logging.DEBUG, logger="q_mcp_setup"):
            result = CommandRunner().run(["x"], "Installing x")
        assert result.ok is False
        assert "Installing x failed." in caplog.messages
        assert "denied" not in caplog.messages

    @patch("q_mcp_setup.runner.subprocess.run")
    def test_verbose_shows_failure_output(self, mock_run, caplog) -> None:
        mock_run.return_value = _completed("denied", returncode=1)
        with caplog.at_level(logging.DEBUG, logger="q_mcp_setup"):
            CommandRunner(verbose=True).run(["x"], "Installing x")
        assert "denied" in caplog.messages

    @patch("q_mcp_setup.runner.subprocess.run")
    def test_debug_echoes_command_and_exit_code(self, mock_run, caplog) -> None:
        mock_run.return_value = _completed("hello", returncode=0)
        with caplog.at_level(logging.DEBUG, logger="q_mcp_setup"):
            CommandRunner(debug=True).run(["echo", "hello"])
        assert "Running command: echo hello" in caplog.messages
        assert "Exit code: 0" in caplog.messages
        assert "hello" in caplog.messages


class TestRunFirst:
    @patch("q_mcp_setup.runner.subprocess.run")
    def test_stops_at_first_success(self, mock_run) -> None:
        mock_run.side_effect = [_completed(returncode=1), _completed(returncode=0)]
        result = CommandRunner().run_first([["apt-get"], ["yum"], ["dnf"]], "Installing jq")
        assert result.ok
        assert mock_run.call_count == 2

    @patch("q_mcp_setup.runner.subprocess.run")
    def test_all_fail(self, mock_run) -> None:
        mock_run.return_value = _completed(returncode=1)
        result = CommandRunner().run_first([["a"], ["b"]])
        assert result.ok is False
        assert mock_run.call_count == 2


class TestOutputOf:
    @patch("q_mcp_setup.runner.subprocess.run")
    def test_unknown_on_failure(self, mock_run) -> None:
        mock_run.return_value = _completed("", returncode=1)
        assert CommandRunner().output_of(["uv", "--version"]) == "Unknown"

    @patch("q_mcp_setup.runner.subprocess.run")
    def test_returns_output(self, mock_run) -> None:
        mock_run.return_value = _completed("uv 0.5.1\n")
        assert CommandRunner().output_of(["uv", "--version"]) == "uv 0.5.1"
