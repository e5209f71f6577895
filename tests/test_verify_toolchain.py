"""Tests for the verify_toolchain command."""

import json
import os
from contextlib import contextmanager
from unittest.mock import patch

import pytest

from runner_tools import verify_toolchain
from runner_tools.checks import Severity, run_check
from runner_tools.utils.logger import get_logger

RUN_VERIFICATION = 'runner_tools.verify_toolchain.run_verification'


def results_with_failures(failures: int):
    results = [run_check(f"check {i}", lambda: True, "ok", "bad") for i in range(3)]
    results += [
        run_check(f"broken {i}", lambda: False, "ok", "bad", severity=Severity.ERROR)
        for i in range(failures)
    ]
    return results


@pytest.fixture(autouse=True)
def project_cwd(monkeypatch, temp_project_dir):
    monkeypatch.chdir(temp_project_dir)
    return temp_project_dir


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Test that every option is off or unset by default."""
        args = verify_toolchain.parse_args([])
        assert args.minimum_version is None
        assert args.exit_on_failure is False
        assert args.json_output is False
        assert args.sdk is None

    def test_flags(self):
        """Test that every option is parsed."""
        args = verify_toolchain.parse_args(
            ["--minimum-version", "8.0", "--exit-on-failure", "--json", "--sdk", "dotnet8"]
        )
        assert args.minimum_version == "8.0"
        assert args.exit_on_failure is True
        assert args.json_output is True
        assert args.sdk == "dotnet8"

    def test_invalid_minimum_version(self, capsys):
        """Test that a non-dotted --minimum-version is a usage error."""
        with pytest.raises(SystemExit) as exc:
            verify_toolchain.parse_args(["--minimum-version", "latest"])
        assert exc.value.code == 2
        assert "invalid version" in capsys.readouterr().err


class TestMain:
    """Tests for the main entry point."""

    def test_exit_zero_with_failures_without_flag(self):
        """Test that failures alone do not change the exit code."""
        with patch(RUN_VERIFICATION, return_value=results_with_failures(2)):
            assert verify_toolchain.main([]) == 0

    def test_exit_one_with_failures_and_flag(self):
        """Test that --exit-on-failure exits 1 when a check fails."""
        with patch(RUN_VERIFICATION, return_value=results_with_failures(1)):
            assert verify_toolchain.main(["--exit-on-failure"]) == 1

    def test_exit_zero_when_all_pass_with_flag(self):
        """Test that --exit-on-failure exits 0 when everything passes."""
        with patch(RUN_VERIFICATION, return_value=results_with_failures(0)):
            assert verify_toolchain.main(["--exit-on-failure"]) == 0

    def test_json_output(self, capsys):
        """Test that --json prints exactly one document on stdout."""
        with patch(RUN_VERIFICATION, return_value=results_with_failures(1)):
            verify_toolchain.main(["--json"])

        document = json.loads(capsys.readouterr().out)
        assert set(document) == {
            "timestamp", "checks", "passed", "failed", "warnings", "totalChecks"
        }
        assert document["passed"] == 3
        assert document["failed"] == 1
        assert document["totalChecks"] == 4

    def test_human_output(self, capsys):
        """Test the per-check lines and summary of the text report."""
        with patch(RUN_VERIFICATION, return_value=results_with_failures(1)):
            verify_toolchain.main([])

        out = capsys.readouterr().out
        assert "✓ check 0: ok" in out
        assert "✗ broken 0: bad" in out
        assert "Total:    4" in out

    def test_defaults_from_config(self):
        """Test that minimum version and SDK come from the packaged defaults."""
        with patch(RUN_VERIFICATION, return_value=[]) as mock_run:
            verify_toolchain.main([])

        config, minimum, sdk = mock_run.call_args[0]
        assert minimum == "6.0"
        assert sdk == "dotnet"

    def test_command_line_overrides(self):
        """Test that options win over settings."""
        with patch(RUN_VERIFICATION, return_value=[]) as mock_run:
            verify_toolchain.main(["--minimum-version", "8.0", "--sdk", "/opt/dotnet/dotnet"])

        _, minimum, sdk = mock_run.call_args[0]
        assert minimum == "8.0"
        assert sdk == "/opt/dotnet/dotnet"

    def test_project_config_override(self, write_project_config):
        """Test that .runner-tools.json overrides the default minimum version."""
        write_project_config({"sdk": {"minimum_version": "7.0"}})

        with patch(RUN_VERIFICATION, return_value=[]) as mock_run:
            verify_toolchain.main([])

        _, minimum, _ = mock_run.call_args[0]
        assert minimum == "7.0"

    def test_logs_under_tool_name(self):
        """Test that a run writes to the verifier's own log file."""
        with patch(RUN_VERIFICATION, return_value=[]):
            verify_toolchain.main([])

        log = get_logger()
        assert log.tool == "verify-toolchain"
        assert "Toolchain verification started" in log.log_path.read_text()


class TestConfigErrors:
    """Tests for unusable .runner-tools.json files."""

    def test_malformed_json_is_usage_error(self, write_project_config, capsys):
        """Test that a malformed project file exits 2 without running checks."""
        write_project_config("{not json")

        with patch(RUN_VERIFICATION) as mock_run:
            assert verify_toolchain.main(["--json"]) == 2

        mock_run.assert_not_called()
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "[ERROR]" in captured.err
        assert "invalid JSON" in captured.err

    def test_bad_minimum_version_is_usage_error(self, write_project_config, capsys):
        """Test that a minimum version from settings is validated like the option."""
        write_project_config({"sdk": {"minimum_version": "latest"}})

        with patch(RUN_VERIFICATION) as mock_run:
            assert verify_toolchain.main([]) == 2

        mock_run.assert_not_called()
        assert "sdk.minimum_version" in capsys.readouterr().err

    def test_string_timeout_is_usage_error(self, write_project_config, capsys):
        """Test that a non-numeric timeout stops the run before any check."""
        write_project_config({"sdk": {"timeout": "five minutes"}})

        with patch(RUN_VERIFICATION) as mock_run:
            assert verify_toolchain.main([]) == 2

        mock_run.assert_not_called()
        assert "sdk.timeout" in capsys.readouterr().err


class TestRunVerification:
    """Tests for run_verification."""

    def test_runs_eight_checks_and_removes_workspace(self, default_config):
        """Test that all eight checks run and the workspace is removed."""
        workspaces = []
        real_workspace = verify_toolchain.scaffold_workspace

        @contextmanager
        def recording_workspace():
            with real_workspace() as path:
                workspaces.append(path)
                yield path

        with patch('runner_tools.checks.toolchain.tool_path', return_value=None), \
                patch('runner_tools.checks.toolchain.run_command',
                      side_effect=FileNotFoundError("dotnet")), \
                patch('runner_tools.verify_toolchain.scaffold_workspace', recording_workspace):
            results = verify_toolchain.run_verification(default_config, "6.0", "dotnet")

        assert len(results) == 8
        assert all(not r.passed for r in results)
        assert len(workspaces) == 1
        assert not os.path.exists(workspaces[0])
