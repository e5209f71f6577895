"""Shared subprocess utilities for checks and the image builder."""

import shutil
import subprocess
from dataclasses import dataclass


@dataclass
class CommandResult:
    """Exit code and captured output of an external command."""
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        return self.stdout + self.stderr


def run_command(args: list[str], cwd: str | None = None,
                timeout: float | None = None,
                capture: bool = True) -> CommandResult:
    """
    Run an external command and report how it exited.

    A non-zero exit code is returned, not raised. A missing executable
    raises FileNotFoundError and an expired timeout raises
    subprocess.TimeoutExpired.

    Args:
        args: Program and arguments
        cwd: Working directory for the command
        timeout: Seconds to wait before giving up
        capture: Capture output instead of streaming it to the console

    Returns:
        CommandResult with the exit code and any captured output
    """
    result = subprocess.run(
        args,
        shell=False,
        cwd=cwd,
        capture_output=capture,
        text=True,
        timeout=timeout
    )
    return CommandResult(
        exit_code=result.returncode,
        stdout=(result.stdout or "") if capture else "",
        stderr=(result.stderr or "") if capture else ""
    )


def tool_path(name: str) -> str | None:
    """Return the full path of an executable on PATH, or None."""
    return shutil.which(name)
