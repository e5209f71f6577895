"""Requirement checks against an installed .NET SDK."""

import os
import shutil
import tempfile
from contextlib import contextmanager
from typing import Iterator, List

from .base import CheckSpec, Severity
from .command import CommandResult, run_command, tool_path
from .version import version_at_least

DEFAULT_SDK_COMMAND = "dotnet"
DEFAULT_MINIMUM_VERSION = "6.0"
DEFAULT_TEMPLATE = "console"
DEFAULT_PROJECT_NAME = "VerifyApp"
DEFAULT_PROJECT_EXTENSION = ".csproj"
DEFAULT_TIMEOUT = 300


@contextmanager
def scaffold_workspace(prefix: str = "toolchain-verify-") -> Iterator[str]:
    """
    Create a randomly named temporary directory for scaffold checks.

    The directory is removed on exit, whatever the checks did. Cleanup
    errors are ignored.
    """
    path = tempfile.mkdtemp(prefix=prefix)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


class ToolchainProbes:
    """Probe operations for each toolchain check, sharing one workspace."""

    def __init__(self, workspace: str,
                 sdk_command: str = DEFAULT_SDK_COMMAND,
                 minimum_version: str = DEFAULT_MINIMUM_VERSION,
                 template: str = DEFAULT_TEMPLATE,
                 project_name: str = DEFAULT_PROJECT_NAME,
                 project_extension: str = DEFAULT_PROJECT_EXTENSION,
                 timeout: float = DEFAULT_TIMEOUT):
        self.workspace = workspace
        self.sdk_command = sdk_command
        self.minimum_version = minimum_version
        self.template = template
        self.project_name = project_name
        self.project_extension = project_extension
        self.timeout = timeout
        self.installed_version: str | None = None
        self.sdk_location: str | None = None

    @property
    def project_dir(self) -> str:
        return os.path.join(self.workspace, self.project_name)

    @property
    def project_file(self) -> str:
        return os.path.join(self.project_dir, self.project_name + self.project_extension)

    def project_exists(self) -> bool:
        return os.path.isfile(self.project_file)

    def _sdk(self, *args: str, cwd: str | None = None) -> CommandResult:
        return run_command([self.sdk_command, *args], cwd=cwd, timeout=self.timeout)

    def sdk_installed(self) -> bool:
        self.sdk_location = tool_path(self.sdk_command)
        return self.sdk_location is not None

    def version_meets_minimum(self) -> bool:
        result = self._sdk("--version")
        if not result.ok:
            return False
        self.installed_version = result.stdout.strip()
        return version_at_least(self.installed_version, self.minimum_version)

    def info_available(self) -> bool:
        return self._sdk("--info").ok

    def sdks_listed(self) -> bool:
        result = self._sdk("--list-sdks")
        return result.ok and bool(result.stdout.strip())

    def runtimes_listed(self) -> bool:
        result = self._sdk("--list-runtimes")
        return result.ok and bool(result.stdout.strip())

    def create_project(self) -> bool:
        result = self._sdk(
            "new", self.template,
            "-n", self.project_name,
            "-o", self.project_dir,
            "--force",
            cwd=self.workspace
        )
        return result.ok and self.project_exists()

    def restore_project(self) -> bool:
        if not self.project_exists():
            return False
        return self._sdk("restore", self.project_file, cwd=self.project_dir).ok

    def build_project(self) -> bool:
        if not self.project_exists():
            return False
        return self._sdk(
            "build", self.project_file, "--no-restore",
            cwd=self.project_dir
        ).ok


def build_checklist(probes: ToolchainProbes) -> List[CheckSpec]:
    """
    Build the ordered list of toolchain checks.

    Order matters: restore and build use the project created by the
    scaffold check.

    Args:
        probes: Probe operations bound to one workspace

    Returns:
        Check specs in execution order
    """
    sdk = probes.sdk_command
    minimum = probes.minimum_version

    return [
        CheckSpec(
            name="SDK installed",
            probe=probes.sdk_installed,
            expected=f"'{sdk}' found on PATH",
            failure=f"'{sdk}' not found on PATH",
            success=lambda: f"Found at {probes.sdk_location}",
        ),
        CheckSpec(
            name="SDK version",
            probe=probes.version_meets_minimum,
            expected=f">= {minimum}",
            failure=f"SDK version below {minimum} or unreadable",
            success=lambda: probes.installed_version or "",
        ),
        CheckSpec(
            name="SDK info",
            probe=probes.info_available,
            expected=f"'{sdk} --info' succeeds",
            failure=f"'{sdk} --info' failed",
            severity=Severity.WARNING,
        ),
        CheckSpec(
            name="SDKs installed",
            probe=probes.sdks_listed,
            expected="At least one SDK listed",
            failure="No SDKs listed",
        ),
        CheckSpec(
            name="Runtimes installed",
            probe=probes.runtimes_listed,
            expected="At least one runtime listed",
            failure="No runtimes listed",
            severity=Severity.WARNING,
        ),
        CheckSpec(
            name="Create project",
            probe=probes.create_project,
            expected=f"'{sdk} new {probes.template}' creates {probes.project_name}{probes.project_extension}",
            failure="Project creation failed",
        ),
        CheckSpec(
            name="Restore dependencies",
            probe=probes.restore_project,
            expected=f"'{sdk} restore' succeeds",
            failure="Restore failed or project missing",
        ),
        CheckSpec(
            name="Build project",
            probe=probes.build_project,
            expected=f"'{sdk} build' succeeds",
            failure="Build failed or project missing",
        ),
    ]
