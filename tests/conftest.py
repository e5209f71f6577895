"""Pytest configuration and shared fixtures."""

import json
import os
import stat
import sys
import tempfile
import textwrap
from pathlib import Path

import pytest

# Add scripts directory to path for imports
scripts_dir = Path(__file__).parent.parent / "scripts"
sys.path.insert(0, str(scripts_dir))

import runner_tools.utils.logger as logger_module


FAKE_DOTNET = """
import os
import sys

args = sys.argv[1:]
mode = os.environ.get("FAKE_DOTNET_MODE", "ok")
log = os.environ.get("FAKE_TOOL_LOG")
if log:
    with open(log, "a") as f:
        f.write("dotnet " + " ".join(args) + "\\n")

if args == ["--version"]:
    print(os.environ.get("FAKE_DOTNET_VERSION", "8.0.100"))
    sys.exit(0)
if args == ["--info"]:
    print(".NET SDK:\\n Version: 8.0.100")
    sys.exit(0)
if args == ["--list-sdks"]:
    print("8.0.100 [/usr/share/dotnet/sdk]")
    sys.exit(0)
if args == ["--list-runtimes"]:
    if mode == "no-runtimes":
        sys.exit(0)
    print("Microsoft.NETCore.App 8.0.0 [/usr/share/dotnet/shared/Microsoft.NETCore.App]")
    sys.exit(0)
if args and args[0] == "new":
    if mode == "new-fails":
        print("Template not found", file=sys.stderr)
        sys.exit(1)
    name = args[args.index("-n") + 1]
    out = args[args.index("-o") + 1]
    os.makedirs(out, exist_ok=True)
    with open(os.path.join(out, name + ".csproj"), "w") as f:
        f.write("<Project Sdk=\\"Microsoft.NET.Sdk\\" />\\n")
    sys.exit(0)
if args and args[0] in ("restore", "build"):
    sys.exit(1 if mode == args[0] + "-fails" else 0)
sys.exit(2)
"""

FAKE_DOCKER = """
import os
import sys

args = sys.argv[1:]
mode = os.environ.get("FAKE_DOCKER_MODE", "ok")
log = os.environ.get("FAKE_TOOL_LOG")
if log:
    with open(log, "a") as f:
        f.write("docker " + " ".join(args) + "\\n")

command = args[0] if args else ""
if command == "version":
    if mode == "down":
        print("Cannot connect to the Docker daemon", file=sys.stderr)
        sys.exit(1)
    print("Client: 24.0.7")
    sys.exit(0)
if command == "images":
    print("REPOSITORY            TAG       SIZE      CREATED AT")
    print("runner-python-multi   latest    1.2GB     2024-01-01")
    sys.exit(0)
if command in ("build", "tag", "push"):
    sys.exit(1 if mode == command + "-fails" else 0)
sys.exit(2)
"""


def write_executable(bin_dir: Path, name: str, body: str) -> Path:
    """Write a Python script that stands in for an external tool."""
    path = bin_dir / name
    path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body))
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture(autouse=True)
def isolated_logger(monkeypatch, tmp_path):
    """Reset the global logger and keep log files out of the home directory."""
    monkeypatch.setenv(logger_module.LOG_DIR_ENV, str(tmp_path / "logs"))
    logger_module._logger = None
    yield
    logger_module._logger = None


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def temp_project_dir(temp_dir):
    """Create a temporary project directory."""
    project_dir = Path(temp_dir) / "test_project"
    project_dir.mkdir()
    return str(project_dir)


@pytest.fixture
def fake_bin(temp_dir):
    """Directory holding fake dotnet and docker executables."""
    bin_dir = Path(temp_dir) / "bin"
    bin_dir.mkdir()
    write_executable(bin_dir, "dotnet", FAKE_DOTNET)
    write_executable(bin_dir, "docker", FAKE_DOCKER)
    return bin_dir


@pytest.fixture
def tool_env(fake_bin, temp_dir):
    """Environment with the fake tools first on PATH and a throwaway HOME."""
    home = Path(temp_dir) / "home"
    home.mkdir()
    env = os.environ.copy()
    env["PATH"] = f"{fake_bin}{os.pathsep}{env.get('PATH', '')}"
    env["HOME"] = str(home)
    env["FAKE_TOOL_LOG"] = str(Path(temp_dir) / "tool_calls.log")
    env["NO_COLOR"] = "1"
    env["PYTHONIOENCODING"] = "utf-8"
    return env


@pytest.fixture
def default_config():
    """Return default tool configuration."""
    return {
        "sdk": {
            "command": "dotnet",
            "minimum_version": "6.0",
            "template": "console",
            "project_name": "VerifyApp",
            "project_extension": ".csproj",
            "timeout": 300
        },
        "image": {
            "engine": "docker",
            "name": "runner-python-multi"
        },
        "debug": False,
        "log_file": True
    }


@pytest.fixture
def write_project_config(temp_project_dir):
    """Write a .runner-tools.json into the project directory."""
    def write(content):
        path = Path(temp_project_dir) / ".runner-tools.json"
        if isinstance(content, str):
            path.write_text(content)
        else:
            path.write_text(json.dumps(content))
        return path
    return write
