"""
Build the multi-Python runner image for containerized CI workflows.

Checks the container engine, builds the image, and optionally tags and
pushes it to a registry.
"""

import argparse
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .checks.command import CommandResult, run_command, tool_path
from .utils.config import PACKAGE_DIR, ConfigError, get_config_value, load_config
from .utils.console import colors_enabled, cyan, gray, green, red, yellow
from .utils.logger import configure_logger, get_logger

TOOL_NAME = "build-runner-image"
USAGE_ERROR = 2
DEFAULT_ENGINE = "docker"
DEFAULT_IMAGE_NAME = "runner-python-multi"
DEFAULT_CONTEXT = PACKAGE_DIR / "docker"
DEFAULT_DOCKERFILE = DEFAULT_CONTEXT / "Dockerfile.python-multi-linux"
IMAGES_FORMAT = "table {{.Repository}}\t{{.Tag}}\t{{.Size}}\t{{.CreatedAt}}"
ENGINE_CHECK_TIMEOUT = 30


class BuildError(Exception):
    """A build step failed and the build cannot continue."""

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.hint = hint


@dataclass
class ImageNames:
    local: str
    full: str
    registry: str | None = None

    @property
    def needs_tag(self) -> bool:
        return self.registry is not None and self.local != self.full


def image_names(name: str, tag: str, registry: str | None = None) -> ImageNames:
    """
    Work out the local and registry image names.

    Args:
        name: Image repository name
        tag: Image tag
        registry: Registry prefix such as "ghcr.io/owner", or None

    Returns:
        ImageNames with the local and full (registry) names
    """
    local = f"{name}:{tag}"
    registry = registry.rstrip("/") if registry else None
    if registry:
        return ImageNames(local=local, full=f"{registry}/{local}", registry=registry)
    return ImageNames(local=local, full=local)


class ImageBuilder:
    """Runs each container engine step once, in order."""

    def __init__(self, engine: str, dockerfile: Path, context: Path,
                 names: ImageNames, color: bool = False):
        self.engine = engine
        self.dockerfile = dockerfile
        self.context = context
        self.names = names
        self.color = color
        self.logger = get_logger()

    def _say(self, text: str = "") -> None:
        print(text)

    def _engine(self, *args: str, capture: bool = True,
                timeout: float | None = None) -> CommandResult:
        try:
            return run_command([self.engine, *args], capture=capture, timeout=timeout)
        except FileNotFoundError:
            raise BuildError(f"{self.engine} is not installed")
        except subprocess.TimeoutExpired:
            raise BuildError(f"'{self.engine} {args[0]}' timed out after {timeout}s")

    def check_engine(self) -> None:
        self._say(yellow(f"Checking {self.engine}...", self.color))
        if tool_path(self.engine) is None:
            raise BuildError(
                f"{self.engine} is not installed",
                hint=f"Install {self.engine} and try again"
            )
        if not self._engine("version", timeout=ENGINE_CHECK_TIMEOUT).ok:
            raise BuildError(
                f"{self.engine} is not running",
                hint=f"Start {self.engine} and try again"
            )
        self._say(green(f"✓ {self.engine} is running", self.color))

    def build(self) -> None:
        self._say()
        self._say(yellow(f"Building image: {self.names.local}", self.color))
        self._say(gray(f"Dockerfile: {self.dockerfile}", self.color))
        self._say(gray("This will take 5-10 minutes (base image + Python versions)...", self.color))
        self._say()

        if not self.dockerfile.is_file():
            raise BuildError(f"Dockerfile not found at {self.dockerfile}")

        result = self._engine(
            "build",
            "-t", self.names.local,
            "-f", str(self.dockerfile),
            str(self.context),
            capture=False
        )
        if not result.ok:
            raise BuildError(f"Image build failed (exit code {result.exit_code})")

        self.logger.info(f"Built image {self.names.local}")
        self._say()
        self._say(green(f"✓ Image built successfully: {self.names.local}", self.color))

    def tag(self) -> None:
        self._say()
        self._say(yellow("Tagging image for registry...", self.color))
        result = self._engine("tag", self.names.local, self.names.full)
        if not result.ok:
            raise BuildError(
                f"Failed to tag {self.names.local} as {self.names.full}: "
                f"{result.output.strip()}"
            )
        self._say(green(f"✓ Tagged as: {self.names.full}", self.color))

    def push(self) -> None:
        self._say()
        self._say(yellow(f"Pushing to registry: {self.names.registry}", self.color))
        self._say(gray(f"Image: {self.names.full}", self.color))
        self._say()

        result = self._engine("push", self.names.full, capture=False)
        if not result.ok:
            raise BuildError(
                "Failed to push image",
                hint=(
                    "If you haven't logged in, run:\n"
                    f"  {self.engine} login {self.names.registry}"
                )
            )

        self.logger.info(f"Pushed image {self.names.full}")
        self._say()
        self._say(green("✓ Image pushed successfully!", self.color))
        self._say()
        self._say(cyan("Use in workflows with:", self.color))
        self._say("  container:")
        self._say(f"    image: {self.names.full}")

    def show_image_info(self) -> None:
        self._say()
        self._say(cyan("=== Image Information ===", self.color))
        try:
            result = run_command(
                [self.engine, "images", self.names.local, "--format", IMAGES_FORMAT]
            )
        except (OSError, subprocess.SubprocessError) as e:
            self.logger.warning(f"Could not list images: {e}")
            return
        if result.ok:
            self._say(result.stdout.rstrip())
        else:
            self.logger.warning(f"Could not list images: {result.output.strip()}")

    def show_usage(self) -> None:
        local = self.names.local
        self._say()
        self._say(cyan("=== Test the Image ===", self.color))
        self._say(yellow("Run verification:", self.color))
        self._say(f"  {self.engine} run --rm {local}")
        self._say()
        self._say(yellow("Test Python 3.10:", self.color))
        self._say(f"  {self.engine} run --rm {local} python3.10 --version")
        self._say()
        self._say(yellow("Interactive shell:", self.color))
        self._say(f"  {self.engine} run --rm -it {local}")

    def run(self, skip_build: bool = False) -> None:
        """Run all steps; raises BuildError on the first fatal failure."""
        self.check_engine()
        if not skip_build:
            self.build()
        if self.names.needs_tag:
            self.tag()
        if self.names.registry:
            self.push()
        self.show_image_info()
        self.show_usage()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=TOOL_NAME,
        description="Build a multi-Python Docker image with versions 3.9-3.12.",
        epilog=(
            "Examples:\n"
            "  build-runner-image\n"
            "  build-runner-image --registry ghcr.io/owner --tag v1.0\n"
            "  build-runner-image --dockerfile ci/Dockerfile --context ci"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--registry", help="Push to registry (e.g. 'ghcr.io/owner')")
    parser.add_argument("--tag", default="latest", help="Image tag (default: 'latest')")
    parser.add_argument(
        "--no-build",
        action="store_true",
        help="Skip build, only tag/push an existing image"
    )
    parser.add_argument(
        "--dockerfile",
        help="Dockerfile to build (default: the bundled multi-Python image)"
    )
    parser.add_argument(
        "--context",
        help="Build context directory (default: the Dockerfile's directory)"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging to stderr")
    return parser.parse_args(argv)


def resolve_path(value: str | Path, cwd: str) -> Path:
    """Relative paths are taken from the directory the tool runs in."""
    path = Path(value)
    return path if path.is_absolute() else Path(cwd) / path


def make_builder(args: argparse.Namespace, config: Dict[str, Any],
                 cwd: str) -> ImageBuilder:
    names = image_names(
        get_config_value(config, "image", "name", default=DEFAULT_IMAGE_NAME),
        args.tag,
        args.registry
    )

    dockerfile_value = args.dockerfile or get_config_value(config, "image", "dockerfile")
    context_value = args.context or get_config_value(config, "image", "context")

    if dockerfile_value:
        dockerfile = resolve_path(dockerfile_value, cwd)
    else:
        dockerfile = DEFAULT_DOCKERFILE

    if context_value:
        context = resolve_path(context_value, cwd)
    elif dockerfile_value:
        context = dockerfile.parent
    else:
        context = DEFAULT_CONTEXT

    return ImageBuilder(
        engine=get_config_value(config, "image", "engine", default=DEFAULT_ENGINE),
        dockerfile=dockerfile,
        context=context,
        names=names,
        color=colors_enabled(sys.stdout)
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the image builder."""
    args = parse_args(argv)
    cwd = os.getcwd()

    try:
        config = load_config(cwd)
    except ConfigError as e:
        configure_logger(TOOL_NAME, debug=args.debug).error(f"Invalid configuration: {e}")
        return USAGE_ERROR

    logger = configure_logger(
        TOOL_NAME,
        debug=args.debug or get_config_value(config, "debug", default=False),
        log_to_file=get_config_value(config, "log_file", default=True)
    )

    builder = make_builder(args, config, cwd)
    color = builder.color

    print(cyan("=== Python Multi-Version Docker Image Builder ===", color))
    print()
    logger.info(f"Image build started: {builder.names.full} from {builder.dockerfile}")

    try:
        builder.run(skip_build=args.no_build)
    except BuildError as e:
        logger.error(f"Image build failed: {e}")
        print()
        print(red(f"Error: {e}", color))
        if e.hint:
            print(e.hint)
        return 1

    print()
    print(green("✓ Build complete!", color))
    return 0
