"""
Verify the locally installed .NET SDK toolchain.

Runs a fixed sequence of requirement checks (SDK present, version, info,
installed SDKs and runtimes, scaffold/restore/build of a throwaway
project) and reports the results as text or as one JSON document.
"""

import argparse
import os
import sys
from typing import Any, Dict, List, Optional

from .checks import CheckResult, parse_version, run_checklist
from .checks.report import exit_code_for, render_human, render_json, summarize
from .checks.toolchain import (
    DEFAULT_MINIMUM_VERSION,
    DEFAULT_PROJECT_EXTENSION,
    DEFAULT_PROJECT_NAME,
    DEFAULT_SDK_COMMAND,
    DEFAULT_TEMPLATE,
    DEFAULT_TIMEOUT,
    ToolchainProbes,
    build_checklist,
    scaffold_workspace,
)
from .utils.config import ConfigError, get_config_value, load_config
from .utils.console import colors_enabled
from .utils.logger import configure_logger

TOOL_NAME = "verify-toolchain"
USAGE_ERROR = 2


def minimum_version_arg(value: str) -> str:
    if parse_version(value) is None:
        raise argparse.ArgumentTypeError(
            f"invalid version '{value}' (expected MAJOR.MINOR[.PATCH])"
        )
    return value


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="verify-toolchain",
        description="Verify the installed .NET SDK toolchain."
    )
    parser.add_argument(
        "--minimum-version",
        type=minimum_version_arg,
        help=f"Minimum SDK version (default: {DEFAULT_MINIMUM_VERSION})"
    )
    parser.add_argument(
        "--exit-on-failure",
        action="store_true",
        help="Exit with status 1 if any check fails"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print results as a single JSON document"
    )
    parser.add_argument("--sdk", help="SDK executable (default: dotnet)")
    parser.add_argument("--debug", action="store_true", help="Verbose logging to stderr")
    return parser.parse_args(argv)


def run_verification(config: Dict[str, Any], minimum_version: str,
                     sdk_command: str) -> List[CheckResult]:
    """Run every toolchain check inside a throwaway workspace."""
    with scaffold_workspace() as workspace:
        probes = ToolchainProbes(
            workspace,
            sdk_command=sdk_command,
            minimum_version=minimum_version,
            template=get_config_value(config, "sdk", "template", default=DEFAULT_TEMPLATE),
            project_name=get_config_value(
                config, "sdk", "project_name", default=DEFAULT_PROJECT_NAME
            ),
            project_extension=get_config_value(
                config, "sdk", "project_extension", default=DEFAULT_PROJECT_EXTENSION
            ),
            timeout=get_config_value(config, "sdk", "timeout", default=DEFAULT_TIMEOUT)
        )
        return run_checklist(build_checklist(probes))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the toolchain verifier."""
    args = parse_args(argv)

    try:
        config = load_config(os.getcwd())
    except ConfigError as e:
        configure_logger(TOOL_NAME, debug=args.debug).error(f"Invalid configuration: {e}")
        return USAGE_ERROR

    logger = configure_logger(
        TOOL_NAME,
        debug=args.debug or get_config_value(config, "debug", default=False),
        log_to_file=get_config_value(config, "log_file", default=True)
    )

    minimum_version = args.minimum_version or get_config_value(
        config, "sdk", "minimum_version", default=DEFAULT_MINIMUM_VERSION
    )
    sdk_command = args.sdk or get_config_value(
        config, "sdk", "command", default=DEFAULT_SDK_COMMAND
    )

    logger.info(f"Toolchain verification started: {sdk_command} >= {minimum_version}")
    results = run_verification(config, minimum_version, sdk_command)
    summary = summarize(results)
    logger.info(
        f"Toolchain verification finished: {summary.passed} passed, "
        f"{summary.failed} failed, {summary.warnings} warnings"
    )

    if args.json_output:
        print(render_json(results))
    else:
        print(render_human(results, summary, color=colors_enabled(sys.stdout)))

    return exit_code_for(summary, args.exit_on_failure)

