"""Requirement checks for the toolchain verifier."""

from typing import Callable, Iterable, List

from .base import CheckResult, CheckSpec, CheckStatus, Severity
from .command import CommandResult, run_command, tool_path
from .version import parse_version, version_at_least
from ..utils.logger import get_logger


def run_check(name: str, probe: Callable[[], bool], expected: str,
              failure: str, success: str | Callable[[], str] | None = None,
              severity: Severity = Severity.ERROR) -> CheckResult:
    """
    Run one probe and wrap its outcome in a CheckResult.

    Args:
        name: Label of the check
        probe: Zero-argument callable returning True on success
        expected: Description of the success condition
        failure: Text reported when the probe returns False
        success: Text (or callable producing it) reported on success;
            defaults to expected
        severity: Severity recorded on failure

    Returns:
        CheckResult; exceptions raised by the probe become a failed result
    """
    try:
        ok = probe()
    except Exception as e:
        return CheckResult(
            name=name,
            status=CheckStatus.FAIL,
            expected=expected,
            actual=f"Error: {str(e)}",
            severity=severity
        )

    if not ok:
        return CheckResult(
            name=name,
            status=CheckStatus.FAIL,
            expected=expected,
            actual=failure,
            severity=severity
        )

    return CheckResult(
        name=name,
        status=CheckStatus.PASS,
        expected=expected,
        actual=_success_text(name, success) or expected,
        severity=Severity.NONE
    )


def _success_text(name: str,
                  success: str | Callable[[], str] | None) -> str | None:
    """Text shown for a passing check; None falls back to the expected text."""
    if not callable(success):
        return success
    try:
        return success()
    except Exception as e:
        get_logger().warning(f"{name}: could not describe result: {e}")
        return None


def run_checklist(specs: Iterable[CheckSpec]) -> List[CheckResult]:
    """Run checks one after another, in order."""
    logger = get_logger()
    results = []

    for spec in specs:
        logger.debug(f"Running check: {spec.name}")
        result = run_check(
            spec.name,
            spec.probe,
            spec.expected,
            spec.failure,
            success=spec.success,
            severity=spec.severity
        )

        if result.passed:
            logger.info(f"✓ {result.name}: {result.actual}")
        else:
            logger.warning(f"✗ {result.name}: {result.actual}")
        results.append(result)

    return results


__all__ = [
    'CheckResult',
    'CheckSpec',
    'CheckStatus',
    'Severity',
    'CommandResult',
    'run_check',
    'run_checklist',
    'run_command',
    'tool_path',
    'parse_version',
    'version_at_least',
]
