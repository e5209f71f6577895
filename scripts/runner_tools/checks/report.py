"""Aggregate check results and render them for people or machines."""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

from .base import CheckResult, Severity
from ..utils.console import green, red, yellow, cyan


@dataclass
class Summary:
    """Counts over one run of checks."""
    passed: int
    failed: int
    warnings: int
    total: int

    @property
    def all_passed(self) -> bool:
        return self.failed == 0


def summarize(results: Sequence[CheckResult]) -> Summary:
    passed = sum(1 for r in results if r.passed)
    warnings = sum(
        1 for r in results
        if not r.passed and r.severity is Severity.WARNING
    )
    return Summary(
        passed=passed,
        failed=len(results) - passed,
        warnings=warnings,
        total=len(results)
    )


def build_document(results: Sequence[CheckResult],
                   timestamp: datetime | None = None) -> Dict[str, Any]:
    """
    Build the structured report.

    Args:
        results: Check results in execution order
        timestamp: Report time; defaults to now (UTC)

    Returns:
        Dict with timestamp, checks and the four counts
    """
    summary = summarize(results)
    timestamp = timestamp or datetime.now(timezone.utc)
    return {
        "timestamp": timestamp.isoformat(),
        "checks": [r.to_dict() for r in results],
        "passed": summary.passed,
        "failed": summary.failed,
        "warnings": summary.warnings,
        "totalChecks": summary.total,
    }


def render_json(results: Sequence[CheckResult],
                timestamp: datetime | None = None) -> str:
    return json.dumps(build_document(results, timestamp), indent=2)


def _marker(result: CheckResult, color: bool) -> str:
    if result.passed:
        return green("✓", color)
    if result.severity is Severity.WARNING:
        return yellow("⚠", color)
    return red("✗", color)


def render_human(results: Sequence[CheckResult], summary: Summary,
                 color: bool = True) -> str:
    """Render one line per check followed by a summary block."""
    lines: List[str] = [cyan("=== Toolchain Verification ===", color), ""]

    for result in results:
        lines.append(f"{_marker(result, color)} {result.name}: {result.actual}")

    lines.extend([
        "",
        cyan("=== Summary ===", color),
        f"Passed:   {summary.passed}",
        f"Failed:   {summary.failed}",
        f"Warnings: {summary.warnings}",
        f"Total:    {summary.total}",
        "",
    ])

    if summary.all_passed:
        lines.append(green("✓ All checks passed", color))
    else:
        lines.append(red(f"✗ {summary.failed} of {summary.total} checks failed", color))

    return "\n".join(lines)


def exit_code_for(summary: Summary, exit_on_failure: bool) -> int:
    """Exit code 1 only when asked to fail and something failed."""
    if exit_on_failure and summary.failed > 0:
        return 1
    return 0
