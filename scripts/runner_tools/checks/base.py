"""Base types for requirement checks."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


class CheckStatus(str, Enum):
    PASS = "Pass"
    FAIL = "Fail"


class Severity(str, Enum):
    NONE = "None"
    WARNING = "Warning"
    ERROR = "Error"


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a single requirement check."""
    name: str
    status: CheckStatus
    expected: str
    actual: str
    severity: Severity = Severity.NONE

    @property
    def passed(self) -> bool:
        return self.status is CheckStatus.PASS

    def to_dict(self) -> dict[str, Any]:
        """Record shape used by the structured report."""
        return {
            "name": self.name,
            "status": self.status.value,
            "expected": self.expected,
            "actual": self.actual,
            "severity": self.severity.value,
        }


@dataclass
class CheckSpec:
    """A named probe plus the text reported for each outcome."""
    name: str
    probe: Callable[[], bool]
    expected: str
    failure: str
    success: str | Callable[[], str] | None = None
    severity: Severity = Severity.ERROR
