"""
Validation contracts produced by the reflection validator.

Severity ordering drives both the sort order of reported issues and the
approve/reject verdict: any critical issue blocks approval.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class IssueCategory(str, Enum):
    STRUCTURE = "structure"
    BUDGET = "budget"
    TIMING = "timing"
    GEOGRAPHY = "geography"
    DIVERSITY = "diversity"
    QUALITY = "quality"


class IssueSeverity(str, Enum):
    """critical (must fix) > warning (should fix) > suggestion (optional)."""

    CRITICAL = "critical"
    WARNING = "warning"
    SUGGESTION = "suggestion"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    IssueSeverity.CRITICAL: 3,
    IssueSeverity.WARNING: 2,
    IssueSeverity.SUGGESTION: 1,
}


class ValidationIssue(BaseModel):
    """A single problem found in a generated itinerary."""

    category: IssueCategory
    severity: IssueSeverity
    message: str
    suggestion: Optional[str] = None
    day_number: Optional[int] = None
    details: List[str] = Field(default_factory=list)

    def format(self) -> str:
        return f"[{self.severity.value.upper()}] {self.category.value.upper()}: {self.message}"


class ReflectionResult(BaseModel):
    """Aggregated validation verdict for an itinerary."""

    issues: List[ValidationIssue] = Field(default_factory=list)
    approved: bool = True
    critical_count: int = 0
    warning_count: int = 0
    suggestion_count: int = 0

    @classmethod
    def from_issues(cls, issues: List[ValidationIssue]) -> "ReflectionResult":
        """
        Sort issues by severity (stable within a severity) and compute the
        verdict and per-severity counts.
        """
        ordered = sorted(issues, key=lambda issue: issue.severity.rank, reverse=True)
        counts = {severity: 0 for severity in IssueSeverity}
        for issue in ordered:
            counts[issue.severity] += 1
        return cls(
            issues=ordered,
            approved=counts[IssueSeverity.CRITICAL] == 0,
            critical_count=counts[IssueSeverity.CRITICAL],
            warning_count=counts[IssueSeverity.WARNING],
            suggestion_count=counts[IssueSeverity.SUGGESTION],
        )

    def critical_issues(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.CRITICAL]

    def summary(self) -> str:
        return (
            f"approved={self.approved}, critical={self.critical_count}, "
            f"warnings={self.warning_count}, suggestions={self.suggestion_count}"
        )
