"""Data models for scan comparison."""

from dataclasses import dataclass, field

from ..models import Issue, Severity
from .models import ScanHistoryEntry


@dataclass(frozen=True)
class ScanDiff:
    """Signed count changes, current minus previous (negative = improvement)."""

    total_diff: int
    by_severity: dict[Severity, int]

    def to_dict(self) -> dict[str, object]:
        return {
            "totalDiff": self.total_diff,
            "bySeverity": {s.value: self.by_severity.get(s, 0) for s in Severity},
        }


@dataclass(frozen=True)
class ScanComparison:
    """Structural comparison between two scans of the same page."""

    current: ScanHistoryEntry
    previous: ScanHistoryEntry
    diff: ScanDiff
    fixed_issues: list[Issue] = field(default_factory=list)  # in previous only
    new_issues: list[Issue] = field(default_factory=list)  # in current only
    unchanged_count: int = 0

    @property
    def improved(self) -> bool:
        return self.diff.total_diff < 0

    def to_dict(self) -> dict[str, object]:
        return {
            "current": self.current.to_dict(),
            "previous": self.previous.to_dict(),
            "diff": self.diff.to_dict(),
            "fixedIssues": [i.to_dict() for i in self.fixed_issues],
            "newIssues": [i.to_dict() for i in self.new_issues],
            "unchangedCount": self.unchanged_count,
        }
