"""Base formatter interface for exported audit reports."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Sequence

from ..collector import AuditKind
from ..models import Issue, ScanResult

AUDIT_LABELS = {
    AuditKind.ACCESSIBILITY: "Accessibility",
    AuditKind.PERFORMANCE: "Performance",
    AuditKind.SEO: "SEO",
    AuditKind.SECURITY: "Security",
    AuditKind.BEST_PRACTICES: "Best Practices",
    AuditKind.PWA: "PWA",
}


class BaseFormatter(ABC):
    """Abstract base class for report formatters.

    ``issues`` is the list to report, usually the scan's issues minus the
    ignored ones; ``result`` supplies the page metadata.
    """

    @abstractmethod
    def format(self, result: ScanResult, issues: Sequence[Issue], kind: AuditKind) -> str:
        """Return the report text, ending with a newline."""


def format_timestamp(timestamp: int) -> str:
    """Epoch milliseconds as ``YYYY-MM-DD HH:MM UTC``."""
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def wcag_label(issue: Issue) -> str:
    if issue.wcag is None:
        return "N/A"
    return f"{issue.wcag.id} ({issue.wcag.level})"
