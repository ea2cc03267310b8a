"""CSV formatter: one row per issue."""

import csv
import io
from typing import Sequence

from ..collector import AuditKind
from ..models import Issue, ScanResult
from .base import BaseFormatter

HEADERS = [
    "Severity",
    "Category",
    "Rule ID",
    "Message",
    "WCAG Criterion",
    "WCAG Level",
    "Element Selector",
    "HTML",
    "Fix Description",
    "Learn More URL",
]


class CsvFormatter(BaseFormatter):
    """Render issues as CSV."""

    def format(self, result: ScanResult, issues: Sequence[Issue], kind: AuditKind) -> str:
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(HEADERS)
        for issue in issues:
            wcag = issue.wcag
            writer.writerow([
                issue.severity.value,
                issue.category.value,
                issue.rule_id,
                issue.message,
                f"{wcag.id} - {wcag.name}" if wcag else "",
                wcag.level if wcag else "",
                issue.selector,
                issue.element.html,
                issue.fix.description,
                issue.help_url,
            ])
        return output.getvalue()
