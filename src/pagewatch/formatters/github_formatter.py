"""GitHub formatter: a task-list issue body."""

from typing import Sequence

from ..collector import AuditKind
from ..models import Issue, ScanResult
from .base import AUDIT_LABELS, BaseFormatter, wcag_label


class GithubFormatter(BaseFormatter):
    """Checklist Markdown for pasting into a GitHub issue or PR comment."""

    def format(self, result: ScanResult, issues: Sequence[Issue], kind: AuditKind) -> str:
        lines = [
            f"## {AUDIT_LABELS[kind]} Issues Found",
            "",
            f"**URL:** {result.url}",
            f"**Total Issues:** {len(issues)}",
            "",
        ]
        for issue in issues:
            lines += [
                f"- [ ] **[{issue.severity.value.upper()}]** {issue.message}",
                f"  - WCAG {wcag_label(issue)}",
                f"  - Selector: `{issue.selector}`",
                f"  - Fix: {issue.fix.description}",
            ]
        return "\n".join(lines) + "\n"
