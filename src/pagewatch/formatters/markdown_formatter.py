"""Markdown report: metadata, a severity summary table, then every issue in full."""

from typing import Sequence

from ..collector import AuditKind
from ..models import Issue, ScanResult, Severity, summarize
from .base import AUDIT_LABELS, BaseFormatter, format_timestamp


class MarkdownFormatter(BaseFormatter):
    """Standalone Markdown document, suitable for saving or pasting into a wiki."""

    def format(self, result: ScanResult, issues: Sequence[Issue], kind: AuditKind) -> str:
        counts = summarize(issues).by_severity
        lines = [
            f"# {AUDIT_LABELS[kind]} Audit Report",
            "",
            f"**URL:** {result.url}",
            f"**Date:** {format_timestamp(result.timestamp)}",
            f"**Total Issues:** {len(issues)}",
            f"**Scan Duration:** {result.duration:.0f}ms",
            "",
            "## Summary",
            "",
            "| Severity | Count |",
            "|----------|-------|",
        ]
        lines += [f"| {s.value.capitalize()} | {counts[s]} |" for s in Severity]
        lines += ["", "## Issues", ""]
        for i, issue in enumerate(issues, start=1):
            lines += self._issue(i, issue)
        return "\n".join(lines) + "\n"

    def _issue(self, index: int, issue: Issue) -> list[str]:
        lines = [f"### {index}. [{issue.severity.value.upper()}] {issue.message}", ""]
        if issue.wcag is not None:
            lines.append(
                f"**WCAG:** {issue.wcag.id} - {issue.wcag.name} (Level {issue.wcag.level})"
            )
        lines += [
            f"**Category:** {issue.category.value}",
            "",
            issue.description,
            "",
            "```html",
            issue.element.html,
            "```",
            "",
            f"**Selector:** `{issue.selector}`",
            "",
            "#### How to Fix",
            "",
            issue.fix.description,
            "",
        ]
        if issue.fix.code:
            lines += ["```html", issue.fix.code, "```", ""]
        if issue.help_url:
            lines += [f"**Learn More:** {issue.help_url}", ""]
        return lines
