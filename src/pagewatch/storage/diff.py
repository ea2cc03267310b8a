"""Diff engine: compares two scans of the same page.

The comparison is a pure set difference over issue content addresses
(``selector::ruleId``).  There is no fuzzy or positional matching: an issue
whose message changed but whose selector and rule did not is unchanged.
"""

from __future__ import annotations

from typing import Union

from ..models import Issue, ScanResult, Severity
from .diff_models import ScanComparison, ScanDiff
from .identity import issue_hash
from .models import ScanHistoryEntry

CURRENT_ENTRY_ID = "current"


def _hash(issue: Issue) -> str:
    return issue_hash(issue.element.selector, issue.rule_id)


def _as_entry(scan: Union[ScanResult, ScanHistoryEntry]) -> ScanHistoryEntry:
    """Wrap a fresh ScanResult as an unsaved history entry."""
    if isinstance(scan, ScanHistoryEntry):
        return scan
    return ScanHistoryEntry.from_result(CURRENT_ENTRY_ID, scan, ("accessibility",))


def compare(
    current: Union[ScanResult, ScanHistoryEntry],
    previous: ScanHistoryEntry,
) -> ScanComparison:
    """Compute fixed/new issues and per-severity count deltas.

    Args:
        current: The latest scan, saved or not.
        previous: An earlier saved scan of the same page.

    Returns:
        A ScanComparison; ``fixed_issues`` and ``new_issues`` keep the order
        of their source scan.
    """
    current_entry = _as_entry(current)

    current_hashes = {_hash(i) for i in current_entry.issues}
    previous_hashes = {_hash(i) for i in previous.issues}

    fixed = [i for i in previous.issues if _hash(i) not in current_hashes]
    new = [i for i in current_entry.issues if _hash(i) not in previous_hashes]

    by_severity = {
        s: current_entry.summary.by_severity.get(s, 0) - previous.summary.by_severity.get(s, 0)
        for s in Severity
    }

    return ScanComparison(
        current=current_entry,
        previous=previous,
        diff=ScanDiff(
            total_diff=current_entry.issue_count - previous.issue_count,
            by_severity=by_severity,
        ),
        fixed_issues=fixed,
        new_issues=new,
        unchanged_count=len(current_hashes & previous_hashes),
    )
