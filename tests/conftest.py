"""Shared test fixtures for PageWatch tests."""

import itertools

import pytest

from pagewatch.models import Category, ElementInfo, FixSuggestion, Issue, ScanResult, Severity
from pagewatch.runtime import ManualClock
from pagewatch.storage import MemoryStore


def make_issue(
    selector: str = "#hero img",
    rule_id: str = "image-alt",
    severity=Severity.SERIOUS,
    category=Category.IMAGES,
    issue_id: str = "issue-1",
    **kwargs,
) -> Issue:
    defaults = {
        "message": "Images must have alternate text",
        "description": "Ensures <img> elements have alternate text",
        "help_url": "https://dequeuniversity.com/rules/axe/4.4/image-alt",
        "element": ElementInfo(selector=selector, html="<img>"),
        "fix": FixSuggestion("Add alt text", '<img alt="">', "https://webaim.org/"),
    }
    defaults.update(kwargs)
    return Issue(id=issue_id, rule_id=rule_id, severity=severity, category=category, **defaults)


def make_result(
    issues=(),
    url: str = "https://example.com/page",
    timestamp: int = 1_700_000_000_000,
    duration: float = 120.0,
    incomplete=(),
) -> ScanResult:
    return ScanResult.create(url, timestamp, duration, issues, incomplete)


@pytest.fixture
def clock():
    """Manual clock pinned to 2023-11-14T22:13:20Z."""
    return ManualClock()


@pytest.fixture
def counter():
    """Private id sequence so generated ids are deterministic."""
    return itertools.count(1)


@pytest.fixture
def store():
    """Empty in-memory key-value store."""
    return MemoryStore()


@pytest.fixture
def issue():
    return make_issue()


@pytest.fixture
def critical_issues():
    """Ten critical issues on distinct elements."""
    return [
        make_issue(selector=f"#btn-{i}", rule_id="button-name", severity=Severity.CRITICAL,
                   category=Category.INTERACTIVE, issue_id=f"issue-{i}")
        for i in range(10)
    ]
