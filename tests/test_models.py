"""Tests for the issue model, summaries and ID generation."""

import itertools

import pytest

from pagewatch.exceptions import InvalidIssueError
from pagewatch.models import (
    Category,
    Issue,
    ScanResult,
    ScanSummary,
    Severity,
    WcagCriteria,
    summarize,
)
from pagewatch.runtime import IdGenerator, ManualClock

from conftest import make_issue, make_result


class TestSeverity:
    def test_weights(self):
        assert Severity.CRITICAL.weight == 10
        assert Severity.SERIOUS.weight == 5
        assert Severity.MODERATE.weight == 2
        assert Severity.MINOR.weight == 1

    def test_strictly_ordered(self):
        weights = [s.weight for s in Severity]
        assert weights == sorted(weights, reverse=True)


class TestIssue:
    def test_hash_is_selector_and_rule(self, issue):
        assert issue.hash == "#hero img::image-alt"

    def test_strings_are_coerced(self):
        issue = make_issue(severity="critical", category="forms")
        assert issue.severity is Severity.CRITICAL
        assert issue.category is Category.FORMS

    def test_unknown_severity_rejected(self):
        with pytest.raises(InvalidIssueError) as exc_info:
            make_issue(severity="blocker")
        assert "blocker" in str(exc_info.value)

    def test_unknown_category_rejected(self):
        with pytest.raises(InvalidIssueError):
            make_issue(category="layout")

    def test_frozen(self, issue):
        with pytest.raises(AttributeError):
            issue.rule_id = "label"

    def test_dict_uses_camel_case(self, issue):
        data = issue.to_dict()
        assert data["ruleId"] == "image-alt"
        assert data["helpUrl"].endswith("image-alt")
        assert data["fix"]["learnMoreUrl"] == "https://webaim.org/"
        assert "wcag" not in data

    def test_from_dict_restores_wcag(self):
        wcag = WcagCriteria("1.1.1", "A", "Non-text Content", "WCAG 1.1.1 - Non-text Content")
        issue = make_issue(wcag=wcag)
        restored = Issue.from_dict(issue.to_dict())
        assert restored == issue


class TestSummary:
    def test_every_member_present_when_empty(self):
        summary = summarize([])
        assert summary.total == 0
        assert set(summary.by_severity) == set(Severity)
        assert set(summary.by_category) == set(Category)
        assert summary == ScanSummary.empty()

    def test_counts_are_consistent(self):
        issues = [
            make_issue(severity=Severity.CRITICAL, category=Category.IMAGES),
            make_issue(severity=Severity.CRITICAL, category=Category.FORMS),
            make_issue(severity=Severity.MINOR, category=Category.FORMS),
        ]
        summary = summarize(issues)
        assert summary.total == 3
        assert sum(summary.by_severity.values()) == 3
        assert sum(summary.by_category.values()) == 3
        assert summary.by_severity[Severity.CRITICAL] == 2
        assert summary.by_category[Category.FORMS] == 2

    def test_direct_scan_result_summarizes_its_issues(self):
        issues = [make_issue(), make_issue(selector="#b")]
        result = ScanResult(url="https://shop.example/", timestamp=1, duration=1.0, issues=issues)
        assert result.summary.total == 2
        assert result.summary == summarize(issues)

    def test_dict_keys_are_enum_values(self):
        data = summarize([make_issue()]).to_dict()
        assert data["bySeverity"]["serious"] == 1
        assert data["byCategory"]["images"] == 1


class TestScanResult:
    def test_incomplete_not_counted(self):
        result = make_result(issues=[make_issue()], incomplete=[make_issue(issue_id="issue-2")])
        assert result.summary.total == 1
        assert len(result.incomplete) == 1

    def test_issues_stored_as_tuple(self):
        result = make_result(issues=[make_issue()])
        assert isinstance(result.issues, tuple)

    def test_dict_round_trip(self):
        result = make_result(issues=[make_issue()])
        assert ScanResult.from_dict(result.to_dict()) == result


class TestIdGenerator:
    def test_format(self):
        ids = IdGenerator("perf-issue", ManualClock(), itertools.count(7))
        assert ids() == "perf-issue-1700000000000-7"

    def test_unique_within_same_millisecond(self):
        clock = ManualClock()
        counter = itertools.count(1)
        first = IdGenerator("issue", clock, counter)
        second = IdGenerator("issue", clock, counter)
        produced = {first() for _ in range(50)} | {second() for _ in range(50)}
        assert len(produced) == 100

    def test_default_sequence_is_shared(self):
        clock = ManualClock()
        a, b = IdGenerator("issue", clock), IdGenerator("issue", clock)
        assert a() != b()
