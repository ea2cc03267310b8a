"""Data models for audit results: the vocabulary every component shares.

All records are frozen dataclasses.  A finding that reappears in a later scan
is a new ``Issue`` with the same ``(selector, rule_id)`` content address, never
a mutated copy of the old one.

Persisted form uses the camelCase keys of the storage records
(``ruleId``, ``helpUrl``, ``bySeverity`` ...) so history written by one
version stays readable by the next.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from .exceptions import InvalidIssueError


class Severity(str, Enum):
    """Issue severity, ordered from most to least severe."""

    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"

    @property
    def weight(self) -> int:
        return SEVERITY_WEIGHTS[self]


SEVERITY_WEIGHTS: dict[Severity, int] = {
    Severity.CRITICAL: 10,
    Severity.SERIOUS: 5,
    Severity.MODERATE: 2,
    Severity.MINOR: 1,
}


class Category(str, Enum):
    IMAGES = "images"
    INTERACTIVE = "interactive"
    FORMS = "forms"
    COLOR = "color"
    DOCUMENT = "document"
    STRUCTURE = "structure"
    ARIA = "aria"
    TECHNICAL = "technical"


def _coerce(enum_cls, value: Any, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidIssueError(field_name, value, [m.value for m in enum_cls]) from None


def coerce_severity(value: Any) -> Severity:
    return _coerce(Severity, value, "severity")


def coerce_category(value: Any) -> Category:
    return _coerce(Category, value, "category")


@dataclass(frozen=True)
class ElementInfo:
    """Where on the page an issue lives."""

    selector: str
    html: str
    failure_summary: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"selector": self.selector, "html": self.html}
        if self.failure_summary is not None:
            data["failureSummary"] = self.failure_summary
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ElementInfo":
        return cls(
            selector=data.get("selector", "body"),
            html=data.get("html", ""),
            failure_summary=data.get("failureSummary"),
        )


@dataclass(frozen=True)
class FixSuggestion:
    description: str
    code: str
    learn_more_url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "code": self.code,
            "learnMoreUrl": self.learn_more_url,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FixSuggestion":
        return cls(
            description=data.get("description", ""),
            code=data.get("code", ""),
            learn_more_url=data.get("learnMoreUrl", ""),
        )


@dataclass(frozen=True)
class WcagCriteria:
    """WCAG success criterion an issue maps to (or a pseudo-criterion for
    non-accessibility audits, e.g. ``id="Performance"``)."""

    id: str
    level: str
    name: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "level": self.level,
            "name": self.name,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WcagCriteria":
        return cls(
            id=data.get("id", "N/A"),
            level=data.get("level", "A"),
            name=data.get("name", "Unknown"),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class Issue:
    """One normalized audit finding."""

    id: str
    rule_id: str
    severity: Severity
    category: Category
    message: str
    description: str
    help_url: str
    element: ElementInfo
    fix: FixSuggestion
    wcag: Optional[WcagCriteria] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "severity", coerce_severity(self.severity))
        object.__setattr__(self, "category", coerce_category(self.category))

    @property
    def selector(self) -> str:
        return self.element.selector

    @property
    def hash(self) -> str:
        """Content address: ``selector::ruleId``."""
        return f"{self.element.selector}::{self.rule_id}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "ruleId": self.rule_id,
            "severity": self.severity.value,
            "category": self.category.value,
            "message": self.message,
            "description": self.description,
            "helpUrl": self.help_url,
            "element": self.element.to_dict(),
            "fix": self.fix.to_dict(),
        }
        if self.wcag is not None:
            data["wcag"] = self.wcag.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Issue":
        wcag = data.get("wcag")
        return cls(
            id=data["id"],
            rule_id=data["ruleId"],
            severity=data["severity"],
            category=data["category"],
            message=data.get("message", ""),
            description=data.get("description", ""),
            help_url=data.get("helpUrl", ""),
            element=ElementInfo.from_dict(data.get("element") or {}),
            fix=FixSuggestion.from_dict(data.get("fix") or {}),
            wcag=WcagCriteria.from_dict(wcag) if wcag else None,
        )


@dataclass(frozen=True)
class ScanSummary:
    """Issue counts for one scan.

    ``by_severity`` and ``by_category`` always hold every enum member.
    """

    total: int
    by_severity: dict[Severity, int]
    by_category: dict[Category, int]

    @classmethod
    def empty(cls) -> "ScanSummary":
        return cls(
            total=0,
            by_severity={s: 0 for s in Severity},
            by_category={c: 0 for c in Category},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "bySeverity": {s.value: self.by_severity.get(s, 0) for s in Severity},
            "byCategory": {c.value: self.by_category.get(c, 0) for c in Category},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScanSummary":
        by_severity = data.get("bySeverity") or {}
        by_category = data.get("byCategory") or {}
        return cls(
            total=int(data.get("total", 0)),
            by_severity={s: int(by_severity.get(s.value, 0)) for s in Severity},
            by_category={c: int(by_category.get(c.value, 0)) for c in Category},
        )


def summarize(issues: Iterable[Issue]) -> ScanSummary:
    """Count issues per severity and per category."""
    by_severity = {s: 0 for s in Severity}
    by_category = {c: 0 for c in Category}
    total = 0
    for issue in issues:
        by_severity[issue.severity] += 1
        by_category[issue.category] += 1
        total += 1
    return ScanSummary(total=total, by_severity=by_severity, by_category=by_category)


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one audit invocation.

    ``incomplete`` holds findings the underlying check could not resolve; they
    are never counted in ``summary``, which is always derived from ``issues``.
    """

    url: str
    timestamp: int  # epoch ms
    duration: float  # ms
    issues: tuple[Issue, ...] = ()
    incomplete: tuple[Issue, ...] = ()
    summary: ScanSummary = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "issues", tuple(self.issues))
        object.__setattr__(self, "incomplete", tuple(self.incomplete))
        object.__setattr__(self, "summary", summarize(self.issues))

    @classmethod
    def create(
        cls,
        url: str,
        timestamp: int,
        duration: float,
        issues: Iterable[Issue],
        incomplete: Iterable[Issue] = (),
    ) -> "ScanResult":
        return cls(
            url=url,
            timestamp=timestamp,
            duration=duration,
            issues=tuple(issues),
            incomplete=tuple(incomplete),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "timestamp": self.timestamp,
            "duration": self.duration,
            "issues": [i.to_dict() for i in self.issues],
            "incomplete": [i.to_dict() for i in self.incomplete],
            "summary": self.summary.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScanResult":
        return cls(
            url=data["url"],
            timestamp=int(data["timestamp"]),
            duration=float(data.get("duration", 0.0)),
            issues=tuple(Issue.from_dict(i) for i in data.get("issues", [])),
            incomplete=tuple(Issue.from_dict(i) for i in data.get("incomplete", [])),
        )
