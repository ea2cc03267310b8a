"""Rule-check framework for the seo, security, best-practices and pwa kinds.

A check is any callable taking a :class:`CheckContext` and returning an
iterable of :class:`CheckOutcome` (or an awaitable of one).  Checks report
passing outcomes too; only ``passed is False`` outcomes become issues.

Adding a check:
1. Write ``def my_check(context) -> list[CheckOutcome]`` in the kind's module.
2. Register it: ``registry.register(AuditKind.SEO, my_check)``.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional, Union

import httpx

from ..config import AuditConfig
from ..models import Category, ElementInfo, FixSuggestion, Issue, Severity, WcagCriteria
from .document import DocumentAccess
from .kinds import AuditKind


@dataclass(frozen=True)
class CheckOutcome:
    """One rule evaluation.  ``element`` is None for page-level findings."""

    id: str
    severity: Severity
    passed: bool
    message: str
    description: str = ""
    fix: Optional[FixSuggestion] = None
    element: Optional[ElementInfo] = None


@dataclass(frozen=True)
class CheckContext:
    document: DocumentAccess
    http: httpx.AsyncClient
    config: AuditConfig


CheckResult = Union[Iterable[CheckOutcome], Awaitable[Iterable[CheckOutcome]]]
Check = Callable[[CheckContext], CheckResult]


@dataclass(frozen=True)
class KindProfile:
    """How outcomes of one audit kind are presented as issues."""

    id_namespace: str
    category: Category
    help_url: str
    fallback_selector: str
    criteria: WcagCriteria


PROFILES: dict[AuditKind, KindProfile] = {
    AuditKind.SEO: KindProfile(
        id_namespace="seo-issue",
        category=Category.DOCUMENT,
        help_url="https://developers.google.com/search/docs",
        fallback_selector="head",
        criteria=WcagCriteria(
            id="SEO",
            level="AA",
            name="Search Engine Optimization",
            description="SEO best practices for better search visibility",
        ),
    ),
    AuditKind.SECURITY: KindProfile(
        id_namespace="security-issue",
        category=Category.TECHNICAL,
        help_url="https://owasp.org/www-project-web-security-testing-guide/",
        fallback_selector="body",
        criteria=WcagCriteria(
            id="Security",
            level="AA",
            name="Web Security",
            description="Security best practices to protect users and data",
        ),
    ),
    AuditKind.BEST_PRACTICES: KindProfile(
        id_namespace="bp-issue",
        category=Category.TECHNICAL,
        help_url="https://web.dev/learn/",
        fallback_selector="html",
        criteria=WcagCriteria(
            id="Best Practices",
            level="AA",
            name="Web Development Best Practices",
            description="Modern web development standards and best practices",
        ),
    ),
    AuditKind.PWA: KindProfile(
        id_namespace="pwa-issue",
        category=Category.TECHNICAL,
        help_url="https://web.dev/progressive-web-apps/",
        fallback_selector="head",
        criteria=WcagCriteria(
            id="PWA",
            level="AA",
            name="Progressive Web App",
            description="PWA requirements for installability and offline support",
        ),
    ),
}


class CheckRegistry:
    """Ordered check lists per audit kind.

    Usage::

        registry = CheckRegistry.default()
        outcomes = await registry.run(AuditKind.SEO, context)
    """

    def __init__(self) -> None:
        self._checks: dict[AuditKind, list[Check]] = {}

    def register(self, kind: AuditKind, check: Check) -> Check:
        self._checks.setdefault(kind, []).append(check)
        return check

    def checks_for(self, kind: AuditKind) -> list[Check]:
        return list(self._checks.get(kind, ()))

    async def run(self, kind: AuditKind, context: CheckContext) -> list[CheckOutcome]:
        """Call every check for ``kind`` in registration order.

        Exceptions raised by a check propagate unchanged.
        """
        outcomes: list[CheckOutcome] = []
        for check in self.checks_for(kind):
            result = check(context)
            if inspect.isawaitable(result):
                result = await result
            outcomes.extend(result)
        return outcomes

    @classmethod
    def default(cls) -> "CheckRegistry":
        """Registry holding the built-in checks for every rule-check kind."""
        from . import best_practices, pwa, security, seo

        registry = cls()
        for kind, module in (
            (AuditKind.SEO, seo),
            (AuditKind.SECURITY, security),
            (AuditKind.BEST_PRACTICES, best_practices),
            (AuditKind.PWA, pwa),
        ):
            for check in module.CHECKS:
                registry.register(kind, check)
        return registry


def outcome_to_issue(outcome: CheckOutcome, profile: KindProfile, issue_id: str) -> Issue:
    fallback = profile.fallback_selector
    if outcome.element is not None:
        element = ElementInfo(
            selector=outcome.element.selector,
            html=outcome.element.html,
            failure_summary=outcome.element.failure_summary or outcome.message,
        )
    else:
        element = ElementInfo(
            selector=fallback,
            html=f"<{fallback}>...</{fallback}>",
            failure_summary=outcome.message,
        )
    return Issue(
        id=issue_id,
        rule_id=outcome.id,
        severity=outcome.severity,
        category=profile.category,
        message=outcome.message,
        description=outcome.description,
        help_url=profile.help_url,
        element=element,
        fix=outcome.fix or FixSuggestion(description="", code="", learn_more_url=profile.help_url),
        wcag=profile.criteria,
    )


def outcomes_to_issues(
    outcomes: Iterable[CheckOutcome],
    profile: KindProfile,
    ids: Callable[[], str],
) -> list[Issue]:
    """Keep failed outcomes only and normalize them into Issues."""
    return [outcome_to_issue(o, profile, ids()) for o in outcomes if o.passed is False]
