"""Accessibility audit: normalize engine results into Issues.

The engine itself is an injected collaborator (an axe-core bridge in the
browser, a fake in tests).  It is asked to run only :data:`BASELINE_RULES`
and must answer with axe-shaped results::

    {"violations": [rule, ...], "incomplete": [rule, ...]}

where each rule carries ``id``, ``impact``, ``help``, ``description``,
``helpUrl`` and ``nodes`` (each with ``target``, ``html``, ``failureSummary``).
Every node of every rule becomes one Issue.
"""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Iterable, Mapping, Protocol, Sequence, Union

from ..models import Category, ElementInfo, Issue, Severity, WcagCriteria
from .document import DocumentAccess
from .fixes import FixTemplates

EngineResults = Mapping[str, Any]


class AccessibilityEngine(Protocol):
    def run(
        self, document: DocumentAccess, rules: Sequence[str]
    ) -> Union[EngineResults, Awaitable[EngineResults]]: ...


BASELINE_RULES: tuple[str, ...] = (
    "image-alt",
    "button-name",
    "link-name",
    "color-contrast",
    "label",
    "html-has-lang",
    "document-title",
    "heading-order",
    "region",
    "aria-valid-attr",
    "aria-required-attr",
    "aria-roles",
    "meta-viewport",
    "tabindex",
    "duplicate-id",
)

RULE_CATEGORIES: dict[str, Category] = {
    "image-alt": Category.IMAGES,
    "button-name": Category.INTERACTIVE,
    "link-name": Category.INTERACTIVE,
    "color-contrast": Category.COLOR,
    "label": Category.FORMS,
    "html-has-lang": Category.DOCUMENT,
    "document-title": Category.DOCUMENT,
    "heading-order": Category.STRUCTURE,
    "region": Category.STRUCTURE,
    "aria-valid-attr": Category.ARIA,
    "aria-required-attr": Category.ARIA,
    "aria-roles": Category.ARIA,
    "meta-viewport": Category.DOCUMENT,
    "tabindex": Category.TECHNICAL,
    "duplicate-id": Category.TECHNICAL,
}

# rule id -> (criterion, level, name)
WCAG_CRITERIA: dict[str, tuple[str, str, str]] = {
    "image-alt": ("1.1.1", "A", "Non-text Content"),
    "button-name": ("4.1.2", "A", "Name, Role, Value"),
    "link-name": ("4.1.2", "A", "Name, Role, Value"),
    "color-contrast": ("1.4.3", "AA", "Contrast (Minimum)"),
    "label": ("1.3.1", "A", "Info and Relationships"),
    "html-has-lang": ("3.1.1", "A", "Language of Page"),
    "document-title": ("2.4.2", "A", "Page Titled"),
    "heading-order": ("1.3.1", "A", "Info and Relationships"),
    "region": ("1.3.1", "A", "Info and Relationships"),
    "aria-valid-attr": ("4.1.2", "A", "Name, Role, Value"),
    "aria-required-attr": ("4.1.2", "A", "Name, Role, Value"),
    "aria-roles": ("4.1.2", "A", "Name, Role, Value"),
    "meta-viewport": ("1.4.4", "AA", "Resize Text"),
    "tabindex": ("2.4.3", "A", "Focus Order"),
    "duplicate-id": ("4.1.1", "A", "Parsing"),
}


def category_for(rule_id: str) -> Category:
    return RULE_CATEGORIES.get(rule_id, Category.TECHNICAL)


def severity_for(impact: Any) -> Severity:
    """Engine impact → Severity; missing or unrecognized impacts are minor."""
    try:
        return Severity(impact or "minor")
    except ValueError:
        return Severity.MINOR


def wcag_for(rule_id: str) -> WcagCriteria:
    entry = WCAG_CRITERIA.get(rule_id)
    if entry is None:
        return WcagCriteria(id="N/A", level="A", name="Unknown", description="Unknown criterion")
    criterion, level, name = entry
    return WcagCriteria(
        id=criterion, level=level, name=name, description=f"WCAG {criterion} - {name}"
    )


def node_selector(target: Any) -> str:
    """First target of an engine node; nested (shadow DOM) targets are space-joined."""
    first = target[0] if isinstance(target, (list, tuple)) and target else target
    if isinstance(first, (list, tuple)) and first:
        return " ".join(str(part) for part in first)
    return str(first) if first else "body"


def transform(
    rules: Iterable[Mapping[str, Any]],
    fixes: FixTemplates,
    ids: Callable[[], str],
) -> list[Issue]:
    issues = []
    for rule in rules:
        rule_id = rule["id"]
        for node in rule.get("nodes", ()):
            element = ElementInfo(
                selector=node_selector(node.get("target")),
                html=node.get("html", ""),
                failure_summary=node.get("failureSummary"),
            )
            issues.append(
                Issue(
                    id=ids(),
                    rule_id=rule_id,
                    severity=severity_for(rule.get("impact")),
                    category=category_for(rule_id),
                    message=rule.get("help", ""),
                    description=rule.get("description", ""),
                    help_url=rule.get("helpUrl", ""),
                    element=element,
                    fix=fixes.generate(rule_id, element),
                    wcag=wcag_for(rule_id),
                )
            )
    return issues


async def audit_accessibility(
    document: DocumentAccess,
    engine: AccessibilityEngine,
    fixes: FixTemplates,
    ids: Callable[[], str],
) -> tuple[list[Issue], list[Issue]]:
    """Run the engine and return ``(issues, incomplete)``.

    Engine exceptions propagate unchanged.
    """
    results = engine.run(document, BASELINE_RULES)
    if inspect.isawaitable(results):
        results = await results
    issues = transform(results.get("violations", ()), fixes, ids)
    incomplete = transform(results.get("incomplete", ()), fixes, ids)
    return issues, incomplete
