"""Default best-practice checks: doctype, charset, deprecated markup, duplicate ids."""

from __future__ import annotations

from collections import Counter

from ..models import FixSuggestion, Severity
from .checks import CheckContext, CheckOutcome
from .selectors import node_element

DEPRECATED_ELEMENTS = (
    "acronym",
    "applet",
    "basefont",
    "big",
    "center",
    "dir",
    "font",
    "frame",
    "frameset",
    "noframes",
    "strike",
    "tt",
    "marquee",
    "blink",
)

_LEARN_MORE: tuple[tuple[str, str], ...] = (
    ("doctype", "https://developer.mozilla.org/en-US/docs/Glossary/Doctype"),
    ("charset", "https://developer.mozilla.org/en-US/docs/Web/HTML/Element/meta#attr-charset"),
    (
        "deprecated",
        "https://developer.mozilla.org/en-US/docs/Web/HTML/Element#obsolete_and_deprecated_elements",
    ),
    ("duplicate-ids", "https://web.dev/duplicate-id/"),
)


def _fix(check_id: str, description: str, code: str) -> FixSuggestion:
    url = next(
        (url for fragment, url in _LEARN_MORE if fragment in check_id), "https://web.dev/learn/"
    )
    return FixSuggestion(description=description, code=code, learn_more_url=url)


def check_doctype(context: CheckContext) -> list[CheckOutcome]:
    doctype = context.document.doctype

    if doctype is None:
        return [
            CheckOutcome(
                id="doctype-missing",
                severity=Severity.SERIOUS,
                passed=False,
                message="Page is missing a DOCTYPE declaration",
                description=(
                    "A DOCTYPE declaration is required for the browser to render the page in "
                    "standards mode."
                ),
                fix=_fix(
                    "doctype-missing",
                    "Add a DOCTYPE declaration at the very beginning of your HTML document.",
                    '<!DOCTYPE html>\n<html lang="en">\n<head>\n  <!-- head content -->\n</head>',
                ),
            )
        ]

    if doctype != "html":
        return [
            CheckOutcome(
                id="doctype-invalid",
                severity=Severity.MODERATE,
                passed=False,
                message=f'DOCTYPE is "{doctype}", should be "html"',
                description="Use the HTML5 DOCTYPE for modern web standards.",
                fix=_fix("doctype-invalid", "Use the HTML5 DOCTYPE declaration.", "<!DOCTYPE html>"),
            )
        ]

    return [CheckOutcome("doctype-ok", Severity.MINOR, True, "DOCTYPE is present and valid")]


def check_charset(context: CheckContext) -> list[CheckOutcome]:
    document = context.document
    declared = document.select_one("meta[charset]") or document.select_one(
        'meta[http-equiv="Content-Type" i]'
    )
    if declared is not None:
        return [CheckOutcome("charset-ok", Severity.MINOR, True, "Character encoding is declared")]

    return [
        CheckOutcome(
            id="charset-missing",
            severity=Severity.SERIOUS,
            passed=False,
            message="Page is missing character encoding declaration",
            description=(
                "Always declare the character encoding to prevent encoding issues and security "
                "vulnerabilities."
            ),
            fix=_fix(
                "charset-missing",
                "Add a meta charset tag in the <head> section.",
                '<meta charset="UTF-8">',
            ),
        )
    ]


def check_deprecated_elements(context: CheckContext) -> list[CheckOutcome]:
    document = context.document
    found = []
    for tag in DEPRECATED_ELEMENTS:
        count = document.count(tag)
        if count:
            found.append(f"{tag} ({count})")
    if not found:
        return []

    first = document.select_one(", ".join(DEPRECATED_ELEMENTS))
    return [
        CheckOutcome(
            id="deprecated-elements",
            severity=Severity.MODERATE,
            passed=False,
            message=f"Found deprecated elements: {', '.join(found)}",
            description="Deprecated HTML elements should be replaced with modern alternatives.",
            fix=_fix(
                "deprecated-elements",
                "Replace deprecated elements with modern HTML5 elements.",
                "<!-- Replace <center> with CSS -->\n"
                '<div style="text-align: center;">Content</div>\n\n'
                "<!-- Replace <font> with CSS -->\n"
                '<span style="font-family: Arial;">Text</span>',
            ),
            element=node_element(document, first) if first is not None else None,
        )
    ]


def check_duplicate_ids(context: CheckContext) -> list[CheckOutcome]:
    document = context.document
    counts = Counter(node.get("id") for node in document.select("[id]"))
    duplicates = [(node_id, n) for node_id, n in counts.items() if node_id and n > 1]
    if not duplicates:
        return [CheckOutcome("duplicate-ids-ok", Severity.MINOR, True, "No duplicate IDs found")]

    listing = ", ".join(f'"{node_id}" ({n}x)' for node_id, n in duplicates)
    first = next(
        node for node in document.select("[id]") if node.get("id") == duplicates[0][0]
    )
    return [
        CheckOutcome(
            id="duplicate-ids",
            severity=Severity.SERIOUS,
            passed=False,
            message=f"Found duplicate IDs: {listing}",
            description="Duplicate IDs are invalid HTML and can cause JavaScript and CSS issues.",
            fix=_fix(
                "duplicate-ids",
                "Ensure all IDs are unique on the page.",
                '<!-- Change duplicate IDs to classes -->\n<div id="unique-id-1"></div>\n'
                '<div id="unique-id-2"></div>',
            ),
            element=node_element(document, first),
        )
    ]


CHECKS = (check_doctype, check_charset, check_deprecated_elements, check_duplicate_ids)
