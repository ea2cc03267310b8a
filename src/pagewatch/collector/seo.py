"""Default SEO checks: title, meta description, language, H1 and canonical URL."""

from __future__ import annotations

from ..models import FixSuggestion, Severity
from .checks import CheckContext, CheckOutcome
from .selectors import node_element

TITLE_LENGTH = (30, 60)
DESCRIPTION_LENGTH = (120, 160)

_LEARN_MORE: tuple[tuple[str, str], ...] = (
    ("title", "https://developers.google.com/search/docs/appearance/title-link"),
    ("meta-description", "https://developers.google.com/search/docs/appearance/snippet"),
    ("lang", "https://developers.google.com/search/docs/specialty/international/localized-versions"),
    ("h1", "https://developers.google.com/search/docs/appearance/structured-data/intro-structured-data"),
    ("canonical", "https://developers.google.com/search/docs/crawling-indexing/consolidate-duplicate-urls"),
)


def _fix(check_id: str, description: str, code: str) -> FixSuggestion:
    url = next(
        (url for fragment, url in _LEARN_MORE if fragment in check_id),
        "https://developers.google.com/search/docs",
    )
    return FixSuggestion(description=description, code=code, learn_more_url=url)


def check_title(context: CheckContext) -> list[CheckOutcome]:
    title = context.document.select_one("title")
    text = title.get_text().strip() if title is not None else ""

    if not text:
        return [
            CheckOutcome(
                id="title-missing",
                severity=Severity.CRITICAL,
                passed=False,
                message="Page is missing a title tag",
                description=(
                    "Every page should have a unique, descriptive title tag for SEO and "
                    "accessibility."
                ),
                fix=_fix(
                    "title-missing",
                    "Add a descriptive title tag within the <head> section.",
                    "<title>Your Page Title Here (50-60 characters)</title>",
                ),
            )
        ]

    low, high = TITLE_LENGTH
    if not low <= len(text) <= high:
        return [
            CheckOutcome(
                id="title-length",
                severity=Severity.MODERATE,
                passed=False,
                message=f"Title length is {len(text)} characters (recommended: {low}-{high})",
                description=(
                    f"Page titles should be between {low}-{high} characters for optimal display in "
                    "search results."
                ),
                fix=_fix(
                    "title-length",
                    f"Adjust your title to be between {low}-{high} characters for better SEO.",
                    f"<title>{text[:60]}...</title>",
                ),
                element=node_element(context.document, title),
            )
        ]

    return [CheckOutcome("title-ok", Severity.MINOR, True, "Page title is present and optimal")]


def check_meta_description(context: CheckContext) -> list[CheckOutcome]:
    meta = context.document.select_one('meta[name="description"]')
    content = (meta.get("content") or "").strip() if meta is not None else ""

    if not content:
        return [
            CheckOutcome(
                id="meta-description-missing",
                severity=Severity.SERIOUS,
                passed=False,
                message="Page is missing a meta description",
                description=(
                    "Meta descriptions help search engines understand your page content and "
                    "improve click-through rates."
                ),
                fix=_fix(
                    "meta-description-missing",
                    "Add a meta description tag within the <head> section.",
                    '<meta name="description" content="A compelling description of your page '
                    'content (150-160 characters)">',
                ),
            )
        ]

    low, high = DESCRIPTION_LENGTH
    if not low <= len(content) <= high:
        return [
            CheckOutcome(
                id="meta-description-length",
                severity=Severity.MODERATE,
                passed=False,
                message=f"Meta description is {len(content)} characters (recommended: {low}-{high})",
                description=(
                    f"Meta descriptions should be between {low}-{high} characters for optimal display "
                    "in search results."
                ),
                fix=_fix(
                    "meta-description-length",
                    f"Adjust your meta description to be between {low}-{high} characters.",
                    f'<meta name="description" content="{content[:160]}...">',
                ),
                element=node_element(context.document, meta),
            )
        ]

    return [
        CheckOutcome(
            "meta-description-ok", Severity.MINOR, True, "Meta description is present and optimal"
        )
    ]


def check_lang(context: CheckContext) -> list[CheckOutcome]:
    html = context.document.select_one("html")
    if html is not None and (html.get("lang") or "").strip():
        return [CheckOutcome("lang-ok", Severity.MINOR, True, "Language attribute is present")]

    return [
        CheckOutcome(
            id="lang-missing",
            severity=Severity.SERIOUS,
            passed=False,
            message="HTML element is missing lang attribute",
            description=(
                "The lang attribute helps screen readers and search engines understand the "
                "page language."
            ),
            fix=_fix(
                "lang-missing",
                "Add a lang attribute to the <html> element.",
                '<html lang="en">',
            ),
            element=node_element(context.document, html) if html is not None else None,
        )
    ]


def check_headings(context: CheckContext) -> list[CheckOutcome]:
    h1s = context.document.select("h1")

    if not h1s:
        return [
            CheckOutcome(
                id="h1-missing",
                severity=Severity.SERIOUS,
                passed=False,
                message="Page is missing an H1 heading",
                description=(
                    "Every page should have exactly one H1 heading that describes the main "
                    "content."
                ),
                fix=_fix(
                    "h1-missing",
                    "Add a single H1 heading that describes your page content.",
                    "<h1>Your Main Page Heading</h1>",
                ),
            )
        ]

    if len(h1s) > 1:
        return [
            CheckOutcome(
                id="h1-multiple",
                severity=Severity.MODERATE,
                passed=False,
                message=f"Page has {len(h1s)} H1 headings (should have exactly 1)",
                description=(
                    "Multiple H1 headings can confuse search engines about the main topic of "
                    "the page."
                ),
                fix=_fix(
                    "h1-multiple",
                    "Keep only one H1 heading and convert others to H2 or lower.",
                    "<h1>Main Heading</h1>\n<h2>Subheading 1</h2>\n<h2>Subheading 2</h2>",
                ),
                element=node_element(context.document, h1s[0]),
            )
        ]

    return []


def check_canonical(context: CheckContext) -> list[CheckOutcome]:
    if context.document.select_one('link[rel="canonical"]') is not None:
        return [CheckOutcome("canonical-ok", Severity.MINOR, True, "Canonical URL is present")]

    return [
        CheckOutcome(
            id="canonical-missing",
            severity=Severity.MODERATE,
            passed=False,
            message="Page is missing a canonical URL",
            description=(
                "Canonical URLs help prevent duplicate content issues by specifying the "
                "preferred version of a page."
            ),
            fix=_fix(
                "canonical-missing",
                "Add a canonical link tag to specify the preferred URL for this page.",
                f'<link rel="canonical" href="{context.document.url}">',
            ),
        )
    ]


CHECKS = (check_title, check_meta_description, check_lang, check_headings, check_canonical)
