"""Fix-suggestion templates for accessibility rules."""

from __future__ import annotations

import re
from typing import Callable, Protocol

from ..models import ElementInfo, FixSuggestion

RULE_DOCS = "https://dequeuniversity.com/rules/axe/4.4/"


class FixTemplates(Protocol):
    def generate(self, rule_id: str, element: ElementInfo) -> FixSuggestion: ...


Template = Callable[[ElementInfo], FixSuggestion]


def _image_alt(el: ElementInfo) -> FixSuggestion:
    return FixSuggestion(
        "Add descriptive alt text that conveys the image content",
        el.html.replace("<img", '<img alt="[Describe what the image shows]"', 1),
        "https://webaim.org/techniques/alttext/",
    )


def _button_name(el: ElementInfo) -> FixSuggestion:
    code = el.html if "aria-label" in el.html else el.html.replace(">", ' aria-label="[Button purpose]">', 1)
    return FixSuggestion(
        "Add text content or aria-label to the button", code, RULE_DOCS + "button-name"
    )


def _link_name(el: ElementInfo) -> FixSuggestion:
    code = el.html if "aria-label" in el.html else el.html.replace("</a>", "[Link text]</a>", 1)
    return FixSuggestion("Add descriptive text content to the link", code, RULE_DOCS + "link-name")


def _color_contrast(el: ElementInfo) -> FixSuggestion:
    return FixSuggestion(
        "Increase contrast ratio to at least 4.5:1 for normal text",
        "/* Current contrast is too low */\n"
        "/* Suggested fixes: */\n"
        "/* 1. Darken text color */\n"
        "/* 2. Lighten background */\n"
        "/* 3. Increase font size to 18px+ (large text needs 3:1) */",
        "https://webaim.org/resources/contrastchecker/",
    )


def _label(el: ElementInfo) -> FixSuggestion:
    return FixSuggestion(
        "Associate a label with the input using for/id or wrapping",
        '<label for="input-id">Label text</label>\n'
        + el.html.replace("<input", '<input id="input-id"', 1),
        "https://webaim.org/techniques/forms/controls",
    )


def _tabindex(el: ElementInfo) -> FixSuggestion:
    return FixSuggestion(
        'Use tabindex="0" or "-1" instead of positive values',
        re.sub(r"tabindex=[\"']\d+[\"']", 'tabindex="0"', el.html, count=1),
        RULE_DOCS + "tabindex",
    )


def _static(description: str, code: str, rule_id: str) -> Template:
    return lambda el: FixSuggestion(description, code, RULE_DOCS + rule_id)


def _annotated(description: str, before: str, after: str, rule_id: str) -> Template:
    """Template that quotes the offending markup between two comment lines."""
    return lambda el: FixSuggestion(
        description, f"{before}\n{el.html}\n{after}", RULE_DOCS + rule_id
    )


TEMPLATES: dict[str, Template] = {
    "image-alt": _image_alt,
    "button-name": _button_name,
    "link-name": _link_name,
    "color-contrast": _color_contrast,
    "label": _label,
    "html-has-lang": _static(
        "Add a lang attribute to the html element", '<html lang="en">', "html-has-lang"
    ),
    "document-title": _static(
        "Add a descriptive title to the page",
        "<title>Page Title - Site Name</title>",
        "document-title",
    ),
    "heading-order": _annotated(
        "Ensure headings follow a logical order without skipping levels",
        "/* Current: */",
        "/* Headings should follow order: h1 → h2 → h3 → h4 */",
        "heading-order",
    ),
    "region": lambda el: FixSuggestion(
        "Wrap content in landmark regions (main, nav, header, footer, etc.)",
        f"<main>\n  {el.html}\n</main>",
        RULE_DOCS + "region",
    ),
    "aria-valid-attr": _annotated(
        "Fix or remove invalid ARIA attributes",
        "/* Review and fix ARIA attributes in: */",
        "/* Valid ARIA attributes: aria-label, aria-labelledby, aria-describedby, etc. */",
        "aria-valid-attr",
    ),
    "aria-required-attr": _annotated(
        "Add required ARIA attributes for the element role",
        "/* Add missing required ARIA attributes: */",
        "/* Check WAI-ARIA spec for required attributes */",
        "aria-required-attr",
    ),
    "aria-roles": _annotated(
        "Use a valid ARIA role value",
        "/* Current: */",
        "/* Use valid roles: button, link, navigation, main, etc. */",
        "aria-roles",
    ),
    "meta-viewport": _static(
        "Allow users to zoom by removing maximum-scale and user-scalable=no",
        '<meta name="viewport" content="width=device-width, initial-scale=1">',
        "meta-viewport",
    ),
    "tabindex": _tabindex,
    "duplicate-id": _annotated(
        "Ensure all id attributes are unique on the page",
        "/* Current: */",
        '/* Change the id to be unique: id="unique-identifier" */',
        "duplicate-id",
    ),
}


class DefaultFixTemplates:
    """Built-in templates, with a documentation link for unknown rules."""

    def __init__(self, templates: dict[str, Template] | None = None) -> None:
        self._templates = dict(TEMPLATES if templates is None else templates)

    def generate(self, rule_id: str, element: ElementInfo) -> FixSuggestion:
        template = self._templates.get(rule_id)
        if template is not None:
            return template(element)
        return FixSuggestion(
            description="See documentation for fix guidance",
            code="",
            learn_more_url=RULE_DOCS + rule_id,
        )
