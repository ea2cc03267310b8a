"""Turn document nodes into stable query selectors, and back into markup."""

from __future__ import annotations

import re
from typing import Any

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError, escape

from ..models import ElementInfo
from .document import DocumentAccess

MAX_CLASSES = 2
MAX_CLASS_MATCHES = 3
MAX_HTML_LENGTH = 200

_LEADING_TAG = re.compile(r"^([a-z0-9]+)", re.IGNORECASE)


def is_element(node: Any) -> bool:
    """True for element nodes (not text, comments or the document root)."""
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def resolve_selector(node: Tag, document: DocumentAccess) -> str:
    """Build a selector for ``node``, preferring the most stable form.

    Order of preference:
      1. ``#id``
      2. ``tag.class1.class2`` when it matches at most three nodes
      3. ``<parent selector> > tag:nth-child(i)``
      4. the bare tag name (the root element)
    """
    node_id = node.get("id")
    if node_id:
        return f"#{escape(node_id)}"

    tag = node.name.lower()

    classes = node.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    if classes:
        candidate = f"{tag}." + ".".join(escape(c) for c in classes[:MAX_CLASSES])
        try:
            if document.count(candidate) <= MAX_CLASS_MATCHES:
                return candidate
        except SelectorSyntaxError:
            pass

    parent = node.parent
    if is_element(parent):
        siblings = [child for child in parent.children if isinstance(child, Tag)]
        # Identity, not equality: bs4 compares tags structurally.
        index = next(i for i, child in enumerate(siblings, start=1) if child is node)
        return f"{resolve_selector(parent, document)} > {tag}:nth-child({index})"

    return tag


def element_html(document: DocumentAccess, selector: str) -> str:
    """Outer HTML of the first match, truncated; a placeholder when nothing matches."""
    try:
        node = document.select_one(selector)
    except SelectorSyntaxError:
        node = None
    if node is not None:
        html = document.outer_html(node)
        if len(html) > MAX_HTML_LENGTH:
            return html[:MAX_HTML_LENGTH] + "...>"
        return html
    return f'<element selector="{selector}">...</element>'


def tag_from_selector(selector: str) -> str:
    match = _LEADING_TAG.match(selector)
    return match.group(1) if match else "div"


def simple_selector(node: Tag) -> str:
    """``#id``, else ``tag.firstClass``, else the tag name."""
    node_id = node.get("id")
    if node_id:
        return f"#{escape(node_id)}"
    tag = node.name.lower()
    classes = node.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return f"{tag}.{escape(classes[0])}" if classes else tag


def node_element(document: DocumentAccess, node: Tag) -> ElementInfo:
    return ElementInfo(
        selector=simple_selector(node),
        html=document.outer_html(node)[:MAX_HTML_LENGTH],
    )
