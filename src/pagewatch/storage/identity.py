"""Stable identity for issues and pages.

Two issues are "the same" across scans iff their ``(selector, rule_id)``
pair matches, regardless of message text or severity.  The history diff and
the ignore registry both key on :func:`issue_hash`.
"""

from urllib.parse import urlparse


def issue_hash(selector: str, rule_id: str) -> str:
    """Return the content address ``selector::rule_id``."""
    return f"{selector}::{rule_id}"


def domain_of(url: str) -> str:
    """Hostname of ``url``; the raw value when it has no parseable host."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return url
    return hostname or url
