"""Human-friendly relative timestamps for history listings."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Optional

_MINUTE_MS = 60_000
_HOUR_MS = 60 * _MINUTE_MS
_DAY_MS = 24 * _HOUR_MS


def format_relative_time(timestamp_ms: int, now_ms: Optional[int] = None) -> str:
    """Describe ``timestamp_ms`` relative to ``now_ms`` (defaults to now).

    >>> format_relative_time(0, 90_000)
    '1m ago'
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    elapsed = now_ms - timestamp_ms

    if elapsed < _MINUTE_MS:
        return "Just now"
    if elapsed < _HOUR_MS:
        return f"{elapsed // _MINUTE_MS}m ago"
    if elapsed < _DAY_MS:
        return f"{elapsed // _HOUR_MS}h ago"
    if elapsed < 2 * _DAY_MS:
        return "Yesterday"
    if elapsed < 7 * _DAY_MS:
        return f"{elapsed // _DAY_MS} days ago"
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d")
