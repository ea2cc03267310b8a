"""Tests for relative timestamps."""

from datetime import datetime

import pytest

from pagewatch.storage import format_relative_time

NOW = 1_700_000_000_000
MIN = 60_000
HOUR = 60 * MIN
DAY = 24 * HOUR


@pytest.mark.parametrize(
    "elapsed,expected",
    [
        (0, "Just now"),
        (59_999, "Just now"),
        (MIN, "1m ago"),
        (59 * MIN, "59m ago"),
        (HOUR, "1h ago"),
        (23 * HOUR, "23h ago"),
        (DAY, "Yesterday"),
        (2 * DAY, "2 days ago"),
        (6 * DAY, "6 days ago"),
    ],
)
def test_relative(elapsed, expected):
    assert format_relative_time(NOW - elapsed, NOW) == expected


def test_older_than_a_week_is_a_date():
    ts = NOW - 30 * DAY
    assert format_relative_time(ts, NOW) == datetime.fromtimestamp(ts / 1000).strftime("%Y-%m-%d")
