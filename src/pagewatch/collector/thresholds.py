"""Metric thresholds and the rating they imply.

A metric is rated against a ``Threshold(good, poor)`` pair:

    value <= good          -> good
    good < value <= poor   -> needs-improvement
    value > poor           -> poor

Only non-good ratings become issues.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from ..models import Severity


class Rating(str, Enum):
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs-improvement"
    POOR = "poor"

    @property
    def severity(self) -> Severity:
        return RATING_SEVERITY[self]


RATING_SEVERITY: dict[Rating, Severity] = {
    Rating.GOOD: Severity.MINOR,
    Rating.NEEDS_IMPROVEMENT: Severity.MODERATE,
    Rating.POOR: Severity.SERIOUS,
}


class Threshold(NamedTuple):
    good: float
    poor: float

    def rate(self, value: float) -> Rating:
        if value <= self.good:
            return Rating.GOOD
        if value <= self.poor:
            return Rating.NEEDS_IMPROVEMENT
        return Rating.POOR


# Core Web Vitals
CLS = Threshold(0.1, 0.25)
INP = Threshold(200, 500)  # ms
TBT = Threshold(200, 600)  # ms
LCP = Threshold(2500, 4000)  # ms
FCP = Threshold(1800, 3000)  # ms
TTFB = Threshold(800, 1800)  # ms

# Navigation timing
DOM_CONTENT_LOADED = Threshold(1000, 2000)  # ms
PAGE_LOAD = Threshold(2000, 4000)  # ms

# Resources
RESOURCE_COUNT = Threshold(50, 100)
TOTAL_SIZE_KB = Threshold(1000, 3000)
IMAGE_SIZE_KB = Threshold(500, 1500)
SCRIPT_SIZE_KB = Threshold(300, 900)

# Main-thread work above this is "blocking" (ms).
LONG_TASK_BUDGET_MS = 50.0
