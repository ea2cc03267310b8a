"""Metrics collector: one audit pass over a document → ScanResult."""

from .accessibility import BASELINE_RULES, AccessibilityEngine
from .checks import CheckContext, CheckOutcome, CheckRegistry
from .collector import MetricsCollector
from .document import DocumentAccess, HtmlDocument
from .fixes import DefaultFixTemplates, FixTemplates
from .kinds import AuditKind, parse_kind
from .signals import SignalReport, SignalWindow, measure_signals
from .thresholds import Rating, Threshold
from .timeline import (
    EventTimingEntry,
    LargestContentfulPaintEntry,
    LayoutShiftEntry,
    LongTaskEntry,
    NavigationTiming,
    PaintEntry,
    PerformanceTimeline,
    ResourceEntry,
)

__all__ = [
    "MetricsCollector",
    "AuditKind",
    "parse_kind",
    "DocumentAccess",
    "HtmlDocument",
    "PerformanceTimeline",
    "LayoutShiftEntry",
    "EventTimingEntry",
    "LongTaskEntry",
    "ResourceEntry",
    "PaintEntry",
    "LargestContentfulPaintEntry",
    "NavigationTiming",
    "SignalWindow",
    "SignalReport",
    "measure_signals",
    "Rating",
    "Threshold",
    "CheckRegistry",
    "CheckOutcome",
    "CheckContext",
    "AccessibilityEngine",
    "BASELINE_RULES",
    "FixTemplates",
    "DefaultFixTemplates",
]
