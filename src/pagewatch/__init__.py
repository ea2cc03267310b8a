"""
PageWatch - web page audits with scores, history and diffs

Audits a document against accessibility, performance, SEO, security,
best-practices and PWA rules, normalizes every finding into one Issue
shape, scores the result 0-100 and tracks it across scans.
"""

__version__ = "0.1.0"

from .collector import AuditKind, HtmlDocument, MetricsCollector
from .config import AuditConfig, load_config
from .messaging import MessageDispatcher
from .models import Category, Issue, ScanResult, ScanSummary, Severity
from .scoring import ScoreResult, get_score_breakdown, score
from .storage import HistoryStore, IgnoreRegistry, MemoryStore, SqliteStore, compare

__all__ = [
    "MetricsCollector",  # Main entry point
    "AuditKind",
    "HtmlDocument",
    "AuditConfig",
    "load_config",
    "Issue",
    "ScanResult",
    "ScanSummary",
    "Severity",
    "Category",
    "score",
    "get_score_breakdown",
    "ScoreResult",
    "HistoryStore",
    "IgnoreRegistry",
    "MemoryStore",
    "SqliteStore",
    "compare",
    "MessageDispatcher",
]
