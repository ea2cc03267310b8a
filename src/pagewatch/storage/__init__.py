"""Persistence: key-value stores, scan history, diffing and the ignore list."""

from .base import KeyValueStore, MemoryStore
from .diff import compare
from .diff_models import ScanComparison, ScanDiff
from .history import HISTORY_KEY, HistoryStore
from .identity import domain_of, issue_hash
from .ignore import IGNORE_KEY, IgnoreRegistry
from .models import IgnoredIssue, ScanHistoryEntry
from .sqlite import SqliteStore
from .timefmt import format_relative_time

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "SqliteStore",
    "HistoryStore",
    "HISTORY_KEY",
    "IgnoreRegistry",
    "IGNORE_KEY",
    "ScanHistoryEntry",
    "IgnoredIssue",
    "ScanComparison",
    "ScanDiff",
    "compare",
    "issue_hash",
    "domain_of",
    "format_relative_time",
]
