"""Exception hierarchy for PageWatch."""

from .audit import (
    AuditError,
    InvalidIssueError,
    UnsupportedAuditKind,
    UnsupportedSignalType,
)
from .base import PageWatchError
from .config import ConfigurationError, InvalidConfigError
from .storage import StorageError
from .taxonomy import ErrorCode, ErrorDetails, describe_error, format_error

__all__ = [
    "PageWatchError",
    "AuditError",
    "UnsupportedAuditKind",
    "InvalidIssueError",
    "UnsupportedSignalType",
    "StorageError",
    "ConfigurationError",
    "InvalidConfigError",
    "ErrorCode",
    "ErrorDetails",
    "describe_error",
    "format_error",
]
