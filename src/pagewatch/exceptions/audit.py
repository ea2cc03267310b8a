"""Audit-related exceptions: unknown audit kinds, malformed issues, signals."""

from typing import Iterable, Optional

from .base import PageWatchError


class AuditError(PageWatchError):
    """Base class for audit-related errors."""
    pass


class UnsupportedAuditKind(AuditError):
    """Raised when an audit is requested for a kind outside the closed set."""

    def __init__(self, kind: object, supported: Optional[Iterable[str]] = None):
        supported_list = list(supported or [])
        details = {"kind": str(kind)}
        if supported_list:
            details["supported"] = ", ".join(supported_list)
        super().__init__(f"Unsupported audit kind: {kind!r}", details=details)
        self.kind = kind
        self.supported = supported_list


class InvalidIssueError(AuditError):
    """Raised when an issue is constructed with an unknown severity or category."""

    def __init__(self, field_name: str, value: object, allowed: Iterable[str]):
        allowed_list = list(allowed)
        super().__init__(
            f"Invalid {field_name}: {value!r}",
            details={"field": field_name, "allowed": ", ".join(allowed_list)},
        )
        self.field_name = field_name
        self.value = value
        self.allowed = allowed_list


class UnsupportedSignalType(AuditError):
    """Raised by a timeline when asked to observe a signal type it cannot deliver.

    The collector treats this as a capability check: the metric is skipped.
    """

    def __init__(self, signal_type: str):
        super().__init__(f"Signal type not supported: {signal_type}")
        self.signal_type = signal_type
