"""Storage exceptions."""

from typing import Optional

from .base import PageWatchError


class StorageError(PageWatchError):
    """Raised when the key-value backend fails to read or write."""

    def __init__(self, operation: str, key: Optional[str], reason: str):
        details = {"operation": operation, "reason": reason}
        if key is not None:
            details["key"] = key
        super().__init__(f"Storage {operation} failed", details=details)
        self.operation = operation
        self.key = key
        self.reason = reason
