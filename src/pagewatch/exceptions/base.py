"""Root of the PageWatch exception hierarchy."""

from typing import Any, Mapping, Optional


class PageWatchError(Exception):
    """Base class for every error PageWatch raises on purpose.

    ``details`` carries short key/value context (the audit kind, the storage
    operation, the config key) and is appended when the error is printed.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"

    def to_dict(self) -> dict[str, Any]:
        """JSON form used by ``--json`` error output."""
        return {"type": type(self).__name__, "message": self.message, "details": self.details}
