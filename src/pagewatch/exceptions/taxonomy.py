"""User-facing error taxonomy with error codes and recovery suggestions.

Error Code Convention:
    PW001 - No page to scan
    PW002 - Restricted page
    PW003 - Scanner not attached to the page
    PW004 - Scan timeout
    PW005 - Generic scan failure (fallback)
    PW006 - Audit kind not supported
    PW007 - Partial failure across several audit kinds
    PW008 - Network failure
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from .audit import UnsupportedAuditKind


class ErrorCode(Enum):
    """Structured error codes shown next to a failed scan."""

    PW001 = "PW001"  # No active page
    PW002 = "PW002"  # Restricted page
    PW003 = "PW003"  # Scanner not attached
    PW004 = "PW004"  # Scan timeout
    PW005 = "PW005"  # Scan failed
    PW006 = "PW006"  # Audit not supported
    PW007 = "PW007"  # Partial scan failure
    PW008 = "PW008"  # Network error


@dataclass(frozen=True)
class ErrorDetails:
    """What the presentation layer shows for a failed scan."""

    code: ErrorCode
    title: str
    message: str
    suggestion: str
    help_url: Optional[str] = None

    def to_json(self) -> dict[str, Optional[str]]:
        return {
            "code": self.code.value,
            "title": self.title,
            "message": self.message,
            "suggestion": self.suggestion,
            "help_url": self.help_url,
        }


ERROR_DETAILS: dict[ErrorCode, ErrorDetails] = {
    ErrorCode.PW001: ErrorDetails(
        ErrorCode.PW001,
        "No Active Page",
        "Could not find an active page to scan.",
        "Make sure you have a webpage open and try again.",
    ),
    ErrorCode.PW002: ErrorDetails(
        ErrorCode.PW002,
        "Restricted Page",
        "Cannot scan browser internal pages (chrome://, about:, etc.)",
        "Navigate to a regular webpage (http:// or https://) to scan.",
    ),
    ErrorCode.PW003: ErrorDetails(
        ErrorCode.PW003,
        "Scanner Not Loaded",
        "The scanner is not loaded on this page.",
        "Refresh the page and try again.",
    ),
    ErrorCode.PW004: ErrorDetails(
        ErrorCode.PW004,
        "Scan Timeout",
        "The scan took too long to complete.",
        "The page may be too large or complex. Try refreshing and scanning again.",
    ),
    ErrorCode.PW005: ErrorDetails(
        ErrorCode.PW005,
        "Scan Failed",
        "An unexpected error occurred during the scan.",
        "Try refreshing the page. If the problem continues, run with --verbose for details.",
    ),
    ErrorCode.PW006: ErrorDetails(
        ErrorCode.PW006,
        "Audit Not Supported",
        "This audit type is not supported.",
        "Try a different audit type.",
    ),
    ErrorCode.PW007: ErrorDetails(
        ErrorCode.PW007,
        "Partial Scan Failure",
        "Some audit types failed while others succeeded.",
        "Check the results for successful audits. Try running failed audits individually.",
    ),
    ErrorCode.PW008: ErrorDetails(
        ErrorCode.PW008,
        "Network Error",
        "Could not communicate with the page.",
        "Check your internet connection and refresh the page.",
    ),
}

# Substring patterns checked in order; first match wins.
_PATTERNS: list[tuple[tuple[str, ...], ErrorCode]] = [
    (("no active page", "no active tab"), ErrorCode.PW001),
    (("internal pages", "restricted"), ErrorCode.PW002),
    (("refresh the page", "not loaded"), ErrorCode.PW003),
    (("timeout", "timed out", "too long"), ErrorCode.PW004),
    (("not yet implemented", "not supported", "unsupported"), ErrorCode.PW006),
    (("some audits failed", "partial"), ErrorCode.PW007),
    (("network", "connection"), ErrorCode.PW008),
]


def describe_error(error: Union[BaseException, str, None]) -> ErrorDetails:
    """Map a thrown error (or its text) to user-facing details.

    Unknown errors fall back to PW005 carrying the original text, or the
    generic PW005 message when the error has no text.
    """
    if isinstance(error, UnsupportedAuditKind):
        return replace(ERROR_DETAILS[ErrorCode.PW006], message=str(error.message))

    if isinstance(error, BaseException):
        message = str(error)
    elif isinstance(error, str):
        message = error
    else:
        message = ""

    lower = message.lower()
    for needles, code in _PATTERNS:
        if any(needle in lower for needle in needles):
            if code is ErrorCode.PW007:
                return replace(ERROR_DETAILS[code], message=message)
            return ERROR_DETAILS[code]

    fallback = ERROR_DETAILS[ErrorCode.PW005]
    return replace(fallback, message=message or fallback.message)


def format_error(error: Union[BaseException, str, None]) -> str:
    """One-line "Title: message" rendering."""
    details = describe_error(error)
    return f"{details.title}: {details.message}"
