"""Persisted records: history entries and ignored issues.

Both serialise to the flat camelCase dicts kept under a single store key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..models import Issue, ScanResult, ScanSummary
from .identity import domain_of


@dataclass(frozen=True)
class ScanHistoryEntry:
    """Size-bounded, persisted view of one ScanResult."""

    id: str
    url: str
    domain: str
    audit_types: tuple[str, ...]
    timestamp: int  # epoch ms
    duration: float  # ms
    summary: ScanSummary
    issue_count: int
    issues: tuple[Issue, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "audit_types", tuple(self.audit_types))
        object.__setattr__(self, "issues", tuple(self.issues))

    @classmethod
    def from_result(
        cls,
        entry_id: str,
        result: ScanResult,
        audit_types: tuple[str, ...] | list[str],
    ) -> "ScanHistoryEntry":
        return cls(
            id=entry_id,
            url=result.url,
            domain=domain_of(result.url),
            audit_types=tuple(audit_types),
            timestamp=result.timestamp,
            duration=result.duration,
            summary=result.summary,
            issue_count=len(result.issues),
            issues=result.issues,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "domain": self.domain,
            "auditTypes": list(self.audit_types),
            "timestamp": self.timestamp,
            "duration": self.duration,
            "summary": self.summary.to_dict(),
            "issueCount": self.issue_count,
            "issues": [i.to_dict() for i in self.issues],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScanHistoryEntry":
        issues = tuple(Issue.from_dict(i) for i in data.get("issues", []))
        return cls(
            id=data["id"],
            url=data["url"],
            domain=data.get("domain") or domain_of(data["url"]),
            audit_types=tuple(data.get("auditTypes", ())),
            timestamp=int(data["timestamp"]),
            duration=float(data.get("duration", 0.0)),
            summary=ScanSummary.from_dict(data.get("summary") or {}),
            issue_count=int(data.get("issueCount", len(issues))),
            issues=issues,
        )


@dataclass(frozen=True)
class IgnoredIssue:
    """A user's decision to stop flagging one issue on one domain."""

    hash: str  # selector::ruleId
    selector: str
    rule_id: str
    message: str
    reason: str
    ignored_at: int  # epoch ms
    domain: str
    custom_note: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "hash": self.hash,
            "selector": self.selector,
            "ruleId": self.rule_id,
            "message": self.message,
            "reason": self.reason,
            "ignoredAt": self.ignored_at,
            "domain": self.domain,
        }
        if self.custom_note is not None:
            data["customNote"] = self.custom_note
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IgnoredIssue":
        return cls(
            hash=data["hash"],
            selector=data["selector"],
            rule_id=data["ruleId"],
            message=data.get("message", ""),
            reason=data.get("reason", ""),
            ignored_at=int(data.get("ignoredAt", 0)),
            domain=data["domain"],
            custom_note=data.get("customNote"),
        )
