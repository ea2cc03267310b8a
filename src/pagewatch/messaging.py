"""Message dispatcher: the request/response bridge into the audit pipeline.

Messages are plain mappings ``{"type": ..., "payload": {...}}``; every
answer carries ``success``.  A failed handler answers with the user-facing
message from :func:`pagewatch.exceptions.describe_error` instead of raising,
so a caller on the other side of the bridge always gets a response.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Optional

from .config import DEFAULT_CONFIG, AuditConfig
from .collector import MetricsCollector, parse_kind
from .exceptions import PageWatchError, describe_error
from .logging_config import get_logger
from .scoring import score_issues
from .storage import HistoryStore, IgnoreRegistry, compare

logger = get_logger(__name__)

Response = dict[str, Any]


class MessageType(str, Enum):
    PING = "PING"
    SCAN_PAGE = "SCAN_PAGE"
    GET_HISTORY = "GET_HISTORY"
    COMPARE = "COMPARE"
    IGNORE_ISSUE = "IGNORE_ISSUE"
    UNIGNORE_ISSUE = "UNIGNORE_ISSUE"


def _require(payload: Mapping[str, Any], name: str) -> Any:
    value = payload.get(name)
    if value is None or value == "":
        raise PageWatchError(f"Missing message field: {name}")
    return value


class MessageDispatcher:
    """Route bridge messages to the collector, history and ignore registry.

    Usage::

        dispatcher = MessageDispatcher(collector, history, ignores)
        response = await dispatcher.handle({"type": "SCAN_PAGE",
                                            "payload": {"auditType": "seo"}})
    """

    def __init__(
        self,
        collector: MetricsCollector,
        history: HistoryStore,
        ignores: IgnoreRegistry,
        *,
        config: AuditConfig = DEFAULT_CONFIG,
    ) -> None:
        self.collector = collector
        self.history = history
        self.ignores = ignores
        self.config = config
        self._handlers: dict[MessageType, Callable[[Mapping[str, Any]], Awaitable[Response]]] = {
            MessageType.PING: self._ping,
            MessageType.SCAN_PAGE: self._scan_page,
            MessageType.GET_HISTORY: self._get_history,
            MessageType.COMPARE: self._compare,
            MessageType.IGNORE_ISSUE: self._ignore_issue,
            MessageType.UNIGNORE_ISSUE: self._unignore_issue,
        }

    async def handle(self, message: Mapping[str, Any]) -> Response:
        try:
            message_type = MessageType(message.get("type"))
        except ValueError:
            return {"success": False, "error": "Unknown message type"}

        payload = message.get("payload") or {}
        try:
            return await self._handlers[message_type](payload)
        except Exception as e:
            logger.warning("%s failed: %s", message_type.value, e)
            return {"success": False, "error": describe_error(e).message}

    # ── handlers ──────────────────────────────────────────────────

    async def _ping(self, payload: Mapping[str, Any]) -> Response:
        return {"success": True, "loaded": True}

    async def _scan_page(self, payload: Mapping[str, Any]) -> Response:
        kind = parse_kind(payload.get("auditType", "accessibility"))
        result = await self.collector.collect(kind)

        actionable = await self.ignores.filter_actionable(result.url, result.issues)
        response: Response = {
            "success": True,
            "result": result.to_dict(),
            "score": score_issues(actionable, self.config.score_scale_factor).to_dict(),
            "ignoredCount": len(result.issues) - len(actionable),
        }
        if payload.get("save", True):
            entry = await self.history.save(result, [kind.value])
            response["historyId"] = entry.id
        return response

    async def _get_history(self, payload: Mapping[str, Any]) -> Response:
        url: Optional[str] = payload.get("url")
        entries = await (self.history.list_for_domain(url) if url else self.history.list_all())
        return {"success": True, "history": [e.to_dict() for e in entries]}

    async def _compare(self, payload: Mapping[str, Any]) -> Response:
        url = _require(payload, "url")
        current = await self.history.most_recent_before(url)
        previous = (
            await self.history.most_recent_before(url, current.timestamp) if current else None
        )
        if current is None or previous is None:
            return {"success": True, "comparison": None}
        return {"success": True, "comparison": compare(current, previous).to_dict()}

    async def _ignore_issue(self, payload: Mapping[str, Any]) -> Response:
        ignored = await self.ignores.ignore(
            _require(payload, "url"),
            _require(payload, "selector"),
            _require(payload, "ruleId"),
            payload.get("message", ""),
            payload.get("reason", "other"),
            payload.get("note"),
        )
        return {"success": True, "ignored": ignored.to_dict()}

    async def _unignore_issue(self, payload: Mapping[str, Any]) -> Response:
        await self.ignores.unignore(
            _require(payload, "url"),
            _require(payload, "selector"),
            _require(payload, "ruleId"),
        )
        return {"success": True}
