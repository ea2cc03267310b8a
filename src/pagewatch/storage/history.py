"""Scan history: a bounded per-domain record of past scans.

Every entry across all domains lives in one flat list under
``HISTORY_KEY``; filtering and trimming happen in memory before each write.
Mutations run under an ``asyncio.Lock`` so two saves fired together cannot
read the same snapshot and overwrite each other.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Iterable, Optional

from ..logging_config import get_logger
from ..models import ScanResult
from ..runtime import Clock, IdGenerator, SystemClock
from .base import KeyValueStore
from .identity import domain_of
from .models import ScanHistoryEntry

logger = get_logger(__name__)

HISTORY_KEY = "pagewatch_scan_history"
MAX_HISTORY_PER_DOMAIN = 10
DEFAULT_AUDIT_TYPES = ("accessibility",)


class HistoryStore:
    """Save, list, and prune scan history entries.

    Usage::

        history = HistoryStore(MemoryStore())
        entry = await history.save(result, ["performance"])
        previous = await history.most_recent_before(result.url, entry.timestamp)
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        max_per_domain: int = MAX_HISTORY_PER_DOMAIN,
        clock: Optional[Clock] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        if max_per_domain < 1:
            raise ValueError("max_per_domain must be at least 1")
        self._store = store
        self._max_per_domain = max_per_domain
        self._id_factory = id_factory or IdGenerator("scan", clock or SystemClock())
        self._lock = asyncio.Lock()

    # ── reads ─────────────────────────────────────────────────────

    async def _read(self) -> list[ScanHistoryEntry]:
        record = await self._store.get(HISTORY_KEY)
        raw = record.get(HISTORY_KEY)
        if not isinstance(raw, list):
            return []
        entries = []
        for item in raw:
            try:
                entries.append(ScanHistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Dropping malformed history entry: %s", e)
        return entries

    async def _write(self, entries: Iterable[ScanHistoryEntry]) -> None:
        await self._store.set({HISTORY_KEY: [e.to_dict() for e in entries]})

    async def list_all(self) -> list[ScanHistoryEntry]:
        """Every stored entry, in storage order."""
        return await self._read()

    async def list_for_domain(self, url: str) -> list[ScanHistoryEntry]:
        """Entries for the hostname of ``url``, newest first."""
        domain = domain_of(url)
        entries = [e for e in await self._read() if e.domain == domain]
        return sorted(entries, key=lambda e: e.timestamp, reverse=True)

    async def most_recent_before(
        self,
        url: str,
        before_timestamp: Optional[int] = None,
    ) -> Optional[ScanHistoryEntry]:
        """Latest entry for the domain strictly older than ``before_timestamp``.

        Without a timestamp the latest entry is returned.  Passing the current
        scan's own timestamp yields the scan before it.
        """
        for entry in await self.list_for_domain(url):
            if before_timestamp is None or entry.timestamp < before_timestamp:
                return entry
        return None

    # ── writes ────────────────────────────────────────────────────

    async def save(
        self,
        result: ScanResult,
        audit_types: Optional[Iterable[str]] = None,
    ) -> ScanHistoryEntry:
        """Append ``result`` and keep only the newest entries for its domain."""
        entry = ScanHistoryEntry.from_result(
            self._id_factory(),
            result,
            tuple(audit_types) if audit_types is not None else DEFAULT_AUDIT_TYPES,
        )

        async with self._lock:
            existing = await self._read()
            others = [e for e in existing if e.domain != entry.domain]
            same_domain = [e for e in existing if e.domain == entry.domain]

            # New entry first so it wins ties on timestamp.
            newest = sorted([entry, *same_domain], key=lambda e: e.timestamp, reverse=True)
            kept = newest[: self._max_per_domain]
            evicted = len(newest) - len(kept)
            if evicted:
                logger.debug("Evicting %d history entries for %s", evicted, entry.domain)

            await self._write([*others, *reversed(kept)])

        return entry

    async def delete(self, entry_id: str) -> None:
        async with self._lock:
            entries = await self._read()
            await self._write(e for e in entries if e.id != entry_id)

    async def clear_domain(self, url: str) -> None:
        domain = domain_of(url)
        async with self._lock:
            entries = await self._read()
            await self._write(e for e in entries if e.domain != domain)

    async def clear_all(self) -> None:
        async with self._lock:
            await self._store.remove(HISTORY_KEY)
