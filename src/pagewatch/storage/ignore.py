"""Ignore registry: issues a user has chosen to stop seeing, per domain.

Entries are keyed by ``(domain, selector::ruleId)``, the same content address
the history diff uses, so an ignored issue stays ignored across rescans.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, Optional

from ..logging_config import get_logger
from ..models import Issue
from ..runtime import Clock, SystemClock
from .base import KeyValueStore
from .identity import domain_of, issue_hash
from .models import IgnoredIssue

logger = get_logger(__name__)

IGNORE_KEY = "pagewatch_ignored_issues"


class IgnoreRegistry:
    def __init__(self, store: KeyValueStore, clock: Optional[Clock] = None) -> None:
        self._store = store
        self._clock: Clock = clock or SystemClock()
        self._lock = asyncio.Lock()

    async def _read(self) -> list[IgnoredIssue]:
        record = await self._store.get(IGNORE_KEY)
        raw = record.get(IGNORE_KEY)
        if not isinstance(raw, list):
            return []
        entries = []
        for item in raw:
            try:
                entries.append(IgnoredIssue.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Dropping malformed ignore entry: %s", e)
        return entries

    async def _write(self, entries: Iterable[IgnoredIssue]) -> None:
        await self._store.set({IGNORE_KEY: [e.to_dict() for e in entries]})

    async def list_for_domain(self, url: str) -> list[IgnoredIssue]:
        domain = domain_of(url)
        return [e for e in await self._read() if e.domain == domain]

    async def ignored_hashes(self, url: str) -> set[str]:
        return {e.hash for e in await self.list_for_domain(url)}

    async def is_ignored(self, url: str, selector: str, rule_id: str) -> bool:
        return issue_hash(selector, rule_id) in await self.ignored_hashes(url)

    async def filter_actionable(self, url: str, issues: Iterable[Issue]) -> list[Issue]:
        """Drop issues the user has ignored on this domain, keeping order."""
        ignored = await self.ignored_hashes(url)
        return [i for i in issues if i.hash not in ignored]

    async def ignore(
        self,
        url: str,
        selector: str,
        rule_id: str,
        message: str,
        reason: str,
        note: Optional[str] = None,
    ) -> IgnoredIssue:
        """Record an ignore decision.

        Ignoring the same issue twice updates the existing entry in place;
        there is never more than one entry per ``(domain, hash)``.
        """
        entry = IgnoredIssue(
            hash=issue_hash(selector, rule_id),
            selector=selector,
            rule_id=rule_id,
            message=message,
            reason=reason,
            ignored_at=self._clock.now_ms(),
            domain=domain_of(url),
            custom_note=note,
        )

        async with self._lock:
            entries = await self._read()
            for index, existing in enumerate(entries):
                if existing.domain == entry.domain and existing.hash == entry.hash:
                    entries[index] = entry
                    break
            else:
                entries.append(entry)
            await self._write(entries)

        logger.debug("Ignored %s on %s", entry.hash, entry.domain)
        return entry

    async def unignore(self, url: str, selector: str, rule_id: str) -> None:
        """Remove an ignore decision; absent entries are left alone."""
        domain = domain_of(url)
        target = issue_hash(selector, rule_id)
        async with self._lock:
            entries = await self._read()
            kept = [e for e in entries if not (e.domain == domain and e.hash == target)]
            if len(kept) != len(entries):
                await self._write(kept)

    async def clear_domain(self, url: str) -> None:
        domain = domain_of(url)
        async with self._lock:
            entries = await self._read()
            await self._write(e for e in entries if e.domain != domain)

    async def clear_all(self) -> None:
        async with self._lock:
            await self._store.remove(IGNORE_KEY)
