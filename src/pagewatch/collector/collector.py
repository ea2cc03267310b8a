"""MetricsCollector: runs one audit pass over a document.

Usage::

    collector = MetricsCollector(HtmlDocument(html, url=url))
    result = await collector.collect("seo")
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterator, Optional, Union

import httpx

from ..config import DEFAULT_CONFIG, AuditConfig
from ..exceptions import AuditError
from ..logging_config import get_logger
from ..models import Issue, ScanResult
from ..runtime import Clock, IdGenerator, SystemClock
from .accessibility import AccessibilityEngine, audit_accessibility
from .checks import PROFILES, CheckContext, CheckRegistry, outcomes_to_issues
from .document import DocumentAccess
from .fixes import DefaultFixTemplates, FixTemplates
from .kinds import AuditKind, parse_kind
from .performance import audit_performance

logger = get_logger(__name__)

ACCESSIBILITY_NAMESPACE = "issue"
PERFORMANCE_NAMESPACE = "perf-issue"


class MetricsCollector:
    """Audit a document for one kind at a time.

    Args:
        document: The page under audit; only read, never modified.
        config: Measurement windows, fetch timeout and emission thresholds.
        clock: Source of timestamps, durations and issue ids.
        checks: Rule checks for the seo/security/best-practices/pwa kinds.
        accessibility_engine: Required for the accessibility kind.
        fixes: Fix templates for accessibility issues.
        http_client: Shared client for manifest and header probes.  When
            omitted, one is created per audit with the configured timeout.
        counter: Private id sequence (tests); defaults to the process sequence.
    """

    def __init__(
        self,
        document: DocumentAccess,
        *,
        config: AuditConfig = DEFAULT_CONFIG,
        clock: Optional[Clock] = None,
        checks: Optional[CheckRegistry] = None,
        accessibility_engine: Optional[AccessibilityEngine] = None,
        fixes: Optional[FixTemplates] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        counter: Optional[Iterator[int]] = None,
    ) -> None:
        self.document = document
        self.config = config
        self._clock: Clock = clock or SystemClock()
        self._checks = checks if checks is not None else CheckRegistry.default()
        self._engine = accessibility_engine
        self._fixes = fixes if fixes is not None else DefaultFixTemplates()
        self._http_client = http_client
        self._counter = counter

    def _ids(self, namespace: str) -> IdGenerator:
        return IdGenerator(namespace, self._clock, self._counter)

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(
            timeout=self.config.fetch_timeout_seconds, follow_redirects=True
        ) as client:
            yield client

    async def collect(self, kind: Union[AuditKind, str]) -> ScanResult:
        """Run one audit and return its result.

        Raises:
            UnsupportedAuditKind: ``kind`` is not one of the audit kinds.
            AuditError: The accessibility kind was requested without an engine.
        """
        audit_kind = parse_kind(kind)
        url = self.document.url
        start = self._clock.monotonic()
        logger.info("Starting %s audit of %s", audit_kind.value, url)

        try:
            issues, incomplete = await self._run(audit_kind)
        except Exception as e:
            logger.error("%s audit of %s failed: %s", audit_kind.value, url, e)
            raise

        duration_ms = (self._clock.monotonic() - start) * 1000
        result = ScanResult.create(
            url=url,
            timestamp=self._clock.now_ms(),
            duration=duration_ms,
            issues=issues,
            incomplete=incomplete,
        )
        logger.info(
            "Finished %s audit: %d issues, %d incomplete in %.0fms",
            audit_kind.value,
            len(result.issues),
            len(result.incomplete),
            duration_ms,
        )
        return result

    async def _run(self, kind: AuditKind) -> tuple[list[Issue], list[Issue]]:
        if kind is AuditKind.ACCESSIBILITY:
            if self._engine is None:
                raise AuditError("No accessibility engine configured")
            return await audit_accessibility(
                self.document, self._engine, self._fixes, self._ids(ACCESSIBILITY_NAMESPACE)
            )

        if kind is AuditKind.PERFORMANCE:
            issues = await audit_performance(
                self.document, self.config, self._ids(PERFORMANCE_NAMESPACE)
            )
            return issues, []

        profile = PROFILES[kind]
        async with self._http() as client:
            context = CheckContext(document=self.document, http=client, config=self.config)
            outcomes = await self._checks.run(kind, context)
        return outcomes_to_issues(outcomes, profile, self._ids(profile.id_namespace)), []
