"""Tests for MetricsCollector."""

import asyncio

import httpx
import pytest

from pagewatch.collector import (
    AuditKind,
    CheckOutcome,
    CheckRegistry,
    HtmlDocument,
    MetricsCollector,
    PerformanceTimeline,
)
from pagewatch.collector.timeline import LongTaskEntry
from pagewatch.config import AuditConfig
from pagewatch.exceptions import AuditError, UnsupportedAuditKind
from pagewatch.models import Severity

PAGE = """<!DOCTYPE html><html lang="en"><head><meta charset="utf-8"><title>Hi</title></head>
<body><h1>Hello</h1></body></html>"""


class SlowRegistry(CheckRegistry):
    """Registry whose single check advances the clock to simulate work."""

    def __init__(self, clock):
        super().__init__()

        def check(context):
            clock.advance(1.5)
            return [CheckOutcome("slow", Severity.MINOR, False, "took a while")]

        self.register(AuditKind.SEO, check)


@pytest.fixture
def document():
    return HtmlDocument(PAGE, url="https://example.com/")


def _collect(collector, kind):
    return asyncio.run(collector.collect(kind))


class TestCollect:
    def test_unsupported_kind(self, document):
        with pytest.raises(UnsupportedAuditKind, match="mobile"):
            _collect(MetricsCollector(document), "mobile")

    def test_accessibility_needs_engine(self, document):
        with pytest.raises(AuditError):
            _collect(MetricsCollector(document), AuditKind.ACCESSIBILITY)

    def test_timestamp_and_duration_from_clock(self, document, clock, counter):
        collector = MetricsCollector(
            document, clock=clock, checks=SlowRegistry(clock), counter=counter
        )
        result = _collect(collector, "seo")

        assert result.url == "https://example.com/"
        assert result.timestamp == 1_700_000_001_500
        assert result.duration == pytest.approx(1500)
        (issue,) = result.issues
        assert issue.id == "seo-issue-1700000001500-1"
        assert result.summary.total == 1
        assert result.summary.by_severity[Severity.MINOR] == 1

    def test_seo_with_shared_client(self, document, clock, counter):
        async def run():
            transport = httpx.MockTransport(lambda request: httpx.Response(404))
            async with httpx.AsyncClient(transport=transport) as client:
                collector = MetricsCollector(
                    document, clock=clock, counter=counter, http_client=client
                )
                result = await collector.collect(AuditKind.SEO)
                assert not client.is_closed
                return result

        result = asyncio.run(run())
        assert {i.rule_id for i in result.issues} == {
            "title-length",
            "meta-description-missing",
            "canonical-missing",
        }
        assert all(i.id.startswith("seo-issue-") for i in result.issues)
        assert result.incomplete == ()

    def test_security_uses_injected_client(self, document, clock, counter):
        requests = []

        def handler(request):
            requests.append(request.method)
            return httpx.Response(200)

        async def run():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                collector = MetricsCollector(
                    document, clock=clock, counter=counter, http_client=client
                )
                return await collector.collect("security")

        result = asyncio.run(run())
        assert requests == ["HEAD"]
        assert len(result.issues) == 6
        assert all(i.rule_id.startswith("header-") for i in result.issues)

    def test_performance(self, clock, counter):
        document = HtmlDocument(
            PAGE, url="https://example.com/", timeline=PerformanceTimeline([LongTaskEntry(900)])
        )
        collector = MetricsCollector(
            document,
            config=AuditConfig(measurement_window_seconds=0),
            clock=clock,
            counter=counter,
        )
        result = _collect(collector, AuditKind.PERFORMANCE)
        assert [i.rule_id for i in result.issues] == ["performance-tbt", "performance-long-task"]
        assert result.issues[0].id.startswith("perf-issue-")

    def test_accessibility_with_engine(self, document, clock, counter):
        class Engine:
            def run(self, document, rules):
                return {
                    "violations": [
                        {"id": "region", "impact": "moderate", "help": "Use landmarks",
                         "nodes": [{"target": ["h1"], "html": "<h1>Hello</h1>"}]}
                    ],
                    "incomplete": [
                        {"id": "color-contrast", "impact": "serious",
                         "nodes": [{"target": ["h1"], "html": "<h1>Hello</h1>"}]}
                    ],
                }

        collector = MetricsCollector(
            document, clock=clock, counter=counter, accessibility_engine=Engine()
        )
        result = _collect(collector, "accessibility")
        assert [i.rule_id for i in result.issues] == ["region"]
        assert [i.rule_id for i in result.incomplete] == ["color-contrast"]
        assert result.summary.total == 1
        assert result.issues[0].id.startswith("issue-")

    def test_engine_errors_propagate(self, document):
        class BrokenEngine:
            def run(self, document, rules):
                raise RuntimeError("engine crashed")

        collector = MetricsCollector(document, accessibility_engine=BrokenEngine())
        with pytest.raises(RuntimeError, match="engine crashed"):
            _collect(collector, "accessibility")
