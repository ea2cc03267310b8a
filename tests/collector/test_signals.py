"""Tests for windowed signal measurement."""

import asyncio
import time

import pytest

from pagewatch.collector import HtmlDocument, PerformanceTimeline, SignalWindow, measure_signals
from pagewatch.collector.signals import (
    measure_blocking_time,
    measure_interaction,
    measure_layout_shift,
)
from pagewatch.collector.thresholds import Rating
from pagewatch.collector.timeline import EventTimingEntry, LayoutShiftEntry, LongTaskEntry
from pagewatch.config import AuditConfig
from pagewatch.exceptions import UnsupportedSignalType

HTML = """<html><body>
<div id="hero"></div>
<p class="note">x</p>
<button id="buy">Buy</button>
</body></html>"""


def _document(entries=(), supported_types=None):
    document = HtmlDocument(HTML, url="https://shop.example/")
    document.timeline = PerformanceTimeline(entries, supported_types)
    return document


class TestSignalWindow:
    def test_close_is_idempotent(self):
        timeline = PerformanceTimeline()
        window = SignalWindow(timeline, "layout-shift")
        window.open()
        assert window.is_open
        assert timeline.observer_count == 1
        window.close()
        window.close()
        assert not window.is_open
        assert timeline.observer_count == 0

    def test_collects_buffered_and_live(self):
        buffered = LayoutShiftEntry(0.05)
        live = LayoutShiftEntry(0.02)
        timeline = PerformanceTimeline([buffered])

        async def run():
            window = SignalWindow(timeline, "layout-shift")
            asyncio.get_running_loop().call_later(0.01, timeline.record, live)
            return await window.collect(0.05)

        assert asyncio.run(run()) == [buffered, live]
        assert timeline.observer_count == 0

    def test_entries_after_close_are_ignored(self):
        timeline = PerformanceTimeline()
        window = SignalWindow(timeline, "longtask")
        samples = asyncio.run(window.collect(0))
        timeline.record(LongTaskEntry(500))
        assert samples == []
        assert window.samples == []

    def test_cancellation_detaches(self):
        timeline = PerformanceTimeline()

        async def run():
            task = asyncio.ensure_future(SignalWindow(timeline, "event").collect(10))
            await asyncio.sleep(0.01)
            assert timeline.observer_count == 1
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(run())
        assert timeline.observer_count == 0

    def test_unsupported_type_raises_on_open(self):
        window = SignalWindow(PerformanceTimeline(supported_types=()), "layout-shift")
        with pytest.raises(UnsupportedSignalType):
            window.open()
        assert not window.is_open


class TestLayoutShift:
    def test_sums_shifts_without_recent_input(self):
        document = _document()
        hero = document.select_one("#hero")
        note = document.select_one("p")
        document.timeline.record(LayoutShiftEntry(0.15, source_nodes=(hero,)))
        document.timeline.record(LayoutShiftEntry(0.05, source_nodes=(note, hero)))
        document.timeline.record(LayoutShiftEntry(0.5, had_recent_input=True, source_nodes=(note,)))

        result = asyncio.run(measure_layout_shift(document, 0))
        assert result.value == pytest.approx(0.2)
        assert result.rating is Rating.NEEDS_IMPROVEMENT
        assert [e.selector for e in result.shifting_elements] == ["#hero", "p.note"]
        assert result.shifting_elements[0].shift == pytest.approx(0.2)

    def test_limits_contributors(self):
        document = _document()
        nodes = [document.select_one(s) for s in ("#hero", "p", "#buy")]
        for node in nodes:
            document.timeline.record(LayoutShiftEntry(0.1, source_nodes=(node,)))
        result = asyncio.run(measure_layout_shift(document, 0, max_contributors=2))
        assert len(result.shifting_elements) == 2

    def test_text_nodes_are_not_contributors(self):
        document = _document()
        text = document.select_one("p").string
        document.timeline.record(LayoutShiftEntry(0.3, source_nodes=(text,)))
        result = asyncio.run(measure_layout_shift(document, 0))
        assert result.rating is Rating.POOR
        assert result.shifting_elements == ()

    def test_nothing_recorded_is_good(self):
        result = asyncio.run(measure_layout_shift(_document(), 0))
        assert result.value == 0
        assert result.rating is Rating.GOOD


class TestInteraction:
    def test_worst_interaction(self):
        document = _document()
        button = document.select_one("#buy")
        for entry in (
            EventTimingEntry("click", 120, interaction_id=1, target=button),
            EventTimingEntry("pointerup", 300, interaction_id=1, target=button),
            EventTimingEntry("keydown", 80, interaction_id=2),
            EventTimingEntry("mousemove", 900, interaction_id=0),
        ):
            document.timeline.record(entry)

        result = asyncio.run(measure_interaction(document, 0))
        assert result.value == 300
        assert result.rating is Rating.NEEDS_IMPROVEMENT
        assert result.worst.type == "pointerup"
        assert result.worst.target == "#buy"

    def test_high_percentile_skips_outlier(self):
        events = [EventTimingEntry("click", 100 + i, interaction_id=i + 1) for i in range(100)]
        events.append(EventTimingEntry("click", 5000, interaction_id=999))
        result = asyncio.run(measure_interaction(_document(events), 0))
        # 101 interactions: index int(101 * 0.02) = 2 of the worst-first list
        assert result.value == 198

    def test_no_interactions(self):
        result = asyncio.run(measure_interaction(_document(), 0))
        assert result.value == 0
        assert result.worst is None


class TestBlockingTime:
    def test_blocking_above_budget(self):
        tasks = [LongTaskEntry(120, start_time=10), LongTaskEntry(400, start_time=900),
                 LongTaskEntry(40)]
        result = asyncio.run(measure_blocking_time(_document(tasks), 0))
        assert result.value == 420
        assert result.rating is Rating.NEEDS_IMPROVEMENT
        assert [t.duration for t in result.long_tasks] == [400, 120, 40]
        assert result.long_tasks[0].blocking_time == 350


class TestMeasureSignals:
    def test_windows_run_concurrently(self):
        config = AuditConfig(measurement_window_seconds=0.2)
        start = time.monotonic()
        report = asyncio.run(measure_signals(_document(), config))
        elapsed = time.monotonic() - start
        assert elapsed < 0.45  # three sequential windows would take 0.6s
        assert report.layout_shift is not None
        assert report.interaction is not None
        assert report.blocking_time is not None

    def test_unsupported_type_omits_metric(self):
        config = AuditConfig(measurement_window_seconds=0)
        document = _document([LongTaskEntry(300)], supported_types={"event", "longtask"})
        report = asyncio.run(measure_signals(document, config))
        assert report.layout_shift is None
        assert report.interaction.value == 0
        assert report.blocking_time.value == 250
        assert document.timeline.observer_count == 0

    def test_unsupported_type_is_never_observed(self, monkeypatch):
        document = _document(supported_types={"event"})
        timeline = document.timeline
        observed = []
        observe = timeline.observe

        def recording_observe(entry_type, callback):
            observed.append(entry_type)
            return observe(entry_type, callback)

        monkeypatch.setattr(timeline, "observe", recording_observe)
        report = asyncio.run(measure_signals(document, AuditConfig(measurement_window_seconds=0)))
        assert observed == ["event"]
        assert report.layout_shift is None
        assert report.blocking_time is None

    def test_supports(self):
        timeline = PerformanceTimeline(supported_types={"longtask"})
        assert timeline.supports("longtask")
        assert not timeline.supports("layout-shift")
        assert PerformanceTimeline().supports("layout-shift")
