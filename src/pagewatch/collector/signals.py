"""Time-windowed runtime signals: layout shift, interaction latency, blocking time.

Each measurement reads the timeline's buffered samples, attaches a live
observer, waits one measurement window, detaches, and aggregates buffered and
live samples together.  :func:`measure_signals` starts all three windows at
once and joins them with a single ``asyncio.gather``, so a full measurement
takes one window rather than three.

A signal type the timeline does not list in ``supported_types`` is not
observed at all; the metric is reported as ``None`` (unmeasurable), never as
zero.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import AuditConfig
from ..exceptions import UnsupportedSignalType
from ..logging_config import get_logger
from . import thresholds
from .document import DocumentAccess
from .selectors import is_element, resolve_selector
from .thresholds import Rating
from .timeline import (
    EventTimingEntry,
    LayoutShiftEntry,
    LongTaskEntry,
    PerformanceTimeline,
    TimelineEntry,
)

logger = get_logger(__name__)

# Position of the reported interaction among per-interaction maxima sorted
# worst-first; approximates the 98th percentile.
INTERACTION_PERCENTILE_OFFSET = 0.02


class SignalWindow:
    """One observer attachment over a fixed window.

    ``close()`` is idempotent and always runs when :meth:`collect` exits,
    including when the awaiting task is cancelled.
    """

    def __init__(self, timeline: PerformanceTimeline, entry_type: str) -> None:
        self.entry_type = entry_type
        self._timeline = timeline
        self._buffered: list[TimelineEntry] = []
        self._live: list[TimelineEntry] = []
        self._disconnect: Optional[Callable[[], None]] = None

    @property
    def is_open(self) -> bool:
        return self._disconnect is not None

    def open(self) -> None:
        """Snapshot the buffer and attach the live observer.

        Raises:
            UnsupportedSignalType: The timeline cannot observe this type.
        """
        self._buffered = self._timeline.get_entries_by_type(self.entry_type)
        self._disconnect = self._timeline.observe(self.entry_type, self._live.append)

    def close(self) -> None:
        disconnect, self._disconnect = self._disconnect, None
        if disconnect is not None:
            disconnect()

    @property
    def samples(self) -> list[TimelineEntry]:
        return [*self._buffered, *self._live]

    async def collect(self, seconds: float) -> list[TimelineEntry]:
        self.open()
        try:
            await asyncio.sleep(seconds)
        finally:
            self.close()
        return self.samples


# ── results ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class ShiftingElement:
    selector: str
    shift: float


@dataclass(frozen=True)
class LayoutShiftResult:
    value: float
    rating: Rating
    shifting_elements: tuple[ShiftingElement, ...] = ()  # worst first


@dataclass(frozen=True)
class Interaction:
    type: str
    target: Optional[str]  # selector, None when the target was not an element
    duration: float


@dataclass(frozen=True)
class InteractionResult:
    value: float
    rating: Rating
    worst: Optional[Interaction] = None


@dataclass(frozen=True)
class LongTask:
    duration: float
    blocking_time: float
    start_time: float


@dataclass(frozen=True)
class BlockingTimeResult:
    value: float
    rating: Rating
    long_tasks: tuple[LongTask, ...] = ()  # worst first


@dataclass(frozen=True)
class SignalReport:
    """Windowed metrics; ``None`` marks a metric the timeline could not measure."""

    layout_shift: Optional[LayoutShiftResult]
    interaction: Optional[InteractionResult]
    blocking_time: Optional[BlockingTimeResult]


# ── measurements ──────────────────────────────────────────────────


async def _collect(timeline: PerformanceTimeline, entry_type: str, seconds: float):
    if not timeline.supports(entry_type):
        logger.debug("Skipping %s measurement: not supported by this timeline", entry_type)
        return None
    try:
        return await SignalWindow(timeline, entry_type).collect(seconds)
    except UnsupportedSignalType as e:
        logger.debug("Skipping %s measurement: %s", entry_type, e)
        return None


async def measure_layout_shift(
    document: DocumentAccess,
    window_seconds: float,
    max_contributors: int = 5,
) -> Optional[LayoutShiftResult]:
    entries = await _collect(document.timeline, LayoutShiftEntry.entry_type, window_seconds)
    if entries is None:
        return None

    total = 0.0
    per_selector: dict[str, float] = {}
    for entry in entries:
        # Shifts right after user input are expected, not layout instability.
        if entry.had_recent_input:
            continue
        total += entry.value
        for node in entry.source_nodes:
            if is_element(node):
                selector = resolve_selector(node, document)
                per_selector[selector] = per_selector.get(selector, 0.0) + entry.value

    ranked = sorted(per_selector.items(), key=lambda item: item[1], reverse=True)
    return LayoutShiftResult(
        value=total,
        rating=thresholds.CLS.rate(total),
        shifting_elements=tuple(
            ShiftingElement(selector, shift) for selector, shift in ranked[:max_contributors]
        ),
    )


async def measure_interaction(
    document: DocumentAccess,
    window_seconds: float,
) -> Optional[InteractionResult]:
    entries = await _collect(document.timeline, EventTimingEntry.entry_type, window_seconds)
    if entries is None:
        return None

    interactions: dict[int, Interaction] = {}
    for entry in entries:
        if entry.interaction_id <= 0:
            continue
        existing = interactions.get(entry.interaction_id)
        if existing is None or entry.duration > existing.duration:
            target = resolve_selector(entry.target, document) if is_element(entry.target) else None
            interactions[entry.interaction_id] = Interaction(entry.name, target, entry.duration)

    if not interactions:
        return InteractionResult(value=0.0, rating=thresholds.INP.rate(0.0))

    durations = sorted((i.duration for i in interactions.values()), reverse=True)
    index = min(int(len(durations) * INTERACTION_PERCENTILE_OFFSET), len(durations) - 1)
    value = durations[index]
    worst = next(i for i in interactions.values() if i.duration == value)
    return InteractionResult(value=value, rating=thresholds.INP.rate(value), worst=worst)


async def measure_blocking_time(
    document: DocumentAccess,
    window_seconds: float,
    max_contributors: int = 5,
) -> Optional[BlockingTimeResult]:
    entries = await _collect(document.timeline, LongTaskEntry.entry_type, window_seconds)
    if entries is None:
        return None

    tasks = [
        LongTask(
            duration=entry.duration,
            blocking_time=max(0.0, entry.duration - thresholds.LONG_TASK_BUDGET_MS),
            start_time=entry.start_time,
        )
        for entry in entries
    ]
    total = sum(t.blocking_time for t in tasks)
    tasks.sort(key=lambda t: t.blocking_time, reverse=True)
    return BlockingTimeResult(
        value=total,
        rating=thresholds.TBT.rate(total),
        long_tasks=tuple(tasks[:max_contributors]),
    )


async def measure_signals(document: DocumentAccess, config: AuditConfig) -> SignalReport:
    """Run all three windows concurrently and join them."""
    window = config.measurement_window_seconds
    layout_shift, interaction, blocking_time = await asyncio.gather(
        measure_layout_shift(document, window, config.max_contributors),
        measure_interaction(document, window),
        measure_blocking_time(document, window, config.max_contributors),
    )
    return SignalReport(
        layout_shift=layout_shift,
        interaction=interaction,
        blocking_time=blocking_time,
    )
