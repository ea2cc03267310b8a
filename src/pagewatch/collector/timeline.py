"""In-process performance timeline.

Mirrors the shape of a browser's performance buffer: entries are kept in
arrival order and looked up by ``entry_type``.  Live observers registered via
:meth:`PerformanceTimeline.observe` receive every entry recorded after they
attach; buffered entries are read separately with
:meth:`PerformanceTimeline.get_entries_by_type`.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Iterable, Optional, Union

from ..exceptions import UnsupportedSignalType
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LayoutShiftEntry:
    value: float
    had_recent_input: bool = False
    source_nodes: tuple[Any, ...] = ()  # document nodes that moved
    start_time: float = 0.0

    entry_type: ClassVar[str] = "layout-shift"


@dataclass(frozen=True)
class EventTimingEntry:
    name: str  # event type, e.g. "click"
    duration: float  # ms
    interaction_id: int = 0  # 0 = not part of a user interaction
    target: Any = None
    start_time: float = 0.0

    entry_type: ClassVar[str] = "event"


@dataclass(frozen=True)
class LongTaskEntry:
    duration: float  # ms
    start_time: float = 0.0

    entry_type: ClassVar[str] = "longtask"


@dataclass(frozen=True)
class ResourceEntry:
    name: str  # resource URL
    initiator_type: str  # "img", "script", "link", ...
    transfer_size: int = 0  # bytes

    entry_type: ClassVar[str] = "resource"


@dataclass(frozen=True)
class PaintEntry:
    name: str  # "first-paint" | "first-contentful-paint"
    start_time: float

    entry_type: ClassVar[str] = "paint"


@dataclass(frozen=True)
class LargestContentfulPaintEntry:
    start_time: float

    entry_type: ClassVar[str] = "largest-contentful-paint"


@dataclass(frozen=True)
class NavigationTiming:
    """Milestones of the page load, all in ms since ``navigation_start``."""

    request_start: float = 0.0
    response_start: float = 0.0
    dom_content_loaded_event_start: float = 0.0
    dom_content_loaded_event_end: float = 0.0
    load_event_end: float = 0.0
    navigation_start: float = 0.0

    entry_type: ClassVar[str] = "navigation"


TimelineEntry = Union[
    LayoutShiftEntry,
    EventTimingEntry,
    LongTaskEntry,
    ResourceEntry,
    PaintEntry,
    LargestContentfulPaintEntry,
    NavigationTiming,
]

ALL_ENTRY_TYPES = frozenset(
    {
        LayoutShiftEntry.entry_type,
        EventTimingEntry.entry_type,
        LongTaskEntry.entry_type,
        ResourceEntry.entry_type,
        PaintEntry.entry_type,
        LargestContentfulPaintEntry.entry_type,
        NavigationTiming.entry_type,
    }
)

Observer = Callable[[TimelineEntry], None]


class PerformanceTimeline:
    """Buffered timeline with live observers.

    Args:
        entries: Entries already in the buffer (e.g. loaded from a trace).
        supported_types: Entry types this timeline can deliver.  Observing
            anything else raises :class:`UnsupportedSignalType`; reading it
            returns an empty list.
    """

    def __init__(
        self,
        entries: Iterable[TimelineEntry] = (),
        supported_types: Optional[Iterable[str]] = None,
    ) -> None:
        self.supported_types: frozenset[str] = (
            frozenset(supported_types) if supported_types is not None else ALL_ENTRY_TYPES
        )
        self._buffer: list[TimelineEntry] = list(entries)
        self._observers: dict[int, tuple[str, Observer]] = {}
        self._handles = itertools.count()

    def supports(self, entry_type: str) -> bool:
        return entry_type in self.supported_types

    def get_entries_by_type(self, entry_type: str) -> list[TimelineEntry]:
        if not self.supports(entry_type):
            return []
        return [e for e in self._buffer if e.entry_type == entry_type]

    def get_entries_by_name(self, name: str) -> list[TimelineEntry]:
        return [e for e in self._buffer if getattr(e, "name", None) == name]

    @property
    def navigation(self) -> Optional[NavigationTiming]:
        entries = self.get_entries_by_type(NavigationTiming.entry_type)
        return entries[0] if entries else None  # type: ignore[return-value]

    def observe(self, entry_type: str, callback: Observer) -> Callable[[], None]:
        """Deliver future entries of ``entry_type`` to ``callback``.

        Returns a disconnect function; calling it more than once is harmless.
        """
        if not self.supports(entry_type):
            raise UnsupportedSignalType(entry_type)

        handle = next(self._handles)
        self._observers[handle] = (entry_type, callback)

        def disconnect() -> None:
            self._observers.pop(handle, None)

        return disconnect

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def record(self, entry: TimelineEntry) -> None:
        """Append a live entry and notify matching observers."""
        if entry.entry_type not in self.supported_types:
            logger.debug("Dropping %s entry: type not supported", entry.entry_type)
            return
        self._buffer.append(entry)
        for entry_type, callback in list(self._observers.values()):
            if entry_type == entry.entry_type:
                callback(entry)
