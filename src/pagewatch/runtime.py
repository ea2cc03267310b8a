"""Injectable runtime capabilities: clocks and issue ID generation.

Every component that needs the time or a fresh identifier receives one of
these explicitly, so tests can pin both without touching process state.
"""

from __future__ import annotations

import itertools
import time
from typing import Iterator, Protocol


class Clock(Protocol):
    """Source of wall-clock timestamps and monotonic durations."""

    def now_ms(self) -> int:
        """Wall-clock time in epoch milliseconds."""
        ...

    def monotonic(self) -> float:
        """Monotonic seconds, only meaningful as a difference."""
        ...


class SystemClock:
    """Clock backed by the host's real time."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)

    def monotonic(self) -> float:
        return time.monotonic()


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self._now_ms = start_ms
        self._monotonic = 0.0

    def now_ms(self) -> int:
        return self._now_ms

    def monotonic(self) -> float:
        return self._monotonic

    def advance(self, seconds: float) -> None:
        self._now_ms += int(seconds * 1000)
        self._monotonic += seconds


_PROCESS_SEQUENCE = itertools.count(1)


class IdGenerator:
    """Produce ``{namespace}-{wall_clock_ms}-{counter}`` identifiers.

    Generators share the process sequence unless given their own ``counter``,
    so two audits running side by side never hand out the same id. Tests pass
    a private counter to get deterministic ids.
    """

    def __init__(
        self,
        namespace: str,
        clock: Clock | None = None,
        counter: Iterator[int] | None = None,
    ) -> None:
        self.namespace = namespace
        self._clock: Clock = clock or SystemClock()
        self._counter = counter if counter is not None else _PROCESS_SEQUENCE

    def __call__(self) -> str:
        return f"{self.namespace}-{self._clock.now_ms()}-{next(self._counter)}"
