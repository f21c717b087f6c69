"""
Operation counters for measuring the cost of image operations.

The library core only ever talks to a CounterSink: anything with a
``count(name, amount)`` method. Buffers carry an optional sink and notify it
of pixel memory accesses (``pixmem``) and, during subimage search, pixel
comparisons (``pixcmp``). Passing no sink disables counting entirely.

Usage:
    counters = InstrumentationCounters()
    img = codec.load("in.pgm", counters=counters)
    with counters.measure() as m:
        locate_subimage(img, pattern)
    print(m.elapsed, m.deltas["pixcmp"])
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Protocol

from config import COUNTER_PIXCMP, COUNTER_PIXMEM

logger = logging.getLogger(__name__)

DEFAULT_COUNTERS = (COUNTER_PIXMEM, COUNTER_PIXCMP)


class CounterSink(Protocol):
    """Receiver of operation counts."""

    def count(self, name: str, amount: int = 1) -> None:
        ...


@dataclass
class Measurement:
    """Wall time and counter increments observed inside ``measure()``.

    Attributes:
        elapsed: Seconds between entering and leaving the block.
        deltas: Increment of every counter over the block.
    """

    elapsed: float = 0.0
    deltas: dict[str, int] = field(default_factory=dict)


class InstrumentationCounters:
    """Named counters plus a simple timer."""

    def __init__(self, names=DEFAULT_COUNTERS):
        self._counts: Counter[str] = Counter({name: 0 for name in names})

    def count(self, name: str, amount: int = 1) -> None:
        self._counts[name] += amount

    def __getitem__(self, name: str) -> int:
        return self._counts[name]

    def reset(self) -> None:
        for name in self._counts:
            self._counts[name] = 0

    def snapshot(self) -> dict[str, int]:
        """Return a copy of the current counter values."""
        return dict(self._counts)

    @contextmanager
    def measure(self) -> Iterator[Measurement]:
        """Time a block and record how much every counter grew inside it."""
        result = Measurement()
        before = self.snapshot()
        start = time.perf_counter()
        try:
            yield result
        finally:
            result.elapsed = time.perf_counter() - start
            result.deltas = {
                name: value - before.get(name, 0)
                for name, value in self._counts.items()
            }

    def report(self, level: int = logging.INFO) -> None:
        """Log every counter on one line."""
        summary = " ".join(f"{name}={value}" for name, value in sorted(self._counts.items()))
        logger.log(level, "Counters: %s", summary)
