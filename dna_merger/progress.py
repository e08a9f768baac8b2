"""Cooperative progress reporting for parsing and merging.

Parsers and the merge engine are written as generators that yield a
ProgressEvent at every batch boundary and return their result. The drivers
below run such a generator to completion, forwarding percentages to an
optional callback, so a host (CLI progress bar, event loop, UI thread) gets
control back between batches.

Usage:
    steps = AncestryParser().iter_parse(content, file_index=0)
    result = drive(steps, lambda pct: bar.update(task, completed=pct))
"""

import asyncio
from collections.abc import Callable, Generator
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

# Input lines / markers processed between two suspension points
BATCH_SIZE = 5000

T = TypeVar("T")

ProgressCallback = Callable[[int], None]


class Phase(str, Enum):
    """Pipeline phase a progress event belongs to."""

    PARSING = "parsing"
    INDEXING = "indexing"
    RESOLVING = "resolving"
    SORTING = "sorting"


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """Progress snapshot emitted at a batch boundary.

    Attributes:
        phase: Phase currently running
        percent: Overall completion, 0-100
    """

    phase: Phase
    percent: int


Steps = Generator[ProgressEvent, None, T]


def drive(steps: Steps[T], callback: ProgressCallback | None = None) -> T:
    """Run a progress generator to completion.

    Args:
        steps: Generator yielding ProgressEvent and returning a result
        callback: Optional function called with each (non-decreasing) percentage

    Returns:
        The generator's return value
    """
    last = 0
    while True:
        try:
            event = next(steps)
        except StopIteration as stop:
            return stop.value
        last = max(last, event.percent)
        if callback is not None:
            callback(last)


async def drive_async(steps: Steps[T], callback: ProgressCallback | None = None) -> T:
    """Run a progress generator from a coroutine.

    Yields to the event loop at every batch boundary so other tasks can run
    while a large file is parsed or merged.

    Args:
        steps: Generator yielding ProgressEvent and returning a result
        callback: Optional function called with each (non-decreasing) percentage

    Returns:
        The generator's return value
    """
    last = 0
    while True:
        try:
            event = next(steps)
        except StopIteration as stop:
            return stop.value
        last = max(last, event.percent)
        if callback is not None:
            callback(last)
        await asyncio.sleep(0)
