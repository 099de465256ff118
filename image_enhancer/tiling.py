"""Row-band splitting for filter passes.

A filter pass reads a read-only snapshot and writes disjoint rows of the live
buffer, so bands of interior rows can be computed independently and joined
before the pass returns.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Tuple

RowKernel = Callable[[int, int], None]


def split_rows(start: int, stop: int, parts: int) -> List[Tuple[int, int]]:
    """Split ``[start, stop)`` into at most ``parts`` contiguous, non-empty bands."""

    total = stop - start
    if total <= 0:
        return []
    parts = max(1, min(parts, total))
    base, extra = divmod(total, parts)
    bands = []
    y0 = start
    for idx in range(parts):
        y1 = y0 + base + (1 if idx < extra else 0)
        bands.append((y0, y1))
        y0 = y1
    return bands


def run_row_bands(kernel: RowKernel, start: int, stop: int, workers: int = 1) -> None:
    """Run ``kernel(y0, y1)`` over ``[start, stop)``, optionally on a thread pool."""

    bands = split_rows(start, stop, workers)
    if not bands:
        return
    if workers <= 1 or len(bands) == 1:
        for y0, y1 in bands:
            kernel(y0, y1)
        return
    with ThreadPoolExecutor(max_workers=len(bands)) as executor:
        futures = [executor.submit(kernel, y0, y1) for y0, y1 in bands]
        for future in futures:
            future.result()
