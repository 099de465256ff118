import threading

import pytest

from image_enhancer.tiling import run_row_bands, split_rows


def test_split_rows_covers_range_without_overlap() -> None:
    bands = split_rows(2, 13, 4)
    assert bands == [(2, 5), (5, 8), (8, 11), (11, 13)]


def test_split_rows_never_returns_empty_bands() -> None:
    assert split_rows(1, 3, 8) == [(1, 2), (2, 3)]
    assert split_rows(5, 5, 3) == []


def test_run_row_bands_visits_every_row_once() -> None:
    seen = []
    lock = threading.Lock()

    def kernel(y0: int, y1: int) -> None:
        with lock:
            seen.extend(range(y0, y1))

    run_row_bands(kernel, 0, 50, workers=4)
    assert sorted(seen) == list(range(50))


def test_run_row_bands_propagates_errors() -> None:
    def kernel(y0: int, y1: int) -> None:
        raise RuntimeError("band failed")

    with pytest.raises(RuntimeError):
        run_row_bands(kernel, 0, 10, workers=2)
