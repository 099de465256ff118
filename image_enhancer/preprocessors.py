"""Neighbourhood filters applied before tone adjustment."""

from __future__ import annotations

import math

import cv2
import numpy as np

from .errors import InvalidConfiguration
from .interfaces import IBufferStage
from .pixel_buffer import COLOR_CHANNELS, PixelBuffer, quantize
from .tiling import run_row_bands

DEBLUR_THRESHOLD = 10.0


def _check_strength(strength: float) -> None:
    if not math.isfinite(strength) or strength < 0:
        raise InvalidConfiguration(f"strength must be a finite value >= 0, got {strength!r}")


def _has_interior(buf: PixelBuffer, radius: int) -> bool:
    return buf.height > 2 * radius and buf.width > 2 * radius


def denoise(buf: PixelBuffer, strength: float, workers: int = 1) -> None:
    """Blend every interior pixel with the median of its window, in place.

    The window radius is ``ceil(strength * 2)``; pixels closer than the radius
    to any border keep their value. ``strength == 0`` leaves the buffer as is.
    """

    _check_strength(strength)
    if strength == 0:
        return
    radius = math.ceil(strength * 2)
    if not _has_interior(buf, radius):
        return
    ksize = 2 * radius + 1
    src = buf.snapshot()
    dst = buf.pixels
    x0, x1 = radius, buf.width - radius

    def kernel(y0: int, y1: int) -> None:
        slab = np.ascontiguousarray(src[y0 - radius : y1 + radius, :, :COLOR_CHANNELS])
        median = cv2.medianBlur(slab, ksize)[radius : radius + (y1 - y0), x0:x1]
        original = src[y0:y1, x0:x1, :COLOR_CHANNELS].astype(np.float64)
        blended = original * (1.0 - strength) + median.astype(np.float64) * strength
        dst[y0:y1, x0:x1, :COLOR_CHANNELS] = quantize(blended)

    run_row_bands(kernel, radius, buf.height - radius, workers)


def _window_means(slab: np.ndarray, radius: int, rows: int) -> np.ndarray:
    """Mean over each full ``(2r+1)^2`` window of ``slab`` using an integral image."""

    k = 2 * radius + 1
    integral = np.zeros((slab.shape[0] + 1, slab.shape[1] + 1, slab.shape[2]), dtype=np.int64)
    integral[1:, 1:] = slab.astype(np.int64).cumsum(axis=0).cumsum(axis=1)
    width = slab.shape[1] + 1
    sums = (
        integral[k : k + rows, k:]
        - integral[0:rows, k:]
        - integral[k : k + rows, : width - k]
        + integral[0:rows, : width - k]
    )
    return sums / float(k * k)


def deblur(buf: PixelBuffer, strength: float, workers: int = 1) -> None:
    """Thresholded unsharp masking against the local window mean, in place.

    ``radius = ceil(strength * 3)`` and ``amount = strength * 1.5``; a channel
    only changes where it differs from its window mean by more than 10.
    """

    _check_strength(strength)
    if strength == 0:
        return
    radius = math.ceil(strength * 3)
    if not _has_interior(buf, radius):
        return
    amount = strength * 1.5
    src = buf.snapshot()
    dst = buf.pixels
    x0, x1 = radius, buf.width - radius

    def kernel(y0: int, y1: int) -> None:
        slab = src[y0 - radius : y1 + radius, :, :COLOR_CHANNELS]
        mean = _window_means(slab, radius, y1 - y0)
        original = src[y0:y1, x0:x1, :COLOR_CHANNELS].astype(np.float64)
        diff = original - mean
        boosted = np.where(np.abs(diff) > DEBLUR_THRESHOLD, original + diff * amount, original)
        dst[y0:y1, x0:x1, :COLOR_CHANNELS] = quantize(boosted)

    run_row_bands(kernel, radius, buf.height - radius, workers)


class MedianDenoiser(IBufferStage):
    """Edge-preserving smoothing via a windowed median."""

    name = "denoise"

    def __init__(self, strength: float, workers: int = 1) -> None:
        _check_strength(strength)
        self.strength = float(strength)
        self.workers = workers

    def process(self, buf: PixelBuffer) -> PixelBuffer:
        denoise(buf, self.strength, self.workers)
        return buf


class UnsharpDeblurrer(IBufferStage):
    """Local-contrast recovery via windowed unsharp masking."""

    name = "deblur"

    def __init__(self, strength: float, workers: int = 1) -> None:
        _check_strength(strength)
        self.strength = float(strength)
        self.workers = workers

    def process(self, buf: PixelBuffer) -> PixelBuffer:
        deblur(buf, self.strength, self.workers)
        return buf
