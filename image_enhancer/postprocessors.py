"""Sharpening applied as the final stage."""

from __future__ import annotations

import math

import cv2
import numpy as np

from .errors import InvalidConfiguration
from .interfaces import IBufferStage
from .pixel_buffer import COLOR_CHANNELS, PixelBuffer, quantize
from .tiling import run_row_bands


def sharpen_kernel(sharpness: float) -> np.ndarray:
    """Return the 3x3 kernel: -1 neighbours, ``9 + (sharpness - 1) * 0.8`` centre.

    The weights sum to ``1 + boost``, so flat regions are brightened by that
    factor rather than left unchanged.
    """

    boost = (sharpness - 1.0) * 0.8
    kernel = np.full((3, 3), -1.0, dtype=np.float64)
    kernel[1, 1] = 9.0 + boost
    return kernel


def _check_sharpness(sharpness: float) -> None:
    if not math.isfinite(sharpness) or sharpness < 0:
        raise InvalidConfiguration(f"sharpness must be a finite value >= 0, got {sharpness!r}")


def sharpen(buf: PixelBuffer, sharpness: float, workers: int = 1) -> None:
    """Convolve interior pixels with :func:`sharpen_kernel`, in place.

    No-op when ``sharpness <= 1``. The outermost ring of pixels is unchanged.
    """

    _check_sharpness(sharpness)
    if sharpness <= 1 or buf.width < 3 or buf.height < 3:
        return
    kernel = sharpen_kernel(sharpness)
    src = buf.snapshot()
    dst = buf.pixels
    x1 = buf.width - 1

    def band(y0: int, y1: int) -> None:
        slab = src[y0 - 1 : y1 + 1, :, :COLOR_CHANNELS].astype(np.float64)
        filtered = cv2.filter2D(slab, cv2.CV_64F, kernel)
        dst[y0:y1, 1:x1, :COLOR_CHANNELS] = quantize(filtered[1 : 1 + (y1 - y0), 1:x1])

    run_row_bands(band, 1, buf.height - 1, workers)


class KernelSharpener(IBufferStage):
    """Fixed-topology 3x3 sharpening with a preset-driven centre weight."""

    name = "sharpen"

    def __init__(self, sharpness: float, workers: int = 1) -> None:
        _check_sharpness(sharpness)
        self.sharpness = float(sharpness)
        self.workers = workers

    def process(self, buf: PixelBuffer) -> PixelBuffer:
        sharpen(buf, self.sharpness, self.workers)
        return buf
