"""Per-pixel tonal adjustments."""

from __future__ import annotations

import math

import numpy as np

from .errors import InvalidConfiguration
from .interfaces import IBufferStage
from .pixel_buffer import COLOR_CHANNELS, PixelBuffer, quantize


def _check_factors(brightness: float, contrast: float) -> None:
    for name, value in (("brightness", brightness), ("contrast", contrast)):
        if not math.isfinite(value) or value <= 0:
            raise InvalidConfiguration(f"{name} must be a finite value > 0, got {value!r}")


def adjust_tone(buf: PixelBuffer, brightness: float, contrast: float) -> None:
    """Apply brightness, then contrast, to every colour channel in place.

    Each step is written back as 8-bit before the next one reads it, so
    contrast always sees the brightness-adjusted value. Alpha is untouched.
    """

    _check_factors(brightness, contrast)
    rgb = buf.pixels[:, :, :COLOR_CHANNELS]
    brightened = quantize(rgb.astype(np.float64) * brightness)
    contrasted = ((brightened.astype(np.float64) / 255.0 - 0.5) * contrast + 0.5) * 255.0
    rgb[...] = quantize(contrasted)


class ToneAdjuster(IBufferStage):
    """Brightness and contrast remapping."""

    name = "tone"

    def __init__(self, brightness: float = 1.0, contrast: float = 1.0) -> None:
        _check_factors(brightness, contrast)
        self.brightness = float(brightness)
        self.contrast = float(contrast)

    def process(self, buf: PixelBuffer) -> PixelBuffer:
        adjust_tone(buf, self.brightness, self.contrast)
        return buf
