"""Resolution-driven resampling."""

from __future__ import annotations

import cv2

from .config import BASE_DPI, ResolutionTarget
from .errors import InvalidDimension
from .interfaces import IResampler
from .pixel_buffer import PixelBuffer


def target_dimensions(width: int, height: int, target: ResolutionTarget) -> tuple[int, int]:
    """Return ``(width, height)`` scaled by ``target.dpi / 72``, halves rounded up."""

    if width <= 0 or height <= 0:
        raise InvalidDimension(f"width and height must be > 0, got {width}x{height}")
    # integer form of floor(x * dpi / 72 + 0.5)
    new_w = (2 * width * target.dpi + BASE_DPI) // (2 * BASE_DPI)
    new_h = (2 * height * target.dpi + BASE_DPI) // (2 * BASE_DPI)
    return max(1, new_w), max(1, new_h)


class BicubicResampler(IResampler):
    """OpenCV resize: bicubic when enlarging, area-weighted when shrinking."""

    def __init__(
        self,
        upscale_interpolation: int = cv2.INTER_CUBIC,
        downscale_interpolation: int = cv2.INTER_AREA,
    ) -> None:
        if cv2.INTER_NEAREST in (upscale_interpolation, downscale_interpolation):
            raise ValueError("nearest-neighbour interpolation is not supported")
        self._up = upscale_interpolation
        self._down = downscale_interpolation

    def resample(self, src: PixelBuffer, target: ResolutionTarget) -> PixelBuffer:
        width, height = target_dimensions(src.width, src.height, target)
        if (width, height) == (src.width, src.height):
            return src.copy()
        shrinking = width * height < src.width * src.height
        pixels = cv2.resize(
            src.pixels,
            (width, height),
            interpolation=self._down if shrinking else self._up,
        )
        return PixelBuffer(width, height, pixels)


def resample(src: PixelBuffer, target: ResolutionTarget) -> PixelBuffer:
    """Return a new buffer scaled to ``target``; ``src`` is not modified."""

    return BicubicResampler().resample(src, target)
