"""The RGBA raster every stage reads and writes."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import InvalidDimension

CHANNELS = 4
COLOR_CHANNELS = 3


@dataclass(eq=False)
class PixelBuffer:
    """8-bit RGBA raster, row-major with a top-left origin.

    ``pixels`` is a ``uint8`` array of shape ``(height, width, 4)``. The
    buffer is owned by whichever stage currently holds it.
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidDimension(
                f"width and height must be > 0, got {self.width}x{self.height}"
            )
        if not isinstance(self.pixels, np.ndarray) or self.pixels.dtype != np.uint8:
            raise InvalidDimension("pixels must be a uint8 numpy array")
        expected = (self.height, self.width, CHANNELS)
        if self.pixels.shape != expected:
            raise InvalidDimension(
                f"pixels shape {self.pixels.shape} does not match {expected}"
            )

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "PixelBuffer":
        """Build a buffer from interleaved RGBA bytes."""

        if width <= 0 or height <= 0:
            raise InvalidDimension(f"width and height must be > 0, got {width}x{height}")
        expected = width * height * CHANNELS
        if len(data) != expected:
            raise InvalidDimension(
                f"expected {expected} bytes for {width}x{height} RGBA, got {len(data)}"
            )
        pixels = np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width, CHANNELS)
        return cls(width, height, pixels.copy())

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "PixelBuffer":
        """Wrap an ``(H, W, 4)`` uint8 array, copying it."""

        if pixels.ndim != 3:
            raise InvalidDimension(f"expected a 3-D array, got shape {pixels.shape}")
        height, width = pixels.shape[:2]
        if pixels.dtype != np.uint8:
            raise InvalidDimension(f"pixels must be uint8, got {pixels.dtype}")
        return cls(width, height, pixels.copy())

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple) -> "PixelBuffer":
        """Return a buffer where every pixel has the given RGBA value."""

        if width <= 0 or height <= 0:
            raise InvalidDimension(f"width and height must be > 0, got {width}x{height}")
        pixels = np.empty((height, width, CHANNELS), dtype=np.uint8)
        pixels[:, :] = rgba
        return cls(width, height, pixels)

    def to_bytes(self) -> bytes:
        return self.pixels.tobytes()

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.pixels.copy())

    def snapshot(self) -> np.ndarray:
        """Return a read-only copy of the current pixels."""

        frozen = self.pixels.copy()
        frozen.setflags(write=False)
        return frozen

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, COLOR_CHANNELS]

    def __len__(self) -> int:
        return self.pixels.size


def quantize(values: np.ndarray) -> np.ndarray:
    """Clamp to [0, 255] and round to the nearest integer, halves to even."""

    return np.clip(np.rint(values), 0, 255).astype(np.uint8)
