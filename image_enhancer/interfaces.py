"""Core protocol interfaces used across the pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, Protocol, Tuple

from .config import ResolutionTarget
from .pixel_buffer import PixelBuffer


class IImageReader(Protocol):
    """Iterates decoded source images."""

    def images(self) -> Iterator[Tuple[Path, PixelBuffer]]:
        """Yield tuples of (source path, decoded RGBA buffer)."""


class IResampler(Protocol):
    """Scales a buffer to the dimensions of a resolution target."""

    def resample(self, src: PixelBuffer, target: ResolutionTarget) -> PixelBuffer:
        """Return a new buffer; ``src`` is left untouched."""


class IBufferStage(Protocol):
    """One enhancement stage that takes ownership of a buffer and hands it on."""

    name: str

    def process(self, buf: PixelBuffer) -> PixelBuffer:
        """Return the processed buffer (possibly the same object, modified)."""


class IImageSink(Protocol):
    """Persists enhanced images and metadata to disk or another destination."""

    def write(
        self,
        source: Path,
        original: PixelBuffer,
        enhanced: PixelBuffer,
        metadata: Dict[str, object],
    ) -> None:
        """Persist the provided image data."""

    def close(self) -> None:
        """Finalize the sink, flushing any buffered data."""
