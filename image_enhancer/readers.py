"""Image reader implementations backed by :mod:`cv2`."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Tuple

import cv2
import numpy as np

from .interfaces import IImageReader
from .pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".webp"}


def to_rgba(decoded: np.ndarray) -> np.ndarray:
    """Convert an OpenCV grey, BGR or BGRA array to 8-bit RGBA."""

    if decoded.dtype == np.uint16:
        # keep the high byte of 16-bit PNG/TIFF samples
        decoded = (decoded >> 8).astype(np.uint8)
    elif decoded.dtype != np.uint8:
        raise RuntimeError(f"Unsupported sample type: {decoded.dtype}")
    if decoded.ndim == 2:
        return cv2.cvtColor(decoded, cv2.COLOR_GRAY2RGBA)
    channels = decoded.shape[2]
    if channels == 1:
        return cv2.cvtColor(decoded[:, :, 0], cv2.COLOR_GRAY2RGBA)
    if channels == 3:
        return cv2.cvtColor(decoded, cv2.COLOR_BGR2RGBA)
    if channels == 4:
        return cv2.cvtColor(decoded, cv2.COLOR_BGRA2RGBA)
    raise RuntimeError(f"Unsupported channel count: {channels}")


def load_pixel_buffer(path: Path) -> PixelBuffer:
    """Decode an image file into a :class:`PixelBuffer`."""

    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    decoded = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if decoded is None:
        raise RuntimeError(f"Failed to decode image: {path}")
    return PixelBuffer.from_array(to_rgba(decoded))


class ImageFolderReader(IImageReader):
    """Read a single image file or every supported image in a directory."""

    def __init__(self, path: Path) -> None:
        if not path.exists():
            raise FileNotFoundError(f"Input not found: {path}")
        self._path = path

    def paths(self) -> List[Path]:
        if self._path.is_file():
            return [self._path]
        return [
            candidate
            for candidate in sorted(self._path.iterdir())
            if candidate.is_file() and candidate.suffix.lower() in SUPPORTED_IMAGE_SUFFIXES
        ]

    def images(self) -> Iterator[Tuple[Path, PixelBuffer]]:
        if self._path.is_file():
            yield self._path, load_pixel_buffer(self._path)
            return
        for image_path in self.paths():
            try:
                buf = load_pixel_buffer(image_path)
            except RuntimeError as exc:
                logger.warning("Skipping %s: %s", image_path.name, exc)
                continue
            yield image_path, buf
