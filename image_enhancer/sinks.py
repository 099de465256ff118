"""Image sink implementations."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Set

import cv2
import pandas as pd

from .config import ResolutionTarget
from .interfaces import IImageSink
from .pixel_buffer import PixelBuffer

METADATA_FILENAME = "enhancement_metadata.csv"


def export_filename(
    resolution: ResolutionTarget, preset_name: str, stem: Optional[str] = None
) -> str:
    """Return ``enhanced-image-{dpi}dpi-{preset}.jpg``, prefixed by ``stem`` if given."""

    # spaces become "-" so names stay shell-friendly ("ai-enhance")
    preset_slug = re.sub(r"\s+", "-", preset_name.strip().lower())
    name = f"enhanced-image-{resolution.dpi}dpi-{preset_slug}.jpg"
    return f"{stem}-{name}" if stem else name


def encode_jpeg(buf: PixelBuffer, quality: int = 95) -> bytes:
    """Encode the colour channels of ``buf`` as JPEG; alpha is dropped."""

    if not 0 <= quality <= 100:
        raise ValueError("quality must be within [0, 100]")
    bgr = cv2.cvtColor(buf.pixels, cv2.COLOR_RGBA2BGR)
    ok, encoded = cv2.imencode(".jpg", bgr, [int(cv2.IMWRITE_JPEG_QUALITY), quality])
    if not ok:
        raise RuntimeError("JPEG encoding failed")
    return encoded.tobytes()


class DiskImageSink(IImageSink):
    """Write JPEG images and a metadata CSV to disk."""

    def __init__(
        self,
        out_dir: Path,
        resolution: ResolutionTarget,
        preset_name: str,
        jpg_quality: int = 95,
        write_metadata: bool = True,
    ) -> None:
        self._out = out_dir
        self._out.mkdir(parents=True, exist_ok=True)
        self._resolution = resolution
        self._preset_name = preset_name
        self._jpg_quality = jpg_quality
        self._write_metadata = write_metadata
        self._rows: List[Dict[str, object]] = []
        self._names: Set[str] = set()

    def _unique_name(self, source: Path) -> str:
        """Return an output name not yet used by this sink; ``a.png`` and ``a.jpg`` share a stem."""

        stem = source.stem
        name = export_filename(self._resolution, self._preset_name, stem)
        counter = 2
        while name in self._names:
            name = export_filename(self._resolution, self._preset_name, f"{stem}-{counter}")
            counter += 1
        self._names.add(name)
        return name

    def write(
        self,
        source: Path,
        original: PixelBuffer,
        enhanced: PixelBuffer,
        metadata: Dict[str, object],
    ) -> None:
        out_path = self._out / self._unique_name(source)
        out_path.write_bytes(encode_jpeg(enhanced, self._jpg_quality))
        row: Dict[str, object] = {
            "source": source.name,
            "output": out_path.name,
            "orig_w": original.width,
            "orig_h": original.height,
            "out_w": enhanced.width,
            "out_h": enhanced.height,
        }
        row.update(metadata)
        self._rows.append(row)

    def close(self) -> None:
        if not self._rows or not self._write_metadata:
            return
        df = pd.DataFrame(self._rows)
        df.sort_values(by=["source"], inplace=True)
        df.to_csv(self._out / METADATA_FILENAME, index=False)
