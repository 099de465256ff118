"""Pipeline orchestration."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, List, Optional

from .adjusters import ToneAdjuster
from .config import EnhancementPreset, EnhancementSettings, ResolutionTarget
from .interfaces import IBufferStage, IImageReader, IImageSink, IResampler
from .pixel_buffer import PixelBuffer
from .postprocessors import KernelSharpener
from .preprocessors import MedianDenoiser, UnsharpDeblurrer
from .resamplers import BicubicResampler

logger = logging.getLogger(__name__)


def build_stages(settings: EnhancementSettings, workers: int = 1) -> List[IBufferStage]:
    """Return the post-resample stages in their fixed order, skipping no-ops."""

    stages: List[IBufferStage] = []
    if settings.denoise > 0:
        stages.append(MedianDenoiser(settings.denoise, workers))
    if settings.deblur > 0:
        stages.append(UnsharpDeblurrer(settings.deblur, workers))
    stages.append(ToneAdjuster(settings.brightness, settings.contrast))
    if settings.sharpness > 1:
        stages.append(KernelSharpener(settings.sharpness, workers))
    return stages


class EnhancementPipeline:
    """Resample, then run denoise, deblur, tone and sharpen in that order."""

    def __init__(
        self,
        settings: EnhancementSettings,
        resampler: Optional[IResampler] = None,
        workers: int = 1,
    ) -> None:
        self.settings = settings
        self._resampler = resampler if resampler is not None else BicubicResampler()
        self._stages = build_stages(settings, workers)

    @property
    def stage_names(self) -> List[str]:
        return [stage.name for stage in self._stages]

    def run(self, src: PixelBuffer, resolution: ResolutionTarget) -> PixelBuffer:
        start = time.perf_counter()
        buf = self._resampler.resample(src, resolution)
        logger.debug(
            "resample %dx%d -> %dx%d (%d dpi) in %.3fs",
            src.width,
            src.height,
            buf.width,
            buf.height,
            resolution.dpi,
            time.perf_counter() - start,
        )
        for stage in self._stages:
            stage_start = time.perf_counter()
            buf = stage.process(buf)
            logger.debug("%s done in %.3fs", stage.name, time.perf_counter() - stage_start)
        return buf


def enhance(
    src: PixelBuffer,
    resolution: ResolutionTarget,
    settings: EnhancementSettings,
    workers: int = 1,
) -> PixelBuffer:
    """Return the enhanced buffer; ``src`` is not modified."""

    return EnhancementPipeline(settings, workers=workers).run(src, resolution)


async def enhance_async(
    src: PixelBuffer,
    resolution: ResolutionTarget,
    settings: EnhancementSettings,
    workers: int = 1,
) -> PixelBuffer:
    """Run :func:`enhance` in a worker thread and resolve with the final buffer."""

    return await asyncio.to_thread(enhance, src, resolution, settings, workers)


class BatchEnhancementJob:
    """Coordinate reading, enhancing, and writing images."""

    def __init__(
        self,
        reader: IImageReader,
        pipeline: EnhancementPipeline,
        resolution: ResolutionTarget,
        preset: EnhancementPreset,
        sink: IImageSink,
        max_images: Optional[int] = None,
    ) -> None:
        self._reader = reader
        self._pipeline = pipeline
        self._resolution = resolution
        self._preset = preset
        self._sink = sink
        self._max_images = max_images

    def run(self) -> Dict[str, float]:
        read = 0
        written = 0
        start = time.time()
        try:
            for path, buf in self._reader.images():
                if self._max_images is not None and written >= self._max_images:
                    break
                read += 1
                image_start = time.time()
                enhanced = self._pipeline.run(buf, self._resolution)
                elapsed = time.time() - image_start
                self._sink.write(
                    path,
                    buf,
                    enhanced,
                    {
                        "dpi": self._resolution.dpi,
                        "preset": self._preset.name,
                        "elapsed_s": elapsed,
                    },
                )
                written += 1
                logger.info(
                    "%s: %dx%d -> %dx%d in %.2fs",
                    path.name,
                    buf.width,
                    buf.height,
                    enhanced.width,
                    enhanced.height,
                    elapsed,
                )
        finally:
            self._sink.close()
        return {
            "images_read": float(read),
            "images_written": float(written),
            "elapsed_s": float(time.time() - start),
        }
