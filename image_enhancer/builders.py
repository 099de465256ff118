"""Factory helpers for assembling the batch job from configuration."""

from __future__ import annotations

from .config import JobConfig
from .pipeline import BatchEnhancementJob, EnhancementPipeline
from .readers import ImageFolderReader
from .sinks import DiskImageSink


def build_job(cfg: JobConfig) -> BatchEnhancementJob:
    """Assemble the full :class:`BatchEnhancementJob`."""

    if cfg.workers <= 0:
        raise ValueError("workers must be >= 1")
    reader = ImageFolderReader(cfg.input_path)
    pipeline = EnhancementPipeline(cfg.preset.settings, workers=cfg.workers)
    sink = DiskImageSink(
        cfg.output_dir,
        cfg.resolution,
        cfg.preset.name,
        cfg.jpg_quality,
        cfg.write_metadata,
    )
    return BatchEnhancementJob(
        reader,
        pipeline,
        cfg.resolution,
        cfg.preset,
        sink,
        cfg.max_images,
    )
