"""Image enhancer package."""

from .config import (
    PRESETS,
    RESOLUTIONS,
    EnhancementPreset,
    EnhancementSettings,
    JobConfig,
    ResolutionTarget,
    get_preset,
    get_resolution,
)
from .errors import EnhancementError, InvalidConfiguration, InvalidDimension
from .pixel_buffer import PixelBuffer
from .resamplers import resample
from .preprocessors import deblur, denoise
from .adjusters import adjust_tone
from .postprocessors import sharpen
from .pipeline import EnhancementPipeline, enhance, enhance_async
from .cli import main

__all__ = [
    "PixelBuffer",
    "ResolutionTarget",
    "EnhancementSettings",
    "EnhancementPreset",
    "JobConfig",
    "RESOLUTIONS",
    "PRESETS",
    "get_resolution",
    "get_preset",
    "EnhancementError",
    "InvalidDimension",
    "InvalidConfiguration",
    "resample",
    "denoise",
    "deblur",
    "adjust_tone",
    "sharpen",
    "EnhancementPipeline",
    "enhance",
    "enhance_async",
    "main",
]
