"""Configuration models and the fixed resolution/preset catalogs."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Tuple, Union

from .errors import InvalidConfiguration

BASE_DPI = 72


@dataclass(frozen=True)
class ResolutionTarget:
    """Output resolution expressed as a dpi relative to the 72 dpi baseline."""

    name: str
    dpi: int
    description: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.dpi, bool) or not isinstance(self.dpi, int) or self.dpi <= 0:
            raise InvalidConfiguration(f"dpi must be a positive integer, got {self.dpi!r}")

    @property
    def scale_factor(self) -> float:
        return self.dpi / BASE_DPI


@dataclass(frozen=True)
class EnhancementSettings:
    """Immutable tuple of filter strengths consumed by the pipeline."""

    brightness: float = 1.0
    contrast: float = 1.0
    sharpness: float = 1.0
    deblur: float = 0.0
    denoise: float = 0.0

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidConfiguration(f"{field.name} must be a finite number, got {value!r}")
        if self.brightness <= 0:
            raise InvalidConfiguration("brightness must be > 0")
        if self.contrast <= 0:
            raise InvalidConfiguration("contrast must be > 0")
        for name in ("sharpness", "deblur", "denoise"):
            if getattr(self, name) < 0:
                raise InvalidConfiguration(f"{name} must be >= 0")


@dataclass(frozen=True)
class EnhancementPreset:
    """A named catalog entry of :class:`EnhancementSettings`."""

    name: str
    settings: EnhancementSettings


RESOLUTIONS: Tuple[ResolutionTarget, ...] = (
    ResolutionTarget("Standard Web", 72, "Best for web and digital display"),
    ResolutionTarget("Medium Quality", 150, "Good for larger screens and basic prints"),
    ResolutionTarget("Print Quality", 300, "Ideal for standard printing"),
    ResolutionTarget("High-Res Print", 600, "Perfect for professional printing"),
)

PRESETS: Tuple[EnhancementPreset, ...] = (
    EnhancementPreset("Balanced", EnhancementSettings(1.0, 1.0, 1.1, 0.5, 0.3)),
    EnhancementPreset("Clarity", EnhancementSettings(1.05, 1.1, 1.4, 0.8, 0.4)),
    EnhancementPreset("HDR", EnhancementSettings(1.15, 1.3, 1.2, 0.6, 0.5)),
    EnhancementPreset("AI Enhance", EnhancementSettings(1.1, 1.2, 1.5, 1.0, 0.7)),
)

DEFAULT_RESOLUTION = RESOLUTIONS[1]
DEFAULT_PRESET = PRESETS[0]


def get_resolution(key: Union[str, int]) -> ResolutionTarget:
    """Look up a catalog resolution by name (case-insensitive) or dpi."""

    if isinstance(key, int) or (isinstance(key, str) and key.strip().isdigit()):
        dpi = int(key)
        for target in RESOLUTIONS:
            if target.dpi == dpi:
                return target
        raise InvalidConfiguration(f"No catalog resolution with {dpi} dpi")
    wanted = key.strip().lower()
    for target in RESOLUTIONS:
        if target.name.lower() == wanted:
            return target
    raise InvalidConfiguration(f"Unknown resolution: {key!r}")


def get_preset(name: str) -> EnhancementPreset:
    """Look up a catalog preset by name (case-insensitive)."""

    wanted = name.strip().lower()
    for preset in PRESETS:
        if preset.name.lower() == wanted:
            return preset
    raise InvalidConfiguration(f"Unknown preset: {name!r}")


def resolve_settings(preset: EnhancementPreset, **overrides: Optional[float]) -> EnhancementSettings:
    """Return the preset settings with any non-``None`` overrides applied."""

    known = {field.name for field in fields(EnhancementSettings)}
    unknown = set(overrides) - known
    if unknown:
        raise InvalidConfiguration(f"Unknown settings: {', '.join(sorted(unknown))}")
    changes = {key: float(value) for key, value in overrides.items() if value is not None}
    if not changes:
        return preset.settings
    return replace(preset.settings, **changes)


@dataclass(frozen=True)
class JobConfig:
    """Immutable container with batch job options."""

    # IO
    input_path: Path
    output_dir: Path

    # Enhancement
    resolution: ResolutionTarget = DEFAULT_RESOLUTION
    preset: EnhancementPreset = DEFAULT_PRESET

    # Export
    jpg_quality: int = 95
    write_metadata: bool = True

    # Limits
    workers: int = 1
    max_images: Optional[int] = None
