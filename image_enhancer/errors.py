"""Exceptions raised by the enhancement core."""

from __future__ import annotations


class EnhancementError(ValueError):
    """Base class for structural errors in the enhancement pipeline."""


class InvalidDimension(EnhancementError):
    """A raster has zero size or its pixel data does not match its dimensions."""


class InvalidConfiguration(EnhancementError):
    """Settings, resolution or filter parameters are out of range or unknown."""
