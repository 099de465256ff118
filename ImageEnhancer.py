#!/usr/bin/env python3
"""Standalone entry script for the image enhancer."""

from __future__ import annotations

from image_enhancer.cli import main


if __name__ == "__main__":
    main()
