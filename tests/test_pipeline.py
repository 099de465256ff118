from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

import numpy as np
import pytest

from image_enhancer.config import PRESETS, RESOLUTIONS, EnhancementSettings, get_preset, get_resolution
from image_enhancer.pipeline import (
    BatchEnhancementJob,
    EnhancementPipeline,
    build_stages,
    enhance,
    enhance_async,
)
from image_enhancer.pixel_buffer import PixelBuffer
from image_enhancer.resamplers import target_dimensions


def _random_buffer(height: int, width: int, seed: int = 0) -> PixelBuffer:
    rng = np.random.default_rng(seed)
    return PixelBuffer.from_array(rng.integers(0, 256, (height, width, 4), dtype=np.uint8))


@dataclass
class FakeReader:
    items: List[Tuple[Path, PixelBuffer]]

    def images(self) -> Iterator[Tuple[Path, PixelBuffer]]:
        for item in self.items:
            yield item


class RecordingSink:
    def __init__(self) -> None:
        self.records: List[Tuple[Path, PixelBuffer, PixelBuffer, Dict[str, object]]] = []
        self.closed = False

    def write(
        self,
        source: Path,
        original: PixelBuffer,
        enhanced: PixelBuffer,
        metadata: Dict[str, object],
    ) -> None:
        self.records.append((source, original, enhanced, metadata))

    def close(self) -> None:
        self.closed = True


class DoublingResampler:
    def resample(self, src: PixelBuffer, target) -> PixelBuffer:
        return PixelBuffer.from_array(np.repeat(np.repeat(src.pixels, 2, axis=0), 2, axis=1))


def test_build_stages_keeps_fixed_order() -> None:
    stages = build_stages(get_preset("Balanced").settings)
    assert [stage.name for stage in stages] == ["denoise", "deblur", "tone", "sharpen"]


def test_build_stages_skips_noop_stages() -> None:
    settings = EnhancementSettings(brightness=1.1, contrast=0.9, sharpness=1.0, deblur=0.0, denoise=0.0)
    assert [stage.name for stage in build_stages(settings)] == ["tone"]


def test_uniform_gray_balanced_standard_web() -> None:
    src = PixelBuffer.filled(4, 4, (128, 128, 128, 255))
    out = enhance(src, get_resolution("Standard Web"), get_preset("Balanced").settings)

    assert (out.width, out.height) == (4, 4)
    expected = np.full((4, 4, 4), 128, dtype=np.uint8)
    expected[:, :, 3] = 255
    # denoise (radius 1) and deblur (radius 2) leave flat regions alone; the
    # un-normalised sharpen kernel scales the interior by 1.08
    expected[1:3, 1:3, :3] = 138
    np.testing.assert_array_equal(out.pixels, expected)
    assert np.all(src.pixels[:, :, :3] == 128)


@pytest.mark.parametrize("preset", PRESETS, ids=lambda p: p.name)
def test_alpha_survives_whole_pipeline(preset) -> None:
    src = _random_buffer(12, 10, seed=1)
    out = enhance(src, RESOLUTIONS[0], preset.settings)
    np.testing.assert_array_equal(out.alpha, src.alpha)


def test_source_buffer_is_not_mutated() -> None:
    src = _random_buffer(10, 10, seed=2)
    before = src.to_bytes()
    enhance(src, RESOLUTIONS[0], get_preset("AI Enhance").settings)
    assert src.to_bytes() == before


@pytest.mark.parametrize("resolution", RESOLUTIONS, ids=lambda r: r.name)
@pytest.mark.parametrize("preset", PRESETS, ids=lambda p: p.name)
def test_every_catalog_combination_completes(resolution, preset) -> None:
    src = _random_buffer(16, 16, seed=3)
    out = enhance(src, resolution, preset.settings)
    assert (out.width, out.height) == target_dimensions(16, 16, resolution)
    assert out.pixels.dtype == np.uint8
    assert out.pixels.shape == (out.height, out.width, 4)


def test_pipeline_uses_injected_resampler() -> None:
    pipeline = EnhancementPipeline(EnhancementSettings(), resampler=DoublingResampler())
    out = pipeline.run(PixelBuffer.filled(3, 2, (1, 2, 3, 4)), RESOLUTIONS[0])
    assert (out.width, out.height) == (6, 4)
    assert pipeline.stage_names == ["tone"]


def test_workers_do_not_change_result() -> None:
    src = _random_buffer(20, 24, seed=4)
    settings = get_preset("AI Enhance").settings
    single = enhance(src, RESOLUTIONS[1], settings)
    tiled = enhance(src, RESOLUTIONS[1], settings, workers=3)
    np.testing.assert_array_equal(tiled.pixels, single.pixels)


def test_enhance_async_resolves_with_final_buffer() -> None:
    src = _random_buffer(8, 8, seed=5)
    settings = get_preset("HDR").settings
    result = asyncio.run(enhance_async(src, RESOLUTIONS[0], settings))
    np.testing.assert_array_equal(result.pixels, enhance(src, RESOLUTIONS[0], settings).pixels)


def test_batch_job_processes_and_records_images() -> None:
    items = [
        (Path("a.png"), PixelBuffer.filled(4, 4, (10, 20, 30, 255))),
        (Path("b.png"), PixelBuffer.filled(6, 4, (40, 50, 60, 255))),
    ]
    preset = get_preset("Clarity")
    resolution = get_resolution("Medium Quality")
    sink = RecordingSink()
    job = BatchEnhancementJob(
        FakeReader(items),
        EnhancementPipeline(preset.settings),
        resolution,
        preset,
        sink,
    )
    stats = job.run()

    assert sink.closed
    assert [record[0].name for record in sink.records] == ["a.png", "b.png"]
    enhanced = sink.records[1][2]
    assert (enhanced.width, enhanced.height) == (13, 8)
    assert sink.records[0][3]["dpi"] == 150
    assert sink.records[0][3]["preset"] == "Clarity"
    assert stats["images_read"] == 2
    assert stats["images_written"] == 2


def test_batch_job_respects_max_images() -> None:
    items = [(Path(f"{idx}.png"), PixelBuffer.filled(2, 2, (0, 0, 0, 255))) for idx in range(3)]
    sink = RecordingSink()
    preset = get_preset("Balanced")
    job = BatchEnhancementJob(
        FakeReader(items),
        EnhancementPipeline(preset.settings),
        RESOLUTIONS[0],
        preset,
        sink,
        max_images=1,
    )
    stats = job.run()
    assert len(sink.records) == 1
    assert stats["images_written"] == 1
    assert sink.closed
