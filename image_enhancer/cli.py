"""Command line entry point for the image enhancer."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .builders import build_job
from .config import (
    DEFAULT_PRESET,
    DEFAULT_RESOLUTION,
    PRESETS,
    RESOLUTIONS,
    EnhancementPreset,
    JobConfig,
    get_preset,
    get_resolution,
    resolve_settings,
)


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI parser."""

    parser = argparse.ArgumentParser(description="Resample and enhance images for print or web")
    parser.add_argument("input", type=Path, nargs="?")
    parser.add_argument("-o", "--out", type=Path)
    parser.add_argument(
        "--resolution",
        type=str,
        default=DEFAULT_RESOLUTION.name,
        help="catalog name or dpi (%s)" % ", ".join(str(r.dpi) for r in RESOLUTIONS),
    )
    parser.add_argument(
        "--preset",
        type=str,
        default=DEFAULT_PRESET.name,
        help="one of: %s" % ", ".join(p.name for p in PRESETS),
    )
    parser.add_argument("--jpgq", type=int, default=95)
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("--max", type=int, default=None)
    parser.add_argument("--no-metadata", action="store_true")
    parser.add_argument("--list", action="store_true", help="print the catalogs and exit")
    parser.add_argument("-v", "--verbose", action="store_true")

    override_group = parser.add_argument_group("Overrides", "Replace individual preset values")
    override_group.add_argument("--brightness", type=float, default=None)
    override_group.add_argument("--contrast", type=float, default=None)
    override_group.add_argument("--sharpness", type=float, default=None)
    override_group.add_argument("--deblur", type=float, default=None)
    override_group.add_argument("--denoise", type=float, default=None)

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse and check CLI arguments."""

    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.list and (args.input is None or args.out is None):
        parser.error("input and -o/--out are required")
    return args


def config_from_args(args: argparse.Namespace) -> JobConfig:
    """Convert CLI arguments into :class:`JobConfig`."""

    preset = get_preset(args.preset)
    settings = resolve_settings(
        preset,
        brightness=args.brightness,
        contrast=args.contrast,
        sharpness=args.sharpness,
        deblur=args.deblur,
        denoise=args.denoise,
    )
    if settings != preset.settings:
        preset = EnhancementPreset(f"{preset.name} Custom", settings)
    return JobConfig(
        input_path=args.input,
        output_dir=args.out,
        resolution=get_resolution(args.resolution),
        preset=preset,
        jpg_quality=args.jpgq,
        write_metadata=not args.no_metadata,
        workers=args.workers,
        max_images=args.max,
    )


def format_catalogs() -> str:
    lines = ["Resolutions:"]
    for target in RESOLUTIONS:
        lines.append(f"  {target.name:<16}{target.dpi:>4} dpi  {target.description}")
    lines.append("Presets:")
    for preset in PRESETS:
        s = preset.settings
        lines.append(
            f"  {preset.name:<16}brightness={s.brightness} contrast={s.contrast} "
            f"sharpness={s.sharpness} deblur={s.deblur} denoise={s.denoise}"
        )
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point used by ``python -m image_enhancer`` and scripts."""

    args = parse_args(argv)
    if args.list:
        print(format_catalogs())
        return
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        cfg = config_from_args(args)
        job = build_job(cfg)
    except (ValueError, FileNotFoundError) as exc:
        build_parser().error(str(exc))
    stats = job.run()
    print(f"Done. Stats: {stats}")


if __name__ == "__main__":  # pragma: no cover
    main()
