#!/usr/bin/env python3
"""Render the demo scene.

This script demonstrates end-to-end rendering with the Whitted tracer. It
builds the demo scene, renders it band by band while reporting progress, and
saves a PNG.

Usage:
    python -m examples.render_demo_scene [options]

Options:
    --width WIDTH       Image width in pixels (default: 640)
    --height HEIGHT     Image height in pixels (default: 480)
    --output OUTPUT     Output file path (default: whitted_demo.png)
    --band-rows ROWS    Scanlines per progress update (default: 16)
    --gamma GAMMA       Gamma correction for the PNG (default: 1.0)
    --cpu               Force the CPU backend
    --verbose           Enable debug logging

Example:
    python -m examples.render_demo_scene --width 320 --height 240 --cpu
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_demo_scene")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the Whitted demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=640,
        help="Image width in pixels (default: 640)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=480,
        help="Image height in pixels (default: 480)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="whitted_demo.png",
        help="Output file path (default: whitted_demo.png)",
    )
    parser.add_argument(
        "--band-rows",
        type=int,
        default=16,
        help="Scanlines per progress update, at most 16 (default: 16)",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=1.0,
        help="Gamma correction for the saved PNG (default: 1.0)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def render_demo_scene(
    width: int = 640,
    height: int = 480,
    output_path: str = "whitted_demo.png",
    band_rows: int = 16,
    gamma: float = 1.0,
) -> Path:
    """Render the demo scene and save to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        output_path: Output file path (PNG).
        band_rows: Scanlines rendered between progress updates.
        gamma: Gamma correction applied when saving.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so Taichi fields are declared after ti.init()
    from whitted.core.renderer import Renderer
    from whitted.preview.export import save_png
    from whitted.scene.demo import create_demo_scene

    logger.info("Creating demo scene (%dx%d)", width, height)
    scene, camera = create_demo_scene()
    logger.debug(
        "Scene has %d primitives and %d lights",
        scene.get_primitive_count(),
        scene.get_light_count(),
    )

    renderer = Renderer(width, height, camera=camera, band_rows=band_rows)

    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        elapsed = time.time() - start_time
        logger.info(
            "Progress: %d/%d rows (%.1f%%) - %.2fs",
            rows_done,
            total_rows,
            100.0 * rows_done / total_rows,
            elapsed,
        )

    renderer.render(callback=progress_callback)

    output_file = Path(output_path)
    save_png(renderer, str(output_file), gamma=gamma)

    logger.info("Saved to %s in %.2fs", output_file.absolute(), time.time() - start_time)
    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        try:
            ti.init(arch=ti.gpu)
        except RuntimeError:
            logger.warning("GPU backend unavailable, using CPU")
            ti.init(arch=ti.cpu)

    try:
        render_demo_scene(
            width=args.width,
            height=args.height,
            output_path=args.output,
            band_rows=args.band_rows,
            gamma=args.gamma,
        )
        return 0
    except Exception:
        logger.exception("Rendering failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
