#!/usr/bin/env python3
"""
bead-map
Convert an image into a bead pattern using the bead catalog.

Usage:
  bead-map INPUT [--width W] [--height H] [--exclude-special] [--exclude-translucent]
           [--workers N] [--preview OUT.png] [--debug]
  bead-map --probe R,G,B [--top-k K]

Input:
  Any Pillow-readable image. It is resized to exactly W x H beads; transparent
  pixels are composited onto white before matching.

Output:
  Colour usage (most used first, grouped by category), match quality and a
  shopping list with spare beads. --preview writes the bead grid as a PNG.

Notes:
  Matching uses a ΔE76 screen refined with CIEDE2000 for close candidates.
  CPU bound; bead rows are spread over a ThreadPoolExecutor.
"""

from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from bead_map.constants import DEFAULT_CHUNK_ROWS, DEFAULT_TOP_K, HYBRID_THRESHOLD
from bead_map.core_types import RGBTuple
from bead_map.errors import BeadMapError
from bead_map.match import find_nearest_k
from bead_map.palette import Palette
from bead_map.palette_data import build_palette
from bead_map.quality import analyze
from bead_map.quantize import quantize, render_rgb
from bead_map.report import colour_usage, estimate_purchase, group_by_category
from bead_map.utils import (
    debug_log,
    default_workers,
    enable_line_buffered_stdout,
    error,
    format_percentage,
    format_seconds_compact,
    key_value_pairs_to_string,
    load_image_rgba,
    log,
    print_banner,
    print_config_line,
    save_png_rgb,
    warn,
)

# CLI args & small helpers


def _parse_rgb(text: str) -> RGBTuple:
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected R,G,B, got {text!r}")
    try:
        r, g, b = (int(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected integers, got {text!r}")
    for v in (r, g, b):
        if not 0 <= v <= 255:
            raise argparse.ArgumentTypeError(f"channel outside 0..255 in {text!r}")
    return (r, g, b)


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text!r}")
    return value


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for bead pattern conversion.

    Returns:
      argparse.Namespace with:
        src: Path to the input image (optional with --probe)
        width, height: bead grid size
        resample: resize filter name
        exclude_special / exclude_translucent: palette filters
        workers: threads for quantization
        chunk_rows: rows per work unit
        preview: optional PNG path for the bead grid
        preview_scale: pixels per bead in the preview
        probe: optional RGB triple to rank beads for
        top_k: number of beads listed for --probe
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="bead-map",
        description="Convert an image into a bead pattern from the bead catalog.",
    )
    parser.add_argument("src", type=Path, nargs="?", help="Input image")
    parser.add_argument("--width", type=_positive_int, default=50, help="Beads per row")
    parser.add_argument("--height", type=_positive_int, default=50, help="Bead rows")
    parser.add_argument(
        "--resample",
        choices=["nearest", "bilinear", "bicubic", "lanczos"],
        default="lanczos",
        help="Scaling filter used to reach the bead grid size.",
    )
    parser.add_argument(
        "--exclude-special",
        action="store_true",
        help="Skip glow, fluorescent, translucent, metallic and pearlescent beads",
    )
    parser.add_argument(
        "--exclude-translucent", action="store_true", help="Skip translucent beads"
    )
    parser.add_argument(
        "--workers", type=int, default=default_workers(), help="Matching threads"
    )
    parser.add_argument(
        "--chunk-rows", type=_positive_int, default=DEFAULT_CHUNK_ROWS, help="Rows per work unit"
    )
    parser.add_argument(
        "--preview", type=Path, default=None, help="Write the bead grid to this PNG"
    )
    parser.add_argument(
        "--preview-scale", type=_positive_int, default=10, help="Preview pixels per bead"
    )
    parser.add_argument(
        "--probe",
        type=_parse_rgb,
        default=None,
        metavar="R,G,B",
        help="List the closest beads for one colour and exit",
    )
    parser.add_argument(
        "--top-k", type=_positive_int, default=DEFAULT_TOP_K, help="Beads listed for --probe"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def _probe(rgb: RGBTuple, palette: Palette, top_k: int) -> None:
    print_banner(f"probe {rgb[0]},{rgb[1]},{rgb[2]}")
    for rank, m in enumerate(find_nearest_k(rgb, palette, k=top_k), start=1):
        log(f"  {rank}. {m.color.id}  {m.color.hex}  {m.color.name}: dE2000={m.distance:.2f}")


def _process_image(args: argparse.Namespace, palette: Palette) -> None:
    """load -> quantize -> quality -> report -> optional preview."""
    t_start = time.perf_counter()
    size: Tuple[int, int] = (args.width, args.height)
    grid = load_image_rgba(args.src, size=size, resample=args.resample)
    t_loaded = time.perf_counter()

    print_banner(args.src.name)
    print_config_line(
        "quantize",
        [
            ("Grid", f"{args.width}x{args.height}"),
            ("Palette", len(palette)),
            ("Workers", args.workers),
            ("Chunk rows", args.chunk_rows),
        ],
        debug=args.debug,
    )

    result = quantize(
        grid, palette, workers=args.workers, chunk_rows=args.chunk_rows
    )
    t_quantized = time.perf_counter()
    quality = analyze(grid, result)
    t_analyzed = time.perf_counter()

    log("Colours used:")
    for category, lines in group_by_category(colour_usage(result)).items():
        log(f"  [{category}]")
        for line in lines:
            share = line.count / result.total
            log(
                f"    {line.id}  {line.hex}  {line.name}: {line.count:,} "
                f"({format_percentage(share)})"
            )
    log(
        key_value_pairs_to_string(
            [
                ("Total beads", result.total),
                ("Colours", result.colour_count),
                ("Mean dE", result.mean_distance),
            ]
        )
    )
    log(
        key_value_pairs_to_string(
            [
                ("Quality", f"{quality.score}%"),
                ("Avg error", quality.average_error),
                ("Max error", quality.max_error),
                ("Min error", quality.min_error),
                ("Scored", quality.matched_pixels),
            ]
        )
    )

    estimate = estimate_purchase(result.counts, palette)
    log("Shopping list (10% spare):")
    for pl in estimate.lines:
        log(f"  {pl.id}  {pl.name}: need {pl.needed:,}  buy {pl.suggested:,} ({pl.package} pack)")
    log(
        key_value_pairs_to_string(
            [
                ("Needed", estimate.total_needed),
                ("Suggested", estimate.total_suggested),
                ("Estimated cost", f"{estimate.estimated_cost:.2f}"),
            ]
        )
    )

    if args.preview is not None:
        save_png_rgb(args.preview, render_rgb(result), scale=args.preview_scale)
        log(f"Wrote {args.preview}")

    if args.debug:
        debug_log(
            f"load={format_seconds_compact(t_loaded - t_start)}  "
            f"quantize={format_seconds_compact(t_quantized - t_loaded)}  "
            f"quality={format_seconds_compact(t_analyzed - t_quantized)}"
        )
    else:
        log(f"Total time {format_seconds_compact(time.perf_counter() - t_start)}")


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point. Returns the process exit code:
      0 success, 1 bead_map error, 2 missing input.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    print_config_line(
        "run",
        [("CPU cores", os.cpu_count() or 1), ("Workers", args.workers)],
        debug=False,
    )

    try:
        palette = build_palette().filtered(
            exclude_special=args.exclude_special,
            exclude_translucent=args.exclude_translucent,
        )
    except BeadMapError as e:
        error(str(e))
        return 1

    if args.debug:
        gap = palette.min_pairwise_distance()
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Palette", palette.name),
                    ("Colours", len(palette)),
                    ("Min pairwise dE76", gap),
                    ("Hybrid threshold", HYBRID_THRESHOLD),
                ]
            )
        )
        if gap < HYBRID_THRESHOLD:
            warn("palette entries closer than the hybrid threshold; several may be refined per pixel")

    if args.probe is not None:
        try:
            _probe(args.probe, palette, args.top_k)
        except ValueError as e:
            error(str(e))
            return 1
        return 0

    if args.src is None:
        error("no input image (pass INPUT or --probe R,G,B)")
        return 2
    if not args.src.exists():
        error(f"not found: {args.src}")
        return 2

    try:
        _process_image(args, palette)
    except BeadMapError as e:
        error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
