# bead_map/quantize.py
from __future__ import annotations

"""
Batch quantizer: RGBA grid -> bead grid + per-colour counts + mean error.

Exports:
  as_grid(grid) -> U8Image
  composite_over_background(grid, background=BACKGROUND_RGB) -> U8Image
  iter_quantize_chunks(grid, palette, *, chunk_rows, ...) -> Iterator[QuantizationChunk]
  merge_chunks(chunks, palette) -> QuantizationResult
  quantize(grid, palette, *, workers=1, chunk_rows, ...) -> QuantizationResult
  render_rgb(result) -> U8Image

Pixels are independent. Work is split into row spans; within a span each
unique composited colour is matched once and scattered back, which gives the
same assignment as matching pixel by pixel. Span results merge by summing
counts and distance sums, so the outcome does not depend on worker count.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np

from .colour_convert import rgb_to_lab
from .constants import BACKGROUND_RGB, DEFAULT_CHUNK_ROWS, HYBRID_THRESHOLD
from .core_types import Counts, QuantizationChunk, QuantizationResult, U8Image
from .distance import delta_e2000
from .errors import ConfigurationError, InvalidChannelValue
from .match import nearest_indices
from .palette import Palette
from .utils import split_rows_by_size


def as_grid(grid: object) -> U8Image:
    """
    Validate a row-major (H, W, 3|4) grid and return it as uint8.

    Non-uint8 input must hold integral values in [0, 255]; anything else is
    a caller error and raises InvalidChannelValue. Ragged rows or a wrong
    shape raise ValueError.
    """
    arr = np.asarray(grid)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"expected (H, W, 3|4) grid, got shape {arr.shape}")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise ValueError(f"grid must be at least 1x1, got shape {arr.shape}")
    if arr.dtype == np.uint8:
        return arr
    if arr.dtype == np.bool_ or not np.issubdtype(arr.dtype, np.number):
        raise InvalidChannelValue(f"grid dtype {arr.dtype} is not numeric")

    values = arr.astype(np.float64)
    if not np.all(np.isfinite(values)):
        raise InvalidChannelValue("grid contains non-finite channel values")
    lo, hi = float(values.min()), float(values.max())
    if lo < 0.0 or hi > 255.0:
        raise InvalidChannelValue(
            f"grid channels outside [0, 255] (min={lo:g}, max={hi:g})", (lo, hi)
        )
    if not np.all(values == np.floor(values)):
        raise InvalidChannelValue("grid contains non-integer channel values")
    return values.astype(np.uint8)


def composite_over_background(
    grid: object, background: Sequence[int] = BACKGROUND_RGB
) -> U8Image:
    """
    Flatten alpha against an opaque background.

    Per channel: round(clamp(src * a + bg * (1 - a), 0, 255)) with a = alpha / 255.
    3-channel grids are already opaque and are returned as a copy.
    """
    arr = as_grid(grid)
    if arr.shape[2] == 3:
        return arr.copy()
    alpha = arr[..., 3:4].astype(np.float64) / 255.0
    bg = np.asarray(background, dtype=np.float64).reshape(1, 1, 3)
    mixed = arr[..., :3].astype(np.float64) * alpha + bg * (1.0 - alpha)
    # Round half up.
    return np.floor(np.clip(mixed, 0.0, 255.0) + 0.5).astype(np.uint8)


def _counts_from_indices(indices: np.ndarray, palette: Palette) -> Counts:
    """id -> count for used entries, in catalog order."""
    per_entry = np.bincount(indices.reshape(-1), minlength=len(palette))
    return {palette[j].id: int(n) for j, n in enumerate(per_entry.tolist()) if n}


def _quantize_span(
    rgb: U8Image, row_start: int, palette: Palette, threshold: float
) -> QuantizationChunk:
    """Match one opaque (h, W, 3) span."""
    height, width = rgb.shape[0], rgb.shape[1]
    flat = rgb.reshape(-1, 3)
    uniques, inverse = np.unique(flat, axis=0, return_inverse=True)
    inverse = inverse.reshape(-1)

    labs = np.array([rgb_to_lab(*px) for px in uniques.tolist()], dtype=np.float64)
    unique_idx, _ = nearest_indices(labs, palette, threshold)

    # Reported error is exact CIEDE2000 against the chosen bead.
    unique_err = np.array(
        [delta_e2000(labs[i], palette[int(j)].lab) for i, j in enumerate(unique_idx)],
        dtype=np.float64,
    )
    pixels_per_unique = np.bincount(inverse, minlength=uniques.shape[0])

    indices = unique_idx[inverse].reshape(height, width).astype(np.int32, copy=False)
    return QuantizationChunk(
        row_start=row_start,
        row_end=row_start + height,
        indices=indices,
        counts=_counts_from_indices(indices, palette),
        distance_sum=float(np.dot(pixels_per_unique, unique_err)),
    )


def iter_quantize_chunks(
    grid: object,
    palette: Palette,
    *,
    chunk_rows: int = DEFAULT_CHUNK_ROWS,
    threshold: float = HYBRID_THRESHOLD,
    background: Sequence[int] = BACKGROUND_RGB,
) -> Iterator[QuantizationChunk]:
    """
    Quantize a grid lazily, chunk_rows rows at a time.
    Callers may stop iterating between chunks; merge_chunks assembles a result.

    The palette, grid and chunk_rows are validated when this is called;
    only the matching itself is deferred.
    """
    if len(palette) == 0:
        raise ConfigurationError(f"no colours to match against in {palette!r}")
    rgb = composite_over_background(grid, background)
    spans = split_rows_by_size(rgb.shape[0], chunk_rows)
    return _iter_spans(rgb, spans, palette, threshold)


def _iter_spans(
    rgb: U8Image, spans: List[Tuple[int, int]], palette: Palette, threshold: float
) -> Iterator[QuantizationChunk]:
    for start, end in spans:
        yield _quantize_span(rgb[start:end], start, palette, threshold)


def merge_chunks(
    chunks: Iterable[QuantizationChunk], palette: Palette
) -> QuantizationResult:
    """
    Combine span results in row order. Counts and distance sums add up
    commutatively, so chunks computed on any worker merge the same way.
    """
    ordered: List[QuantizationChunk] = sorted(chunks, key=lambda c: c.row_start)
    if not ordered:
        raise ValueError("no chunks to merge")

    per_entry = {c.id: 0 for c in palette}
    distance_sum = 0.0
    for chunk in ordered:
        for colour_id, n in chunk.counts.items():
            per_entry[colour_id] += n
        distance_sum += chunk.distance_sum

    indices = np.vstack([c.indices for c in ordered]).astype(np.int32, copy=False)
    total = int(indices.size)
    return QuantizationResult(
        indices=indices,
        palette=palette,
        counts={k: v for k, v in per_entry.items() if v},
        mean_distance=distance_sum / total,
    )


def quantize(
    grid: object,
    palette: Palette,
    *,
    workers: int = 1,
    chunk_rows: int = DEFAULT_CHUNK_ROWS,
    threshold: float = HYBRID_THRESHOLD,
    background: Sequence[int] = BACKGROUND_RGB,
) -> QuantizationResult:
    """
    Map every pixel of an (H, W, 3|4) grid to its nearest bead.

    Args:
      grid: uint8 RGBA/RGB array or nested lists, row-major
      palette: view to match against (see Palette.filtered)
      workers: threads for span fan-out; 1 runs inline
      chunk_rows: rows per span
      threshold: hybrid ΔE76 refinement threshold
      background: colour transparent pixels are composited onto
    Returns:
      QuantizationResult with counts summing to H * W
    """
    if len(palette) == 0:
        raise ConfigurationError(f"no colours to match against in {palette!r}")
    rgb = composite_over_background(grid, background)
    spans = split_rows_by_size(rgb.shape[0], chunk_rows)

    if workers <= 1 or len(spans) == 1:
        chunks = [_quantize_span(rgb[s:e], s, palette, threshold) for s, e in spans]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(_quantize_span, rgb[s:e], s, palette, threshold)
                for s, e in spans
            ]
            chunks = [f.result() for f in futures]

    return merge_chunks(chunks, palette)


def render_rgb(result: QuantizationResult) -> U8Image:
    """(H, W, 3) uint8 image of the assigned bead colours."""
    return result.palette.rgb_array[result.indices].astype(np.uint8, copy=True)


__all__ = [
    "as_grid",
    "composite_over_background",
    "iter_quantize_chunks",
    "merge_chunks",
    "quantize",
    "render_rgb",
]
