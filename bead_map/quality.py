# bead_map/quality.py
from __future__ import annotations

"""
Quality analysis of a finished bead grid.

Exports:
  analyze(original, assigned, palette=None) -> QualityReport

Error is exact CIEDE2000 between each original (uncomposited) source colour
and the Lab of the bead assigned to it. When the two grids differ in shape
only the overlapping region is scored, matched_pixels says how much that
was, and the report carries the DimensionMismatch.
"""

from typing import Optional, Sequence, Union

import numpy as np

from .colour_convert import rgb_to_lab
from .core_types import ColourId, IndexGrid, QualityReport, QuantizationResult
from .distance import delta_e2000
from .errors import DimensionMismatch
from .palette import Palette
from .quantize import as_grid
from .utils import warn

AssignedGrid = Union[QuantizationResult, Sequence[Sequence[ColourId]]]


def _assigned_indices(
    assigned: AssignedGrid, palette: Optional[Palette]
) -> tuple[IndexGrid, Palette]:
    if isinstance(assigned, QuantizationResult):
        return assigned.indices, assigned.palette
    if palette is None:
        raise ValueError("palette is required when assigned is a grid of ids")
    rows = [[palette.index_of(colour_id) for colour_id in row] for row in assigned]
    if not rows:
        return np.zeros((0, 0), dtype=np.int32), palette
    widths = {len(r) for r in rows}
    if len(widths) != 1:
        raise ValueError(f"assigned grid rows differ in length: {sorted(widths)}")
    return np.array(rows, dtype=np.int32).reshape(len(rows), widths.pop()), palette


def analyze(
    original: object,
    assigned: AssignedGrid,
    palette: Optional[Palette] = None,
) -> QualityReport:
    """
    Score how faithfully the assigned beads reproduce the original pixels.

    Args:
      original: (H, W, 3|4) source grid; alpha is ignored
      assigned: QuantizationResult, or rows of palette ids
      palette: lookup for ids; required only for a grid of ids
    Returns:
      QualityReport with average / max / min error and matched_pixels.
      An empty overlap gives zeros throughout.
    """
    src = as_grid(original)[..., :3]
    indices, pal = _assigned_indices(assigned, palette)

    src_shape = (int(src.shape[0]), int(src.shape[1]))
    dst_shape = (int(indices.shape[0]), int(indices.shape[1]))
    mismatch: Optional[DimensionMismatch] = None
    if src_shape != dst_shape:
        mismatch = DimensionMismatch(src_shape, dst_shape)
        rows, cols = mismatch.overlap_shape
        warn(f"quality: {mismatch}; scoring {cols}x{rows} overlap only")
    else:
        rows, cols = src_shape

    if rows == 0 or cols == 0:
        return QualityReport(0.0, 0.0, 0.0, 0, mismatch)

    src_flat = src[:rows, :cols].reshape(-1, 3).astype(np.int32)
    idx_flat = indices[:rows, :cols].reshape(-1, 1).astype(np.int32)

    # Each distinct (source colour, bead) pair is scored once.
    pairs, counts = np.unique(
        np.hstack([src_flat, idx_flat]), axis=0, return_counts=True
    )
    errors = np.array(
        [delta_e2000(rgb_to_lab(r, g, b), pal[j].lab) for r, g, b, j in pairs.tolist()],
        dtype=np.float64,
    )

    matched = int(counts.sum())
    return QualityReport(
        average_error=float(np.dot(counts, errors)) / matched,
        max_error=float(errors.max()),
        min_error=float(errors.min()),
        matched_pixels=matched,
        mismatch=mismatch,
    )


__all__ = ["analyze"]
