# bead_map/match.py
from __future__ import annotations

"""
Nearest-colour lookups against a Palette view.

Exports:
  find_nearest(rgb, palette, threshold=HYBRID_THRESHOLD) -> MatchResult
  find_nearest_lab(lab, palette, threshold=HYBRID_THRESHOLD) -> MatchResult
  find_nearest_k(rgb, palette, k=DEFAULT_TOP_K) -> list[MatchResult]
  nearest_indices(labs, palette, threshold=HYBRID_THRESHOLD) -> (indices, distances)

find_nearest* rank candidates with the hybrid distance (ΔE76 screen, CIEDE2000
below the threshold). find_nearest_k is diagnostic and always uses exact
CIEDE2000. Ties resolve to the earlier catalog entry in both.
"""

from typing import List, Sequence, Tuple

import numpy as np

from .colour_convert import rgb_to_lab
from .constants import DEFAULT_TOP_K, HYBRID_THRESHOLD
from .core_types import Lab, LabTuple, MatchResult
from .distance import delta_e2000, delta_e2000_vec, delta_e76_vec
from .errors import ConfigurationError
from .palette import Palette


def _require_candidates(palette: Palette) -> None:
    if len(palette) == 0:
        raise ConfigurationError(f"no colours to match against in {palette!r}")


def _hybrid_row(lab: Sequence[float], palette: Palette, threshold: float) -> np.ndarray:
    """Hybrid distance from one Lab colour to every palette entry."""
    dist = delta_e76_vec(lab, palette.lab_array)
    for j in np.nonzero(dist < threshold)[0].tolist():
        dist[j] = delta_e2000(lab, palette[j].lab)
    return dist


def find_nearest_lab(
    lab: Sequence[float], palette: Palette, threshold: float = HYBRID_THRESHOLD
) -> MatchResult:
    """Closest palette entry to a Lab colour under the hybrid distance."""
    _require_candidates(palette)
    dist = _hybrid_row(lab, palette, threshold)
    j = int(np.argmin(dist))  # first minimum wins
    return MatchResult(color=palette[j], distance=float(dist[j]), index=j)


def find_nearest(
    rgb: Sequence[int], palette: Palette, threshold: float = HYBRID_THRESHOLD
) -> MatchResult:
    """
    Closest palette entry to an 8-bit RGB colour (extra channels ignored).

    Raises:
      ConfigurationError: the palette view is empty.
      InvalidChannelValue: a channel is outside [0, 255].
    """
    _require_candidates(palette)
    return find_nearest_lab(rgb_to_lab(rgb[0], rgb[1], rgb[2]), palette, threshold)


def find_nearest_k(
    rgb: Sequence[int], palette: Palette, k: int = DEFAULT_TOP_K
) -> List[MatchResult]:
    """
    The k closest entries by exact CIEDE2000, ascending.
    Returns every entry when k exceeds the palette size.
    """
    if k <= 0:
        raise ValueError(f"k must be positive, got {k}")
    _require_candidates(palette)
    lab: LabTuple = rgb_to_lab(rgb[0], rgb[1], rgb[2])
    dist = delta_e2000_vec(lab, palette.lab_array)
    # Stable sort keeps catalog order among equal distances.
    order = np.argsort(dist, kind="stable")[:k]
    return [
        MatchResult(color=palette[int(j)], distance=float(dist[j]), index=int(j))
        for j in order
    ]


def nearest_indices(
    labs: Lab, palette: Palette, threshold: float = HYBRID_THRESHOLD
) -> Tuple[np.ndarray, np.ndarray]:
    """
    find_nearest_lab for each row of an [N,3] Lab array.

    Returns:
      indices: int32 [N] palette-view positions
      distances: float64 [N] hybrid distances
    """
    _require_candidates(palette)
    rows = np.asarray(labs, dtype=np.float64).reshape(-1, 3)
    indices = np.empty((rows.shape[0],), dtype=np.int32)
    distances = np.empty((rows.shape[0],), dtype=np.float64)
    for i in range(rows.shape[0]):
        dist = _hybrid_row(rows[i], palette, threshold)
        j = int(np.argmin(dist))
        indices[i] = j
        distances[i] = dist[j]
    return indices, distances


__all__ = [
    "find_nearest",
    "find_nearest_lab",
    "find_nearest_k",
    "nearest_indices",
]
