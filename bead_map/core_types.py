# bead_map/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .errors import DimensionMismatch

if TYPE_CHECKING:  # pragma: no cover
    from .palette import Palette

# Basic aliases

RGBTuple = Tuple[int, int, int]
RGBATuple = Tuple[int, int, int, int]
LabTuple = Tuple[float, float, float]
HexStr = str
ColourId = str

U8Image = NDArray[np.uint8]  # (H, W, 3) or (H, W, 4)
IndexGrid = NDArray[np.int32]  # (H, W) palette-view indices
Lab = NDArray[np.float64]  # (..., 3) CIE Lab

Counts = Dict[ColourId, int]  # id -> occurrences

# Value objects


@dataclass(frozen=True)
class PaletteColor:
    """Catalog entry with its Lab coordinates computed once at construction."""

    id: ColourId
    name: str
    category: str
    rgb: RGBTuple
    lab: LabTuple
    special: bool = False

    @property
    def hex(self) -> HexStr:
        return rgb_to_hex(self.rgb)


@dataclass(frozen=True)
class MatchResult:
    """Chosen palette entry, its position in the view, and the distance."""

    color: PaletteColor
    distance: float
    index: int = 0


@dataclass(frozen=True, eq=False)
class QuantizationChunk:
    """Quantized row span [row_start, row_end) of a grid."""

    row_start: int
    row_end: int
    indices: IndexGrid  # (row_end - row_start, W)
    counts: Counts
    distance_sum: float

    @property
    def pixel_count(self) -> int:
        return int(self.indices.size)


@dataclass(frozen=True, eq=False)
class QuantizationResult:
    """
    Bead grid for a whole image.

    indices index into `palette`, the (possibly filtered) view used for
    matching. counts sums to width * height.
    """

    indices: IndexGrid  # (H, W)
    palette: "Palette"
    counts: Counts
    mean_distance: float

    @property
    def height(self) -> int:
        return int(self.indices.shape[0])

    @property
    def width(self) -> int:
        return int(self.indices.shape[1])

    @property
    def total(self) -> int:
        return int(sum(self.counts.values()))

    @property
    def colour_count(self) -> int:
        """Number of distinct bead colours used."""
        return len(self.counts)

    @property
    def ids(self) -> List[List[ColourId]]:
        """Grid of colour identifiers, one list per row."""
        id_of = self.palette.ids
        return [[id_of[int(j)] for j in row] for row in self.indices]

    def color_at(self, row: int, col: int) -> PaletteColor:
        return self.palette[int(self.indices[row, col])]


@dataclass(frozen=True)
class QualityReport:
    """Aggregate CIEDE2000 error between source pixels and their beads."""

    average_error: float
    max_error: float
    min_error: float
    matched_pixels: int
    mismatch: Optional[DimensionMismatch] = field(default=None, compare=False)

    @property
    def score(self) -> int:
        """0..100 quality percentage (100 minus the mean error, halves round up)."""
        return int(clamp_value(math.floor(100.0 - self.average_error + 0.5), 0, 100))

    @property
    def partial(self) -> bool:
        return self.mismatch is not None


# Small helpers


def clamp_value(value: float, lo: float, hi: float) -> float:
    """Clamp value to [lo, hi]."""
    return lo if value < lo else hi if value > hi else value


def rgb_to_hex(rgb: Sequence[int]) -> HexStr:
    """RGB tuple to uppercase hex string '#RRGGBB'."""
    return f"#{int(rgb[0]):02X}{int(rgb[1]):02X}{int(rgb[2]):02X}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb', '#rrggbb' or '#rrggbbaa' (case-insensitive); alpha is dropped."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        s = f"#{s}"
    if len(s) == 4:
        r, g, b = s[1], s[2], s[3]
        s = f"#{r}{r}{g}{g}{b}{b}"
    if len(s) not in (7, 9):
        raise ValueError(f"hex must be '#rrggbb' or '#rgb': {hex_str!r}")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


__all__ = [
    # aliases / types
    "RGBTuple",
    "RGBATuple",
    "LabTuple",
    "HexStr",
    "ColourId",
    "U8Image",
    "IndexGrid",
    "Lab",
    "Counts",
    # value objects
    "PaletteColor",
    "MatchResult",
    "QuantizationChunk",
    "QuantizationResult",
    "QualityReport",
    # helpers
    "clamp_value",
    "rgb_to_hex",
    "hex_to_rgb",
]
