# bead_map/__init__.py
"""
bead_map package.

Purpose:
  Map photographic colours onto a fixed catalog of craft-bead colours in CIE Lab,
  and report per-colour counts and match quality. See bead_map.cli for the CLI.

Public API:
  build_palette   : catalog -> immutable Palette (Lab computed once).
  default_palette : the full catalog, built on first use.
  Palette         : ordered palette with filtered(...) views.
  find_nearest    : hybrid ΔE76/CIEDE2000 nearest bead for one colour.
  find_nearest_k  : top-k beads by exact CIEDE2000.
  quantize        : RGBA grid -> QuantizationResult (ids, counts, mean error).
  analyze         : original grid + bead grid -> QualityReport.
  colour_convert  : rgb_to_lab and friends.
  distance        : delta_e76, delta_e2000, hybrid_distance.
  report          : usage list and purchase estimate.

Quick start:
  from bead_map import build_palette, quantize, analyze
  palette = build_palette().filtered(exclude_special=True)
  result = quantize(grid, palette)
  quality = analyze(grid, result)
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import core_types
from . import distance
from . import palette_data
from . import report
from . import utils

from .core_types import (  # noqa: E402
    MatchResult,
    PaletteColor,
    QualityReport,
    QuantizationChunk,
    QuantizationResult,
)
from .errors import (  # noqa: E402
    BeadMapError,
    ConfigurationError,
    DimensionMismatch,
    InvalidChannelValue,
)
from .palette import Palette  # noqa: E402
from .palette_data import BEAD_COLORS, build_palette, default_palette  # noqa: E402
from .match import find_nearest, find_nearest_k  # noqa: E402
from .quantize import iter_quantize_chunks, merge_chunks, quantize  # noqa: E402
from .quality import analyze  # noqa: E402

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "distance",
    "palette_data",
    "report",
    "utils",
    "MatchResult",
    "PaletteColor",
    "QualityReport",
    "QuantizationChunk",
    "QuantizationResult",
    "BeadMapError",
    "ConfigurationError",
    "DimensionMismatch",
    "InvalidChannelValue",
    "Palette",
    "BEAD_COLORS",
    "build_palette",
    "default_palette",
    "find_nearest",
    "find_nearest_k",
    "iter_quantize_chunks",
    "merge_chunks",
    "quantize",
    "analyze",
]
