# bead_map/constants.py
"""
Tunables shared across the project.

- Colour science: D65 reference white, Lab piecewise constants
- Matching: hybrid refinement threshold, compositing background
- Batching: chunk size for row-span processing
- Purchase estimate: spare ratio, rounding step, package sizes, unit cost
"""
from __future__ import annotations

from typing import Tuple

# ================
# Colour science
# ================
D65_WHITE: Tuple[float, float, float] = (95.047, 100.000, 108.883)
LAB_EPSILON: float = 0.008856
LAB_KAPPA_LINEAR: float = 7.787
LAB_OFFSET: float = 16.0 / 116.0

SRGB_GAMMA_THRESHOLD: float = 0.04045

# Rows of the sRGB -> XYZ (D65) matrix.
SRGB_TO_XYZ: Tuple[Tuple[float, float, float], ...] = (
    (0.4124564, 0.3575761, 0.1804375),
    (0.2126729, 0.7151522, 0.0721750),
    (0.0193339, 0.1191920, 0.9503041),
)

# ==========
# Matching
# ==========
# ΔE76 below this is refined with CIEDE2000 for that candidate.
HYBRID_THRESHOLD: float = 5.0

BACKGROUND_RGB: Tuple[int, int, int] = (255, 255, 255)

DEFAULT_TOP_K: int = 5

# ==========
# Batching
# ==========
DEFAULT_CHUNK_ROWS: int = 16

# =================
# Purchase estimate
# =================
# Applied with integer maths (see report.suggested_quantity); float ceil differs.
PURCHASE_SPARE_RATIO: float = 1.1
PURCHASE_ROUND_TO: int = 100
PACKAGE_SIZES: Tuple[int, ...] = (200, 500, 1000, 2000)
COST_PER_BEAD: float = 0.05

__all__ = [
    "D65_WHITE",
    "LAB_EPSILON",
    "LAB_KAPPA_LINEAR",
    "LAB_OFFSET",
    "SRGB_GAMMA_THRESHOLD",
    "SRGB_TO_XYZ",
    "HYBRID_THRESHOLD",
    "BACKGROUND_RGB",
    "DEFAULT_TOP_K",
    "DEFAULT_CHUNK_ROWS",
    "PURCHASE_SPARE_RATIO",
    "PURCHASE_ROUND_TO",
    "PACKAGE_SIZES",
    "COST_PER_BEAD",
]
