# bead_map/distance.py
from __future__ import annotations

"""
Perceptual colour differences in CIE Lab.

Exports:
  delta_e76(lab1, lab2)            Euclidean distance, the cheap screen
  delta_e2000(lab1, lab2)          CIEDE2000 scalar reference
  delta_e76_vec(lab, pal_lab)      one vs many, NumPy
  delta_e2000_vec(lab, pal_lab)    one vs many, scalar routine per row
  hybrid_distance(lab1, lab2)      ΔE76, refined to CIEDE2000 below the threshold
"""

import math
from typing import Sequence, Union

import numpy as np
from numpy.typing import NDArray

from .constants import HYBRID_THRESHOLD

LabLike = Union[Sequence[float], NDArray[np.floating]]

_POW25_7 = 25.0**7


def delta_e76(lab1: LabLike, lab2: LabLike) -> float:
    """Euclidean distance between two Lab colours."""
    dL = float(lab1[0]) - float(lab2[0])
    da = float(lab1[1]) - float(lab2[1])
    db = float(lab1[2]) - float(lab2[2])
    return math.sqrt(dL * dL + da * da + db * db)


def _hue_deg(a_val: float, b_val: float) -> float:
    if a_val == 0.0 and b_val == 0.0:
        return 0.0
    ang = math.degrees(math.atan2(b_val, a_val))
    return ang + 360.0 if ang < 0.0 else ang


def delta_e2000(lab1: LabLike, lab2: LabLike) -> float:
    """
    CIEDE2000 distance between two Lab colours (kL = kC = kH = 1).
    Scalar reference implementation; agrees with the Sharma et al. test data.
    """
    L1, a1, b1 = float(lab1[0]), float(lab1[1]), float(lab1[2])
    L2, a2, b2 = float(lab2[0]), float(lab2[1]), float(lab2[2])

    C1 = math.hypot(a1, b1)
    C2 = math.hypot(a2, b2)
    C_bar = 0.5 * (C1 + C2)
    C_bar7 = C_bar**7
    G = 0.5 * (1.0 - math.sqrt(C_bar7 / (C_bar7 + _POW25_7)))

    a1p = (1.0 + G) * a1
    a2p = (1.0 + G) * a2
    C1p = math.hypot(a1p, b1)
    C2p = math.hypot(a2p, b2)

    h1p = _hue_deg(a1p, b1)
    h2p = _hue_deg(a2p, b2)

    dLp = L2 - L1
    dCp = C2p - C1p

    # Hue difference across the 0/360 seam; undefined hue counts as 0.
    dhp = h2p - h1p
    if C1p * C2p == 0.0:
        dhp = 0.0
    elif dhp > 180.0:
        dhp -= 360.0
    elif dhp < -180.0:
        dhp += 360.0

    dHp = 2.0 * math.sqrt(C1p * C2p) * math.sin(math.radians(dhp / 2.0))

    L_bar = 0.5 * (L1 + L2)
    C_bar_p = 0.5 * (C1p + C2p)

    if C1p * C2p == 0.0:
        h_bar_p = h1p + h2p
    else:
        h_sum = h1p + h2p
        if abs(h1p - h2p) <= 180.0:
            h_bar_p = 0.5 * h_sum
        elif h_sum < 360.0:
            h_bar_p = 0.5 * (h_sum + 360.0)
        else:
            h_bar_p = 0.5 * (h_sum - 360.0)

    T = (
        1.0
        - 0.17 * math.cos(math.radians(h_bar_p - 30.0))
        + 0.24 * math.cos(math.radians(2.0 * h_bar_p))
        + 0.32 * math.cos(math.radians(3.0 * h_bar_p + 6.0))
        - 0.20 * math.cos(math.radians(4.0 * h_bar_p - 63.0))
    )

    d_theta = 30.0 * math.exp(-(((h_bar_p - 275.0) / 25.0) ** 2.0))
    C_bar_p7 = C_bar_p**7
    R_c = 2.0 * math.sqrt(C_bar_p7 / (C_bar_p7 + _POW25_7))

    L_term = (L_bar - 50.0) ** 2.0
    S_l = 1.0 + (0.015 * L_term) / math.sqrt(20.0 + L_term)
    S_c = 1.0 + 0.045 * C_bar_p
    S_h = 1.0 + 0.015 * C_bar_p * T
    R_t = -math.sin(math.radians(2.0 * d_theta)) * R_c

    l_part = dLp / S_l
    c_part = dCp / S_c
    h_part = dHp / S_h
    return math.sqrt(
        max(0.0, l_part * l_part + c_part * c_part + h_part * h_part + R_t * c_part * h_part)
    )


def delta_e76_vec(lab: LabLike, pal_lab: np.ndarray) -> NDArray[np.float64]:
    """Row-wise Euclidean distance from one Lab colour to an [N,3] array."""
    diff = np.asarray(pal_lab, dtype=np.float64) - np.asarray(lab, dtype=np.float64)
    return np.sqrt(np.sum(diff * diff, axis=-1))


def delta_e2000_vec(lab: LabLike, pal_lab: np.ndarray) -> NDArray[np.float64]:
    """
    Row-wise CIEDE2000 from one Lab colour to an [N,3] array.
    Uses the scalar routine per row for consistent results.
    """
    cands = np.asarray(pal_lab, dtype=np.float64)
    out = np.empty((cands.shape[0],), dtype=np.float64)
    for i in range(cands.shape[0]):
        out[i] = delta_e2000(lab, cands[i])
    return out


def hybrid_distance(
    lab1: LabLike, lab2: LabLike, threshold: float = HYBRID_THRESHOLD
) -> float:
    """
    ΔE76 when the colours are clearly apart, CIEDE2000 when ΔE76 < threshold.
    """
    d76 = delta_e76(lab1, lab2)
    if d76 < threshold:
        return delta_e2000(lab1, lab2)
    return d76


__all__ = [
    "delta_e76",
    "delta_e2000",
    "delta_e76_vec",
    "delta_e2000_vec",
    "hybrid_distance",
]
