# bead_map/colour_convert.py
from __future__ import annotations

"""
Colour conversions (sRGB -> XYZ -> CIE Lab, D65).

Exports:
  srgb_to_linear(c)
  rgb_to_xyz(r, g, b)
  xyz_to_lab(x, y, z)
  rgb_to_lab(r, g, b)
  rgb_to_lab_array(rgb)
  lab_to_lch(lab)

The scalar path (rgb_to_lab) is what palette construction and matching use,
so a catalog colour and the same RGB queried later give bit-identical Lab.
rgb_to_lab_array is the vectorised equivalent for bulk diagnostics.
"""

import math
from typing import Tuple

import numpy as np

from .constants import (
    D65_WHITE,
    LAB_EPSILON,
    LAB_KAPPA_LINEAR,
    LAB_OFFSET,
    SRGB_GAMMA_THRESHOLD,
    SRGB_TO_XYZ,
)
from .core_types import Lab, LabTuple
from .errors import InvalidChannelValue


def _checked_channel(value: float) -> float:
    try:
        c = float(value)
    except (TypeError, ValueError):
        raise InvalidChannelValue(f"channel is not a number: {value!r}", value)
    if not math.isfinite(c) or c < 0.0 or c > 255.0:
        raise InvalidChannelValue(f"channel outside [0, 255]: {value!r}", value)
    return c


# sRGB to linear


def srgb_to_linear(c: float) -> float:
    """Inverse sRGB companding for one channel in 0..1."""
    if c <= SRGB_GAMMA_THRESHOLD:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


# sRGB to XYZ (D65), scaled to Y=100


def rgb_to_xyz(r: float, g: float, b: float) -> Tuple[float, float, float]:
    """
    8-bit sRGB to CIE XYZ (D65, Y in 0..100).
    Raises InvalidChannelValue for channels outside [0, 255].
    """
    r_lin = srgb_to_linear(_checked_channel(r) / 255.0)
    g_lin = srgb_to_linear(_checked_channel(g) / 255.0)
    b_lin = srgb_to_linear(_checked_channel(b) / 255.0)

    m = SRGB_TO_XYZ
    x = (r_lin * m[0][0] + g_lin * m[0][1] + b_lin * m[0][2]) * 100.0
    y = (r_lin * m[1][0] + g_lin * m[1][1] + b_lin * m[1][2]) * 100.0
    z = (r_lin * m[2][0] + g_lin * m[2][1] + b_lin * m[2][2]) * 100.0
    return x, y, z


# XYZ to Lab


def _lab_f(t: float) -> float:
    if t > LAB_EPSILON:
        return t ** (1.0 / 3.0)
    return LAB_KAPPA_LINEAR * t + LAB_OFFSET


def xyz_to_lab(x: float, y: float, z: float) -> LabTuple:
    """CIE XYZ (Y in 0..100) to CIE Lab against the D65 white point."""
    xn, yn, zn = D65_WHITE
    fx = _lab_f(x / xn)
    fy = _lab_f(y / yn)
    fz = _lab_f(z / zn)
    L = 116.0 * fy - 16.0
    a = 500.0 * (fx - fy)
    b = 200.0 * (fy - fz)
    return (L, a, b)


def rgb_to_lab(r: float, g: float, b: float) -> LabTuple:
    """8-bit sRGB to CIE Lab (D65). Pure and deterministic."""
    return xyz_to_lab(*rgb_to_xyz(r, g, b))


# Vectorised


def rgb_to_lab_array(rgb: np.ndarray) -> Lab:
    """
    sRGB [0..255] array (..., 3) to Lab (..., 3), float64.
    Same formula as rgb_to_lab; values may differ from it in the last ulp.
    """
    arr = np.asarray(rgb, dtype=np.float64)
    if arr.shape[-1] < 3:
        raise ValueError(f"expected (..., 3) array, got shape {arr.shape}")
    arr = arr[..., :3]
    if arr.size and (not np.all(np.isfinite(arr)) or arr.min() < 0.0 or arr.max() > 255.0):
        raise InvalidChannelValue("channel outside [0, 255] in array")

    u = arr / 255.0
    linear = np.where(
        u <= SRGB_GAMMA_THRESHOLD, u / 12.92, ((u + 0.055) / 1.055) ** 2.4
    )
    xyz = linear @ np.asarray(SRGB_TO_XYZ, dtype=np.float64).T * 100.0
    ratios = xyz / np.asarray(D65_WHITE, dtype=np.float64)
    f = np.where(
        ratios > LAB_EPSILON,
        np.power(ratios, 1.0 / 3.0),
        LAB_KAPPA_LINEAR * ratios + LAB_OFFSET,
    )

    out = np.empty(arr.shape, dtype=np.float64)
    out[..., 0] = 116.0 * f[..., 1] - 16.0
    out[..., 1] = 500.0 * (f[..., 0] - f[..., 1])
    out[..., 2] = 200.0 * (f[..., 1] - f[..., 2])
    return out


# Lab to LCh


def lab_to_lch(lab: Lab) -> np.ndarray:
    """
    Lab[...,3] to LCh[...,3] (hue in degrees, [0,360)).
    Shape is preserved.
    """
    arr = np.asarray(lab, dtype=np.float64)
    C = np.hypot(arr[..., 1], arr[..., 2])
    h = (np.degrees(np.arctan2(arr[..., 2], arr[..., 1])) + 360.0) % 360.0
    return np.stack([arr[..., 0], C, h], axis=-1)


__all__ = [
    "srgb_to_linear",
    "rgb_to_xyz",
    "xyz_to_lab",
    "rgb_to_lab",
    "rgb_to_lab_array",
    "lab_to_lch",
]
