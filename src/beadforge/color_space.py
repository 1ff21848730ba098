"""sRGB to CIE Lab conversion and color distance metrics.

All functions are pure.  Lab values use the D65 reference white and the
simplified Euclidean Delta E (CIE76), not CIE94/CIEDE2000.
"""

from __future__ import annotations

import math
import re
from typing import Sequence

from beadforge.models import LabColor

RGB = Sequence[int]

# sRGB (linear) -> XYZ, D65
_SRGB_TO_XYZ: tuple[tuple[float, float, float], ...] = (
    (0.4124564, 0.3575761, 0.1804375),
    (0.2126729, 0.7151522, 0.0721750),
    (0.0193339, 0.1191920, 0.9503041),
)

# XYZ -> sRGB (linear), rounded coefficients; only used by the approximate inverse
_XYZ_TO_SRGB: tuple[tuple[float, float, float], ...] = (
    (3.2406, -1.5372, -0.4986),
    (-0.9689, 1.8758, 0.0415),
    (0.0557, -0.2040, 1.0570),
)

D65_WHITE: tuple[float, float, float] = (0.95047, 1.0, 1.08883)

_LAB_EPSILON = 0.008856
_LAB_KAPPA = 7.787

# Luminance-sensitivity weights for the RGB fallback metric
RGB_WEIGHTS: tuple[float, float, float] = (0.30, 0.59, 0.11)

_HEX_PATTERN = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)


def _gamma_decode(channel: float) -> float:
    if channel > 0.04045:
        return ((channel + 0.055) / 1.055) ** 2.4
    return channel / 12.92


def _gamma_encode(channel: float) -> float:
    if channel > 0.0031308:
        return 1.055 * channel ** (1 / 2.4) - 0.055
    return 12.92 * channel


def _lab_f(t: float) -> float:
    if t > _LAB_EPSILON:
        return t ** (1 / 3)
    return _LAB_KAPPA * t + 16 / 116


def _lab_f_inverse(t: float) -> float:
    cubed = t * t * t
    if cubed > _LAB_EPSILON:
        return cubed
    return (t - 16 / 116) / _LAB_KAPPA


def rgb_to_lab(rgb: RGB) -> LabColor:
    """Convert an 8-bit sRGB triple to CIE Lab.

    Args:
        rgb: ``(R, G, B)`` with channels in 0–255.

    Returns:
        The corresponding :class:`LabColor`.  White maps to roughly
        ``(100, 0, 0)`` and black to ``(0, 0, 0)``.
    """
    linear = [_gamma_decode(c / 255) for c in rgb[:3]]
    xyz = [
        sum(coeff * value for coeff, value in zip(row, linear))
        for row in _SRGB_TO_XYZ
    ]
    fx, fy, fz = (_lab_f(v / white) for v, white in zip(xyz, D65_WHITE))
    return LabColor(l=116 * fy - 16, a=500 * (fx - fy), b=200 * (fy - fz))


def delta_e(lab1: LabColor, lab2: LabColor) -> float:
    """Euclidean distance between two Lab colors (Delta E 76)."""
    return math.sqrt(
        (lab1.l - lab2.l) ** 2 + (lab1.a - lab2.a) ** 2 + (lab1.b - lab2.b) ** 2
    )


def lab_to_approx_rgb(lab: LabColor) -> tuple[int, int, int]:
    """Approximate inverse of :func:`rgb_to_lab`.

    Uses rounded matrix coefficients and clamps to 0–255, so the result is
    lossy and ``rgb_to_lab`` / ``lab_to_approx_rgb`` do not round-trip
    exactly.  Only used when Lab matching is disabled.
    """
    fy = (lab.l + 16) / 116
    fx = lab.a / 500 + fy
    fz = fy - lab.b / 200
    xyz = [
        _lab_f_inverse(f) * white for f, white in zip((fx, fy, fz), D65_WHITE)
    ]
    channels = []
    for row in _XYZ_TO_SRGB:
        linear = sum(coeff * value for coeff, value in zip(row, xyz))
        encoded = _gamma_encode(linear)
        channels.append(max(0, min(255, round(encoded * 255))))
    return (channels[0], channels[1], channels[2])


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up (``round()`` goes to even)."""
    return math.floor(value + 0.5)


def rgb_distance(c1: RGB, c2: RGB) -> float:
    """Plain Euclidean distance in RGB space."""
    return math.sqrt(sum((a - b) ** 2 for a, b in zip(c1[:3], c2[:3])))


def weighted_rgb_distance(c1: RGB, c2: RGB) -> float:
    """Luminance-weighted Euclidean RGB distance (0.30 / 0.59 / 0.11)."""
    return math.sqrt(
        sum(w * (a - b) ** 2 for w, a, b in zip(RGB_WEIGHTS, c1[:3], c2[:3]))
    )


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Parse ``#RRGGBB`` (``#`` optional, any case) into an RGB tuple.

    Raises:
        ValueError: If *value* is not a six-digit hex color.
    """
    match = _HEX_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid hex color: {value!r}")
    r, g, b = (int(part, 16) for part in match.groups())
    return (r, g, b)


def rgb_to_hex(rgb: Sequence[float]) -> str:
    """Format an RGB triple as lowercase ``#rrggbb`` (rounded and clamped)."""
    return "#" + "".join(
        f"{max(0, min(255, round(channel))):02x}" for channel in rgb[:3]
    )
