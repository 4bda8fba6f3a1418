"""sRGB <-> CIE L*a*b* conversion (D65) and the CIE76 colour difference."""

from __future__ import annotations

import math
from typing import Tuple

RGB = Tuple[int, int, int]
Lab = Tuple[float, float, float]

# D65 reference white, XYZ scaled to 100.
_WHITE_X = 95.047
_WHITE_Y = 100.0
_WHITE_Z = 108.883


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_channel(value: float) -> int:
    return max(0, min(255, round_half_up(value)))


def _linearize(channel: float) -> float:
    channel /= 255.0
    if channel > 0.04045:
        return ((channel + 0.055) / 1.055) ** 2.4
    return channel / 12.92


def _compand(channel: float) -> float:
    if channel > 0.0031308:
        return 1.055 * channel ** (1 / 2.4) - 0.055
    return 12.92 * channel


def _lab_f(t: float) -> float:
    if t > 0.008856:
        return t ** (1 / 3)
    return 7.787 * t + 16 / 116


def _lab_f_inv(t: float) -> float:
    if t > 0.206897:
        return t ** 3
    return (t - 16 / 116) / 7.787


def rgb_to_xyz(r: float, g: float, b: float) -> Tuple[float, float, float]:
    r, g, b = _linearize(r), _linearize(g), _linearize(b)
    x = r * 0.4124564 + g * 0.3575761 + b * 0.1804375
    y = r * 0.2126729 + g * 0.7151522 + b * 0.0721750
    z = r * 0.0193339 + g * 0.1191920 + b * 0.9503041
    return x * 100, y * 100, z * 100


def xyz_to_rgb(x: float, y: float, z: float) -> RGB:
    x, y, z = x / 100, y / 100, z / 100
    r = x * 3.2404542 + y * -1.5371385 + z * -0.4985314
    g = x * -0.9692660 + y * 1.8760108 + z * 0.0415560
    b = x * 0.0556434 + y * -0.2040259 + z * 1.0572252
    return (
        clamp_channel(_compand(r) * 255),
        clamp_channel(_compand(g) * 255),
        clamp_channel(_compand(b) * 255),
    )


def rgb_to_lab(r: float, g: float, b: float) -> Lab:
    x, y, z = rgb_to_xyz(r, g, b)
    fx = _lab_f(x / _WHITE_X)
    fy = _lab_f(y / _WHITE_Y)
    fz = _lab_f(z / _WHITE_Z)
    return 116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz)


def lab_to_rgb(L: float, a: float, b: float) -> RGB:
    fy = (L + 16) / 116
    fx = a / 500 + fy
    fz = fy - b / 200
    return xyz_to_rgb(
        _lab_f_inv(fx) * _WHITE_X,
        _lab_f_inv(fy) * _WHITE_Y,
        _lab_f_inv(fz) * _WHITE_Z,
    )


def delta_e(lab1: Lab, lab2: Lab) -> float:
    """CIE76 difference: Euclidean distance between two Lab points."""
    dl = lab1[0] - lab2[0]
    da = lab1[1] - lab2[1]
    db = lab1[2] - lab2[2]
    return math.sqrt(dl * dl + da * da + db * db)
