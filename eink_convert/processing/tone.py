"""Tonal adjustments applied before quantization.

Every function here mutates ``img`` (mode ``RGB`` or ``RGBA``) in place. Alpha
is never touched.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional, Tuple

from PIL import Image

from .colorspace import RGB, clamp_channel, lab_to_rgb, rgb_to_lab, round_half_up
from .palette import Palette
from .params import ProcessingParams, ToneMode

logger = logging.getLogger(__name__)


def _apply_lut(img: Image.Image, table: List[int]) -> None:
    lut = table * 3
    if img.mode == "RGBA":
        lut += list(range(256))
    img.paste(img.point(lut))


def _map_pixels(img: Image.Image, transform: Callable[[RGB], RGB]) -> None:
    width, height = img.size
    pixels = img.load()
    seen: Dict[RGB, RGB] = {}
    for y in range(height):
        for x in range(width):
            pixel = pixels[x, y]
            rgb = pixel[:3]
            mapped = seen.get(rgb)
            if mapped is None:
                mapped = seen[rgb] = transform(rgb)
            if mapped != rgb:
                pixels[x, y] = mapped + pixel[3:]


def apply_exposure(img: Image.Image, exposure: float) -> None:
    if exposure == 1.0:
        return
    _apply_lut(img, [min(255, round_half_up(value * exposure)) for value in range(256)])


def apply_contrast(img: Image.Image, contrast: float) -> None:
    if contrast == 1.0:
        return
    _apply_lut(img, [clamp_channel((value - 128) * contrast + 128) for value in range(256)])


def scurve_value(
    value: int,
    strength: float,
    shadow_boost: float,
    highlight_compress: float,
    midpoint: float,
) -> int:
    normalized = value / 255.0
    if normalized <= midpoint:
        result = (normalized / midpoint) ** (1.0 - strength * shadow_boost) * midpoint
    else:
        highlight = (normalized - midpoint) / (1.0 - midpoint)
        result = midpoint + highlight ** (1.0 + strength * highlight_compress) * (1.0 - midpoint)
    if isinstance(result, complex) or not math.isfinite(result):
        raise ArithmeticError(f"S-curve produced {result!r} for input {value}")
    return round_half_up(max(0.0, min(1.0, result)) * 255)


def apply_scurve(
    img: Image.Image,
    strength: float,
    shadow_boost: float,
    highlight_compress: float,
    midpoint: float,
) -> None:
    if strength == 0:
        return
    _apply_lut(
        img,
        [
            scurve_value(value, strength, shadow_boost, highlight_compress, midpoint)
            for value in range(256)
        ],
    )


def saturate(rgb: RGB, saturation: float) -> RGB:
    """Scale HSL saturation of one colour; grays come back unchanged."""
    r, g, b = rgb
    high = max(r, g, b) / 255
    low = min(r, g, b) / 255
    if high == low:
        return rgb

    lightness = (high + low) / 2
    d = high - low
    s = d / (2 - high - low) if lightness > 0.5 else d / (high + low)

    if high == r / 255:
        hue = ((g / 255 - b / 255) / d + (6 if g < b else 0)) / 6
    elif high == g / 255:
        hue = ((b / 255 - r / 255) / d + 2) / 6
    else:
        hue = ((r / 255 - g / 255) / d + 4) / 6

    new_s = max(0.0, min(1.0, s * saturation))
    c = (1 - abs(2 * lightness - 1)) * new_s
    x = c * (1 - abs((hue * 6) % 2 - 1))
    m = lightness - c / 2

    sector = math.floor(hue * 6)
    if sector == 0:
        rp, gp, bp = c, x, 0.0
    elif sector == 1:
        rp, gp, bp = x, c, 0.0
    elif sector == 2:
        rp, gp, bp = 0.0, c, x
    elif sector == 3:
        rp, gp, bp = 0.0, x, c
    elif sector == 4:
        rp, gp, bp = x, 0.0, c
    else:
        rp, gp, bp = c, 0.0, x

    return (
        clamp_channel((rp + m) * 255),
        clamp_channel((gp + m) * 255),
        clamp_channel((bp + m) * 255),
    )


def apply_saturation(img: Image.Image, saturation: float) -> None:
    # 0.0 still goes through the HSL round-trip rather than a luma shortcut.
    if saturation == 1.0:
        return
    _map_pixels(img, lambda rgb: saturate(rgb, saturation))


def lightness_range(perceived: Palette) -> Tuple[float, float]:
    """L* of the display's black and white inks."""
    black_l = rgb_to_lab(*perceived.black)[0]
    white_l = rgb_to_lab(*perceived.white)[0]
    return black_l, white_l


def compress_dynamic_range(img: Image.Image, perceived: Palette) -> None:
    black_l, white_l = lightness_range(perceived)
    span = white_l - black_l

    def compress(rgb: RGB) -> RGB:
        lightness, a, b = rgb_to_lab(*rgb)
        return lab_to_rgb(black_l + (lightness / 100) * span, a, b)

    _map_pixels(img, compress)


def adjust_tone(
    img: Image.Image,
    params: ProcessingParams,
    perceived: Optional[Palette] = None,
) -> None:
    """Exposure, saturation, tone map, then optional dynamic range compression."""
    apply_exposure(img, params.exposure)
    apply_saturation(img, params.saturation)

    if params.tone_mode is ToneMode.CONTRAST:
        apply_contrast(img, params.contrast)
    else:
        apply_scurve(
            img,
            params.strength,
            params.shadow_boost,
            params.highlight_compress,
            params.midpoint,
        )

    if params.compress_dynamic_range and perceived is not None:
        black_l, white_l = lightness_range(perceived)
        logger.debug("Compressing dynamic range to L* %d-%d", round(black_l), round(white_l))
        compress_dynamic_range(img, perceived)
