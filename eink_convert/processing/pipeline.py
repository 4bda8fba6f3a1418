from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from .dither import dither
from .palette import SPECTRA6, PalettePair
from .params import ProcessingParams, ToneMode, default_params
from .tone import adjust_tone

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    image: Image.Image
    original: Image.Image


def _log_params(img: Image.Image, params: ProcessingParams) -> None:
    logger.debug("Processing %dx%d image", img.width, img.height)
    logger.debug("  exposure=%s saturation=%s tone_mode=%s",
                 params.exposure, params.saturation, params.tone_mode.value)
    if params.tone_mode is ToneMode.SCURVE:
        logger.debug(
            "  scurve strength=%s shadow_boost=%s highlight_compress=%s midpoint=%s",
            params.strength,
            params.shadow_boost,
            params.highlight_compress,
            params.midpoint,
        )
    else:
        logger.debug("  contrast=%s", params.contrast)
    logger.debug(
        "  color_method=%s dither=%s compress_dynamic_range=%s",
        params.color_method.value,
        params.dither_algorithm.value,
        params.compress_dynamic_range,
    )


def process_image(
    src: Image.Image,
    *,
    palette: PalettePair = SPECTRA6,
    params: Optional[ProcessingParams] = None,
    skip_dithering: bool = False,
    use_perceived_output: bool = False,
) -> ConversionResult:
    """Tone-adjust and dither ``src``, which must already be at display size.

    ``src`` is left untouched; the result carries the quantized image and a
    copy of the input for thumbnailing.
    """

    params = params or default_params()
    original = src.copy()
    img = src.copy() if src.mode in ("RGB", "RGBA") else src.convert("RGB")
    _log_params(img, params)

    adjust_tone(img, params, palette.perceived)

    if not skip_dithering:
        output_palette = palette.perceived if use_perceived_output else palette.theoretical
        logger.debug("Applying %s dithering", params.dither_algorithm.value)
        dither(img, params, output_palette, palette.perceived)

    return ConversionResult(image=img, original=original)
