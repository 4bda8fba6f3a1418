"""Pixel pipeline for small-palette e-paper displays."""

from .bitmap import encode_bmp
from .colorspace import delta_e, lab_to_rgb, rgb_to_lab
from .dither import DIFFUSION_KERNELS, dither, error_diffusion_dither, kernel_for
from .geometry import make_thumbnail, prepare_for_display, resize_cover
from .palette import (
    PALETTE_PRESETS,
    SPECTRA6,
    ColorRole,
    Palette,
    PalettePair,
    closest_index,
    get_palette,
    parse_palette,
    validate_palette,
)
from .params import ColorMethod, DitherAlgorithm, ProcessingParams, ToneMode
from .pipeline import ConversionResult, process_image
from .presets import PRESETS, get_preset
from .tone import adjust_tone

__all__ = [
    "encode_bmp",
    "delta_e",
    "lab_to_rgb",
    "rgb_to_lab",
    "DIFFUSION_KERNELS",
    "dither",
    "error_diffusion_dither",
    "kernel_for",
    "make_thumbnail",
    "prepare_for_display",
    "resize_cover",
    "PALETTE_PRESETS",
    "SPECTRA6",
    "ColorRole",
    "Palette",
    "PalettePair",
    "closest_index",
    "get_palette",
    "parse_palette",
    "validate_palette",
    "ColorMethod",
    "DitherAlgorithm",
    "ProcessingParams",
    "ToneMode",
    "ConversionResult",
    "process_image",
    "PRESETS",
    "get_preset",
    "adjust_tone",
]
