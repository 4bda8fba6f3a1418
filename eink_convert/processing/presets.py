from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..errors import ConfigurationError
from .params import ColorMethod, DitherAlgorithm, ProcessingParams, ToneMode


@dataclass(frozen=True)
class Preset:
    name: str
    title: str
    description: str
    params: ProcessingParams


PRESETS: Dict[str, Preset] = {
    "cdr": Preset(
        name="cdr",
        title="Compressed Dynamic Range (Default)",
        description=(
            "Balanced preset that compresses highlights to prevent overexposure. "
            "Works well with most images."
        ),
        params=ProcessingParams(
            exposure=1.0,
            saturation=1.0,
            tone_mode=ToneMode.CONTRAST,
            contrast=1.0,
            color_method=ColorMethod.RGB,
            dither_algorithm=DitherAlgorithm.FLOYD_STEINBERG,
            compress_dynamic_range=True,
        ),
    ),
    "scurve": Preset(
        name="scurve",
        title="S-Curve",
        description=(
            "Advanced tone mapping with brighter output. "
            "Some parts of the image may be over-exposed."
        ),
        params=ProcessingParams(
            exposure=1.0,
            saturation=1.3,
            tone_mode=ToneMode.SCURVE,
            strength=0.9,
            shadow_boost=0.0,
            highlight_compress=1.5,
            midpoint=0.5,
            compress_dynamic_range=False,
        ),
    ),
    "vivid": Preset(
        name="vivid",
        title="Vivid",
        description="Boosted colors for colorful images and illustrations.",
        params=ProcessingParams(
            exposure=1.1,
            saturation=1.6,
            tone_mode=ToneMode.SCURVE,
            strength=0.7,
            shadow_boost=0.1,
            highlight_compress=1.3,
            midpoint=0.5,
            compress_dynamic_range=False,
        ),
    ),
    "soft": Preset(
        name="soft",
        title="Soft",
        description="Softer look with better gradient rendering.",
        params=ProcessingParams(
            saturation=1.1,
            tone_mode=ToneMode.CONTRAST,
            contrast=0.9,
            dither_algorithm=DitherAlgorithm.STUCKI,
            compress_dynamic_range=True,
        ),
    ),
    "grayscale": Preset(
        name="grayscale",
        title="Grayscale",
        description="Optimized for black and white photos using LAB color space.",
        params=ProcessingParams(
            saturation=0.0,
            tone_mode=ToneMode.SCURVE,
            strength=0.8,
            shadow_boost=0.1,
            highlight_compress=1.4,
            midpoint=0.5,
            color_method=ColorMethod.LAB,
            compress_dynamic_range=True,
        ),
    ),
}

DITHER_TITLES: Tuple[Tuple[DitherAlgorithm, str], ...] = (
    (DitherAlgorithm.FLOYD_STEINBERG, "Floyd-Steinberg"),
    (DitherAlgorithm.STUCKI, "Stucki"),
    (DitherAlgorithm.BURKES, "Burkes"),
    (DitherAlgorithm.SIERRA, "Sierra"),
)


def get_preset(name: str) -> ProcessingParams:
    preset = PRESETS.get((name or "").strip().lower())
    if preset is None:
        raise ConfigurationError(
            "preset", f"Unknown processing preset {name!r} (available: {', '.join(PRESETS)})"
        )
    return preset.params


def preset_names() -> List[str]:
    return list(PRESETS)


def preset_options() -> List[Dict[str, str]]:
    return [
        {"value": preset.name, "title": preset.title, "description": preset.description}
        for preset in PRESETS.values()
    ]


def dither_options() -> List[Dict[str, str]]:
    return [{"value": algorithm.value, "title": title} for algorithm, title in DITHER_TITLES]
