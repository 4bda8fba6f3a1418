from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


class ToneMode(str, Enum):
    CONTRAST = "contrast"
    SCURVE = "scurve"


class ColorMethod(str, Enum):
    RGB = "rgb"
    LAB = "lab"


class DitherAlgorithm(str, Enum):
    FLOYD_STEINBERG = "floyd-steinberg"
    STUCKI = "stucki"
    BURKES = "burkes"
    SIERRA = "sierra"

    @classmethod
    def parse(cls, value: "str | DitherAlgorithm") -> "DitherAlgorithm":
        """Resolve ``value`` to a kernel name; unknown names mean Floyd-Steinberg."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown dither algorithm %r, using floyd-steinberg", value)
            return cls.FLOYD_STEINBERG


# (min, max) inclusive bounds checked when params are constructed.
PARAM_BOUNDS: Dict[str, tuple] = {
    "exposure": (0.5, 2.0),
    "saturation": (0.0, 2.0),
    "contrast": (0.5, 2.0),
    "strength": (0.0, 1.0),
    "shadow_boost": (0.0, 1.0),
    "highlight_compress": (0.5, 5.0),
    "midpoint": (0.3, 0.7),
}

# Interchange (camelCase) names accepted by ``ProcessingParams.merge``.
PARAM_ALIASES = {
    "toneMode": "tone_mode",
    "shadowBoost": "shadow_boost",
    "highlightCompress": "highlight_compress",
    "colorMethod": "color_method",
    "ditherAlgorithm": "dither_algorithm",
    "compressDynamicRange": "compress_dynamic_range",
}


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    if isinstance(value, int):
        return bool(value)
    raise ConfigurationError(name, f"Expected a boolean, got {value!r}")


def _coerce_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(name, f"Expected a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(name, f"Expected a number, got {value!r}") from None


@dataclass(frozen=True)
class ProcessingParams:
    exposure: float = 1.0
    saturation: float = 1.0
    tone_mode: ToneMode = ToneMode.CONTRAST
    contrast: float = 1.0
    strength: float = 0.9
    shadow_boost: float = 0.0
    highlight_compress: float = 1.5
    midpoint: float = 0.5
    color_method: ColorMethod = ColorMethod.RGB
    dither_algorithm: DitherAlgorithm = DitherAlgorithm.FLOYD_STEINBERG
    compress_dynamic_range: bool = True

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "tone_mode", ToneMode(self.tone_mode))
        except ValueError:
            raise ConfigurationError("tone_mode", f"Unknown tone mode {self.tone_mode!r}") from None
        try:
            object.__setattr__(self, "color_method", ColorMethod(self.color_method))
        except ValueError:
            raise ConfigurationError(
                "color_method", f"Unknown color method {self.color_method!r}"
            ) from None
        object.__setattr__(self, "dither_algorithm", DitherAlgorithm.parse(self.dither_algorithm))
        object.__setattr__(
            self,
            "compress_dynamic_range",
            _coerce_bool("compress_dynamic_range", self.compress_dynamic_range),
        )

        for name, (low, high) in PARAM_BOUNDS.items():
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(name, f"Expected a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigurationError(name, "Must be a finite number")
            if not low <= value <= high:
                raise ConfigurationError(name, f"Must be between {low} and {high}, got {value}")

        # The shadow exponent is 1 - strength * shadow_boost and must stay positive.
        if self.strength * self.shadow_boost >= 1.0:
            raise ConfigurationError(
                "shadow_boost", "strength * shadow_boost must be below 1"
            )

    def merge(self, overrides: Mapping[str, Any] | None) -> "ProcessingParams":
        """Return a copy with ``overrides`` laid over this set, field by field."""
        if not overrides:
            return self

        known = {field.name: field for field in fields(self)}
        changes: Dict[str, Any] = {}
        for key, raw_value in overrides.items():
            name = PARAM_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(key, "Unknown processing parameter")
            if raw_value is None:
                continue
            if name == "compress_dynamic_range":
                changes[name] = _coerce_bool(name, raw_value)
            elif name in PARAM_BOUNDS:
                changes[name] = _coerce_float(name, raw_value)
            else:
                changes[name] = str(raw_value.value if isinstance(raw_value, Enum) else raw_value).lower()
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Enum):
                data[key] = value.value
        return data


def default_params() -> ProcessingParams:
    return ProcessingParams()
