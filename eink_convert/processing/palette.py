from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..errors import ConfigurationError
from .colorspace import Lab, RGB, delta_e, rgb_to_lab
from .params import ColorMethod


class ColorRole(str, Enum):
    BLACK = "black"
    WHITE = "white"
    YELLOW = "yellow"
    RED = "red"
    BLUE = "blue"
    GREEN = "green"


RESERVED_SLOT = 4
WHITE_SLOT = 1

# Slot index -> role. Drivers index inks by position, slot 4 is unused.
SLOT_ROLES: Tuple[Optional[ColorRole], ...] = (
    ColorRole.BLACK,
    ColorRole.WHITE,
    ColorRole.YELLOW,
    ColorRole.RED,
    None,
    ColorRole.BLUE,
    ColorRole.GREEN,
)

PaletteSlots = Tuple[RGB, ...]


@dataclass(frozen=True)
class Palette:
    black: RGB
    white: RGB
    yellow: RGB
    red: RGB
    blue: RGB
    green: RGB

    def color(self, role: ColorRole) -> RGB:
        return getattr(self, ColorRole(role).value)

    def slots(self) -> PaletteSlots:
        """Return the 7-slot table used for matching and output."""
        return tuple((0, 0, 0) if role is None else self.color(role) for role in SLOT_ROLES)

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            role.value: dict(zip("rgb", self.color(role))) for role in ColorRole
        }


@dataclass(frozen=True)
class PalettePair:
    """Nominal driver colours plus how those inks actually look on the panel."""

    theoretical: Palette
    perceived: Palette

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, int]]]:
        return {
            "theoretical": self.theoretical.to_dict(),
            "perceived": self.perceived.to_dict(),
        }


SPECTRA6 = PalettePair(
    theoretical=Palette(
        black=(0, 0, 0),
        white=(255, 255, 255),
        yellow=(255, 255, 0),
        red=(255, 0, 0),
        blue=(0, 0, 255),
        green=(0, 255, 0),
    ),
    perceived=Palette(
        black=(2, 2, 2),
        white=(190, 200, 200),
        yellow=(205, 202, 0),
        red=(135, 19, 0),
        blue=(5, 64, 158),
        green=(39, 102, 60),
    ),
)

PALETTE_PRESETS: Dict[str, PalettePair] = {
    "spectra6": SPECTRA6,
    "default": SPECTRA6,
}

PALETTE_TITLES = {
    "spectra6": (
        "Spectra 6 (Default)",
        "6-color ACeP palette for Waveshare and similar displays",
    ),
}


def get_palette(name: str) -> PalettePair:
    palette = PALETTE_PRESETS.get((name or "").strip().lower())
    if palette is None:
        raise ConfigurationError(
            "palette",
            f"Unknown palette preset {name!r} (available: {', '.join(PALETTE_PRESETS)})",
        )
    return palette


def palette_names() -> List[str]:
    return list(PALETTE_PRESETS)


def palette_options() -> List[Dict[str, str]]:
    return [
        {"value": name, "title": title, "description": description}
        for name, (title, description) in PALETTE_TITLES.items()
    ]


def _validate_channel(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(field, f"Expected an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ConfigurationError(field, f"Expected an integer, got {value!r}")
    if not 0 <= value <= 255:
        raise ConfigurationError(field, f"Must be 0-255, got {value!r}")
    return int(value)


def _validate_single(data: Any, name: str) -> Palette:
    if not isinstance(data, Mapping):
        raise ConfigurationError(name, "Palette must be an object")

    colors: Dict[str, RGB] = {}
    for role in ColorRole:
        entry = data.get(role.value)
        field = f"{name}.{role.value}"
        if entry is None:
            raise ConfigurationError(field, "Missing required color")
        if not isinstance(entry, Mapping):
            raise ConfigurationError(field, "Color must be an object with r, g, b")
        channels = []
        for channel in "rgb":
            if channel not in entry:
                raise ConfigurationError(f"{field}.{channel}", "Missing channel")
            channels.append(_validate_channel(entry[channel], f"{field}.{channel}"))
        colors[role.value] = (channels[0], channels[1], channels[2])
    return Palette(**colors)


def validate_palette(data: Any) -> PalettePair:
    """Validate an interchange-format palette pair and build a ``PalettePair``."""
    if not isinstance(data, Mapping):
        raise ConfigurationError("palette", "Palette must be an object")
    for key in ("theoretical", "perceived"):
        if key not in data:
            raise ConfigurationError(key, f"Palette must have a '{key}' property")
    return PalettePair(
        theoretical=_validate_single(data["theoretical"], "theoretical"),
        perceived=_validate_single(data["perceived"], "perceived"),
    )


def parse_palette(text: str) -> PalettePair:
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError("palette", f"Invalid palette JSON: {exc}") from None
    return validate_palette(data)


def slots_to_lab(slots: Sequence[RGB]) -> Tuple[Lab, ...]:
    return tuple(rgb_to_lab(*color) for color in slots)


def closest_rgb(rgb: Sequence[float], slots: Sequence[RGB]) -> int:
    best_index = WHITE_SLOT
    best_distance = float("inf")
    r, g, b = rgb[0], rgb[1], rgb[2]
    for index, (R, G, B) in enumerate(slots):
        if index == RESERVED_SLOT:
            continue
        distance = (R - r) ** 2 + (G - g) ** 2 + (B - b) ** 2
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index


def closest_lab(rgb: Sequence[float], slots_lab: Sequence[Lab]) -> int:
    best_index = WHITE_SLOT
    best_distance = float("inf")
    lab = rgb_to_lab(rgb[0], rgb[1], rgb[2])
    for index, slot_lab in enumerate(slots_lab):
        if index == RESERVED_SLOT:
            continue
        distance = delta_e(lab, slot_lab)
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index


def closest_index(
    rgb: Sequence[float],
    slots: Sequence[RGB],
    method: ColorMethod = ColorMethod.RGB,
    slots_lab: Optional[Sequence[Lab]] = None,
) -> int:
    """Index of the nearest non-reserved slot; the first minimum wins ties.

    ``slots_lab`` should be precomputed with :func:`slots_to_lab` when matching
    many pixels against the same palette.
    """

    if ColorMethod(method) is ColorMethod.LAB:
        return closest_lab(rgb, slots_lab if slots_lab is not None else slots_to_lab(slots))
    return closest_rgb(rgb, slots)
