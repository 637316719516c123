from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np

from .colormodel import (
    HUE_MAX,
    Color,
    css_hsl,
    hsl_to_rgb_array,
    legible_text_color,
    round_half_up,
)


class HarmonyMode(str, enum.Enum):
    COMPLEMENTARY = "complementary"
    ANALOGOUS = "analogous"
    TRIADIC = "triadic"
    TETRADIC = "tetradic"
    SPLIT_COMPLEMENTARY = "split-complementary"
    MONOCHROMATIC = "monochromatic"


class WheelMode(str, enum.Enum):
    SATURATION = "saturation"  # radius = saturation, lightness on the slider
    LIGHTNESS = "lightness"  # radius = 1 - lightness, saturation on the slider


DESCRIPTIONS: Mapping[HarmonyMode, str] = {
    HarmonyMode.COMPLEMENTARY: (
        "Two colors opposite each other on the color wheel. "
        "High contrast and high impact."
    ),
    HarmonyMode.ANALOGOUS: (
        "Colors that are next to each other on the color wheel. "
        "Serene and comfortable designs."
    ),
    HarmonyMode.TRIADIC: (
        "Three colors evenly spaced on the color wheel. "
        "Vibrant even if you use pale versions."
    ),
    HarmonyMode.TETRADIC: (
        "Four colors arranged into two complementary pairs. "
        "Offers plenty of possibilities for variation."
    ),
    HarmonyMode.SPLIT_COMPLEMENTARY: (
        "A variation of the complementary color scheme. In addition to the base "
        "color, it uses the two colors adjacent to its complement."
    ),
    HarmonyMode.MONOCHROMATIC: (
        "A single color extended using its shades, tones, and tints. "
        "Gentle and soothing."
    ),
}

# (hue offset, label) per scheme
_HUE_OFFSETS: Mapping[HarmonyMode, tuple[tuple[int, str], ...]] = {
    HarmonyMode.COMPLEMENTARY: ((0, "Base"), (180, "Complement")),
    HarmonyMode.ANALOGOUS: ((-30, "-30°"), (0, "Base"), (30, "+30°")),
    HarmonyMode.TRIADIC: ((0, "Base"), (120, "+120°"), (240, "+240°")),
    HarmonyMode.TETRADIC: ((0, "Base"), (90, "+90°"), (180, "+180°"), (270, "+270°")),
    HarmonyMode.SPLIT_COMPLEMENTARY: ((0, "Base"), (150, "+150°"), (210, "+210°")),
}

# fraction of the wheel width kept free outside the rim
RIM_MARGIN = 10.0 / 325.0
WHEEL_RADIUS = 0.5 - RIM_MARGIN


@dataclass(frozen=True)
class HarmonyEntry:
    h: int
    s: int
    l: int
    label: str

    @property
    def is_base(self) -> bool:
        return self.label == "Base"

    @property
    def color(self) -> Color:
        return Color.from_hsl(self.h, self.s, self.l)

    def to_dict(self) -> dict[str, Any]:
        return {
            "h": self.h,
            "s": self.s,
            "l": self.l,
            "label": self.label,
            "hex": self.color.hex,
            "hsl": css_hsl(self.color),
            "text_color": legible_text_color(self.l),
        }


@dataclass(frozen=True)
class WheelPoint:
    angle: float
    radius_ratio: float
    is_base: bool = False


def _clamp(v: float, lo: float, hi: float) -> float:
    return lo if v < lo else hi if v > hi else v


def compute_harmony(mode: HarmonyMode | str, h: int, s: int, l: int) -> list[HarmonyEntry]:
    """Ordered harmony set around the base color (h, s, l)."""
    mode = HarmonyMode(mode)
    if mode is HarmonyMode.MONOCHROMATIC:
        return [
            HarmonyEntry(h, s, max(0, l - 30), "Darker"),
            HarmonyEntry(h, max(0, s - 30), l, "Desaturated"),
            HarmonyEntry(h, s, l, "Base"),
            HarmonyEntry(h, min(100, s + 30), l, "Saturated"),
            HarmonyEntry(h, s, min(100, l + 30), "Lighter"),
        ]
    return [
        HarmonyEntry((h + offset) % HUE_MAX, s, l, label)
        for offset, label in _HUE_OFFSETS[mode]
    ]


# --------------------------------------------------------------------------
# Wheel geometry
# --------------------------------------------------------------------------


def wheel_position(wheel_mode: WheelMode | str, entry: HarmonyEntry) -> WheelPoint:
    """Polar placement of a harmony entry; radius ratio clamped to [0, 1]."""
    if WheelMode(wheel_mode) is WheelMode.SATURATION:
        ratio = entry.s / 100.0
    else:
        ratio = 1.0 - entry.l / 100.0
    return WheelPoint(float(entry.h), _clamp(ratio, 0.0, 1.0), entry.is_base)


def wheel_interaction(
    wheel_mode: WheelMode | str, angle: float, radius_ratio: float
) -> dict[str, int]:
    """Partial HSL update for a wheel hit; the slider-held channel is omitted."""
    ratio = _clamp(radius_ratio, 0.0, 1.0)
    h = round_half_up(angle) % HUE_MAX
    if WheelMode(wheel_mode) is WheelMode.SATURATION:
        return {"h": h, "s": round_half_up(ratio * 100.0)}
    return {"h": h, "l": round_half_up((1.0 - ratio) * 100.0)}


def wheel_fixed_channel(wheel_mode: WheelMode | str) -> str:
    return "l" if WheelMode(wheel_mode) is WheelMode.SATURATION else "s"


def surface_to_polar(x: float, y: float) -> tuple[float, float]:
    """Normalized wheel-surface position → (angle degrees, radius ratio).

    Angles grow clockwise from the +x axis since y points down.
    """
    dx, dy = x - 0.5, y - 0.5
    angle = math.degrees(math.atan2(dy, dx)) % 360.0
    ratio = math.hypot(dx, dy) / WHEEL_RADIUS
    return angle, _clamp(ratio, 0.0, 1.0)


def polar_to_surface(angle: float, radius_ratio: float) -> tuple[float, float]:
    rad = math.radians(angle)
    dist = WHEEL_RADIUS * _clamp(radius_ratio, 0.0, 1.0)
    return 0.5 + math.cos(rad) * dist, 0.5 + math.sin(rad) * dist


def render_wheel(wheel_mode: WheelMode | str, color: Color, size: int) -> np.ndarray | None:
    """RGBA wheel field; pixels outside the rim are fully transparent.

    Every pixel inside the rim shows the color `wheel_interaction` would pick
    there, so the field and the pointer mapping cannot disagree.
    """
    if size <= 0:
        return None
    c = (np.arange(size) + 0.5) / size - 0.5
    dx, dy = np.meshgrid(c, c)
    angle = np.degrees(np.arctan2(dy, dx)) % 360.0
    ratio = np.hypot(dx, dy) / WHEEL_RADIUS
    inside = ratio <= 1.0
    ratio = np.clip(ratio, 0.0, 1.0)

    if WheelMode(wheel_mode) is WheelMode.SATURATION:
        rgb = hsl_to_rgb_array(angle, ratio, color.l / 100.0)
    else:
        rgb = hsl_to_rgb_array(angle, color.s / 100.0, 1.0 - ratio)

    out = np.zeros((size, size, 4), dtype=np.uint8)
    out[..., :3] = np.clip(np.floor(rgb * 255.0 + 0.5), 0, 255).astype(np.uint8)
    out[..., 3] = np.where(inside, 255, 0).astype(np.uint8)
    return out


__all__ = [
    "DESCRIPTIONS",
    "HarmonyEntry",
    "HarmonyMode",
    "WheelMode",
    "WheelPoint",
    "compute_harmony",
    "polar_to_surface",
    "render_wheel",
    "surface_to_polar",
    "wheel_fixed_channel",
    "wheel_interaction",
    "wheel_position",
]
