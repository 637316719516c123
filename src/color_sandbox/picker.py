"""2D picker: six axis pairings over HSL or RGB.

Each mode maps a normalized surface position (x, y in [0,1], y=0 at the top)
to two free channels and leaves a third channel fixed; the fixed channel is
driven by an auxiliary slider instead.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np

from .colormodel import (
    HUE_MAX,
    PERCENT_MAX,
    RGB_MAX,
    Color,
    hsl_to_rgb_array,
    round_half_up,
)

log = logging.getLogger(__name__)


class PickerMode(str, enum.Enum):
    SAT_LIGHT = "sat-light"
    HUE_SAT = "hue-sat"
    HUE_LIGHT = "hue-light"
    RED_GREEN = "red-green"
    RED_BLUE = "red-blue"
    GREEN_BLUE = "green-blue"


@dataclass(frozen=True)
class Axes:
    x: str  # channel on the horizontal axis
    y: str  # channel on the vertical axis (max at the top)
    fixed: str  # channel held by the auxiliary slider
    x_label: str
    y_label: str
    fixed_label: str
    unit: str  # unit shown next to the auxiliary slider value

    @property
    def is_hsl(self) -> bool:
        return self.fixed in ("h", "s", "l")


AXES: Mapping[PickerMode, Axes] = {
    PickerMode.SAT_LIGHT: Axes("s", "l", "h", "Saturation", "Lightness", "Hue", "°"),
    PickerMode.HUE_SAT: Axes("h", "s", "l", "Hue", "Saturation", "Lightness", "%"),
    PickerMode.HUE_LIGHT: Axes("h", "l", "s", "Hue", "Lightness", "Saturation", "%"),
    PickerMode.RED_GREEN: Axes("r", "g", "b", "Red", "Green", "Blue", ""),
    PickerMode.RED_BLUE: Axes("r", "b", "g", "Red", "Blue", "Green", ""),
    PickerMode.GREEN_BLUE: Axes("g", "b", "r", "Green", "Blue", "Red", ""),
}

CHANNEL_MAX: Mapping[str, int] = {
    "r": RGB_MAX, "g": RGB_MAX, "b": RGB_MAX,
    "h": HUE_MAX, "s": PERCENT_MAX, "l": PERCENT_MAX,
}


def _clamp01(v: float) -> float:
    return 0.0 if v < 0.0 else 1.0 if v > 1.0 else float(v)


def position_to_color(
    mode: PickerMode | str, x: float, y: float, color: Color
) -> dict[str, int]:
    """Partial update for a pointer at (x, y); the fixed channel is omitted.

    `color` is accepted for symmetry with `color_to_position`; the fixed channel
    of the result always comes from it via `apply_partial`.
    """
    axes = AXES[PickerMode(mode)]
    x, y = _clamp01(x), _clamp01(1.0 - _clamp01(y))
    vx = round_half_up(x * CHANNEL_MAX[axes.x])
    vy = round_half_up(y * CHANNEL_MAX[axes.y])
    if axes.x == "h":
        vx %= HUE_MAX
    return {axes.x: vx, axes.y: vy}


def apply_partial(color: Color, partial: Mapping[str, Any]) -> Color:
    """Apply an all-HSL or all-RGB partial update to `color`."""
    keys = set(partial)
    if keys <= {"h", "s", "l"}:
        return color.with_hsl(**partial)
    if keys <= {"r", "g", "b"}:
        return color.with_rgb(**partial)
    raise KeyError(f"partial mixes HSL and RGB channels: {sorted(keys)}")


def color_to_position(mode: PickerMode | str, color: Color) -> tuple[float, float]:
    """Inverse of `position_to_color`: where the crosshair sits for `color`."""
    axes = AXES[PickerMode(mode)]
    vx = getattr(color, axes.x) / CHANNEL_MAX[axes.x]
    vy = getattr(color, axes.y) / CHANNEL_MAX[axes.y]
    return vx, 1.0 - vy


def fixed_channel(mode: PickerMode | str) -> str:
    return AXES[PickerMode(mode)].fixed


def fixed_value(mode: PickerMode | str, color: Color) -> int:
    return getattr(color, fixed_channel(mode))


def set_fixed_value(mode: PickerMode | str, value: Any) -> dict[str, Any]:
    """Partial update touching only the mode's fixed channel."""
    return {fixed_channel(mode): value}


def render_field(
    mode: PickerMode | str, color: Color, width: int, height: int
) -> np.ndarray | None:
    """Opaque RGBA field of shape (height, width, 4), or None if degenerate.

    Pixel column i maps to x = i/(width-1) and row j to y = 1 - j/(height-1).
    """
    if width <= 0 or height <= 0:
        return None
    axes = AXES[PickerMode(mode)]
    xs = np.linspace(0.0, 1.0, width)
    ys = 1.0 - np.linspace(0.0, 1.0, height)
    gx, gy = np.meshgrid(xs, ys)

    if axes.is_hsl:
        chans = {
            "h": np.full(gx.shape, color.h / 360.0),
            "s": np.full(gx.shape, color.s / 100.0),
            "l": np.full(gx.shape, color.l / 100.0),
        }
        chans[axes.x], chans[axes.y] = gx, gy
        rgb = hsl_to_rgb_array(chans["h"] * 360.0, chans["s"], chans["l"]) * 255.0
    else:
        chans = {
            "r": np.full(gx.shape, float(color.r)),
            "g": np.full(gx.shape, float(color.g)),
            "b": np.full(gx.shape, float(color.b)),
        }
        chans[axes.x], chans[axes.y] = gx * 255.0, gy * 255.0
        rgb = np.stack([chans["r"], chans["g"], chans["b"]], axis=-1)

    out = np.empty((height, width, 4), dtype=np.uint8)
    out[..., :3] = np.clip(np.floor(rgb + 0.5), 0, 255).astype(np.uint8)
    out[..., 3] = 255
    log.debug("rendered %s field %dx%d", PickerMode(mode).value, width, height)
    return out


__all__ = [
    "AXES",
    "Axes",
    "PickerMode",
    "apply_partial",
    "color_to_position",
    "fixed_channel",
    "fixed_value",
    "position_to_color",
    "render_field",
    "set_fixed_value",
]
