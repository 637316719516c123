from __future__ import annotations

import logging
import math
import string
from dataclasses import dataclass
from typing import Any

import numpy as np
from coloraide import Color as CAColor

log = logging.getLogger(__name__)

RGB_MAX = 255
HUE_MAX = 360
PERCENT_MAX = 100


class InvalidColorValue(ValueError):
    """Raised when input cannot be turned into a finite channel value."""


# --------------------------------------------------------------------------
# Scalar conversions
# --------------------------------------------------------------------------


def round_half_up(x: float) -> int:
    # Math.round semantics; Python's round() is banker's rounding
    return int(math.floor(x + 0.5))


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[float, float, float]:
    """HSL → sRGB in [0,1]. `h` in degrees (any real), `s`/`l` in [0,1].

    Chroma form: a = s·min(l, 1−l), then for n in (0, 8, 4)
    k = (n + h/30) mod 12 and f = l − a·clamp(min(k−3, 9−k), −1, 1).
    """
    a = s * min(l, 1.0 - l)

    def f(n: int) -> float:
        k = (n + h / 30.0) % 12.0
        return l - a * max(min(k - 3.0, 9.0 - k, 1.0), -1.0)

    return f(0), f(8), f(4)


def hsl_to_rgb_array(h: Any, s: Any, l: Any) -> np.ndarray:
    """Vectorised `hsl_to_rgb`; broadcasts inputs, returns (..., 3) floats."""
    h, s, l = np.broadcast_arrays(
        np.asarray(h, np.float64), np.asarray(s, np.float64), np.asarray(l, np.float64)
    )
    a = s * np.minimum(l, 1.0 - l)
    out = np.empty(h.shape + (3,), dtype=np.float64)
    for i, n in enumerate((0, 8, 4)):
        k = (n + h / 30.0) % 12.0
        out[..., i] = l - a * np.clip(np.minimum(k - 3.0, 9.0 - k), -1.0, 1.0)
    return out


def rgb_to_hsl(r: float, g: float, b: float) -> tuple[float, float, float]:
    """sRGB in [0,255] → (h degrees in [0,360), s in [0,1], l in [0,1]).

    Achromatic input (max == min) has hue 0 and saturation 0.
    """
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    hi, lo = max(r, g, b), min(r, g, b)
    d = hi - lo
    l = (hi + lo) / 2.0
    if d == 0:
        return 0.0, 0.0, l
    s = d / (1.0 - abs(2.0 * l - 1.0))
    if hi == r:
        h = (g - b) / d + (6.0 if g < b else 0.0)
    elif hi == g:
        h = (b - r) / d + 2.0
    else:
        h = (r - g) / d + 4.0
    return (60.0 * h) % 360.0, s, l


def rgb01_to_hex(r: float, g: float, b: float) -> str:
    """Channels in [0,1] → '#rrggbb' (scaled ×255, clamped)."""
    u8 = [min(RGB_MAX, max(0, round_half_up(c * 255.0))) for c in (r, g, b)]
    return "#{:02x}{:02x}{:02x}".format(*u8)


def rgb255_to_hex(r: float, g: float, b: float) -> str:
    """Channels in [0,255] → '#rrggbb' (no scaling)."""
    u8 = [min(RGB_MAX, max(0, round_half_up(c))) for c in (r, g, b)]
    return "#{:02x}{:02x}{:02x}".format(*u8)


# --------------------------------------------------------------------------
# Input coercion
# --------------------------------------------------------------------------


def coerce_channel(value: Any, maximum: int) -> int:
    """Round and clamp `value` into [0, maximum]; reject NaN/inf/garbage."""
    if isinstance(value, bool):
        raise InvalidColorValue(f"not a number: {value!r}")
    if isinstance(value, str):
        value = value.strip()
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidColorValue(f"not a number: {value!r}") from None
    if not math.isfinite(v):
        raise InvalidColorValue(f"non-finite value: {value!r}")
    return min(maximum, max(0, round_half_up(v)))


def coerce_hue(value: Any) -> int:
    """Like `coerce_channel` but wraps into [0, 360) instead of clamping."""
    if isinstance(value, bool):
        raise InvalidColorValue(f"not a number: {value!r}")
    try:
        v = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise InvalidColorValue(f"not a number: {value!r}") from None
    if not math.isfinite(v):
        raise InvalidColorValue(f"non-finite value: {value!r}")
    return round_half_up(v) % HUE_MAX


# --------------------------------------------------------------------------
# Color value
# --------------------------------------------------------------------------


@dataclass(frozen=True)
class Color:
    """The selected color, held in both RGB and HSL integer form."""

    r: int
    g: int
    b: int
    h: int
    s: int
    l: int

    @classmethod
    def from_rgb(cls, r: Any, g: Any, b: Any) -> "Color":
        r, g, b = (coerce_channel(c, RGB_MAX) for c in (r, g, b))
        h, s, l = rgb_to_hsl(r, g, b)
        return cls(
            r, g, b,
            round_half_up(h) % HUE_MAX,
            round_half_up(s * 100.0),
            round_half_up(l * 100.0),
        )

    @classmethod
    def from_hsl(cls, h: Any, s: Any, l: Any) -> "Color":
        # keep the HSL as given; re-deriving it from RGB would drift by rounding
        h = coerce_hue(h)
        s = coerce_channel(s, PERCENT_MAX)
        l = coerce_channel(l, PERCENT_MAX)
        r, g, b = (round_half_up(c * 255.0) for c in hsl_to_rgb(h, s / 100.0, l / 100.0))
        return cls(r, g, b, h, s, l)

    @property
    def rgb(self) -> tuple[int, int, int]:
        return self.r, self.g, self.b

    @property
    def hsl(self) -> tuple[int, int, int]:
        return self.h, self.s, self.l

    @property
    def hex(self) -> str:
        return rgb255_to_hex(self.r, self.g, self.b)

    def with_rgb(self, **channels: Any) -> "Color":
        """Replace some of r/g/b and re-derive HSL."""
        unknown = set(channels) - {"r", "g", "b"}
        if unknown:
            raise KeyError(f"not RGB channels: {sorted(unknown)}")
        rgb = {"r": self.r, "g": self.g, "b": self.b, **channels}
        return Color.from_rgb(rgb["r"], rgb["g"], rgb["b"])

    def with_hsl(self, **channels: Any) -> "Color":
        """Replace some of h/s/l, keep the rest, and re-derive RGB."""
        unknown = set(channels) - {"h", "s", "l"}
        if unknown:
            raise KeyError(f"not HSL channels: {sorted(unknown)}")
        hsl = {"h": self.h, "s": self.s, "l": self.l, **channels}
        return Color.from_hsl(hsl["h"], hsl["s"], hsl["l"])

    def to_dict(self) -> dict[str, Any]:
        return {
            "r": self.r, "g": self.g, "b": self.b,
            "h": self.h, "s": self.s, "l": self.l,
            "hex": self.hex,
            "rgb": css_rgb(self),
            "hsl": css_hsl(self),
        }


# --------------------------------------------------------------------------
# Text formats
# --------------------------------------------------------------------------


def css_hex(color: Color) -> str:
    return color.hex


def css_rgb(color: Color) -> str:
    return f"rgb({color.r}, {color.g}, {color.b})"


def css_hsl(color: Color) -> str:
    return f"hsl({color.h}, {color.s}%, {color.l}%)"


def parse_hex(s: str) -> Color:
    """Parse '#rgb' / '#rrggbb' (leading '#' optional)."""
    raw = (s or "").strip().lstrip("#")
    if len(raw) == 3 and all(c in string.hexdigits for c in raw):
        raw = "".join(ch * 2 for ch in raw)
    if len(raw) != 6 or not all(c in string.hexdigits for c in raw):
        raise InvalidColorValue("hex must be 3 or 6 hex digits")
    return Color.from_rgb(*(int(raw[i : i + 2], 16) for i in (0, 2, 4)))


def parse_color_text(text: str) -> Color:
    """Any CSS color string ColorAide understands, clipped into sRGB."""
    try:
        c = CAColor(text.strip()).convert("srgb").clip()
    except (ValueError, AttributeError) as exc:
        raise InvalidColorValue(f"invalid color: {text!r}") from exc
    r, g, b = (float(v) for v in c.coords())
    if not all(math.isfinite(v) for v in (r, g, b)):
        raise InvalidColorValue(f"invalid color: {text!r}")
    log.debug("parsed %r as %s", text, rgb01_to_hex(r, g, b))
    return Color.from_rgb(r * 255.0, g * 255.0, b * 255.0)


# --------------------------------------------------------------------------
# Legibility
# --------------------------------------------------------------------------


def legible_text_color(l: float) -> str:
    """Black on light swatches, white otherwise."""
    return "#000" if l > 60 else "#fff"


def contrast_lightness(l: float) -> int:
    return 10 if l > 50 else 90


def random_pastel(rng: np.random.Generator) -> Color:
    h = int(rng.integers(0, 360))
    s = int(rng.integers(70, 90))
    l = int(rng.integers(75, 90))
    return Color.from_hsl(h, s, l)


__all__ = [
    "Color",
    "InvalidColorValue",
    "coerce_channel",
    "coerce_hue",
    "contrast_lightness",
    "css_hex",
    "css_hsl",
    "css_rgb",
    "hsl_to_rgb",
    "hsl_to_rgb_array",
    "legible_text_color",
    "parse_color_text",
    "parse_hex",
    "random_pastel",
    "rgb01_to_hex",
    "rgb255_to_hex",
    "rgb_to_hsl",
    "round_half_up",
]
