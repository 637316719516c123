from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .colormodel import HUE_MAX, Color, round_half_up

MIN_TILE_WIDTH = 40
DEFAULT_ROWS = 4


@dataclass(frozen=True)
class Limits:
    hue: int
    sat: int
    light: int


def columns_for_width(width: float, min_tile: int = MIN_TILE_WIDTH) -> int:
    """How many `min_tile`-wide columns fit into `width`; 0 while hidden."""
    if width <= 0 or min_tile <= 0:
        return 0
    return int(width // min_tile)


def distance_factor(col: int, columns: int) -> float:
    """0 at the center column, growing linearly toward the edges.

    Clamped below at 0 only; there is no upper clamp.
    """
    center = (columns - 1) / 2.0
    max_dist = columns / 1.5
    if max_dist <= 0:
        return 0.0
    return max(0.0, abs(col - center) / max_dist)


def limits_for_column(col: int, columns: int) -> Limits:
    f = distance_factor(col, columns)
    spread = 10 + round_half_up(20.0 * f)
    return Limits(hue=15 + round_half_up(45.0 * f), sat=spread, light=spread)


def sample(
    h: int,
    s: int,
    l: int,
    columns: int,
    rows: int = DEFAULT_ROWS,
    *,
    rng: np.random.Generator,
) -> list[Color] | None:
    """Random HSL variants of (h, s, l), row-major, `columns * rows` of them.

    Returns None when there is no room for a single column yet.
    """
    if columns <= 0 or rows <= 0:
        return None
    limits = [limits_for_column(c, columns) for c in range(columns)]
    out: list[Color] = []
    for i in range(columns * rows):
        lim = limits[i % columns]
        dh = int(rng.integers(-lim.hue, lim.hue, endpoint=True))
        ds = int(rng.integers(-lim.sat, lim.sat, endpoint=True))
        dl = int(rng.integers(-lim.light, lim.light, endpoint=True))
        out.append(
            Color.from_hsl(
                (h + dh) % HUE_MAX,
                min(100, max(0, s + ds)),
                min(100, max(0, l + dl)),
            )
        )
    return out


__all__ = [
    "DEFAULT_ROWS",
    "Limits",
    "MIN_TILE_WIDTH",
    "columns_for_width",
    "distance_factor",
    "limits_for_column",
    "sample",
]
