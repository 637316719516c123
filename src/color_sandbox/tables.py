from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from .colormodel import Color, css_rgb

HUE_STEP = 15
PERCENT_STEP = 5


@dataclass(frozen=True)
class TableRow:
    value: int
    label: str
    hsl: tuple[int, int, int]
    color: Color
    is_current: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "label": self.label,
            "hex": self.color.hex,
            "rgb": css_rgb(self.color),
            # from the row value so the hue table keeps its 360 row
            "hsl": "hsl({}, {}%, {}%)".format(*self.hsl),
            "is_current": self.is_current,
        }


def _values(current: int, stop: int, step: int) -> list[tuple[int, bool]]:
    """Grid values 0..stop, plus `current` inserted when it is off-grid."""
    grid = [(v, v == current) for v in range(0, stop + 1, step)]
    if current % step:
        grid.append((current, True))
    return grid


def _rows(items: Iterable[tuple[int, bool]], make, unit: str) -> list[TableRow]:
    rows = []
    for v, cur in items:
        hsl = make(v)
        rows.append(TableRow(v, f"{v}{unit}", hsl, Color.from_hsl(*hsl), cur))
    return rows


def hue_table(h: int, s: int, l: int) -> list[TableRow]:
    # 360 is kept as its own row; Color folds it back to hue 0
    items = sorted(_values(h, 360, HUE_STEP))
    return _rows(items, lambda v: (v, s, l), "")


def saturation_table(h: int, s: int, l: int) -> list[TableRow]:
    items = sorted(_values(s, 100, PERCENT_STEP), reverse=True)
    return _rows(items, lambda v: (h, v, l), "%")


def lightness_table(h: int, s: int, l: int) -> list[TableRow]:
    items = sorted(_values(l, 100, PERCENT_STEP), reverse=True)
    return _rows(items, lambda v: (h, s, v), "%")


TABLES = {
    "hue": hue_table,
    "saturation": saturation_table,
    "lightness": lightness_table,
}

__all__ = ["TABLES", "TableRow", "hue_table", "lightness_table", "saturation_table"]
