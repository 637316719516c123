"""Display surface: where the session pushes everything it computes."""

from __future__ import annotations

import base64
from typing import Any, Protocol, Sequence

import numpy as np


class Display(Protocol):
    def set_channel_values(self, r: int, g: int, b: int, h: int, s: int, l: int) -> None: ...

    def set_color_text(self, texts: dict[str, Any]) -> None: ...

    def set_picker_field(self, pixels: np.ndarray, width: int, height: int) -> None: ...

    def set_crosshair(self, x: float, y: float) -> None: ...

    def set_gradient(self, control_id: str, spec: str) -> None: ...

    def render_harmony_swatches(self, swatches: Sequence[dict[str, Any]]) -> None: ...

    def render_wheel(self, base: dict[str, Any], points: Sequence[dict[str, Any]]) -> None: ...

    def render_value_table(self, kind: str, rows: Sequence[dict[str, Any]]) -> None: ...

    def render_nearby(self, tiles: Sequence[dict[str, Any]], columns: int) -> None: ...

    def render_quiz(self, quiz: dict[str, Any]) -> None: ...


def encode_pixels(pixels: np.ndarray) -> str:
    """RGBA uint8 buffer → base64 text for JSON transport."""
    return base64.b64encode(np.ascontiguousarray(pixels, dtype=np.uint8).tobytes()).decode("ascii")


class RecordingDisplay:
    """Keeps the latest value of every push; the HTTP layer serves it as JSON."""

    def __init__(self) -> None:
        self.state: dict[str, Any] = {
            "channels": None,
            "text": None,
            "crosshair": None,
            "gradients": {},
            "harmony": [],
            "wheel": None,
            "tables": {},
            "nearby": {"tiles": [], "columns": 0},
            "quiz": None,
        }
        self.picker_field: np.ndarray | None = None
        self.pushes = 0

    def _push(self, key: str, value: Any) -> None:
        self.state[key] = value
        self.pushes += 1

    def set_channel_values(self, r: int, g: int, b: int, h: int, s: int, l: int) -> None:
        self._push("channels", {"r": r, "g": g, "b": b, "h": h, "s": s, "l": l})

    def set_color_text(self, texts: dict[str, Any]) -> None:
        self._push("text", dict(texts))

    def set_picker_field(self, pixels: np.ndarray, width: int, height: int) -> None:
        self.picker_field = pixels
        self.pushes += 1

    def set_crosshair(self, x: float, y: float) -> None:
        self._push("crosshair", {"x": x, "y": y})

    def set_gradient(self, control_id: str, spec: str) -> None:
        self.state["gradients"][control_id] = spec
        self.pushes += 1

    def render_harmony_swatches(self, swatches: Sequence[dict[str, Any]]) -> None:
        self._push("harmony", list(swatches))

    def render_wheel(self, base: dict[str, Any], points: Sequence[dict[str, Any]]) -> None:
        self._push("wheel", {"base": base, "points": list(points)})

    def render_value_table(self, kind: str, rows: Sequence[dict[str, Any]]) -> None:
        self.state["tables"][kind] = list(rows)
        self.pushes += 1

    def render_nearby(self, tiles: Sequence[dict[str, Any]], columns: int) -> None:
        self._push("nearby", {"tiles": list(tiles), "columns": columns})

    def render_quiz(self, quiz: dict[str, Any]) -> None:
        self._push("quiz", quiz)

    def picker_field_payload(self) -> dict[str, Any] | None:
        if self.picker_field is None:
            return None
        height, width = self.picker_field.shape[:2]
        return {"width": width, "height": height, "rgba": encode_pixels(self.picker_field)}


__all__ = ["Display", "RecordingDisplay", "encode_pixels"]
