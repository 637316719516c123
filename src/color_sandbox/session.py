"""The sandbox session: owns the current color and drives the display.

Every input funnels into `set_color`, which recomputes all derived views and
pushes them to the display. Pointer input is absolute (no deltas), so a
dropped or late move event cannot leave the session out of sync.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import numpy as np

from .colormodel import (
    Color,
    contrast_lightness,
    css_hsl,
    css_rgb,
    random_pastel,
)
from .config import SandboxConfig
from .debounce import Debouncer
from .display import Display
from .gradients import channel_gradient, slider_gradients
from .harmony import (
    DESCRIPTIONS,
    HarmonyEntry,
    HarmonyMode,
    WheelMode,
    compute_harmony,
    polar_to_surface,
    surface_to_polar,
    wheel_fixed_channel,
    wheel_interaction,
    wheel_position,
)
from .nearby import columns_for_width, sample
from .picker import (
    AXES,
    PickerMode,
    apply_partial,
    color_to_position,
    fixed_value,
    position_to_color,
    render_field,
    set_fixed_value,
)
from .quiz import GuessResult, QuizEngine
from .streaks import MemoryStreakStore, StreakStore
from .tables import TABLES

log = logging.getLogger(__name__)

SLIDER_CHANNELS = {
    "r": "r", "red": "r",
    "g": "g", "green": "g",
    "b": "b", "blue": "b",
    "h": "h", "hue": "h",
    "s": "s", "saturation": "s",
    "l": "l", "lightness": "l",
}


def _checked_index(index: int, size: int, what: str) -> int:
    if not 0 <= index < size:
        raise ValueError(f"{what} index out of range: {index}")
    return index


class SandboxSession:
    def __init__(
        self,
        display: Display,
        *,
        config: SandboxConfig | None = None,
        rng: np.random.Generator | None = None,
        color: Color | None = None,
        store: StreakStore | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or SandboxConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.display = display

        self.picker_mode = PickerMode.SAT_LIGHT
        self.harmony_mode = HarmonyMode.TETRADIC
        self.wheel_mode = WheelMode.SATURATION
        self.harmony: list[HarmonyEntry] = []
        self.nearby: list[Color] = []
        self.nearby_width = self.config.nearby_width

        if store is None:
            store = StreakStore(self.config.streak_path) if self.config.streak_path else MemoryStreakStore()
        self.quiz = QuizEngine(rng=self.rng, retries=self.config.quiz_retries, store=store)

        self._resize = Debouncer(self.config.resize_debounce, self._resample_nearby, _clock=clock)
        self._field_key: tuple | None = None

        self.color = color if color is not None else random_pastel(self.rng)
        self._refresh()

    # ------------------------------------------------------------------
    # Color updates
    # ------------------------------------------------------------------

    def set_color(self, color: Color) -> None:
        self.color = color
        self._refresh()

    def update_rgb(self, r: Any, g: Any, b: Any) -> None:
        self.set_color(Color.from_rgb(r, g, b))

    def update_hsl(self, h: Any, s: Any, l: Any) -> None:
        self.set_color(Color.from_hsl(h, s, l))

    def slider_change(self, channel: str, value: Any) -> None:
        """One channel moved; the other channels of its model stay put."""
        try:
            ch = SLIDER_CHANNELS[channel.lower()]
        except (KeyError, AttributeError):
            raise ValueError(f"unknown channel '{channel}'") from None
        self.set_color(apply_partial(self.color, {ch: value}))

    # ------------------------------------------------------------------
    # 2D picker
    # ------------------------------------------------------------------

    def set_picker_mode(self, mode: PickerMode | str) -> None:
        self.picker_mode = PickerMode(mode)
        log.debug("picker mode -> %s", self.picker_mode.value)
        self._render_picker()
        self._render_fixed_slider()

    def pointer_move_picker(self, x: float, y: float) -> None:
        partial = position_to_color(self.picker_mode, x, y, self.color)
        self.set_color(apply_partial(self.color, partial))

    def set_picker_fixed(self, value: Any) -> None:
        self.set_color(apply_partial(self.color, set_fixed_value(self.picker_mode, value)))

    # ------------------------------------------------------------------
    # Harmony explorer
    # ------------------------------------------------------------------

    def set_harmony_mode(self, mode: HarmonyMode | str) -> None:
        self.harmony_mode = HarmonyMode(mode)
        self._render_harmony()

    def set_wheel_mode(self, mode: WheelMode | str) -> None:
        self.wheel_mode = WheelMode(mode)
        self._render_harmony()

    def pointer_move_wheel(self, x: float, y: float) -> None:
        angle, ratio = surface_to_polar(x, y)
        self.set_color(apply_partial(self.color, wheel_interaction(self.wheel_mode, angle, ratio)))

    def set_harmony_fixed(self, value: Any) -> None:
        self.set_color(apply_partial(self.color, {wheel_fixed_channel(self.wheel_mode): value}))

    def select_harmony(self, index: int) -> None:
        entry = self.harmony[_checked_index(index, len(self.harmony), "harmony")]
        self.update_hsl(entry.h, entry.s, entry.l)

    # ------------------------------------------------------------------
    # Nearby colors
    # ------------------------------------------------------------------

    def resize_nearby(self, width: float) -> None:
        """Viewport resize; the resample waits for the debounce delay."""
        self._resize.trigger(width)

    def poll(self) -> bool:
        return self._resize.poll()

    def select_nearby(self, index: int) -> None:
        self.set_color(self.nearby[_checked_index(index, len(self.nearby), "nearby")])

    def _resample_nearby(self, width: float) -> None:
        self.nearby_width = width
        self._render_nearby()

    # ------------------------------------------------------------------
    # Quiz
    # ------------------------------------------------------------------

    def start_quiz(self, mode: str, **formats: str | None) -> None:
        self.quiz.set_mode(mode, **formats)
        self.display.render_quiz(self.quiz.snapshot())

    def next_round(self) -> None:
        self.quiz.new_round()
        self.display.render_quiz(self.quiz.snapshot())

    def choose_option(self, index: int) -> GuessResult:
        return self._answered(self.quiz.choose_option(index))

    def submit_slider_guess(self, fmt: str, v1: Any, v2: Any, v3: Any) -> GuessResult:
        return self._answered(self.quiz.evaluate_slider_guess(fmt, v1, v2, v3))

    def submit_channel_guess(self, guess: Any) -> GuessResult:
        return self._answered(self.quiz.evaluate_channel_guess(guess))

    def _answered(self, result: GuessResult) -> GuessResult:
        self.display.render_quiz(self.quiz.snapshot())
        return result

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _refresh(self) -> None:
        c = self.color
        self.display.set_channel_values(c.r, c.g, c.b, c.h, c.s, c.l)
        ink = f"hsl({c.h}, {c.s}%, {contrast_lightness(c.l)}%)"
        self.display.set_color_text(
            {"hex": c.hex, "rgb": css_rgb(c), "hsl": css_hsl(c), "ink": ink}
        )
        for control, spec in slider_gradients(c).items():
            self.display.set_gradient(control, spec)
        self._render_picker()
        self._render_fixed_slider()
        for kind, build in TABLES.items():
            self.display.render_value_table(kind, [row.to_dict() for row in build(c.h, c.s, c.l)])
        self._render_nearby()
        self._render_harmony()

    def _render_picker(self) -> None:
        width, height = self.config.picker_width, self.config.picker_height
        key = (self.picker_mode, fixed_value(self.picker_mode, self.color), width, height)
        if key != self._field_key:
            pixels = render_field(self.picker_mode, self.color, width, height)
            if pixels is not None:
                self.display.set_picker_field(pixels, width, height)
                self._field_key = key
        x, y = color_to_position(self.picker_mode, self.color)
        self.display.set_crosshair(x, y)

    def _render_fixed_slider(self) -> None:
        self.display.set_gradient("fixed2d", channel_gradient(AXES[self.picker_mode].fixed, self.color))

    def _render_nearby(self) -> None:
        columns = columns_for_width(self.nearby_width, self.config.nearby_min_tile)
        tiles = sample(
            self.color.h, self.color.s, self.color.l,
            columns, self.config.nearby_rows, rng=self.rng,
        )
        if tiles is None:
            log.debug("nearby grid has no room yet (width=%s)", self.nearby_width)
            return
        self.nearby = tiles
        self.display.render_nearby(
            [{"hex": t.hex, "hsl": css_hsl(t), "h": t.h, "s": t.s, "l": t.l} for t in tiles],
            columns,
        )

    def _render_harmony(self) -> None:
        c = self.color
        self.harmony = compute_harmony(self.harmony_mode, c.h, c.s, c.l)
        self.display.render_harmony_swatches([e.to_dict() for e in self.harmony])
        points = []
        for entry in self.harmony:
            p = wheel_position(self.wheel_mode, entry)
            x, y = polar_to_surface(p.angle, p.radius_ratio)
            points.append({
                "angle": p.angle, "radius_ratio": p.radius_ratio,
                "x": x, "y": y, "is_base": p.is_base,
            })
        base = c.to_dict()
        base["description"] = DESCRIPTIONS[self.harmony_mode]
        base["wheel_mode"] = self.wheel_mode.value
        self.display.render_wheel(base, points)
        self.display.set_gradient(
            "harmony-fixed", channel_gradient(wheel_fixed_channel(self.wheel_mode), c)
        )

    def snapshot(self) -> dict[str, Any]:
        return {
            "color": self.color.to_dict(),
            "picker_mode": self.picker_mode.value,
            "harmony_mode": self.harmony_mode.value,
            "wheel_mode": self.wheel_mode.value,
            "nearby_width": self.nearby_width,
            "resize_pending": self._resize.pending,
        }


__all__ = ["SandboxSession"]
