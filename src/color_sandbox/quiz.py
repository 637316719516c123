"""Color quiz: random targets, three guessing games, score and streaks."""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import numpy as np

from .colormodel import (
    HUE_MAX,
    PERCENT_MAX,
    RGB_MAX,
    Color,
    coerce_channel,
    css_hex,
    css_hsl,
    css_rgb,
)
from .streaks import MemoryStreakStore, StreakStore

log = logging.getLogger(__name__)

SLIDER_TOLERANCE = 45.0  # ~10% of the largest RGB distance, sqrt(3 * 255**2)
CHANNEL_TOLERANCE = 0.10  # fraction of the channel's range
NUM_DISTRACTORS = 3


class QuizMode(str, enum.Enum):
    CODE_TO_SWATCH = "code-to-swatch"  # multiple choice
    SWATCH_TO_CODE = "swatch-to-code"  # three sliders
    CHANNEL_ISOLATION = "channel-isolation"  # one channel


class Channel(str, enum.Enum):
    RED = "Red"
    GREEN = "Green"
    BLUE = "Blue"
    HUE = "Hue"
    SATURATION = "Saturation"
    LIGHTNESS = "Lightness"

    @property
    def maximum(self) -> int:
        return _CHANNEL_MAX[self]

    def value_of(self, color: Color) -> int:
        return getattr(color, _CHANNEL_ATTR[self])


_CHANNEL_MAX = {
    Channel.RED: RGB_MAX,
    Channel.GREEN: RGB_MAX,
    Channel.BLUE: RGB_MAX,
    Channel.HUE: HUE_MAX,
    Channel.SATURATION: PERCENT_MAX,
    Channel.LIGHTNESS: PERCENT_MAX,
}
_CHANNEL_ATTR = {
    Channel.RED: "r",
    Channel.GREEN: "g",
    Channel.BLUE: "b",
    Channel.HUE: "h",
    Channel.SATURATION: "s",
    Channel.LIGHTNESS: "l",
}

CHANNEL_POOLS: Mapping[str, tuple[Channel, ...]] = {
    "rgb": (Channel.RED, Channel.GREEN, Channel.BLUE),
    "hsl": (Channel.HUE, Channel.SATURATION, Channel.LIGHTNESS),
    "red": (Channel.RED,),
    "green": (Channel.GREEN,),
    "blue": (Channel.BLUE,),
    "hue": (Channel.HUE,),
    "saturation": (Channel.SATURATION,),
    "lightness": (Channel.LIGHTNESS,),
    "mixed": tuple(Channel),
}

CODE_FORMATS = ("hex", "rgb", "hsl", "mixed")
SLIDER_FORMATS = ("rgb", "hsl")


class RoundState(str, enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"
    SUCCESS = "success"
    FAILURE = "failure"


class QuizStateError(RuntimeError):
    """An answer arrived while no round was active."""


@dataclass
class QuizOption:
    color: Color
    is_correct: bool
    state: str = "open"  # open | wrong | correct | revealed


@dataclass(frozen=True)
class GuessResult:
    correct: bool
    round_over: bool
    message: str
    distance: float | None = None
    actual: Any = None
    hint: str | None = None


@dataclass
class Scoreboard:
    score: int = 0
    streak: int = 0
    max_streaks: dict[str, int] = field(default_factory=dict)


# --------------------------------------------------------------------------
# Generation and scoring rules
# --------------------------------------------------------------------------


def generate_target(rng: np.random.Generator) -> Color:
    """Random target away from near-black, near-white and gray."""
    h = int(rng.integers(0, 360))
    s = int(rng.integers(40, 100))
    l = int(rng.integers(25, 75))
    return Color.from_hsl(h, s, l)


def generate_distractor(target: Color, rng: np.random.Generator) -> Color:
    """A color near `target` but with a different RGB value."""
    while True:
        h = (target.h + rng.uniform(-60.0, 60.0)) % 360.0
        s = min(95.0, max(10.0, target.s + rng.uniform(-20.0, 20.0)))
        l = min(85.0, max(15.0, target.l + rng.uniform(-20.0, 20.0)))
        candidate = Color.from_hsl(h, s, l)
        if candidate.rgb != target.rgb:
            return candidate


def rgb_distance(a: Color, b: Color) -> float:
    return math.sqrt((a.r - b.r) ** 2 + (a.g - b.g) ** 2 + (a.b - b.b) ** 2)


def circular_distance(a: float, b: float, period: float = 360.0) -> float:
    d = abs(a - b) % period
    return min(d, period - d)


def guess_to_color(fmt: str, values: Sequence[Any]) -> Color:
    if len(values) != 3:
        raise ValueError("expected three slider values")
    if fmt == "rgb":
        return Color.from_rgb(*values)
    if fmt == "hsl":
        h = coerce_channel(values[0], HUE_MAX)
        return Color.from_hsl(h, values[1], values[2])
    raise ValueError(f"unknown slider format '{fmt}'")


def check_slider_guess(fmt: str, values: Sequence[Any], target: Color) -> tuple[bool, float]:
    distance = rgb_distance(target, guess_to_color(fmt, values))
    return distance < SLIDER_TOLERANCE, distance


def check_channel_guess(channel: Channel | str, guess: float, actual: float) -> bool:
    """Within 10% of the channel range; hue compares around the circle."""
    channel = Channel(channel)
    tolerance = channel.maximum * CHANNEL_TOLERANCE
    if channel is Channel.HUE:
        return circular_distance(guess, actual) <= tolerance
    return abs(guess - actual) <= tolerance


def code_text(color: Color, fmt: str) -> str:
    if fmt == "hex":
        return css_hex(color)
    if fmt == "hsl":
        return css_hsl(color)
    return css_rgb(color)


# --------------------------------------------------------------------------
# Engine
# --------------------------------------------------------------------------


class QuizEngine:
    """Round lifecycle, score and streak bookkeeping for one player.

    Idle → active → success | failure → active (next round). A wrong answer
    with retries left keeps the round active.
    """

    def __init__(
        self,
        *,
        rng: np.random.Generator,
        retries: Mapping[str, int] | None = None,
        store: StreakStore | None = None,
    ) -> None:
        self.rng = rng
        self.retries = {m.value: 0 for m in QuizMode}
        self.retries.update(retries or {})
        self.store = store if store is not None else MemoryStreakStore()
        self.board = Scoreboard(max_streaks=self.store.load())

        self.mode: QuizMode | None = None
        self.state = RoundState.IDLE
        self.target: Color | None = None
        self.options: list[QuizOption] = []
        self.channel: Channel | None = None
        self.retries_left = 0
        self.code_format = "mixed"
        self.slider_format = "rgb"
        self.channel_format = "mixed"
        self.prompt = ""
        self.start_values: list[int] = []

    # ---- mode & rounds ----

    def set_mode(
        self,
        mode: QuizMode | str,
        *,
        code_format: str | None = None,
        slider_format: str | None = None,
        channel_format: str | None = None,
    ) -> None:
        if code_format is not None:
            if code_format not in CODE_FORMATS:
                raise ValueError(f"unknown code format '{code_format}'")
            self.code_format = code_format
        if slider_format is not None:
            if slider_format not in SLIDER_FORMATS:
                raise ValueError(f"unknown slider format '{slider_format}'")
            self.slider_format = slider_format
        if channel_format is not None:
            if channel_format not in CHANNEL_POOLS:
                raise ValueError(f"unknown channel format '{channel_format}'")
            self.channel_format = channel_format

        self.mode = QuizMode(mode)
        self.board.streak = 0
        log.debug("quiz mode -> %s", self.mode.value)
        self.new_round()

    def new_round(self) -> None:
        if self.mode is None:
            raise QuizStateError("no quiz mode selected")
        self.target = generate_target(self.rng)
        self.retries_left = max(0, int(self.retries.get(self.mode.value, 0)))
        self.options = []
        self.channel = None
        self.prompt = ""
        self.start_values = []

        if self.mode is QuizMode.CODE_TO_SWATCH:
            self._prepare_options()
        elif self.mode is QuizMode.SWATCH_TO_CODE:
            maxima = (RGB_MAX,) * 3 if self.slider_format == "rgb" else (HUE_MAX, PERCENT_MAX, PERCENT_MAX)
            self.start_values = [m // 2 for m in maxima]
        else:
            pool = CHANNEL_POOLS[self.channel_format]
            self.channel = pool[int(self.rng.integers(0, len(pool)))]
            self.prompt = f"Guess the {self.channel.value} value"
            self.start_values = [int(self.rng.integers(0, self.channel.maximum))]
        self.state = RoundState.ACTIVE

    def _prepare_options(self) -> None:
        assert self.target is not None
        fmt = self.code_format
        if fmt == "mixed":
            fmt = "hex" if self.rng.random() > 0.5 else ("rgb" if self.rng.random() > 0.5 else "hsl")
        self.prompt = code_text(self.target, fmt)

        options = [QuizOption(self.target, True)]
        options += [
            QuizOption(generate_distractor(self.target, self.rng), False)
            for _ in range(NUM_DISTRACTORS)
        ]
        self.options = [options[i] for i in self.rng.permutation(len(options))]

    def _require_active(self, mode: QuizMode) -> Color:
        if self.state is not RoundState.ACTIVE or self.target is None:
            raise QuizStateError("no active round")
        if self.mode is not mode:
            raise QuizStateError(f"active round is '{self.mode.value}', not '{mode.value}'")
        return self.target

    # ---- answers ----

    def choose_option(self, index: int) -> GuessResult:
        self._require_active(QuizMode.CODE_TO_SWATCH)
        if not 0 <= index < len(self.options):
            raise ValueError(f"option index out of range: {index}")
        option = self.options[index]
        if option.state != "open":
            raise QuizStateError(f"option {index} was already tried")

        if option.is_correct:
            option.state = "correct"
            self._succeed()
            return GuessResult(True, True, "Correct!")
        option.state = "wrong"
        if self.retries_left > 0:
            self.retries_left -= 1
            return GuessResult(False, False, "Not that one. Try again!")
        for other in self.options:
            if other.is_correct:
                other.state = "revealed"
        self._fail()
        return GuessResult(False, True, "Out of tries.", actual=self.prompt)

    def evaluate_slider_guess(self, fmt: str, v1: Any, v2: Any, v3: Any) -> GuessResult:
        target = self._require_active(QuizMode.SWATCH_TO_CODE)
        correct, distance = check_slider_guess(fmt, (v1, v2, v3), target)
        if correct:
            self._succeed()
            return GuessResult(True, True, "Close enough! Great job!", distance=distance)
        miss = f"Not quite! (Dist: {round(distance)})"
        if self.retries_left > 0:
            self.retries_left -= 1
            return GuessResult(False, False, f"{miss} Try again!", distance=distance)
        self._fail()
        actual = code_text(target, fmt)
        return GuessResult(False, True, f"{miss} Actual: {actual}", distance=distance, actual=actual)

    def evaluate_channel_guess(self, guess: Any) -> GuessResult:
        target = self._require_active(QuizMode.CHANNEL_ISOLATION)
        assert self.channel is not None
        value = coerce_channel(guess, self.channel.maximum)
        actual = self.channel.value_of(target)
        if check_channel_guess(self.channel, value, actual):
            self._succeed()
            return GuessResult(True, True, f"Correct! Actual was {actual}", actual=actual)
        if self.retries_left > 0:
            self.retries_left -= 1
            hint = "Too low" if value < actual else "Too high"
            return GuessResult(False, False, f"Incorrect ({hint}). Try again!", hint=hint)
        self._fail()
        return GuessResult(False, True, f"Too far. Actual was {actual}", actual=actual)

    # ---- transitions ----

    def _succeed(self) -> None:
        assert self.mode is not None
        board = self.board
        board.score += 10 + 2 * board.streak
        board.streak += 1
        self.state = RoundState.SUCCESS
        if board.streak > board.max_streaks.get(self.mode.value, 0):
            board.max_streaks[self.mode.value] = board.streak
            try:
                self.store.save(board.max_streaks)
            except OSError as exc:
                log.warning("could not save best streaks: %s", exc)
            log.info("new best streak for %s: %d", self.mode.value, board.streak)

    def _fail(self) -> None:
        self.board.streak = 0
        self.state = RoundState.FAILURE

    def snapshot(self) -> dict[str, Any]:
        mode = self.mode.value if self.mode else None
        show_target = self.mode is not QuizMode.CODE_TO_SWATCH or self.state is not RoundState.ACTIVE
        return {
            "mode": mode,
            "state": self.state.value,
            "score": self.board.score,
            "streak": self.board.streak,
            "max_streak": self.board.max_streaks.get(mode, 0) if mode else 0,
            "retries_left": self.retries_left,
            "prompt": self.prompt,
            "channel": self.channel.value if self.channel else None,
            "start_values": list(self.start_values),
            "target": self.target.to_dict() if self.target and show_target else None,
            "options": [
                {"hex": o.color.hex, "rgb": css_rgb(o.color), "state": o.state}
                for o in self.options
            ],
        }


__all__ = [
    "CHANNEL_POOLS",
    "Channel",
    "GuessResult",
    "QuizEngine",
    "QuizMode",
    "QuizOption",
    "QuizStateError",
    "RoundState",
    "Scoreboard",
    "check_channel_guess",
    "check_slider_guess",
    "circular_distance",
    "generate_distractor",
    "generate_target",
    "rgb_distance",
]
