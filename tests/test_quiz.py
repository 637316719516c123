import numpy as np
import pytest

from color_sandbox.colormodel import Color
from color_sandbox.quiz import (
    Channel,
    QuizEngine,
    QuizMode,
    QuizStateError,
    RoundState,
    check_channel_guess,
    check_slider_guess,
    circular_distance,
    generate_distractor,
    generate_target,
)
from color_sandbox.streaks import MemoryStreakStore, StreakStore


def make_engine(seed=0, **retries):
    store = MemoryStreakStore()
    engine = QuizEngine(
        rng=np.random.default_rng(seed),
        retries={k.replace("_", "-"): v for k, v in retries.items()},
        store=store,
    )
    return engine, store


def wrong_value(actual, maximum):
    return 0 if actual > maximum / 2 else maximum


def test_channel_tolerance_wraps_hue():
    assert check_channel_guess("Hue", 355, 5)
    assert abs(355 - 5) > 0.10 * 360  # a linear comparison would reject it
    assert circular_distance(355, 5) == 10
    assert not check_channel_guess(Channel.HUE, 300, 5)


def test_channel_tolerance_is_ten_percent_of_range():
    assert check_channel_guess("Red", 25, 0)
    assert not check_channel_guess("Red", 26, 0)
    assert check_channel_guess("Lightness", 60, 50)
    assert not check_channel_guess("Saturation", 61, 50)


def test_slider_guess_scenario():
    target = Color.from_hsl(200, 70, 50)
    assert target.rgb == (38, 157, 217)
    correct, distance = check_slider_guess("rgb", (45, 150, 210), target)
    assert correct
    assert distance == pytest.approx(12.124, abs=1e-3)

    correct, _ = check_slider_guess("hsl", (200, 70, 50), target)
    assert correct
    correct, distance = check_slider_guess("rgb", (200, 20, 20), target)
    assert not correct and distance > 45


def test_targets_stay_in_gamut():
    rng = np.random.default_rng(3)
    for _ in range(300):
        t = generate_target(rng)
        assert 0 <= t.h < 360
        assert 40 <= t.s <= 100
        assert 25 <= t.l <= 75


def test_distractors_are_near_but_different():
    rng = np.random.default_rng(11)
    target = Color.from_hsl(20, 90, 80)
    for _ in range(200):
        d = generate_distractor(target, rng)
        assert d.rgb != target.rgb
        assert circular_distance(d.h, target.h) <= 61
        assert 10 <= d.s <= 95
        assert 15 <= d.l <= 85


def test_multiple_choice_round():
    engine, _ = make_engine(code_to_swatch=0)
    engine.set_mode("code-to-swatch", code_format="hex")
    assert engine.state is RoundState.ACTIVE
    assert len(engine.options) == 4
    assert sum(o.is_correct for o in engine.options) == 1
    assert engine.prompt == engine.target.hex

    index = next(i for i, o in enumerate(engine.options) if o.is_correct)
    result = engine.choose_option(index)
    assert result.correct and result.round_over
    assert engine.board.score == 10
    with pytest.raises(QuizStateError):
        engine.choose_option(index)


def test_multiple_choice_retry_then_reveal():
    engine, _ = make_engine(code_to_swatch=1)
    engine.set_mode(QuizMode.CODE_TO_SWATCH)
    wrong = [i for i, o in enumerate(engine.options) if not o.is_correct]

    first = engine.choose_option(wrong[0])
    assert not first.correct and not first.round_over
    assert engine.retries_left == 0

    second = engine.choose_option(wrong[1])
    assert second.round_over
    assert engine.state is RoundState.FAILURE
    assert [o.state for o in engine.options if o.is_correct] == ["revealed"]


def test_streak_resets_but_score_is_kept():
    engine, store = make_engine(channel_isolation=0)
    engine.set_mode("channel-isolation", channel_format="red")
    for _ in range(3):
        assert engine.evaluate_channel_guess(engine.target.r).correct
        engine.new_round()
    assert engine.board.score == 10 + 12 + 14
    assert engine.board.streak == 3

    result = engine.evaluate_channel_guess(wrong_value(engine.target.r, 255))
    assert not result.correct and result.round_over
    assert result.actual == engine.target.r
    assert engine.board.streak == 0
    assert engine.board.score == 36
    assert store.saved == {"channel-isolation": 3}


def test_channel_retry_gives_direction_hint():
    engine, _ = make_engine(channel_isolation=2)
    engine.set_mode("channel-isolation", channel_format="lightness")
    actual = engine.target.l
    guess = wrong_value(actual, 100)
    result = engine.evaluate_channel_guess(guess)
    assert not result.round_over
    assert result.hint == ("Too low" if guess < actual else "Too high")
    assert engine.retries_left == 1
    assert engine.state is RoundState.ACTIVE


def test_slider_round_failure_reports_actual():
    engine, _ = make_engine(swatch_to_code=0)
    engine.set_mode("swatch-to-code", slider_format="rgb")
    assert engine.start_values == [127, 127, 127]
    t = engine.target
    far = [wrong_value(c, 255) for c in t.rgb]
    result = engine.evaluate_slider_guess("rgb", *far)
    assert result.round_over and not result.correct
    assert result.actual == f"rgb({t.r}, {t.g}, {t.b})"
    assert result.message.startswith("Not quite!")


def test_mode_switch_resets_streak():
    engine, _ = make_engine()
    engine.set_mode("channel-isolation", channel_format="hue")
    engine.evaluate_channel_guess(engine.target.h)
    assert engine.board.streak == 1
    engine.set_mode("swatch-to-code")
    assert engine.board.streak == 0
    assert engine.board.score == 10


def test_answer_for_other_mode_rejected():
    engine, _ = make_engine()
    with pytest.raises(QuizStateError):
        engine.new_round()
    engine.set_mode("swatch-to-code")
    with pytest.raises(QuizStateError):
        engine.evaluate_channel_guess(10)


def test_bad_formats_rejected():
    engine, _ = make_engine()
    with pytest.raises(ValueError):
        engine.set_mode("channel-isolation", channel_format="cmyk")
    with pytest.raises(ValueError):
        engine.set_mode("nope")


def test_max_streak_loaded_from_store(tmp_path):
    path = tmp_path / "streaks.json"
    StreakStore(path).save({"code-to-swatch": 4})
    engine = QuizEngine(rng=np.random.default_rng(0), store=StreakStore(path))
    assert engine.board.max_streaks == {"code-to-swatch": 4}


class BrokenStore(MemoryStreakStore):
    def save(self, streaks):
        raise OSError("disk full")


def test_unwritable_store_does_not_undo_the_round():
    engine = QuizEngine(rng=np.random.default_rng(0), store=BrokenStore())
    engine.set_mode("channel-isolation", channel_format="green")
    result = engine.evaluate_channel_guess(engine.target.g)
    assert result.correct
    assert engine.state is RoundState.SUCCESS
    assert (engine.board.score, engine.board.streak) == (10, 1)
    assert engine.board.max_streaks == {"channel-isolation": 1}
