import numpy as np
import pytest

from color_sandbox.colormodel import Color
from color_sandbox.picker import (
    AXES,
    PickerMode,
    apply_partial,
    color_to_position,
    fixed_channel,
    position_to_color,
    render_field,
    set_fixed_value,
)

BASE = Color.from_hsl(140, 55, 45)
GRID = np.linspace(0.0, 1.0, 11)


def test_position_to_color_table():
    assert position_to_color("sat-light", 0.25, 0.75, BASE) == {"s": 25, "l": 25}
    assert position_to_color("hue-sat", 0.5, 0.0, BASE) == {"h": 180, "s": 100}
    assert position_to_color("hue-light", 0.25, 1.0, BASE) == {"h": 90, "l": 0}
    assert position_to_color("red-green", 1.0, 0.0, BASE) == {"r": 255, "g": 255}
    assert position_to_color("red-blue", 0.0, 1.0, BASE) == {"r": 0, "b": 0}
    assert position_to_color("green-blue", 0.2, 0.6, BASE) == {"g": 51, "b": 102}


def test_position_is_clamped():
    assert position_to_color("sat-light", -0.3, 1.7, BASE) == {"s": 0, "l": 0}


@pytest.mark.parametrize("mode", list(PickerMode))
def test_color_to_position_inverts_position_to_color(mode):
    axes = AXES[mode]
    for x in GRID:
        for y in GRID:
            c = apply_partial(BASE, position_to_color(mode, x, y, BASE))
            px, py = color_to_position(mode, c)
            dx = abs(px - x)
            if axes.x == "h":
                dx = min(dx, 1.0 - dx)  # hue 360 folds onto 0
            assert dx < 0.006
            assert abs(py - y) < 0.006


@pytest.mark.parametrize("mode", list(PickerMode))
def test_move_leaves_fixed_channel(mode):
    fixed = fixed_channel(mode)
    c = apply_partial(BASE, position_to_color(mode, 0.3, 0.8, BASE))
    assert getattr(c, fixed) == getattr(BASE, fixed)


def test_fixed_slider_changes_one_channel():
    c = apply_partial(BASE, set_fixed_value("hue-sat", 80))
    assert c.hsl == (BASE.h, BASE.s, 80)

    rgb_base = Color.from_rgb(10, 20, 30)
    d = apply_partial(rgb_base, set_fixed_value("red-blue", 99))
    assert d.rgb == (10, 99, 30)


def test_mixed_partial_rejected():
    with pytest.raises(KeyError):
        apply_partial(BASE, {"h": 1, "r": 2})


def test_render_rgb_field_corners():
    base = Color.from_rgb(10, 20, 77)
    field = render_field("red-green", base, 16, 8)
    assert field.shape == (8, 16, 4)
    assert field.dtype == np.uint8
    assert (field[..., 3] == 255).all()
    assert tuple(field[0, 0, :3]) == (0, 255, 77)
    assert tuple(field[-1, -1, :3]) == (255, 0, 77)


def test_render_hsl_field_matches_color():
    field = render_field("sat-light", BASE, 101, 101)
    assert (field[-1, :, :3] == 0).all()  # l = 0 along the bottom
    assert (field[0, :, :3] == 255).all()  # l = 100 along the top
    expected = Color.from_hsl(BASE.h, 50, 50).rgb
    assert all(abs(int(a) - b) <= 1 for a, b in zip(field[50, 50, :3], expected))


def test_render_hue_axis_spans_spectrum():
    field = render_field("hue-sat", Color.from_hsl(0, 100, 50), 13, 5)
    # top row is full saturation; x=0 is red, x=1/3 is green
    assert tuple(field[0, 0, :3]) == (255, 0, 0)
    assert tuple(field[0, 4, :3]) == (0, 255, 0)


def test_degenerate_field():
    assert render_field("sat-light", BASE, 0, 10) is None
    assert render_field("red-blue", BASE, 10, 0) is None
