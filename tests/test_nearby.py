import numpy as np
import pytest

from color_sandbox.nearby import (
    Limits,
    columns_for_width,
    distance_factor,
    limits_for_column,
    sample,
)
from color_sandbox.quiz import circular_distance


class MaxRng:
    """Always draws the top of the requested range."""

    def integers(self, low, high, endpoint=False):
        return high if endpoint else high - 1


def test_limits_five_columns():
    assert limits_for_column(2, 5) == Limits(15, 10, 10)
    assert distance_factor(0, 5) == pytest.approx(0.6)
    assert limits_for_column(0, 5) == Limits(42, 22, 22)
    assert limits_for_column(4, 5) == Limits(42, 22, 22)
    assert limits_for_column(1, 5) == Limits(29, 16, 16)


def test_distance_factor_has_no_upper_clamp():
    # inside the grid the factor stays below 0.75, so the edges never reach
    # the nominal +/-60 hue spread; positions past the edge are not capped
    for columns in range(1, 60):
        assert distance_factor(0, columns) < 0.75
    assert distance_factor(-10, 5) > 1.0
    assert limits_for_column(-10, 5).hue > 60


def test_columns_for_width():
    assert columns_for_width(0) == 0
    assert columns_for_width(39) == 0
    assert columns_for_width(399) == 9
    assert columns_for_width(400, min_tile=50) == 8


def test_nothing_to_sample_without_columns():
    rng = np.random.default_rng(0)
    assert sample(10, 50, 50, 0, rng=rng) is None


def test_sample_respects_limits():
    rng = np.random.default_rng(42)
    h, s, l, columns = 350, 95, 8, 7
    tiles = sample(h, s, l, columns, rng=rng)
    assert len(tiles) == columns * 4
    for i, tile in enumerate(tiles):
        lim = limits_for_column(i % columns, columns)
        assert 0 <= tile.h < 360
        assert circular_distance(tile.h, h) <= lim.hue
        assert 0 <= tile.s <= 100 and abs(tile.s - s) <= lim.sat
        assert 0 <= tile.l <= 100 and abs(tile.l - l) <= lim.light


def test_sample_upper_bound_is_inclusive_and_wraps():
    tiles = sample(350, 95, 50, 1, rows=2, rng=MaxRng())
    assert [(t.h, t.s, t.l) for t in tiles] == [(5, 100, 60), (5, 100, 60)]


def test_seeded_sampling_is_repeatable():
    a = sample(120, 40, 60, 5, rng=np.random.default_rng(7))
    b = sample(120, 40, 60, 5, rng=np.random.default_rng(7))
    assert a == b
