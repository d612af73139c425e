import pytest

from meshray.interpolate import Interpolator1D

SPEEDS = [0.0, 25.0, 50.0, 75.0]
TORQUES = [1000.0, 1000.0, 600.0, 250.0]


@pytest.fixture
def table():
    return Interpolator1D(SPEEDS, TORQUES)


def test_clamps_below(table):
    assert table.interpolate(-10.0) == TORQUES[0]


def test_clamps_above(table):
    assert table.interpolate(1000.0) == TORQUES[-1]


@pytest.mark.parametrize("x, y", list(zip(SPEEDS, TORQUES)))
def test_exact_at_knots(table, x, y):
    assert table.interpolate(x) == pytest.approx(y)


def test_midpoint(table):
    assert table.interpolate(37.5) == pytest.approx(800.0)


def test_flat_segment(table):
    assert table.interpolate(12.0) == pytest.approx(1000.0)


@pytest.mark.parametrize("x", [30.0, 51.0, 60.0, 74.9])
def test_value_between_neighbours(table, x):
    value = table.interpolate(x)
    lo = max(i for i, s in enumerate(SPEEDS) if s <= x)
    bounds = sorted((TORQUES[lo], TORQUES[lo + 1]))
    assert bounds[0] <= value <= bounds[1]


def test_length_mismatch():
    with pytest.raises(ValueError):
        Interpolator1D([0.0, 1.0], [1.0])


def test_empty_rejected():
    with pytest.raises(ValueError):
        Interpolator1D([], [])