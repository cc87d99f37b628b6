"""
Geometry math tests.

Tests:
1-3. Slope factor — flat, 4/12, never below 1
4-8. Plan area — square, winding, closed ring, degenerate, L-shape
9.   Segment length
"""

import math

import pytest

from roofquote.calculators.geometry import line_length_ft, plan_area_sq_ft, slope_factor

from conftest import square


def test_slope_factor_flat_is_one():
    assert slope_factor(0) == 1.0


def test_slope_factor_four_twelve():
    assert slope_factor(4) == pytest.approx(math.sqrt(1 + (4 / 12) ** 2))
    assert slope_factor(4) == pytest.approx(1.0541, abs=1e-4)


def test_slope_factor_never_below_one():
    for pitch in [0, 0.5, 1, 3, 6, 8, 12, 18, 24, 36]:
        assert slope_factor(pitch) >= 1.0
    # 12/12 is a 45° roof
    assert slope_factor(12) == pytest.approx(math.sqrt(2))


def test_plan_area_square():
    assert plan_area_sq_ft(square(10)) == pytest.approx(100.0)


def test_plan_area_ignores_winding():
    ccw = square(10)
    cw = tuple(reversed(ccw))
    assert plan_area_sq_ft(ccw) == pytest.approx(100.0)
    assert plan_area_sq_ft(cw) == pytest.approx(100.0)


def test_plan_area_explicitly_closed_ring():
    ring = square(10) + ((0, 0),)
    assert plan_area_sq_ft(ring) == pytest.approx(100.0)


def test_plan_area_degenerate_is_zero():
    assert plan_area_sq_ft(()) == 0.0
    assert plan_area_sq_ft(((0, 0),)) == 0.0
    assert plan_area_sq_ft(((0, 0), (10, 0))) == 0.0


def test_plan_area_l_shape():
    ring = ((0, 0), (20, 0), (20, 10), (10, 10), (10, 20), (0, 20))
    assert plan_area_sq_ft(ring) == pytest.approx(300.0)


def test_line_length():
    assert line_length_ft((0, 0), (3, 4)) == pytest.approx(5.0)
    assert line_length_ft((2, 2), (2, 2)) == 0.0
