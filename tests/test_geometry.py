import math

import pytest

from polydash.errors import DegenerateGeometryError, InvalidPointError
from polydash.geometry import (
    almost_equal_points,
    arc_from_bulge,
    bulge_from_arc,
    in_window,
    mirror_point,
    normalize_angle,
    rotate_point,
)
from polydash.models import INVALID_POINT, Point


def test_invalid_point_propagates_through_arithmetic() -> None:
    assert not (INVALID_POINT + Point(1.0, 1.0)).valid
    assert not (Point(1.0, 1.0) - INVALID_POINT).valid
    assert not (INVALID_POINT * 2.0).valid


def test_invalid_point_refuses_distance() -> None:
    with pytest.raises(InvalidPointError):
        Point(0.0, 0.0).distance_to(INVALID_POINT)


def test_invalid_point_is_not_the_origin() -> None:
    assert INVALID_POINT != Point(0.0, 0.0)
    assert not almost_equal_points(INVALID_POINT, Point(0.0, 0.0))


def test_rotate_point_quarter_turn() -> None:
    p = rotate_point(Point(2.0, 1.0), Point(1.0, 1.0), math.pi / 2)
    assert abs(p.x - 1.0) < 1e-9
    assert abs(p.y - 2.0) < 1e-9


def test_mirror_point_about_diagonal() -> None:
    p = mirror_point(Point(1.0, 0.0), Point(0.0, 0.0), Point(1.0, 1.0))
    assert almost_equal_points(p, Point(0.0, 1.0))


def test_in_window_accepts_either_corner_order() -> None:
    assert in_window(Point(5.0, 5.0), Point(10.0, 10.0), Point(0.0, 0.0))
    assert not in_window(Point(11.0, 5.0), Point(0.0, 0.0), Point(10.0, 10.0))
    assert not in_window(INVALID_POINT, Point(-1.0, -1.0), Point(1.0, 1.0))


def test_normalize_angle_range() -> None:
    assert abs(normalize_angle(-math.pi / 2) - 1.5 * math.pi) < 1e-12
    assert abs(normalize_angle(5 * math.pi) - math.pi) < 1e-9


def test_semicircle_from_unit_bulge() -> None:
    arc = arc_from_bulge(Point(0.0, 0.0), Point(10.0, 0.0), 1.0)
    assert almost_equal_points(arc.center, Point(5.0, 0.0))
    assert abs(arc.radius - 5.0) < 1e-9
    assert abs(arc.included_angle - math.pi) < 1e-12


def test_positive_bulge_is_counter_clockwise() -> None:
    # quarter circle from (1,0) to (0,1) around the origin
    bulge = math.tan(math.pi / 8)
    arc = arc_from_bulge(Point(1.0, 0.0), Point(0.0, 1.0), bulge)
    assert almost_equal_points(arc.center, Point(0.0, 0.0))
    assert abs(arc.radius - 1.0) < 1e-9


def test_negative_bulge_puts_center_on_the_right() -> None:
    bulge = -math.tan(math.pi / 8)
    arc = arc_from_bulge(Point(0.0, 1.0), Point(1.0, 0.0), bulge)
    assert almost_equal_points(arc.center, Point(0.0, 0.0))


def test_bulge_round_trip_through_arc_angles() -> None:
    for bulge in (0.2, 0.5, 1.0, 2.5, -0.3, -1.0, -4.0):
        arc = arc_from_bulge(Point(1.0, 2.0), Point(7.0, -3.0), bulge)
        recovered = bulge_from_arc(arc.start_angle, arc.end_angle, bulge < 0.0)
        assert abs(recovered - bulge) < 1e-9


def test_zero_bulge_is_not_an_arc() -> None:
    with pytest.raises(DegenerateGeometryError):
        arc_from_bulge(Point(0.0, 0.0), Point(1.0, 0.0), 0.0)
