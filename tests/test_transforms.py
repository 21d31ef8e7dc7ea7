import math

import pytest

from polydash.errors import DegenerateGeometryError, InvalidPointError
from polydash.geometry import almost_equal_points
from polydash.models import INVALID_POINT, Point
from polydash.polyline import Polyline


def _mixed_closed() -> Polyline:
    poly = Polyline(Point(0.0, 0.0))
    poly.add_vertex(Point(10.0, 0.0))
    poly.set_next_bulge(0.5)
    poly.add_vertex(Point(10.0, 10.0))
    poly.add_vertex(Point(0.0, 10.0))
    poly.set_closing_bulge(-0.3)
    poly.set_closed(True)
    poly.end_polyline()
    return poly


def _endpoints(poly: Polyline) -> list[tuple[Point, Point]]:
    return [(s.start, s.end) for s in poly.segments]


def _same_endpoints(a: list[tuple[Point, Point]], b: list[tuple[Point, Point]]) -> bool:
    return all(
        almost_equal_points(p1, q1, 1e-9) and almost_equal_points(p2, q2, 1e-9)
        for (p1, p2), (q1, q2) in zip(a, b)
    )


def test_move_shifts_segments_and_cached_points() -> None:
    poly = _mixed_closed()
    poly.move(Point(5.0, -2.0))
    assert poly.startpoint == Point(5.0, -2.0)
    assert poly.endpoint == poly.startpoint
    assert poly.segments[1].start == Point(15.0, -2.0)
    assert poly.is_continuous()


def test_move_keeps_unset_endpoint_unset() -> None:
    poly = Polyline()
    poly.move(Point(1.0, 1.0))
    assert not poly.startpoint.valid
    assert not poly.endpoint.valid


def test_rotate_then_inverse_restores_geometry() -> None:
    poly = _mixed_closed()
    before = _endpoints(poly)
    center = Point(3.0, -7.0)
    poly.rotate(center, 1.1)
    assert not _same_endpoints(before, _endpoints(poly))
    poly.rotate(center, -1.1)
    assert _same_endpoints(before, _endpoints(poly))
    assert almost_equal_points(poly.startpoint, Point(0.0, 0.0))


def test_rotate_keeps_arc_shape() -> None:
    poly = _mixed_closed()
    radius = poly.segments[1].radius
    poly.rotate(Point(0.0, 0.0), math.pi / 3)
    assert abs(poly.segments[1].radius - radius) < 1e-9
    assert poly.segments[1].bulge == 0.5


def test_uniform_scale() -> None:
    poly = _mixed_closed()
    length = poly.length
    poly.scale(Point(0.0, 0.0), 2.0)
    assert poly.segments[0].end == Point(20.0, 0.0)
    assert abs(poly.length - 2.0 * length) < 1e-9


def test_zero_scale_rejected() -> None:
    poly = _mixed_closed()
    with pytest.raises(DegenerateGeometryError):
        poly.scale(Point(0.0, 0.0), Point(0.0, 1.0))
    assert poly.segments[0].end == Point(10.0, 0.0)


def test_mirror_flips_bulges_and_keeps_closing_current() -> None:
    poly = _mixed_closed()
    poly.mirror(Point(0.0, 0.0), Point(0.0, 1.0))
    assert poly.segments[0].end == Point(-10.0, 0.0)
    assert poly.segments[1].bulge == -0.5
    assert poly.get_closing_bulge() == 0.3
    closing = poly.end_polyline()
    assert closing.bulge == 0.3
    assert poly.is_continuous()


def test_mirror_twice_is_identity() -> None:
    poly = _mixed_closed()
    before = _endpoints(poly)
    poly.mirror(Point(1.0, 2.0), Point(4.0, 9.0))
    poly.mirror(Point(1.0, 2.0), Point(4.0, 9.0))
    assert _same_endpoints(before, _endpoints(poly))
    assert poly.segments[1].bulge == 0.5


def test_mirror_degenerate_axis_rejected() -> None:
    poly = _mixed_closed()
    with pytest.raises(DegenerateGeometryError):
        poly.mirror(Point(1.0, 1.0), Point(1.0, 1.0))


def test_stretch_moves_only_vertices_in_window() -> None:
    poly = _mixed_closed()
    poly.stretch(Point(8.0, 8.0), Point(12.0, 12.0), Point(5.0, 0.0))
    assert poly.segments[0].start == Point(0.0, 0.0)
    assert poly.segments[0].end == Point(10.0, 0.0)
    assert poly.segments[1].end == Point(15.0, 10.0)
    assert poly.segments[2].start == Point(15.0, 10.0)
    assert poly.segments[2].end == Point(0.0, 10.0)
    assert poly.is_continuous()


def test_stretch_preserves_bulge_and_rederives_arc() -> None:
    poly = _mixed_closed()
    arc = poly.segments[1]
    old_radius = arc.radius
    poly.stretch(Point(8.0, 8.0), Point(12.0, 12.0), Point(0.0, 10.0))
    assert arc.bulge == 0.5
    assert arc.radius > old_radius
    assert abs(math.tan(arc.included_angle / 4.0) - 0.5) < 1e-9
    assert almost_equal_points(arc.point_at(arc.length), Point(10.0, 20.0))


def test_stretch_whole_window_moves_everything() -> None:
    poly = _mixed_closed()
    before = _endpoints(poly)
    poly.stretch(Point(-100.0, -100.0), Point(100.0, 100.0), Point(1.0, 1.0))
    shifted = [(a + Point(1.0, 1.0), b + Point(1.0, 1.0)) for a, b in before]
    assert _same_endpoints(shifted, _endpoints(poly))
    assert poly.startpoint == Point(1.0, 1.0)


def test_stretch_rejects_collapse() -> None:
    poly = _mixed_closed()
    with pytest.raises(DegenerateGeometryError):
        poly.stretch(Point(9.0, -1.0), Point(11.0, 1.0), Point(-10.0, 0.0))
    assert poly.segments[0].end == Point(10.0, 0.0)


def test_transform_with_invalid_center_fails() -> None:
    poly = _mixed_closed()
    with pytest.raises(ValueError):
        poly.rotate(INVALID_POINT, 1.0)


def test_stretch_with_unset_corner_fails() -> None:
    poly = _mixed_closed()
    with pytest.raises(InvalidPointError):
        poly.stretch(INVALID_POINT, Point(1.0, 1.0), Point(5.0, 5.0))
    assert poly.startpoint == Point(0.0, 0.0)
    assert poly.segments[0].start == Point(0.0, 0.0)
