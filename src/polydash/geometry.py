from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import DegenerateGeometryError
from .models import Point

TWO_PI = 2.0 * math.pi


@dataclass(frozen=True, slots=True)
class ArcGeometry:
    center: Point
    radius: float
    start_angle: float     # radians, CCW from positive X
    end_angle: float       # radians, CCW from positive X
    included_angle: float  # signed, positive = CCW


def almost_equal_points(a: Point, b: Point, eps: float = 1e-9) -> bool:
    if not (a.valid and b.valid):
        return a.valid == b.valid
    return math.isclose(a.x, b.x, abs_tol=eps) and math.isclose(a.y, b.y, abs_tol=eps)


def normalize_angle(angle: float) -> float:
    """Reduce an angle into [0, 2pi)."""
    reduced = math.fmod(angle, TWO_PI)
    if reduced < 0.0:
        reduced += TWO_PI
    if reduced >= TWO_PI:
        reduced = 0.0
    return reduced


def rotate_point(point: Point, center: Point, angle: float) -> Point:
    if not point.valid:
        return point
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = point.x - center.x
    dy = point.y - center.y
    return Point(center.x + dx * cos_a - dy * sin_a, center.y + dx * sin_a + dy * cos_a)


def scale_point(point: Point, center: Point, factor: Point) -> Point:
    if not point.valid:
        return point
    return Point(
        center.x + (point.x - center.x) * factor.x,
        center.y + (point.y - center.y) * factor.y,
    )


def mirror_point(point: Point, axis_point1: Point, axis_point2: Point) -> Point:
    if not point.valid:
        return point
    dx = axis_point2.x - axis_point1.x
    dy = axis_point2.y - axis_point1.y
    norm_sq = dx * dx + dy * dy
    if norm_sq <= 1e-24:
        raise DegenerateGeometryError("Mirror axis points coincide")
    t = ((point.x - axis_point1.x) * dx + (point.y - axis_point1.y) * dy) / norm_sq
    foot_x = axis_point1.x + t * dx
    foot_y = axis_point1.y + t * dy
    return Point(2.0 * foot_x - point.x, 2.0 * foot_y - point.y)


def in_window(point: Point, corner1: Point, corner2: Point, eps: float = 0.0) -> bool:
    if not point.valid:
        return False
    min_x, max_x = sorted((corner1.x, corner2.x))
    min_y, max_y = sorted((corner1.y, corner2.y))
    return (min_x - eps <= point.x <= max_x + eps) and (min_y - eps <= point.y <= max_y + eps)


def is_finite_bulge(bulge: float) -> bool:
    return math.isfinite(bulge)


def arc_from_bulge(start: Point, end: Point, bulge: float) -> ArcGeometry:
    """Derive the circle through ``start`` and ``end`` whose included angle is ``4 * atan(bulge)``."""
    if bulge == 0.0 or not is_finite_bulge(bulge):
        raise DegenerateGeometryError(f"Bulge {bulge!r} does not describe an arc")
    chord = start.distance_to(end)
    if chord <= 0.0:
        raise DegenerateGeometryError("Arc endpoints coincide")

    included = 4.0 * math.atan(bulge)
    signed_radius = chord / (2.0 * math.sin(included / 2.0))
    chord_angle = math.atan2(end.y - start.y, end.x - start.x)
    direction = chord_angle + math.pi / 2.0 - included / 2.0
    center = Point(
        start.x + signed_radius * math.cos(direction),
        start.y + signed_radius * math.sin(direction),
    )
    return ArcGeometry(
        center=center,
        radius=abs(signed_radius),
        start_angle=normalize_angle((start - center).angle()),
        end_angle=normalize_angle((end - center).angle()),
        included_angle=included,
    )


def sweep_between(start_angle: float, end_angle: float, reversed_: bool) -> float:
    """Signed sweep from ``start_angle`` to ``end_angle``; negative when clockwise."""
    sweep = normalize_angle(end_angle - start_angle)
    if sweep == 0.0:
        sweep = TWO_PI
    if reversed_:
        return -(TWO_PI - sweep) if sweep != TWO_PI else -TWO_PI
    return sweep


def bulge_from_arc(start_angle: float, end_angle: float, reversed_: bool) -> float:
    return math.tan(sweep_between(start_angle, end_angle, reversed_) / 4.0)
