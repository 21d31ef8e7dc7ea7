from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TypeAlias

from . import config
from .errors import DegenerateGeometryError
from .geometry import (
    ArcGeometry,
    arc_from_bulge,
    is_finite_bulge,
    mirror_point,
    rotate_point,
    scale_point,
    sweep_between,
)
from .models import Point, require_points


def _check_endpoints(start: Point, end: Point) -> None:
    require_points(start, end, what="segment endpoint")
    if start.distance_to(end) <= 0.0:
        raise DegenerateGeometryError(f"Zero-length segment at ({start.x}, {start.y})")


@dataclass(slots=True, eq=False)
class LineSegment:
    start: Point
    end: Point
    selected: bool = False

    def __post_init__(self) -> None:
        _check_endpoints(self.start, self.end)

    @property
    def bulge(self) -> float:
        return 0.0

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    def point_at(self, distance: float) -> Point:
        length = self.length
        t = min(max(distance / length, 0.0), 1.0)
        return Point(
            self.start.x + (self.end.x - self.start.x) * t,
            self.start.y + (self.end.y - self.start.y) * t,
        )

    def sample(self, start_distance: float, end_distance: float) -> list[Point]:
        return [self.point_at(start_distance), self.point_at(end_distance)]

    def set_endpoints(self, start: Point, end: Point) -> None:
        _check_endpoints(start, end)
        self.start = start
        self.end = end

    def move(self, offset: Point) -> None:
        self.start = self.start + offset
        self.end = self.end + offset

    def rotate(self, center: Point, angle: float) -> None:
        self.start = rotate_point(self.start, center, angle)
        self.end = rotate_point(self.end, center, angle)

    def scale(self, center: Point, factor: Point) -> None:
        self.start = scale_point(self.start, center, factor)
        self.end = scale_point(self.end, center, factor)

    def mirror(self, axis_point1: Point, axis_point2: Point) -> None:
        self.start = mirror_point(self.start, axis_point1, axis_point2)
        self.end = mirror_point(self.end, axis_point1, axis_point2)

    def copy(self) -> LineSegment:
        return LineSegment(self.start, self.end, selected=self.selected)

    def reversed(self) -> LineSegment:
        return LineSegment(self.end, self.start, selected=self.selected)


@dataclass(slots=True, eq=False)
class ArcSegment:
    """
    Arc between two vertices, encoded by its bulge (tan of a quarter of the
    included angle; positive bulges run counter-clockwise).

    Center, radius and angles are derived on demand and cached under the
    (start, end, bulge) triple that produced them, so moving an endpoint
    keeps the bulge and recomputes the circle.
    """

    start: Point
    end: Point
    bulge: float
    selected: bool = False
    _cache: ArcGeometry | None = field(default=None, init=False, repr=False)
    _cache_key: tuple[Point, Point, float] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        _check_endpoints(self.start, self.end)
        if self.bulge == 0.0 or not is_finite_bulge(self.bulge):
            raise DegenerateGeometryError(f"Invalid arc bulge: {self.bulge!r}")

    def invalidate(self) -> None:
        self._cache = None
        self._cache_key = None

    @property
    def geometry(self) -> ArcGeometry:
        key = (self.start, self.end, self.bulge)
        if self._cache is None or self._cache_key != key:
            self._cache = arc_from_bulge(self.start, self.end, self.bulge)
            self._cache_key = key
        return self._cache

    @property
    def center(self) -> Point:
        return self.geometry.center

    @property
    def radius(self) -> float:
        return self.geometry.radius

    @property
    def start_angle(self) -> float:
        return self.geometry.start_angle

    @property
    def end_angle(self) -> float:
        return self.geometry.end_angle

    @property
    def is_reversed(self) -> bool:
        return self.bulge < 0.0

    @property
    def included_angle(self) -> float:
        """Signed sweep measured from the derived center, not from the bulge."""
        geo = self.geometry
        return sweep_between(geo.start_angle, geo.end_angle, self.is_reversed)

    @property
    def length(self) -> float:
        geo = self.geometry
        return geo.radius * abs(geo.included_angle)

    def point_at(self, distance: float) -> Point:
        geo = self.geometry
        distance = min(max(distance, 0.0), self.length)
        sign = -1.0 if self.is_reversed else 1.0
        angle = geo.start_angle + sign * distance / geo.radius
        return Point(
            geo.center.x + geo.radius * math.cos(angle),
            geo.center.y + geo.radius * math.sin(angle),
        )

    def sample(self, start_distance: float, end_distance: float) -> list[Point]:
        span_angle = abs(end_distance - start_distance) / self.radius
        steps = max(1, int(math.ceil(span_angle / config.ARC_SEGMENT_ANGLE)))
        step = (end_distance - start_distance) / steps
        return [self.point_at(start_distance + i * step) for i in range(steps + 1)]

    def set_endpoints(self, start: Point, end: Point) -> None:
        _check_endpoints(start, end)
        self.start = start
        self.end = end
        self.invalidate()

    def move(self, offset: Point) -> None:
        self.start = self.start + offset
        self.end = self.end + offset
        self.invalidate()

    def rotate(self, center: Point, angle: float) -> None:
        self.start = rotate_point(self.start, center, angle)
        self.end = rotate_point(self.end, center, angle)
        self.invalidate()

    def scale(self, center: Point, factor: Point) -> None:
        self.start = scale_point(self.start, center, factor)
        self.end = scale_point(self.end, center, factor)
        if factor.x * factor.y < 0.0:
            self.bulge = -self.bulge
        self.invalidate()

    def mirror(self, axis_point1: Point, axis_point2: Point) -> None:
        self.start = mirror_point(self.start, axis_point1, axis_point2)
        self.end = mirror_point(self.end, axis_point1, axis_point2)
        self.bulge = -self.bulge
        self.invalidate()

    def copy(self) -> ArcSegment:
        return ArcSegment(self.start, self.end, self.bulge, selected=self.selected)

    def reversed(self) -> ArcSegment:
        return ArcSegment(self.end, self.start, -self.bulge, selected=self.selected)


Segment: TypeAlias = LineSegment | ArcSegment


def make_segment(start: Point, end: Point, bulge: float = 0.0) -> Segment:
    if not is_finite_bulge(bulge):
        raise DegenerateGeometryError(f"Invalid bulge: {bulge!r}")
    if bulge == 0.0:
        return LineSegment(start, end)
    return ArcSegment(start, end, bulge)
