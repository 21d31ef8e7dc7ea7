from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TypeAlias

from .errors import InvalidPointError

Coordinate: TypeAlias = tuple[float, float]


@dataclass(frozen=True, slots=True)
class Point:
    """A 2D coordinate. ``valid=False`` means "no point yet", not the origin."""

    x: float = 0.0
    y: float = 0.0
    valid: bool = True

    @classmethod
    def from_tuple(cls, coord: Coordinate) -> Point:
        return cls(float(coord[0]), float(coord[1]))

    def __add__(self, other: Point) -> Point:
        if not (self.valid and other.valid):
            return INVALID_POINT
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        if not (self.valid and other.valid):
            return INVALID_POINT
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Point:
        if not self.valid:
            return INVALID_POINT
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def angle(self) -> float:
        self.require("angle")
        return math.atan2(self.y, self.x)

    def distance_to(self, other: Point) -> float:
        self.require("distance")
        other.require("distance")
        return math.hypot(other.x - self.x, other.y - self.y)

    def as_tuple(self) -> Coordinate:
        self.require("coordinate")
        return (self.x, self.y)

    def require(self, what: str = "geometry") -> Point:
        if not self.valid:
            raise InvalidPointError(f"Invalid point used for {what}")
        return self


INVALID_POINT = Point(0.0, 0.0, valid=False)


@dataclass(frozen=True, slots=True)
class NearestRef:
    point: Point
    distance: float


def require_points(*points: Point, what: str = "geometry") -> None:
    for point in points:
        point.require(what)
