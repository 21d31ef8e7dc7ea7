from __future__ import annotations

import itertools
import logging
from typing import Callable, Iterable, Iterator

from . import config
from .drawing import Painter, View, draw_segment
from .errors import DegenerateGeometryError, EmptyStructureError
from .geometry import almost_equal_points, in_window, is_finite_bulge, mirror_point, rotate_point, scale_point
from .linetypes import LinePattern, get_pattern
from .models import INVALID_POINT, Coordinate, NearestRef, Point
from .segments import Segment, make_segment

logger = logging.getLogger(__name__)

_ids = itertools.count(1)

Vertex = tuple[Point, float]


class Polyline:
    """
    An ordered chain of line and arc segments sharing endpoints pairwise.

    Arcs are encoded by the bulge of the vertex they start at. Appending uses
    a pending "next bulge" that is consumed by the following ``add_vertex``.
    When the polyline is closed, ``end_polyline`` materializes a closing
    segment from the last vertex back to the start point; it is owned by
    the polyline and regenerated whenever the chain changes.

    Start and end point are cached and kept in sync by the editing
    operations; after touching segments directly call ``update_endpoints``.
    """

    def __init__(
        self,
        startpoint: Point = INVALID_POINT,
        endpoint: Point = INVALID_POINT,
        closed: bool = False,
        *,
        pattern: LinePattern | str | None = None,
        tolerance: float | None = None,
    ) -> None:
        self.id = next(_ids)
        self.selected = False
        if isinstance(pattern, str) or pattern is None:
            pattern = get_pattern(pattern or config.DEFAULT_PATTERN)
        self.pattern = pattern
        self.tolerance = config.DEFAULT_TOLERANCE if tolerance is None else tolerance
        self._startpoint = startpoint
        self._endpoint = endpoint if endpoint.valid else startpoint
        self._closed = closed
        self._segments: list[Segment] = []
        self._closing: Segment | None = None
        self._closing_active = False
        self._next_bulge = 0.0
        self._closing_bulge = 0.0

    @classmethod
    def from_vertices(
        cls,
        vertices: Iterable[tuple[Point | Coordinate, float]],
        closed: bool = False,
        *,
        pattern: LinePattern | str | None = None,
        tolerance: float | None = None,
    ) -> Polyline:
        """Build a polyline from (vertex, bulge-to-next) pairs."""
        poly = cls(pattern=pattern, tolerance=tolerance)
        items = [
            (p if isinstance(p, Point) else Point.from_tuple(p), float(bulge))
            for p, bulge in vertices
        ]
        if closed and len(items) > 1 and almost_equal_points(items[0][0], items[-1][0], poly.tolerance):
            items.pop()
        if not items:
            return poly

        poly.set_startpoint(items[0][0])
        for (_, bulge), (point, _) in zip(items, items[1:]):
            poly.set_next_bulge(bulge)
            poly.add_vertex(point)
        if closed:
            poly.set_closing_bulge(items[-1][1])
            poly.set_closed(True)
            poly.end_polyline()
        return poly

    def __repr__(self) -> str:
        return (
            f"Polyline(id={self.id}, start={self._startpoint}, end={self._endpoint}, "
            f"closed={self._closed}, segments={len(self.segments)})"
        )

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    # ------------------------------------------------------------
    # Entity registration hooks
    # ------------------------------------------------------------
    def on_segment_added(self, segment: Segment) -> None:
        logger.debug("polyline %d: added %r", self.id, segment)

    def on_segment_removed(self, segment: Segment) -> None:
        logger.debug("polyline %d: removed %r", self.id, segment)

    # ------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------
    @property
    def startpoint(self) -> Point:
        return self._startpoint

    @property
    def endpoint(self) -> Point:
        return self._endpoint

    @property
    def segments(self) -> tuple[Segment, ...]:
        if self._closing is None:
            return tuple(self._segments)
        return (*self._segments, self._closing)

    @property
    def closing_segment(self) -> Segment | None:
        return self._closing

    @property
    def next_bulge(self) -> float:
        return self._next_bulge

    @property
    def length(self) -> float:
        return sum(segment.length for segment in self.segments)

    def set_startpoint(self, point: Point) -> None:
        self._startpoint = point
        if not self._endpoint.valid:
            self._endpoint = point

    def set_endpoint(self, point: Point) -> None:
        self._endpoint = point

    def set_next_bulge(self, bulge: float) -> None:
        if not is_finite_bulge(bulge):
            raise DegenerateGeometryError(f"Invalid bulge: {bulge!r}")
        self._next_bulge = bulge

    def set_closing_bulge(self, bulge: float) -> None:
        if not is_finite_bulge(bulge):
            raise DegenerateGeometryError(f"Invalid bulge: {bulge!r}")
        self._closing_bulge = bulge
        if self._closing_active:
            self._materialize_closing()

    def get_closing_bulge(self) -> float:
        return self._closing_bulge

    def is_closed(self) -> bool:
        return self._closed

    def set_closed(self, closed: bool) -> None:
        self._closed = bool(closed)
        if not self._closed:
            self._closing_active = False
            self._drop_closing()

    def vertices(self) -> list[Vertex]:
        """(vertex, bulge-to-next) pairs; the last bulge is the closing bulge when closed."""
        if not self._startpoint.valid:
            return []
        points = [self._startpoint] + [segment.end for segment in self._segments]
        bulges = [segment.bulge for segment in self._segments]
        if self._closing is not None:
            bulges.append(self._closing.bulge)
        else:
            bulges.append(self._closing_bulge if self._closed else 0.0)
        return list(zip(points, bulges))

    def is_continuous(self, tolerance: float | None = None) -> bool:
        tol = self.tolerance if tolerance is None else tolerance
        segments = self.segments
        return all(
            almost_equal_points(a.end, b.start, tol) for a, b in zip(segments, segments[1:])
        )

    # ------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------
    def add_vertex(
        self, coord: Point, tolerance: float | None = None, prepend: bool = False
    ) -> Segment | None:
        """
        Append (or prepend) a vertex, consuming the pending next bulge.

        The first vertex of an empty polyline only records the start point
        and returns None. Raises DegenerateGeometryError when ``coord``
        coincides with the vertex it would connect to.
        """
        coord.require("vertex")
        if not self._startpoint.valid:
            self.set_startpoint(coord)
            return None

        tol = self.tolerance if tolerance is None else tolerance
        anchor = self._startpoint if prepend else self._last_vertex()
        if coord.distance_to(anchor) <= tol:
            logger.debug("polyline %d: rejected duplicate vertex (%g, %g)", self.id, coord.x, coord.y)
            raise DegenerateGeometryError(
                f"Vertex ({coord.x}, {coord.y}) coincides with the previous vertex"
            )

        segment = self.create_vertex(coord, self._next_bulge, prepend)
        self._next_bulge = 0.0
        return segment

    def create_vertex(self, coord: Point, bulge: float = 0.0, prepend: bool = False) -> Segment:
        if prepend:
            segment = make_segment(coord, self._startpoint, bulge)
        else:
            segment = make_segment(self._last_vertex(), coord, bulge)

        self._drop_closing()
        if prepend:
            self._segments.insert(0, segment)
            self._startpoint = coord
        else:
            self._segments.append(segment)
            self._endpoint = coord
        self.on_segment_added(segment)
        if self._closing_active:
            self._materialize_closing()
        return segment

    def remove_last_vertex(self) -> None:
        if not self._segments:
            logger.debug("polyline %d: no vertex to remove", self.id)
            raise EmptyStructureError("Polyline has no segment to remove")

        self._drop_closing()
        segment = self._segments.pop()
        self.on_segment_removed(segment)
        self._endpoint = self._last_vertex()
        if self._closing_active:
            self._materialize_closing()

    def end_polyline(self) -> Segment | None:
        """Finish editing; a closed polyline gets its closing segment."""
        if self._closed:
            if self._next_bulge != 0.0:
                self._closing_bulge = self._next_bulge
                self._next_bulge = 0.0
            self._closing_active = True
            if not self._closing_is_current():
                self._materialize_closing()
        return self._closing

    def update_endpoints(self) -> None:
        if self._segments:
            self._startpoint = self._segments[0].start
            self._endpoint = self._segments[-1].end
        if not self._closed:
            self._drop_closing()
        elif self._segments:
            self._closing_active = True
            if self._closing_is_current():
                self._endpoint = self._startpoint
            else:
                self._materialize_closing()

    def _last_vertex(self) -> Point:
        if self._segments:
            return self._segments[-1].end
        return self._startpoint

    def _closing_is_current(self) -> bool:
        closing = self._closing
        if closing is None:
            return False
        return (
            closing.start == self._last_vertex()
            and closing.end == self._startpoint
            and closing.bulge == self._closing_bulge
        )

    def _drop_closing(self) -> None:
        if self._closing is None:
            return
        closing, self._closing = self._closing, None
        self.on_segment_removed(closing)
        self._endpoint = self._last_vertex()

    def _materialize_closing(self) -> None:
        self._drop_closing()
        last = self._last_vertex()
        if not self._segments or last.distance_to(self._startpoint) <= self.tolerance:
            self._endpoint = last
            return
        self._closing = make_segment(last, self._startpoint, self._closing_bulge)
        self.on_segment_added(self._closing)
        self._endpoint = self._startpoint

    # ------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------
    def move(self, offset: Point) -> None:
        offset.require("move offset")
        for segment in self.segments:
            segment.move(offset)
        self._startpoint = self._startpoint + offset
        self._endpoint = self._endpoint + offset

    def rotate(self, center: Point, angle: float) -> None:
        center.require("rotation center")
        for segment in self.segments:
            segment.rotate(center, angle)
        self._startpoint = rotate_point(self._startpoint, center, angle)
        self._endpoint = rotate_point(self._endpoint, center, angle)

    def scale(self, center: Point, factor: Point | float) -> None:
        center.require("scale center")
        if not isinstance(factor, Point):
            factor = Point(factor, factor)
        if factor.x == 0.0 or factor.y == 0.0:
            raise DegenerateGeometryError("Scale factor collapses the polyline")
        for segment in self.segments:
            segment.scale(center, factor)
        if factor.x * factor.y < 0.0:
            self._closing_bulge = -self._closing_bulge
        self._startpoint = scale_point(self._startpoint, center, factor)
        self._endpoint = scale_point(self._endpoint, center, factor)

    def mirror(self, axis_point1: Point, axis_point2: Point) -> None:
        if almost_equal_points(axis_point1.require("mirror axis"), axis_point2.require("mirror axis")):
            raise DegenerateGeometryError("Mirror axis points coincide")
        for segment in self.segments:
            segment.mirror(axis_point1, axis_point2)
        self._closing_bulge = -self._closing_bulge
        self._startpoint = mirror_point(self._startpoint, axis_point1, axis_point2)
        self._endpoint = mirror_point(self._endpoint, axis_point1, axis_point2)

    def stretch(self, first_corner: Point, second_corner: Point, offset: Point) -> None:
        """
        Move every vertex inside the window by ``offset``. Segments keep
        their bulge, so an arc with one moved endpoint keeps its included
        angle and gets a new center and radius.
        """
        first_corner.require("stretch window")
        second_corner.require("stretch window")
        offset.require("stretch offset")

        def moved(point: Point) -> Point:
            if in_window(point, first_corner, second_corner, self.tolerance):
                return point + offset
            return point

        self._relocate(moved)

    # ------------------------------------------------------------
    # Reference points
    # ------------------------------------------------------------
    def get_ref_points(self) -> list[Point]:
        if not self._startpoint.valid:
            return []
        return [self._startpoint] + [segment.end for segment in self._segments]

    def get_nearest_ref(self, coord: Point) -> NearestRef | None:
        return _nearest(coord, self.get_ref_points())

    def get_nearest_selected_ref(self, coord: Point) -> NearestRef | None:
        if self.selected:
            return self.get_nearest_ref(coord)
        refs: list[Point] = []
        for segment in self.segments:
            if segment.selected:
                refs.extend((segment.start, segment.end))
        return _nearest(coord, refs)

    def move_ref(self, ref: Point, offset: Point) -> bool:
        """
        Drag the vertex at ``ref`` by ``offset``. Adjacent arcs keep their
        bulge (and so their included angle); their circle is re-derived.
        Returns False when no vertex lies at ``ref``.
        """
        ref.require("reference point")
        offset.require("move offset")

        def moved(point: Point) -> Point:
            if point.valid and point.distance_to(ref) <= self.tolerance:
                return point + offset
            return point

        return self._relocate(moved)

    def _relocate(self, moved: Callable[[Point], Point]) -> bool:
        plan: list[tuple[Segment, Point, Point]] = []
        for segment in self._segments:
            start, end = moved(segment.start), moved(segment.end)
            if start == segment.start and end == segment.end:
                continue
            if start.distance_to(end) <= self.tolerance:
                raise DegenerateGeometryError(
                    f"Moving the vertex to ({end.x}, {end.y}) collapses a segment"
                )
            plan.append((segment, start, end))

        new_start = moved(self._startpoint)
        if not plan and new_start == self._startpoint:
            return False

        for segment, start, end in plan:
            segment.set_endpoints(start, end)
        self._startpoint = new_start
        self._endpoint = self._last_vertex()
        if self._closing_active:
            self._materialize_closing()
        return True

    # ------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------
    def draw(self, painter: Painter, view: View | None = None, pattern_offset: float = 0.0) -> float:
        """Stroke every segment in order; returns the offset for the next entity."""
        offset = pattern_offset
        for segment in self.segments:
            offset = draw_segment(segment, painter, view, self.pattern, offset)
        return offset

    def clone(self) -> Polyline:
        copy = Polyline(
            self._startpoint,
            self._endpoint,
            self._closed,
            pattern=self.pattern,
            tolerance=self.tolerance,
        )
        copy.selected = self.selected
        copy._next_bulge = self._next_bulge
        copy._closing_bulge = self._closing_bulge
        copy._closing_active = self._closing_active
        for segment in self._segments:
            duplicate = segment.copy()
            copy._segments.append(duplicate)
            copy.on_segment_added(duplicate)
        if self._closing is not None:
            copy._closing = self._closing.copy()
            copy.on_segment_added(copy._closing)
        return copy


def _nearest(coord: Point, candidates: list[Point]) -> NearestRef | None:
    coord.require("nearest reference query")
    best: NearestRef | None = None
    for point in candidates:
        distance = coord.distance_to(point)
        if best is None or distance < best.distance:
            best = NearestRef(point, distance)
    return best
