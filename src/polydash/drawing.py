from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol

from . import config
from .dashing import stroke_spans
from .linetypes import LinePattern
from .models import Coordinate, Point
from .segments import Segment


class Painter(Protocol):
    def draw_polyline(self, points: list[Coordinate]) -> None: ...


class View(Protocol):
    def to_gui(self, point: Point) -> Point: ...

    def to_gui_distance(self, distance: float) -> float: ...


class Drawable(Protocol):
    def draw(self, painter: Painter, view: View | None = None, pattern_offset: float = 0.0) -> float: ...


@dataclass(frozen=True, slots=True)
class ViewTransform:
    """World to GUI mapping: translate by ``-origin``, uniform scale, optional Y flip about ``flip_y_ref``."""

    scale: float = 1.0
    origin: Coordinate = (0.0, 0.0)
    flip_y_ref: float | None = None

    def to_gui(self, point: Point) -> Point:
        point.require("view mapping")
        x = point.x - self.origin[0]
        y = point.y - self.origin[1]
        if self.flip_y_ref is None:
            return Point(x * self.scale, y * self.scale)
        return Point(x * self.scale, (self.flip_y_ref - y) * self.scale)

    def to_gui_distance(self, distance: float) -> float:
        return abs(distance) * self.scale


IDENTITY_VIEW = ViewTransform()


def draw_segment(
    segment: Segment,
    painter: Painter,
    view: View | None,
    pattern: LinePattern,
    pattern_offset: float = 0.0,
) -> float:
    """
    Stroke one segment and return the phase offset for the next one.

    The pattern is walked in GUI units so dashes keep their on-screen size
    at every zoom level; each drawn span is mapped back to a distance along
    the segment, sampled, and handed to the painter.
    """
    view = view or IDENTITY_VIEW
    world_length = segment.length
    gui_length = view.to_gui_distance(world_length)
    if gui_length <= config.SPAN_EPSILON:
        return pattern_offset

    spans, new_offset = stroke_spans(pattern, gui_length, pattern_offset)
    ratio = world_length / gui_length
    for span in spans:
        if not span.drawn:
            continue
        points = segment.sample(span.start * ratio, span.end * ratio)
        painter.draw_polyline([view.to_gui(p).as_tuple() for p in points])
    return new_offset


def draw_entities(
    entities: Iterable[Drawable],
    painter: Painter,
    view: View | None = None,
    pattern_offset: float = 0.0,
    *,
    continuous: bool = True,
) -> float:
    """Draw entities in order, carrying the phase offset from one to the next."""
    offset = pattern_offset
    for entity in entities:
        start = offset if continuous else pattern_offset
        offset = entity.draw(painter, view, start)
    return offset
