from __future__ import annotations

import math
from pathlib import Path

from svgpathtools import Arc as SvgArc, Line as SvgLine, Path as SvgPath, wsvg

from .models import Coordinate, Point
from .polyline import Polyline
from .segments import ArcSegment


def _complex(point: Point | Coordinate) -> complex:
    if isinstance(point, Point):
        point = point.as_tuple()
    return complex(point[0], point[1])


class SvgPathPainter:
    """Painter that collects every stroked span as an svgpathtools Path."""

    def __init__(self) -> None:
        self.paths: list[SvgPath] = []

    def draw_polyline(self, points: list[Coordinate]) -> None:
        lines = [
            SvgLine(_complex(a), _complex(b))
            for a, b in zip(points, points[1:])
            if a != b
        ]
        if lines:
            self.paths.append(SvgPath(*lines))


def polyline_to_svg_path(polyline: Polyline) -> SvgPath:
    """Undashed geometry of a polyline with true SVG arcs."""
    out = SvgPath()
    for segment in polyline.segments:
        start = _complex(segment.start)
        end = _complex(segment.end)
        if isinstance(segment, ArcSegment):
            radius = segment.radius
            out.append(
                SvgArc(
                    start=start,
                    radius=complex(radius, radius),
                    rotation=0.0,
                    large_arc=abs(segment.included_angle) > math.pi,
                    sweep=segment.bulge > 0.0,
                    end=end,
                )
            )
        else:
            out.append(SvgLine(start, end))
    return out


def write_svg(
    path: str | Path,
    paths: list[SvgPath],
    *,
    stroke_width: float = 0.5,
    color: str = "black",
) -> None:
    if not paths:
        raise ValueError("Nothing to draw")
    wsvg(
        paths,
        colors=[color] * len(paths),
        stroke_widths=[stroke_width] * len(paths),
        filename=str(path),
    )
