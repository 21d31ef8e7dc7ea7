from __future__ import annotations

import logging
from pathlib import Path

from .drawing import ViewTransform, draw_entities
from .dxf_io import read_dxf
from .linetypes import get_pattern
from .polyline import Polyline
from .svg_output import SvgPathPainter, write_svg

logger = logging.getLogger(__name__)


def render_dxf_to_svg(
    input_dxf: str | Path,
    output_svg: str | Path,
    *,
    pattern: str | None = None,
    scale: float = 1.0,
    flip_y: bool = True,
    continuous: bool = True,
    stroke_width: float = 0.5,
) -> list[Polyline]:
    polylines = read_dxf(input_dxf)
    if not polylines:
        raise ValueError(f"No polylines found in {input_dxf}")

    if pattern is not None:
        override = get_pattern(pattern)
        for polyline in polylines:
            polyline.pattern = override

    view = ViewTransform(scale=scale, flip_y_ref=compute_y_flip_ref(polylines) if flip_y else None)
    painter = SvgPathPainter()
    offset = draw_entities(polylines, painter, view, continuous=continuous)
    logger.info(
        "Stroked %d polylines into %d spans (final offset %.3f)",
        len(polylines), len(painter.paths), offset,
    )
    write_svg(output_svg, painter.paths, stroke_width=stroke_width)
    return polylines


def compute_y_flip_ref(polylines: list[Polyline]) -> float:
    min_y: float | None = None
    max_y: float | None = None

    for polyline in polylines:
        for point in polyline.get_ref_points():
            if min_y is None or point.y < min_y:
                min_y = point.y
            if max_y is None or point.y > max_y:
                max_y = point.y

    if min_y is None or max_y is None:
        return 0.0
    return min_y + max_y
