from __future__ import annotations

import logging
from pathlib import Path

import ezdxf
from ezdxf import units

from . import config
from .errors import PolydashError
from .linetypes import PATTERNS, SOLID, LinePattern
from .polyline import Polyline

logger = logging.getLogger(__name__)

_DXF_UNIT_MAP = {
    "mm": units.MM,
    "inch": units.IN,
    "px": 0,
}


def write_dxf(path: str | Path, polylines: list[Polyline], *, unit: str = "mm", layer: str = "0") -> None:
    """Write polylines as LWPOLYLINE entities with (x, y, bulge) vertices."""
    doc = ezdxf.new(config.DXF_VERSION)
    doc.units = _DXF_UNIT_MAP.get(unit.lower(), 0)
    msp = doc.modelspace()

    lt_map = _register_linetypes(doc, [p.pattern for p in polylines])
    _ensure_layer(doc, layer)

    for polyline in polylines:
        points = [(point.x, point.y, bulge) for point, bulge in polyline.vertices()]
        if len(points) < 2:
            logger.warning("Skipping polyline %d: fewer than two vertices", polyline.id)
            continue
        attribs = {"layer": layer}
        if polyline.pattern.name in lt_map:
            attribs["linetype"] = lt_map[polyline.pattern.name]
        msp.add_lwpolyline(points, format="xyb", close=polyline.is_closed(), dxfattribs=attribs)

    doc.saveas(str(path))


def read_dxf(path: str | Path, *, tolerance: float | None = None) -> list[Polyline]:
    """Load every LWPOLYLINE of the modelspace as a Polyline."""
    doc = ezdxf.readfile(str(path))
    msp = doc.modelspace()
    out: list[Polyline] = []

    for entity in msp.query("LWPOLYLINE"):
        vertices = [((x, y), bulge) for x, y, bulge in entity.get_points(format="xyb")]
        pattern = pattern_for_linetype(entity.dxf.linetype)
        try:
            polyline = Polyline.from_vertices(
                vertices, closed=entity.closed, pattern=pattern, tolerance=tolerance
            )
        except PolydashError as exc:
            logger.warning("Skipping LWPOLYLINE %s: %s", entity.dxf.handle, exc)
            continue
        out.append(polyline)

    return out


def linetype_name(pattern: LinePattern) -> str:
    return config.DXF_LINETYPE_PREFIX + pattern.name.upper()


def pattern_for_linetype(name: str) -> LinePattern:
    upper = name.upper()
    if upper in ("BYLAYER", "BYBLOCK", "CONTINUOUS"):
        return SOLID
    if upper.startswith(config.DXF_LINETYPE_PREFIX):
        key = upper[len(config.DXF_LINETYPE_PREFIX):].lower()
        if key in PATTERNS:
            return PATTERNS[key]
    logger.warning("Unknown linetype %r, drawing solid", name)
    return SOLID


def _register_linetypes(
    doc: ezdxf.document.Drawing, patterns: list[LinePattern],
) -> dict[str, str]:
    lt_map: dict[str, str] = {}
    for pattern in patterns:
        if pattern.is_solid or pattern.name in lt_map:
            continue
        name = linetype_name(pattern)
        # DXF pattern: [total_length, dash, -gap, dash, -gap, ...]
        dxf_pattern = [pattern.cycle_length, *pattern.lengths]
        if name not in doc.linetypes:
            doc.linetypes.add(name, pattern=dxf_pattern, description=f"polydash {pattern.name}")
        lt_map[pattern.name] = name
    return lt_map


def _ensure_layer(doc: ezdxf.document.Drawing, layer_name: str) -> None:
    if layer_name in doc.layers:
        return
    doc.layers.new(name=layer_name)
