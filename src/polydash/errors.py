from __future__ import annotations


class PolydashError(ValueError):
    """Base class for rejected edits and invalid definitions."""


class DegenerateGeometryError(PolydashError):
    """Coincident points, zero-length segments or a non-finite bulge."""


class EmptyStructureError(PolydashError):
    """A vertex was requested from a polyline that has none to give."""


class InvalidPatternError(PolydashError):
    """A line pattern that cannot be walked (empty, zero element, no cycle)."""


class InvalidPointError(PolydashError):
    """An unset point was used where a coordinate is required."""
