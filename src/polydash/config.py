"""
Tunable defaults shared by the polyline model, the pattern cursor and the
file front ends. Callers override them per instance or per call; the values
here only apply when nothing else is given.
"""

import math

# ---------------------------------------------------------------
# GEOMETRY
# ---------------------------------------------------------------

# Two points closer than this are the same vertex
DEFAULT_TOLERANCE = 1e-6

# Largest angular step used when an arc is sampled into points for a painter
ARC_SEGMENT_ANGLE = math.radians(5.0)


# ---------------------------------------------------------------
# PATTERNS
# ---------------------------------------------------------------

# Lengths below this are treated as zero by the pattern cursor
SPAN_EPSILON = 1e-9

DEFAULT_PATTERN = "solid"


# ---------------------------------------------------------------
# PERSISTENCE
# ---------------------------------------------------------------

DXF_LINETYPE_PREFIX = "POLYDASH_"
DXF_VERSION = "R2018"
