"""
Named dash patterns.

A pattern is a cyclic sequence of signed lengths: positive elements are
drawn, negative elements are gaps. The ``2`` and ``x2`` variants are the
same topology at half and double length; the numbers are kept literally as
users know them rather than derived from the base pattern.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .errors import InvalidPatternError


@dataclass(frozen=True, slots=True)
class LinePattern:
    name: str
    lengths: tuple[float, ...]

    def __post_init__(self) -> None:
        lengths = tuple(float(v) for v in self.lengths)
        object.__setattr__(self, "lengths", lengths)
        if not lengths:
            raise InvalidPatternError(f"Pattern {self.name!r} has no elements")
        for value in lengths:
            if not math.isfinite(value) or value == 0.0:
                raise InvalidPatternError(f"Pattern {self.name!r} has invalid element {value!r}")
        if self.cycle_length <= 0.0:
            raise InvalidPatternError(f"Pattern {self.name!r} has no positive cycle length")

    @property
    def cycle_length(self) -> float:
        return sum(abs(v) for v in self.lengths)

    @property
    def is_solid(self) -> bool:
        return all(v > 0.0 for v in self.lengths)

    def __len__(self) -> int:
        return len(self.lengths)


_DEFINITIONS: dict[str, tuple[float, ...]] = {
    "solid": (10.0,),

    "dot": (0.1, -6.2),
    "dot2": (0.1, -3.1),
    "dotx2": (0.1, -12.4),

    "dash": (12.0, -6.0),
    "dash2": (6.0, -3.0),
    "dashx2": (24.0, -12.0),

    "dashdot": (12.0, -5.95, 0.1, -5.95),
    "dashdot2": (6.0, -2.95, 0.1, -2.95),
    "dashdotx2": (24.0, -11.95, 0.1, -11.95),

    "divide": (12.0, -5.9, 0.15, -5.9, 0.15, -5.9),
    "divide2": (6.0, -2.9, 0.15, -2.9, 0.15, -2.9),
    "dividex2": (24.0, -11.9, 0.15, -11.9, 0.15, -11.9),

    "center": (32.0, -6.0, 6.0, -6.0),
    "center2": (16.0, -3.0, 3.0, -3.0),
    "centerx2": (64.0, -12.0, 12.0, -12.0),

    "border": (12.0, -6.0, 12.0, -5.95, 0.1, -5.95),
    "border2": (6.0, -3.0, 6.0, -2.95, 0.1, -2.95),
    "borderx2": (24.0, -12.0, 24.0, -11.95, 0.1, -11.95),

    # Block references and the selection highlight
    "block": (0.5, -0.5),
    "selected": (1.0, -3.0),
}

PATTERNS: Mapping[str, LinePattern] = MappingProxyType(
    {name: LinePattern(name, lengths) for name, lengths in _DEFINITIONS.items()}
)

SOLID = PATTERNS["solid"]


def get_pattern(name: str) -> LinePattern:
    key = name.strip().lower()
    try:
        return PATTERNS[key]
    except KeyError:
        available = ", ".join(PATTERNS)
        raise KeyError(f"Unknown line pattern {name!r} (available: {available})") from None


def pattern_names() -> list[str]:
    return list(PATTERNS)
