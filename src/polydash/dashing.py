"""
Pattern cursor: walks a dash pattern along a length.

The cursor keeps no state of its own. The caller owns the phase offset,
passes it in, and threads the returned offset into the next call so the
dash rhythm continues across segments and across entities.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from . import config
from .linetypes import LinePattern


@dataclass(frozen=True, slots=True)
class StrokeSpan:
    start: float
    end: float
    drawn: bool

    @property
    def length(self) -> float:
        return self.end - self.start


def merge_spans(spans: Iterable[StrokeSpan]) -> list[StrokeSpan]:
    """Join consecutive spans of the same kind that touch."""
    merged: list[StrokeSpan] = []
    for span in spans:
        if merged:
            last = merged[-1]
            if last.drawn == span.drawn and math.isclose(last.end, span.start, abs_tol=config.SPAN_EPSILON):
                merged[-1] = StrokeSpan(last.start, span.end, last.drawn)
                continue
        merged.append(span)
    return merged


def _locate(pattern: LinePattern, phase: float) -> tuple[int, float]:
    """Element index at ``phase`` and the length of that element still ahead."""
    lengths = pattern.lengths
    position = phase
    for index, value in enumerate(lengths):
        size = abs(value)
        if position < size - config.SPAN_EPSILON:
            return index, size - position
        position -= size
    # phase rounded up to the full cycle
    return 0, abs(lengths[0])


def stroke_spans(
    pattern: LinePattern, length: float, offset: float = 0.0
) -> tuple[list[StrokeSpan], float]:
    """
    Partition ``length`` into drawn and gap spans starting ``offset`` units
    into the pattern cycle. Returns the spans (distances measured from the
    start of the length) and the phase to pass to the next call.
    """
    if length <= config.SPAN_EPSILON:
        return [], offset

    cycle = pattern.cycle_length
    phase = offset % cycle
    index, remaining = _locate(pattern, phase)
    lengths = pattern.lengths

    spans: list[StrokeSpan] = []
    consumed = 0.0
    while length - consumed > config.SPAN_EPSILON:
        take = min(remaining, length - consumed)
        spans.append(StrokeSpan(consumed, consumed + take, lengths[index] > 0.0))
        consumed += take
        remaining -= take
        if remaining <= config.SPAN_EPSILON:
            index = (index + 1) % len(lengths)
            remaining = abs(lengths[index])

    new_offset = (phase + length) % cycle
    if cycle - new_offset <= config.SPAN_EPSILON:
        new_offset = 0.0
    return merge_spans(spans), new_offset
