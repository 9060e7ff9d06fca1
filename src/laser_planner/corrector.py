"""Feed rate correction for non-circular laser beam footprints.

A laser spot that is elongated along one axis burns lines running across
that axis less deeply. The corrector slows controlled moves in proportion to
how much of their travel is disadvantaged relative to the chosen weak axis,
then rewrites only the feed-rate tokens of the affected program lines.
"""

import logging
import math
import re
from dataclasses import replace
from enum import Enum
from typing import Dict, List, Sequence, Tuple, Union

from laser_planner.models import CorrectionResult, Segment
from laser_planner.parser import parse, split_comment

logger = logging.getLogger(__name__)

FEED_TOKEN_PATTERN = re.compile(r"F[+-]?\d*\.?\d+", re.IGNORECASE)


class CorrectionAxis(Enum):
    """Weak axis of the beam footprint."""

    X = "X"  # moves along X are unaffected, moves along Y get full correction
    Y = "Y"  # moves along Y are unaffected, moves along X get full correction


def orientation_weight(segment: Segment, axis: CorrectionAxis) -> float:
    """Share of a segment's travel that runs across the weak axis.

    For axis X the weight is ``dy / (dx + dy)``: horizontal moves get 0 and
    vertical moves get 1. Axis Y swaps the roles. Zero-length segments get 0.

    Args:
        segment: Segment to weigh
        axis: Weak axis

    Returns:
        Weight in [0, 1]
    """
    dx = abs(segment.dx)
    dy = abs(segment.dy)
    if dx + dy == 0:
        return 0.0
    if axis == CorrectionAxis.X:
        return dy / (dx + dy)
    return dx / (dx + dy)


def correction_factor(segment: Segment, coefficient: float, axis: CorrectionAxis) -> float:
    """Feed rate reduction for one segment, in [0, coefficient].

    Rapid moves are never corrected since the laser is off during traverse.
    """
    if segment.is_rapid:
        return 0.0
    return coefficient * orientation_weight(segment, axis)


def round_feed_rate(feedrate: float) -> int:
    """Round a feed rate to an integer, halves away from zero."""
    return int(math.floor(feedrate + 0.5))


def _substitute_feed(line: str, feedrate: float) -> str:
    """Put an ``F`` token with the given value on a single program line.

    The last feed token in the code part is replaced, as a repeated word
    takes its last value. Without one, a new token is appended after the
    code, keeping trailing whitespace and any comment where they were.
    """
    token = f"F{round_feed_rate(feedrate)}"
    code_part, _ = split_comment(line)
    tail = line[len(code_part) :]

    matches = list(FEED_TOKEN_PATTERN.finditer(code_part))
    if matches:
        last = matches[-1]
        return code_part[: last.start()] + token + code_part[last.end() :] + tail

    stripped = code_part.rstrip()
    trailing = code_part[len(stripped) :]
    return f"{stripped} {token}{trailing}{tail}"


def rewrite_feed_rates(text: str, feed_by_line: Dict[int, float]) -> str:
    """Rewrite feed-rate tokens on selected lines of a program.

    Lines absent from ``feed_by_line`` are copied byte-for-byte, so the
    output has exactly the same line count and separators as the input.

    Args:
        text: Original program text
        feed_by_line: Zero-based line index mapped to the new feed rate

    Returns:
        Rewritten program text
    """
    lines = text.split("\n")
    for line_number, feedrate in sorted(feed_by_line.items()):
        if 0 <= line_number < len(lines):
            lines[line_number] = _substitute_feed(lines[line_number], feedrate)
            logger.debug("Line %d feed rate set to %.3f", line_number, feedrate)
    return "\n".join(lines)


def correct_segments(
    segments: Sequence[Segment], coefficient: float, axis: Union[str, CorrectionAxis]
) -> Tuple[Tuple[Segment, ...], Tuple[float, ...]]:
    """Apply the orientation correction to already parsed segments.

    Returns:
        Tuple of (corrected segments, correction factors), both aligned
        index-for-index with ``segments``
    """
    axis = CorrectionAxis(axis)
    corrected: List[Segment] = []
    factors: List[float] = []

    for seg in segments:
        factor = correction_factor(seg, coefficient, axis)
        factors.append(factor)
        if seg.is_rapid or seg.feedrate is None:
            corrected.append(seg)
        else:
            corrected.append(replace(seg, feedrate=seg.feedrate * (1 - factor)))

    return tuple(corrected), tuple(factors)


def apply_correction(
    text: str, coefficient: float, axis: Union[str, CorrectionAxis]
) -> CorrectionResult:
    """Slow down controlled moves that run across the weak axis.

    Each controlled segment's feed rate becomes
    ``feedrate * (1 - coefficient * weight)`` (see ``orientation_weight``).
    The coefficient is expected in [0, 1) and is not validated here.

    Controlled moves issued before any feed rate was set have nothing to
    scale; they keep ``feedrate=None`` and their line is left untouched.

    Args:
        text: Program text
        coefficient: Maximum relative slowdown, applied in full to moves
            running straight across the weak axis
        axis: Weak axis, ``"X"``/``"Y"`` or a CorrectionAxis

    Returns:
        CorrectionResult with original and corrected segments, per-segment
        factors and the rewritten program text

    Example:
        >>> result = apply_correction("G1 X0 Y10 F1000", 0.5, "X")
        >>> result.correction_factors
        (0.5,)
        >>> result.corrected_text
        'G1 X0 Y10 F500'
    """
    original = parse(text)
    corrected, factors = correct_segments(original, coefficient, axis)

    feed_by_line: Dict[int, float] = {}
    for seg in corrected:
        if seg.is_rapid or seg.feedrate is None or seg.source_command is None:
            continue
        feed_by_line[seg.source_command.line_number] = seg.feedrate

    return CorrectionResult(
        original_segments=original,
        corrected_segments=corrected,
        correction_factors=factors,
        corrected_text=rewrite_feed_rates(text, feed_by_line),
    )
