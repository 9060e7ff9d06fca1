"""Segment model for laser motion programs."""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from laser_planner.models.geometry import Point2D

SECONDS_PER_MINUTE = 60.0


@dataclass(frozen=True)
class SourceCommand:
    """Parsed program line a segment originates from.

    Attributes:
        code: Normalized command code, e.g. ``"G1"`` or ``"M3"``. Empty for
            a line that carries only parameter words, such as ``F1200``
        params: (letter, value) pairs, one per letter. A letter repeated on
            the line keeps its last value
        line_number: Zero-based index of the line in the program text
        comment: Text after the ``;`` comment marker, stripped, or None
    """

    code: str
    params: Tuple[Tuple[str, float], ...] = ()
    line_number: int = 0
    comment: Optional[str] = None

    def get(self, letter: str, default: Optional[float] = None) -> Optional[float]:
        """Value of a parameter letter, or ``default`` if the line lacks it."""
        for name, value in self.params:
            if name == letter:
                return value
        return default


@dataclass(frozen=True)
class Segment:
    """One linear tool movement in absolute coordinates.

    Note:
        Feed rate, laser state and power are snapshots of the modal state at
        the time the move was executed. ``feedrate`` is None when the program
        never set one before this move.

    Attributes:
        start: Start point
        end: End point
        is_rapid: True for traverse (G0) moves, False for controlled (G1) moves
        feedrate: Commanded feed rate in units per minute
        laser_on: Whether the laser was switched on
        power: Raw laser power (``S`` value), not a percentage
        source_command: The command that produced this segment
    """

    start: Point2D
    end: Point2D
    is_rapid: bool
    feedrate: Optional[float] = None
    laser_on: bool = False
    power: Optional[float] = None
    source_command: Optional[SourceCommand] = None

    @property
    def dx(self) -> float:
        return self.end.x - self.start.x

    @property
    def dy(self) -> float:
        return self.end.y - self.start.y

    @property
    def length(self) -> float:
        """Euclidean length of the move."""
        return math.hypot(self.dx, self.dy)
