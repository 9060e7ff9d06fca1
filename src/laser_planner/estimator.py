"""Execution time estimation with junction velocity smoothing.

Each segment is timed with a trapezoidal or triangular velocity profile.
Entry and exit velocities come from the junctions with the neighbouring
segments, so a straight run of short segments flows through at speed while
sharp corners and rapid/controlled transitions force the machine to slow
down or stop.

Example:
    >>> from laser_planner.parser import parse
    >>> from laser_planner.estimator import estimate_time
    >>> segments = parse("G1 X100 F1200")
    >>> result = estimate_time(segments, acceleration=800.0)
    >>> result.cutting_time == result.total_time
    True
"""

import logging
from typing import List, Optional, Sequence

from laser_planner.kinematics import junction_velocity, segment_time, unit_direction
from laser_planner.models import (
    SECONDS_PER_MINUTE,
    MachineConfig,
    Segment,
    TimeEstimationResult,
)

logger = logging.getLogger(__name__)

DEFAULT_MACHINE = MachineConfig()


def cruise_velocity(segment: Segment, machine: MachineConfig = DEFAULT_MACHINE) -> float:
    """Target velocity of a segment in mm/s.

    Rapid moves always run at the machine's rapid rate. Controlled moves use
    their feed rate; a controlled move with no feed rate has velocity 0.
    """
    if segment.is_rapid:
        return machine.rapid_feed_rate / SECONDS_PER_MINUTE
    return (segment.feedrate or 0.0) / SECONDS_PER_MINUTE


def _boundary_velocity(
    before: Segment, after: Segment, acceleration: float, machine: MachineConfig
) -> float:
    """Velocity at the joint between two consecutive segments."""
    # switching between rapid and controlled moves always stops the machine
    if before.is_rapid != after.is_rapid:
        return 0.0
    return junction_velocity(
        unit_direction(before),
        unit_direction(after),
        cruise_velocity(before, machine),
        cruise_velocity(after, machine),
        acceleration,
        junction_deviation=machine.junction_deviation,
        min_angle=machine.min_junction_angle,
    )


def segment_times(
    segments: Sequence[Segment],
    acceleration: float,
    machine: MachineConfig = DEFAULT_MACHINE,
) -> List[float]:
    """Estimated time of every segment, in seconds.

    Args:
        segments: Segments in execution order
        acceleration: Machine acceleration in mm/s²
        machine: Rapid rate and cornering limits (its own acceleration is
            not used; ``acceleration`` is)

    Returns:
        List aligned with ``segments``. Zero-length segments, controlled
        moves without a feed rate and non-positive accelerations give 0.
    """
    times: List[float] = []
    last = len(segments) - 1

    for i, seg in enumerate(segments):
        distance = seg.length
        if distance == 0 or acceleration <= 0:
            times.append(0.0)
            continue

        entry = 0.0
        if i > 0:
            entry = _boundary_velocity(segments[i - 1], seg, acceleration, machine)

        exit_ = 0.0
        if i < last:
            exit_ = _boundary_velocity(seg, segments[i + 1], acceleration, machine)

        velocity = cruise_velocity(seg, machine)
        if velocity <= 0:
            logger.debug("Segment %d has no feed rate, counted as zero time", i)

        times.append(segment_time(distance, velocity, acceleration, entry, exit_))

    return times


def estimate_single_pass(
    segments: Sequence[Segment],
    acceleration: float,
    machine: MachineConfig = DEFAULT_MACHINE,
) -> TimeEstimationResult:
    """Estimate total, rapid and cutting time of one segment sequence."""
    rapid_time = 0.0
    cutting_time = 0.0

    for seg, time in zip(segments, segment_times(segments, acceleration, machine)):
        if seg.is_rapid:
            rapid_time += time
        else:
            cutting_time += time

    return TimeEstimationResult(
        total_time=rapid_time + cutting_time,
        rapid_time=rapid_time,
        cutting_time=cutting_time,
    )


def estimate_time(
    segments: Sequence[Segment],
    acceleration: float,
    original_segments: Optional[Sequence[Segment]] = None,
    machine: MachineConfig = DEFAULT_MACHINE,
) -> TimeEstimationResult:
    """Estimate execution time, optionally against an uncorrected run.

    Args:
        segments: Segments to time (typically the corrected ones)
        acceleration: Machine acceleration in mm/s²
        original_segments: Baseline sequence. When given, the result also
            carries ``original_total_time`` and ``time_savings``.
        machine: Rapid rate and cornering limits

    Returns:
        TimeEstimationResult. ``time_savings`` is never negative: a run that
        got slower reports 0.

    Example:
        >>> estimate_time([], acceleration=800.0)
        TimeEstimationResult(total_time=0.0, rapid_time=0.0, cutting_time=0.0, original_total_time=None, time_savings=None)
    """
    result = estimate_single_pass(segments, acceleration, machine)
    if original_segments is None:
        return result

    original = estimate_single_pass(original_segments, acceleration, machine)
    return TimeEstimationResult(
        total_time=result.total_time,
        rapid_time=result.rapid_time,
        cutting_time=result.cutting_time,
        original_total_time=original.total_time,
        time_savings=max(0.0, original.total_time - result.total_time),
    )


def format_time(seconds: float) -> str:
    """Format a duration for display.

    Examples:
        >>> format_time(30)
        '30.0 seconds'
        >>> format_time(125.6)
        '2 min 6 s'
        >>> format_time(3660)
        '1 h 1 min'
    """
    if seconds < 60:
        return f"{seconds:.1f} seconds"
    if seconds < 3600:
        minutes = int(seconds // 60)
        return f"{minutes} min {seconds % 60:.0f} s"
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    return f"{hours} h {minutes} min"
