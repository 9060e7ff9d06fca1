"""Velocity profile and junction speed calculations.

All functions here work in millimeters and seconds: velocities are mm/s and
accelerations mm/s². Feed rates in mm/min are converted by the estimator.
"""

import math
from enum import Enum
from typing import Tuple

from laser_planner.models import Segment
from laser_planner.models.machine import (
    DEFAULT_JUNCTION_DEVIATION,
    DEFAULT_MIN_JUNCTION_ANGLE,
)

Vector = Tuple[float, float]


class VelocityProfile(Enum):
    """Shape of the velocity-vs-distance curve over one segment."""

    TRAPEZOIDAL = "trapezoidal"  # reaches cruise velocity
    TRIANGULAR = "triangular"  # must decelerate before reaching cruise velocity


def unit_direction(segment: Segment) -> Vector:
    """Unit direction vector of a segment, ``(0, 0)`` if it has no length."""
    length = segment.length
    if length == 0:
        return 0.0, 0.0
    return segment.dx / length, segment.dy / length


def junction_angle(first: Vector, second: Vector) -> float:
    """Angle in radians between two direction vectors.

    The dot product is clamped to [-1, 1] to absorb rounding error.
    """
    dot = first[0] * second[0] + first[1] * second[1]
    return math.acos(min(max(dot, -1.0), 1.0))


def junction_velocity(
    prev_direction: Vector,
    next_direction: Vector,
    prev_velocity: float,
    next_velocity: float,
    acceleration: float,
    junction_deviation: float = DEFAULT_JUNCTION_DEVIATION,
    min_angle: float = DEFAULT_MIN_JUNCTION_ANGLE,
) -> float:
    """Maximum speed at the boundary between two segments.

    Near-straight transitions (angle below ``min_angle``, or no bend at all)
    pass at the slower of the two cruise velocities. Sharper corners are limited by
    ``sqrt(acceleration * junction_deviation / (1 - cos(angle)))``, then
    capped at both cruise velocities.

    Args:
        prev_direction: Unit direction of the segment ending at the junction
        next_direction: Unit direction of the segment starting at the junction
        prev_velocity: Cruise velocity of the previous segment in mm/s
        next_velocity: Cruise velocity of the next segment in mm/s
        acceleration: Machine acceleration in mm/s²
        junction_deviation: Cornering tolerance
        min_angle: Straight-through threshold in radians

    Returns:
        Junction velocity in mm/s. Zero when acceleration is not positive.

    Examples:
        >>> junction_velocity((1.0, 0.0), (1.0, 0.0), 20.0, 10.0, 800.0)
        10.0
        >>> round(junction_velocity((1.0, 0.0), (0.0, 1.0), 50.0, 50.0, 800.0), 3)
        6.325
    """
    if acceleration <= 0:
        return 0.0

    angle = junction_angle(prev_direction, next_direction)
    bend = 1 - math.cos(angle)
    if angle < min_angle or bend <= 0:
        return min(prev_velocity, next_velocity)

    cornering = math.sqrt(acceleration * junction_deviation / bend)
    return min(cornering, prev_velocity, next_velocity)


def profile_shape(
    distance: float,
    cruise_velocity: float,
    acceleration: float,
    entry_velocity: float,
    exit_velocity: float,
) -> VelocityProfile:
    """Decide whether a segment is long enough to reach cruise velocity."""
    accel_distance = (cruise_velocity**2 - entry_velocity**2) / (2 * acceleration)
    decel_distance = (cruise_velocity**2 - exit_velocity**2) / (2 * acceleration)
    if accel_distance + decel_distance <= distance:
        return VelocityProfile.TRAPEZOIDAL
    return VelocityProfile.TRIANGULAR


def segment_time(
    distance: float,
    cruise_velocity: float,
    acceleration: float,
    entry_velocity: float = 0.0,
    exit_velocity: float = 0.0,
) -> float:
    """Time to traverse a segment under constant acceleration limits.

    Entry and exit velocities are first capped at the cruise velocity.

    - Trapezoidal: accelerate to cruise, hold it, decelerate to exit.
    - Triangular: accelerate to the peak velocity
      ``sqrt((2*a*d + entry² + exit²) / 2)`` and immediately decelerate.
      If the peak is not real, fall back to the mean of entry and exit.

    Args:
        distance: Segment length in mm
        cruise_velocity: Target velocity in mm/s
        acceleration: Machine acceleration in mm/s²
        entry_velocity: Velocity at segment start in mm/s
        exit_velocity: Velocity at segment end in mm/s

    Returns:
        Time in seconds. Zero for non-positive distance, velocity or
        acceleration.

    Examples:
        >>> round(segment_time(100.0, 10.0, 100.0), 6)
        10.1
    """
    if distance <= 0 or cruise_velocity <= 0 or acceleration <= 0:
        return 0.0

    entry = min(entry_velocity, cruise_velocity)
    exit_ = min(exit_velocity, cruise_velocity)

    shape = profile_shape(distance, cruise_velocity, acceleration, entry, exit_)
    if shape == VelocityProfile.TRAPEZOIDAL:
        accel_distance = (cruise_velocity**2 - entry**2) / (2 * acceleration)
        decel_distance = (cruise_velocity**2 - exit_**2) / (2 * acceleration)
        accel_time = (cruise_velocity - entry) / acceleration
        decel_time = (cruise_velocity - exit_) / acceleration
        cruise_time = (distance - accel_distance - decel_distance) / cruise_velocity
        return accel_time + cruise_time + decel_time

    peak_squared = (2 * acceleration * distance + entry**2 + exit_**2) / 2
    if peak_squared <= 0:
        mean_velocity = (entry + exit_) / 2
        return distance / mean_velocity if mean_velocity > 0 else 0.0

    peak = math.sqrt(peak_squared)
    return (peak - entry) / acceleration + (peak - exit_) / acceleration
