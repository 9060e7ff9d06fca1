"""Core data models for laser motion planning.

This package contains all model classes and shared constants.
"""

from laser_planner.models.geometry import BoundingBox, Point2D
from laser_planner.models.machine import MachineConfig
from laser_planner.models.results import CorrectionResult, TimeEstimationResult
from laser_planner.models.segment import SECONDS_PER_MINUTE, Segment, SourceCommand

__all__ = [
    "Point2D",
    "BoundingBox",
    "Segment",
    "SourceCommand",
    "MachineConfig",
    "CorrectionResult",
    "TimeEstimationResult",
    "SECONDS_PER_MINUTE",
]
