"""Motion and timing pipeline for laser engraving G-code programs."""

from .corrector import CorrectionAxis, apply_correction
from .estimator import estimate_time
from .geometry import bounding_box, centroid
from .models import MachineConfig, Point2D, Segment
from .parser import parse
from .planner import LaserPlanner

__all__ = [
    "LaserPlanner",
    "MachineConfig",
    "Point2D",
    "Segment",
    "CorrectionAxis",
    "parse",
    "bounding_box",
    "centroid",
    "apply_correction",
    "estimate_time",
]
