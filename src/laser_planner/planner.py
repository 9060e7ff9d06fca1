"""End-to-end laser program planning pipeline.

This module provides the LaserPlanner class that integrates all components:
- Parsing the program into segments
- Bounding box and centroid for display
- Beam-shape speed correction
- Before/after execution time estimation

Example:
    >>> from laser_planner.planner import LaserPlanner
    >>> from laser_planner.models import MachineConfig
    >>>
    >>> program = "G0 X10 Y10\\nM3 S500\\nG1 X10 Y40 F1200\\nM5"
    >>> planner = LaserPlanner(machine=MachineConfig(acceleration=800.0), coefficient=0.3)
    >>> report = planner.process(program)
    >>> report.correction.correction_factors
    (0.0, 0.3)
"""

import logging
from dataclasses import dataclass
from typing import Tuple, Union

from laser_planner.corrector import CorrectionAxis, apply_correction
from laser_planner.estimator import estimate_time
from laser_planner.geometry import bounding_box, centroid
from laser_planner.models import (
    BoundingBox,
    CorrectionResult,
    MachineConfig,
    Point2D,
    Segment,
    TimeEstimationResult,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanReport:
    """Everything a viewer needs to display one processed program.

    Attributes:
        segments: Parsed segments of the original program
        bounding_box: Bounds of the original segments (empty sentinel when
            the program has no moves)
        centroid: Vertex-set centroid of the original segments
        correction: Speed correction result, including the rewritten text
        timing: Time of the corrected program compared with the original
    """

    segments: Tuple[Segment, ...]
    bounding_box: BoundingBox
    centroid: Point2D
    correction: CorrectionResult
    timing: TimeEstimationResult


class LaserPlanner:
    """End-to-end planning for laser engraving programs.

    The planner is the validation layer for user-facing settings: the core
    functions it calls accept whatever they are given, so coefficient and
    axis are checked here.

    Args:
        machine: Kinematic limits used for time estimation
        coefficient: Maximum relative slowdown, in [0, 1)
        axis: Weak axis of the beam, ``"X"``/``"Y"`` or a CorrectionAxis

    Example:
        >>> planner = LaserPlanner(coefficient=0.5, axis="Y")
        >>> report = planner.process(program_text)
    """

    def __init__(
        self,
        machine: MachineConfig = MachineConfig(),
        coefficient: float = 0.5,
        axis: Union[str, CorrectionAxis] = CorrectionAxis.X,
    ):
        """Initialize the planner.

        Raises:
            ValueError: If coefficient is outside [0, 1) or axis is unknown
        """
        if not 0 <= coefficient < 1:
            raise ValueError(f"coefficient must be in [0, 1), got {coefficient}")
        try:
            self.axis = CorrectionAxis(axis)
        except ValueError:
            raise ValueError(f"axis must be 'X' or 'Y', got {axis!r}") from None

        self.machine = machine
        self.coefficient = coefficient

    def process(self, text: str) -> PlanReport:
        """Run a program through parsing, correction and time estimation.

        Args:
            text: Program text

        Returns:
            PlanReport. The input text is never modified; the corrected
            program is in ``report.correction.corrected_text``.
        """
        correction = apply_correction(text, self.coefficient, self.axis)
        segments = correction.original_segments

        timing = estimate_time(
            correction.corrected_segments,
            self.machine.acceleration,
            original_segments=segments,
            machine=self.machine,
        )

        logger.info(
            "Planned %d segments: %.1fs corrected vs %.1fs original",
            len(segments),
            timing.total_time,
            timing.original_total_time,
        )

        return PlanReport(
            segments=segments,
            bounding_box=bounding_box(segments),
            centroid=centroid(segments),
            correction=correction,
            timing=timing,
        )

    def __repr__(self) -> str:
        """Return string representation of the planner."""
        return (
            f"LaserPlanner(coefficient={self.coefficient}, "
            f"axis={self.axis.name}, acceleration={self.machine.acceleration})"
        )
