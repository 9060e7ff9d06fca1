"""Result records produced by the corrector and the time estimator."""

from dataclasses import dataclass
from typing import Optional, Tuple

from laser_planner.models.segment import Segment


@dataclass(frozen=True)
class CorrectionResult:
    """Outcome of a speed correction run.

    Attributes:
        original_segments: Segments parsed from the input text
        corrected_segments: Same geometry with reduced feed rates
        correction_factors: Factor applied to each original segment, in
            ``[0, coefficient]``; rapids always get 0
        corrected_text: Program text with rewritten feed-rate tokens
    """

    original_segments: Tuple[Segment, ...]
    corrected_segments: Tuple[Segment, ...]
    correction_factors: Tuple[float, ...]
    corrected_text: str


@dataclass(frozen=True)
class TimeEstimationResult:
    """Estimated execution time in seconds.

    ``original_total_time`` and ``time_savings`` are only set when an
    uncorrected segment sequence was supplied for comparison.
    """

    total_time: float
    rapid_time: float
    cutting_time: float
    original_total_time: Optional[float] = None
    time_savings: Optional[float] = None
