"""Machine configuration model for time estimation."""

import math
from dataclasses import dataclass

DEFAULT_ACCELERATION = 800.0
DEFAULT_RAPID_FEED_RATE = 5000.0
DEFAULT_JUNCTION_DEVIATION = 0.05
DEFAULT_MIN_JUNCTION_ANGLE = math.radians(10)


@dataclass(frozen=True)
class MachineConfig:
    """Kinematic limits of a laser engraver.

    Attributes:
        acceleration: Maximum acceleration in millimeters per second squared
        rapid_feed_rate: Maximum traverse rate in millimeters per minute, used
            for every rapid move regardless of its programmed feed rate
        junction_deviation: Cornering tolerance. Smaller values force slower
            corners, larger values allow faster cornering.
        min_junction_angle: Direction changes below this angle (radians) are
            treated as straight and pass through without a cornering limit
    """

    acceleration: float = DEFAULT_ACCELERATION
    rapid_feed_rate: float = DEFAULT_RAPID_FEED_RATE
    junction_deviation: float = DEFAULT_JUNCTION_DEVIATION
    min_junction_angle: float = DEFAULT_MIN_JUNCTION_ANGLE

    def __post_init__(self) -> None:
        """Validate that all limits are usable."""
        if self.acceleration <= 0:
            raise ValueError(f"acceleration must be positive, got {self.acceleration}")
        if self.rapid_feed_rate <= 0:
            raise ValueError(f"rapid_feed_rate must be positive, got {self.rapid_feed_rate}")
        if self.junction_deviation <= 0:
            raise ValueError(
                f"junction_deviation must be positive, got {self.junction_deviation}"
            )
        if not 0 <= self.min_junction_angle < math.pi:
            raise ValueError(
                f"min_junction_angle must be in [0, pi), got {self.min_junction_angle}"
            )
