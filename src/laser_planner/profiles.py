"""Machine profile presets for common laser engravers."""

from enum import Enum

from laser_planner.models.machine import MachineConfig


class MachineProfile(Enum):
    """Common engraver classes with typical kinematic limits."""

    STANDARD = "standard"  # GRBL defaults: moderate acceleration and traverse
    DIODE_LASER = "diode_laser"  # Belt-driven hobby diode frame: soft, slow
    CO2_LASER = "co2_laser"  # Rigid CO2 gantry: fast traverse, hard accelerations


def create_machine_config(profile: MachineProfile) -> MachineConfig:
    """
    Create a MachineConfig from a predefined profile.

    Each profile represents typical limits for a class of machines:
    - STANDARD: Values matching GRBL's stock configuration
    - DIODE_LASER: Lightweight open frame that needs gentle cornering
    - CO2_LASER: Stiff enclosed gantry that corners aggressively

    Args:
        profile: Machine profile to use

    Returns:
        MachineConfig with limits matching the selected profile

    Raises:
        ValueError: If the profile is unknown

    Examples:
        >>> standard = create_machine_config(MachineProfile.STANDARD)
        >>> print(f"Acceleration: {standard.acceleration} mm/s²")
        Acceleration: 800.0 mm/s²

        >>> co2 = create_machine_config(MachineProfile.CO2_LASER)
        >>> print(f"Rapid: {co2.rapid_feed_rate} mm/min")
        Rapid: 12000.0 mm/min
    """
    if profile == MachineProfile.STANDARD:
        return MachineConfig(
            acceleration=800.0,  # mm/s²
            rapid_feed_rate=5000.0,  # mm/min
            junction_deviation=0.05,
        )
    elif profile == MachineProfile.DIODE_LASER:
        return MachineConfig(
            acceleration=500.0,  # mm/s² - belts and a light frame
            rapid_feed_rate=3000.0,  # mm/min
            junction_deviation=0.02,  # tighter corners to avoid ringing
        )
    elif profile == MachineProfile.CO2_LASER:
        return MachineConfig(
            acceleration=2000.0,  # mm/s² - rigid gantry
            rapid_feed_rate=12000.0,  # mm/min
            junction_deviation=0.1,
        )
    else:
        raise ValueError(f"Unknown machine profile: {profile}")
