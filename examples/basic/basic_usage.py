"""Basic usage example.

This example demonstrates:
- Parsing a small engraving program
- Correcting feed rates for a beam that is weak along X
- Comparing estimated execution time before and after correction

This is the simplest way to use the laser planner.
"""

import logging

from laser_planner import LaserPlanner, MachineConfig
from laser_planner.estimator import format_time

PROGRAM = """; 30mm square with a diagonal
G21
G90
G0 X10 Y10 ; move to start
M3 S700
G1 X40 Y10 F1800 ; bottom edge
G1 X40 Y40 ; right edge
G1 X10 Y40 ; top edge
G1 X10 Y10 ; left edge
G1 X40 Y40 ; diagonal
M5
G0 X0 Y0
"""


def main():
    """Correct a sample program and print the results."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 80)
    print("BASIC LASER PLANNER USAGE")
    print("=" * 80)

    # acceleration: mm/s² (typical hobby machines: 500-2000)
    machine = MachineConfig(acceleration=800.0)

    # coefficient: maximum slowdown for moves running across the weak axis
    planner = LaserPlanner(machine=machine, coefficient=0.4, axis="X")
    report = planner.process(PROGRAM)

    box = report.bounding_box
    print(f"\n  Segments: {len(report.segments)}")
    print(f"  Bounds:   ({box.min.x:.1f}, {box.min.y:.1f}) - ({box.max.x:.1f}, {box.max.y:.1f})")
    print(f"  Centroid: ({report.centroid.x:.2f}, {report.centroid.y:.2f})\n")

    print(f"  {'#':<4} {'Type':<8} {'Length':<10} {'Feed Rate':<12} {'Corrected':<12} {'Factor'}")
    print("  " + "-" * 70)
    correction = report.correction
    for i, (orig, corr, factor) in enumerate(
        zip(correction.original_segments, correction.corrected_segments, correction.correction_factors)
    ):
        kind = "rapid" if orig.is_rapid else "cut"
        print(
            f"  {i:<4} {kind:<8} {orig.length:<10.1f} {orig.feedrate or 0:<12.0f} "
            f"{corr.feedrate or 0:<12.0f} {factor:.2f}"
        )

    timing = report.timing
    print("\nEstimated time:")
    print(f"  Original:  {format_time(timing.original_total_time)}")
    print(f"  Corrected: {format_time(timing.total_time)}")
    print(f"  Rapid:     {format_time(timing.rapid_time)}")
    print(f"  Cutting:   {format_time(timing.cutting_time)}")

    print("\nCorrected program:")
    print(correction.corrected_text)


if __name__ == "__main__":
    main()
