"""Tests for the beam-shape speed corrector."""

import pytest

from laser_planner.corrector import (
    CorrectionAxis,
    apply_correction,
    correction_factor,
    orientation_weight,
    rewrite_feed_rates,
    round_feed_rate,
)
from laser_planner.models import Point2D, Segment

SAMPLE_PROGRAM = """; calibration square
G21
G90
M3 S800
G0 X10 Y10 ; move to start
G1 X30 Y10 F1000 ; bottom edge
G1 X30 Y30 ; right edge
G1 X10 Y30 F1000
G1 X10 Y10
M5
G0 X0 Y0
"""


def controlled(dx, dy, feedrate=1000.0):
    """Controlled segment from the origin by (dx, dy)."""
    return Segment(Point2D(0, 0), Point2D(dx, dy), is_rapid=False, feedrate=feedrate)


class TestOrientationWeight:
    """Tests for orientation_weight()."""

    def test_axis_x(self):
        """Test horizontal moves get 0 and vertical moves get 1 on axis X."""
        assert orientation_weight(controlled(10, 0), CorrectionAxis.X) == 0
        assert orientation_weight(controlled(0, 10), CorrectionAxis.X) == 1

    def test_axis_y(self):
        """Test axis Y swaps the roles."""
        assert orientation_weight(controlled(10, 0), CorrectionAxis.Y) == 1
        assert orientation_weight(controlled(0, -10), CorrectionAxis.Y) == 0

    def test_diagonal(self):
        """Test a 45 degree move gets half weight on either axis."""
        assert orientation_weight(controlled(-5, 5), CorrectionAxis.X) == pytest.approx(0.5)
        assert orientation_weight(controlled(5, -5), CorrectionAxis.Y) == pytest.approx(0.5)

    def test_zero_length(self):
        """Test zero-length segments get no weight."""
        assert orientation_weight(controlled(0, 0), CorrectionAxis.X) == 0


class TestCorrectionFactor:
    """Tests for correction_factor()."""

    def test_rapid_is_never_corrected(self):
        """Test rapids get factor 0 regardless of orientation."""
        rapid = Segment(Point2D(0, 0), Point2D(0, 10), is_rapid=True)
        assert correction_factor(rapid, 0.8, CorrectionAxis.X) == 0

    def test_factor_scales_with_coefficient(self):
        """Test the factor is coefficient times weight."""
        assert correction_factor(controlled(3, 1), 0.4, CorrectionAxis.X) == pytest.approx(0.1)


class TestRoundFeedRate:
    """Tests for round_feed_rate()."""

    def test_half_rounds_up(self):
        """Test halves round away from zero, not to even."""
        assert round_feed_rate(500.5) == 501
        assert round_feed_rate(2.5) == 3
        assert round_feed_rate(499.4) == 499


class TestRewriteFeedRates:
    """Tests for text rewriting."""

    def test_replaces_existing_token(self):
        """Test an existing F token is replaced in place."""
        assert rewrite_feed_rates("G1 X1 F1000 Y2", {0: 750.4}) == "G1 X1 F750 Y2"

    def test_replaces_decimal_token(self):
        """Test decimal feed tokens are replaced whole."""
        assert rewrite_feed_rates("G1 X1 F1000.75", {0: 500}) == "G1 X1 F500"

    def test_appends_before_comment(self):
        """Test a missing F token is inserted before the comment."""
        assert rewrite_feed_rates("G1 X1 ; edge", {0: 600}) == "G1 X1 F600 ; edge"

    def test_appends_at_line_end(self):
        """Test a missing F token is appended at the end of the code."""
        assert rewrite_feed_rates("G1 X1", {0: 600}) == "G1 X1 F600"

    def test_keeps_carriage_return(self):
        """Test CRLF line endings survive the rewrite."""
        assert rewrite_feed_rates("G1 X1\r\nG1 X2\r", {0: 600}) == "G1 X1 F600\r\nG1 X2\r"

    def test_feed_in_comment_is_untouched(self):
        """Test an F token inside the comment is not replaced."""
        assert rewrite_feed_rates("G1 X1 ; was F900", {0: 600}) == "G1 X1 F600 ; was F900"

    def test_other_lines_unchanged(self):
        """Test lines outside the map are copied verbatim."""
        text = "  ; indented comment  \nG1 X1 F100\n\n\tM5  "
        out = rewrite_feed_rates(text, {1: 50})
        assert out.split("\n") == ["  ; indented comment  ", "G1 X1 F50", "", "\tM5  "]

    def test_out_of_range_line_ignored(self):
        """Test stale line numbers do not raise."""
        assert rewrite_feed_rates("G1 X1", {5: 100}) == "G1 X1"

    def test_repeated_feed_rewrites_last_token(self):
        """Test the effective (last) F word is the one rewritten."""
        assert rewrite_feed_rates("G1 F100 X1 F200", {0: 150}) == "G1 F100 X1 F150"


class TestApplyCorrection:
    """Tests for apply_correction()."""

    def test_result_lengths_match(self):
        """Test corrected segments and factors align with the originals."""
        result = apply_correction(SAMPLE_PROGRAM, 0.5, "X")
        assert len(result.original_segments) == 6
        assert len(result.corrected_segments) == len(result.original_segments)
        assert len(result.correction_factors) == len(result.original_segments)

    def test_bare_feed_rate_line_is_corrected(self):
        """Test a move under a feed rate set on its own line is slowed down."""
        result = apply_correction("F1000\nG1 X0 Y10", 0.5, "X")
        assert result.corrected_segments[0].feedrate == pytest.approx(500)
        assert result.corrected_text == "F1000\nG1 X0 Y10 F500"

    def test_block_numbered_line_is_corrected(self):
        """Test the feed token behind an N word is rewritten."""
        result = apply_correction("N10 G1 X0 Y10 F1000", 0.5, "X")
        assert result.corrected_text == "N10 G1 X0 Y10 F500"

    def test_orientation_law(self):
        """Test horizontal moves are untouched and vertical ones fully corrected."""
        result = apply_correction(SAMPLE_PROGRAM, 0.5, CorrectionAxis.X)
        assert result.correction_factors == (0.0, 0.0, 0.5, 0.0, 0.5, 0.0)
        feeds = [s.feedrate for s in result.corrected_segments]
        assert feeds[1] == pytest.approx(1000)
        assert feeds[2] == pytest.approx(500)

    def test_axis_y(self):
        """Test axis Y corrects the horizontal edges instead."""
        result = apply_correction(SAMPLE_PROGRAM, 0.5, "Y")
        assert result.correction_factors == (0.0, 0.5, 0.0, 0.5, 0.0, 0.0)

    def test_factors_within_bounds(self):
        """Test every factor lies in [0, coefficient]."""
        text = "G1 X3 Y1 F900\nG1 X-4 Y8\nG0 X0 Y0\nG1 X7 Y-2"
        result = apply_correction(text, 0.7, "X")
        assert all(0 <= f <= 0.7 for f in result.correction_factors)

    def test_corrected_text(self):
        """Test only feed tokens change and the line count is preserved."""
        result = apply_correction(SAMPLE_PROGRAM, 0.5, "X")
        original_lines = SAMPLE_PROGRAM.split("\n")
        corrected_lines = result.corrected_text.split("\n")

        assert len(corrected_lines) == len(original_lines)
        assert corrected_lines[5] == "G1 X30 Y10 F1000 ; bottom edge"
        assert corrected_lines[6] == "G1 X30 Y30 F500 ; right edge"
        assert corrected_lines[7] == "G1 X10 Y30 F1000"
        assert corrected_lines[8] == "G1 X10 Y10 F500"

    def test_non_move_lines_are_verbatim(self):
        """Test every line without a controlled move is copied unchanged."""
        result = apply_correction(SAMPLE_PROGRAM, 0.9, "Y")
        for i, (before, after) in enumerate(
            zip(SAMPLE_PROGRAM.split("\n"), result.corrected_text.split("\n"))
        ):
            if not before.startswith("G1"):
                assert after == before, f"line {i} changed"

    def test_zero_coefficient_is_noop(self):
        """Test coefficient 0 leaves every feed rate as it was."""
        result = apply_correction(SAMPLE_PROGRAM, 0, "X")
        assert all(f == 0 for f in result.correction_factors)
        for original, corrected in zip(result.original_segments, result.corrected_segments):
            assert corrected.feedrate == original.feedrate

    def test_zero_coefficient_text(self):
        """Test coefficient 0 only re-emits feed tokens at the same value."""
        result = apply_correction(SAMPLE_PROGRAM, 0, "X")
        lines = result.corrected_text.split("\n")
        assert lines[5] == "G1 X30 Y10 F1000 ; bottom edge"
        assert lines[6] == "G1 X30 Y30 F1000 ; right edge"

    def test_originals_are_not_modified(self):
        """Test the original segments keep their feed rates."""
        result = apply_correction(SAMPLE_PROGRAM, 0.5, "X")
        assert all(
            s.feedrate == 1000 for s in result.original_segments if not s.is_rapid
        )

    def test_rapids_copied_unchanged(self):
        """Test rapid segments are identical in both sequences."""
        result = apply_correction(SAMPLE_PROGRAM, 0.5, "X")
        for original, corrected in zip(result.original_segments, result.corrected_segments):
            if original.is_rapid:
                assert corrected == original

    def test_missing_feed_rate_left_alone(self):
        """Test controlled moves without a feed rate are not given one."""
        result = apply_correction("G1 X0 Y10\nG1 X0 Y20 F600", 0.5, "X")
        assert result.corrected_segments[0].feedrate is None
        assert result.corrected_text == "G1 X0 Y10\nG1 X0 Y20 F300"

    def test_zero_length_move(self):
        """Test a zero-length controlled move gets factor 0."""
        result = apply_correction("G1 X5 F100\nG1 X5", 0.5, "Y")
        assert result.correction_factors[1] == 0
        assert result.corrected_text == "G1 X5 F50\nG1 X5 F100"

    def test_empty_program(self):
        """Test empty text produces an empty result."""
        result = apply_correction("", 0.5, "X")
        assert result.original_segments == ()
        assert result.correction_factors == ()
        assert result.corrected_text == ""
