"""Tests for framekit.interpolate."""

import pytest

from framekit.easing import back, cubic, out
from framekit.errors import ConfigurationError
from framekit.interpolate import interpolate, interpolate_colors


class TestInsideSegments:
    def test_midpoint(self):
        assert interpolate(15, [0, 30], [0, 1], "clamp") == 0.5

    def test_exact_endpoints(self):
        inputs, outputs = [0, 7, 30], [0.1, 0.7, 0.3]
        assert interpolate(0, inputs, outputs) == 0.1
        assert interpolate(7, inputs, outputs) == 0.7
        assert interpolate(30, inputs, outputs) == 0.3

    def test_exact_endpoints_with_overshooting_easing(self):
        ease = out(back(1.70158))
        assert interpolate(0, [0, 10], [0.2, 0.9], easing=ease) == 0.2
        assert interpolate(10, [0, 10], [0.2, 0.9], easing=ease) == 0.9

    def test_multi_segment_picks_right_segment(self):
        inputs, outputs = [30, 60, 90], [0, 1, 0.6]
        assert interpolate(45, inputs, outputs) == pytest.approx(0.5)
        assert interpolate(75, inputs, outputs) == pytest.approx(0.8)

    def test_descending_outputs(self):
        assert interpolate(10, [0, 40], [1, 0]) == pytest.approx(0.75)

    def test_easing_applies_to_progress(self):
        value = interpolate(5, [0, 10], [0, 100], easing=cubic)
        assert value == pytest.approx(12.5)

    def test_easing_out_cubic(self):
        value = interpolate(5, [0, 10], [0, 1], easing=out(cubic))
        assert value == pytest.approx(0.875)

    def test_fractional_frame(self):
        assert interpolate(2.5, [0, 10], [0, 1]) == pytest.approx(0.25)


class TestExtrapolation:
    def test_clamp_left(self):
        assert interpolate(-5, [0, 30], [0, 1], "clamp") == 0

    def test_clamp_right(self):
        assert interpolate(100, [0, 30], [0, 1], "clamp") == 1

    @pytest.mark.parametrize("frame", [-1000, -1, -0.5])
    def test_clamp_left_any_frame(self, frame):
        assert interpolate(frame, [0, 10, 20], [3, 5, 9], "clamp") == 3

    def test_extend_is_default(self):
        assert interpolate(-10, [0, 10], [0, 1]) == pytest.approx(-1)
        assert interpolate(20, [0, 10], [0, 1]) == pytest.approx(2)

    def test_extend_uses_outer_segment_slopes(self):
        inputs, outputs = [0, 10, 20], [0, 1, 5]
        assert interpolate(-10, inputs, outputs) == pytest.approx(-1)
        assert interpolate(30, inputs, outputs) == pytest.approx(9)

    def test_extend_ignores_easing(self):
        value = interpolate(20, [0, 10], [0, 1], easing=cubic)
        assert value == pytest.approx(2)

    def test_identity_returns_frame(self):
        assert interpolate(-7, [0, 10], [100, 200], "identity") == -7
        assert interpolate(42, [0, 10], [100, 200], "identity") == 42

    def test_sides_are_independent(self):
        kwargs = dict(extrapolate_left="clamp", extrapolate_right="extend")
        assert interpolate(-5, [0, 10], [0, 1], **kwargs) == 0
        assert interpolate(20, [0, 10], [0, 1], **kwargs) == pytest.approx(2)

    def test_side_override_beats_both_sides(self):
        value = interpolate(20, [0, 10], [0, 1], "clamp", extrapolate_right="identity")
        assert value == 20

    def test_unknown_policy_raises(self):
        with pytest.raises(ConfigurationError, match="extrapolation"):
            interpolate(5, [0, 10], [0, 1], "wrap")


class TestValidation:
    def test_length_mismatch(self):
        with pytest.raises(ConfigurationError, match="same length"):
            interpolate(5, [0, 10, 20], [0, 1])

    def test_single_breakpoint(self):
        with pytest.raises(ConfigurationError, match="at least 2"):
            interpolate(5, [0], [0])

    def test_not_strictly_increasing(self):
        with pytest.raises(ConfigurationError, match="strictly increasing"):
            interpolate(5, [0, 10, 10], [0, 1, 2])

    def test_decreasing(self):
        with pytest.raises(ConfigurationError, match="strictly increasing"):
            interpolate(5, [10, 0], [0, 1])

    def test_non_finite_input(self):
        with pytest.raises(ConfigurationError, match="finite"):
            interpolate(5, [0, float("inf")], [0, 1])

    def test_non_numeric_output(self):
        with pytest.raises(ConfigurationError, match="number"):
            interpolate(5, [0, 10], [0, "one"])

    def test_nan_frame(self):
        with pytest.raises(ConfigurationError, match="frame"):
            interpolate(float("nan"), [0, 10], [0, 1])

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            interpolate(5, [0], [0])

    def test_numeric_string_inputs_are_converted(self):
        assert interpolate(5, ["0", "10"], [0, 1]) == 0.5
        assert interpolate(10, ["0", "10"], [0, 1]) == 1

    @pytest.mark.parametrize("inputs, outputs", [(5, [0, 1]), ([0, 10], 1), ("010", [0, 1])])
    def test_non_sequence_breakpoints_raise(self, inputs, outputs):
        with pytest.raises(ConfigurationError, match="must be a sequence"):
            interpolate(5, inputs, outputs)


class TestDeterminism:
    def test_repeated_calls_are_identical(self):
        args = (17.3, [0, 12.5, 40], [0.1, 0.9, -3.2])
        first = interpolate(*args, easing=out(back(1.5)))
        for _ in range(5):
            assert interpolate(*args, easing=out(back(1.5))) == first


class TestInterpolateColors:
    def test_midpoint(self):
        assert interpolate_colors(5, [0, 10], ["#000000", "#ffffff"]) == (128, 128, 128)

    def test_clamps_both_sides(self):
        colors = [(255, 0, 0), (0, 0, 255)]
        assert interpolate_colors(-5, [0, 10], colors) == (255, 0, 0)
        assert interpolate_colors(50, [0, 10], colors) == (0, 0, 255)

    def test_exact_breakpoint(self):
        colors = ["#ef4444", "#f59e0b", "#22c55e"]
        assert interpolate_colors(10, [0, 10, 20], colors) == (245, 158, 11)

    def test_invalid_color_raises(self):
        with pytest.raises(ConfigurationError, match="color"):
            interpolate_colors(5, [0, 10], ["#000000", "purple"])
