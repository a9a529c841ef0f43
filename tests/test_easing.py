"""Tests for framekit.easing curves and name parsing."""

import pytest

from framekit import easing
from framekit.errors import ConfigurationError


BASE_CURVES = [
    easing.linear, easing.quad, easing.cubic, easing.sin, easing.circle,
    easing.back(), easing.elastic(), easing.bounce, easing.poly(4),
    easing.bezier(0.25, 0.1, 0.25, 1.0),
]


class TestEndpoints:
    @pytest.mark.parametrize("curve", BASE_CURVES)
    def test_starts_at_zero_and_ends_at_one(self, curve):
        assert curve(0) == pytest.approx(0, abs=1e-9)
        assert curve(1) == pytest.approx(1, abs=1e-9)

    @pytest.mark.parametrize("curve", BASE_CURVES)
    def test_modifiers_keep_endpoints(self, curve):
        for wrapped in (easing.out(curve), easing.in_out(curve)):
            assert wrapped(0) == pytest.approx(0, abs=1e-9)
            assert wrapped(1) == pytest.approx(1, abs=1e-9)


class TestCubic:
    def test_ease_out_cubic_formula(self):
        for t in (0.1, 0.25, 0.5, 0.9):
            assert easing.ease_out_cubic(t) == pytest.approx(1 - (1 - t) ** 3)

    def test_ease_in_cubic_formula(self):
        assert easing.ease_in_cubic(0.5) == pytest.approx(0.125)

    def test_in_is_identity_modifier(self):
        assert easing.in_(easing.cubic) is easing.cubic

    def test_in_out_is_symmetric(self):
        f = easing.in_out(easing.cubic)
        assert f(0.5) == pytest.approx(0.5)
        assert f(0.25) == pytest.approx(1 - f(0.75))


class TestBack:
    def test_in_dips_below_zero(self):
        assert min(easing.back(1.5)(t / 100) for t in range(101)) < 0

    def test_out_overshoots_one(self):
        f = easing.out(easing.back(1.5))
        assert max(f(t / 100) for t in range(101)) > 1
        assert f(1) == pytest.approx(1)

    def test_larger_magnitude_overshoots_more(self):
        small = max(easing.out(easing.back(0.5))(t / 100) for t in range(101))
        large = max(easing.out(easing.back(3))(t / 100) for t in range(101))
        assert large > small

    def test_zero_magnitude_is_cubic(self):
        assert easing.back(0)(0.3) == pytest.approx(easing.cubic(0.3))


class TestBezier:
    def test_linear_control_points(self):
        f = easing.bezier(0.3, 0.3, 0.7, 0.7)
        assert f(0.42) == pytest.approx(0.42)

    def test_ease_is_fast_in_the_middle(self):
        f = easing.bezier(0.25, 0.1, 0.25, 1.0)
        assert f(0.5) > 0.5

    def test_out_of_range_x_raises(self):
        with pytest.raises(ConfigurationError, match="bezier"):
            easing.bezier(1.5, 0, 0.5, 1)


class TestFromName:
    def test_plain_curve(self):
        assert easing.from_name("cubic") is easing.cubic

    def test_modifier(self):
        f = easing.from_name("out:cubic")
        assert f(0.5) == pytest.approx(easing.ease_out_cubic(0.5))

    def test_factory_with_argument(self):
        f = easing.from_name("in_out:back(1.5)")
        g = easing.in_out(easing.back(1.5))
        assert f(0.3) == pytest.approx(g(0.3))

    def test_bezier_with_spaces(self):
        f = easing.from_name("bezier(0.25, 0.1, 0.25, 1)")
        assert f(1) == 1.0

    def test_unknown_name_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown easing"):
            easing.from_name("wobble")

    def test_bad_modifier_raises(self):
        with pytest.raises(ConfigurationError, match="Invalid easing"):
            easing.from_name("sideways:cubic")

    def test_arguments_on_plain_curve_raise(self):
        with pytest.raises(ConfigurationError, match="no arguments"):
            easing.from_name("cubic(2)")

    def test_non_numeric_argument_raises(self):
        with pytest.raises(ConfigurationError, match="numbers"):
            easing.from_name("back(lots)")

    def test_wrong_argument_count_raises(self):
        with pytest.raises(ConfigurationError, match="arguments"):
            easing.from_name("bezier(0.1, 0.2)")
