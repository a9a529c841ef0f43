"""Tests for framekit.common utilities."""

import pytest

from framekit.common import (
    load_font,
    parse_hex_color,
    random_value,
    resolve_color,
    resolve_vars,
    to_rgb,
)
from framekit.errors import ConfigurationError


class TestParseHexColor:
    def test_with_hash(self):
        assert parse_hex_color("#da7756") == (218, 119, 86)

    def test_without_hash(self):
        assert parse_hex_color("1A1A2E") == (26, 26, 46)

    def test_black(self):
        assert parse_hex_color("#000000") == (0, 0, 0)

    def test_short_form_raises(self):
        with pytest.raises(ConfigurationError, match="hex color"):
            parse_hex_color("#fff")


class TestToRgb:
    def test_tuple_passthrough(self):
        assert to_rgb((1, 2, 3)) == (1, 2, 3)

    def test_list_rounds(self):
        assert to_rgb([0.4, 127.6, 255]) == (0, 128, 255)

    def test_out_of_range_channel_raises(self):
        with pytest.raises(ConfigurationError):
            to_rgb((0, 0, 256))

    def test_bad_shape_raises(self):
        with pytest.raises(ConfigurationError, match="Invalid color"):
            to_rgb((1, 2))


class TestResolveColor:
    def test_palette_key(self):
        assert resolve_color("accent", {"accent": (218, 119, 86)}) == (218, 119, 86)

    def test_inline_hex(self):
        assert resolve_color("#22c55e", {}) == (34, 197, 94)

    def test_unknown_key_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown color"):
            resolve_color("nonexistent", {})


class TestResolveVars:
    def test_single_var(self):
        assert resolve_vars("Hello ${name}", {"name": "Ada"}) == "Hello Ada"

    def test_non_string_value(self):
        assert resolve_vars("${n} frames", {"n": 30}) == "30 frames"

    def test_no_vars(self):
        assert resolve_vars("plain", {}) == "plain"

    def test_unknown_var_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown variable"):
            resolve_vars("${missing}", {})


class TestLoadFont:
    def test_returns_font_object(self):
        assert load_font(size=24) is not None

    def test_bold_and_tiny_sizes(self):
        assert load_font(size=0.2, bold=True) is not None


class TestRandomValue:
    def test_same_seed_same_value(self):
        assert random_value("particle-3") == random_value("particle-3")
        assert random_value(42) == random_value(42)

    def test_in_unit_interval(self):
        values = [random_value(f"p-{i}") for i in range(50)]
        assert all(0 <= v < 1 for v in values)

    def test_different_seeds_differ(self):
        assert len({random_value(i) for i in range(20)}) == 20

    def test_bad_seed_raises(self):
        with pytest.raises(ConfigurationError, match="seed"):
            random_value(1.5)
