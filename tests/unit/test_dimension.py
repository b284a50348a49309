"""Unit tests for the dimension codec and numeric helpers."""

import math

import pytest

from token_engine.codecs.base import (
    coerce_number,
    format_number,
    parse_float_prefix,
    parse_int_prefix,
    round_half_up,
)
from token_engine.codecs.dimension import (
    FONT_SIZE,
    RADIUS,
    SPACING,
    Dimension,
    format_dimension,
    match_radius_preset,
    match_spacing_preset,
    parse_dimension,
    preview_radius,
    profile_for,
    to_stored_value,
)


class TestNumericHelpers:
    """Tests for the shared number coercion helpers."""

    def test_round_half_up_rounds_halves_upward(self) -> None:
        """Halves round toward positive infinity."""
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(-0.5) == 0
        assert round_half_up(127.5) == 128

    def test_parse_float_prefix(self) -> None:
        """Leading numbers are read like parseFloat."""
        assert parse_float_prefix("1.5em") == 1.5
        assert parse_float_prefix("  -2px") == -2.0
        assert parse_float_prefix("em") is None
        assert parse_float_prefix(None) is None

    def test_parse_int_prefix(self) -> None:
        """Leading integers are read and floats truncated."""
        assert parse_int_prefix("24px") == 24
        assert parse_int_prefix(12.7) == 12
        assert parse_int_prefix("abc") is None

    def test_coerce_number_keeps_ints(self) -> None:
        """Whole numeric strings become ints; bools are rejected."""
        assert coerce_number("16") == 16
        assert isinstance(coerce_number("16"), int)
        assert coerce_number("1.5") == 1.5
        assert coerce_number(True) is None
        assert coerce_number("16px") is None
        assert coerce_number(math.inf) is None

    def test_format_number(self) -> None:
        """Integral floats drop the fraction."""
        assert format_number(16.0) == "16"
        assert format_number(1.5) == "1.5"
        assert format_number(-0.02) == "-0.02"
        assert "e" not in format_number(0.0000001)


class TestParseDimension:
    """Tests for parse_dimension."""

    def test_none_yields_profile_default(self) -> None:
        """Missing values become the slot default."""
        assert parse_dimension(None) == Dimension(16, "px")
        assert parse_dimension(None, RADIUS) == Dimension(8, "px")

    def test_object_form(self) -> None:
        """Stored {value, unit} objects are read directly."""
        assert parse_dimension({"value": 1.5, "unit": "rem"}) == Dimension(1.5, "rem")

    def test_object_without_unit_uses_default_unit(self) -> None:
        """A missing unit falls back to px."""
        assert parse_dimension({"value": 24}) == Dimension(24, "px")

    def test_object_with_numeric_string_value(self) -> None:
        """Numeric strings inside the object are coerced."""
        assert parse_dimension({"value": "12", "unit": "px"}) == Dimension(12, "px")

    def test_disallowed_unit_falls_back_to_default_unit(self) -> None:
        """Spacing does not accept percentages."""
        assert parse_dimension({"value": 50, "unit": "%"}, SPACING) == Dimension(50, "px")
        assert parse_dimension({"value": 50, "unit": "%"}, RADIUS) == Dimension(50, "%")

    def test_string_forms(self) -> None:
        """Strings with and without units are parsed."""
        assert parse_dimension("16px") == Dimension(16, "px")
        assert parse_dimension("1.5rem") == Dimension(1.5, "rem")
        assert parse_dimension("12") == Dimension(12, "px")
        assert parse_dimension(" -0.5em ") == Dimension(-0.5, "em")

    def test_unreadable_string_yields_default(self) -> None:
        """Garbage strings never raise."""
        assert parse_dimension("wide") == Dimension(16, "px")
        assert parse_dimension("1.2.3px") == Dimension(16, "px")
        assert parse_dimension("50%", SPACING) == Dimension(16, "px")

    def test_plain_numbers(self) -> None:
        """Numbers take the default unit; integral floats collapse."""
        assert parse_dimension(24) == Dimension(24, "px")
        result = parse_dimension(16.0)
        assert result.value == 16
        assert isinstance(result.value, int)

    @pytest.mark.parametrize("raw", [True, [], {"unit": "rem"}, math.nan])
    def test_other_shapes_never_raise(self, raw) -> None:
        """Unsupported shapes degrade to a valid dimension."""
        result = parse_dimension(raw, RADIUS)
        assert result.unit in RADIUS.allowed_units
        assert isinstance(result.value, (int, float))

    def test_dimension_instance_is_accepted(self) -> None:
        """Canonical values parse to an equal copy."""
        original = Dimension(2, "rem")
        parsed = parse_dimension(original)
        assert parsed == original
        assert parsed is not original

    def test_profile_with_default(self) -> None:
        """Configured defaults replace the built-in default value."""
        profile = SPACING.with_default(8)
        assert parse_dimension(None, profile) == Dimension(8, "px")
        assert SPACING.default_value == 16

    def test_profile_for(self) -> None:
        """Profiles are looked up by slot name."""
        assert profile_for("radius") is RADIUS
        assert profile_for("font-size") is FONT_SIZE
        assert profile_for("unknown") is SPACING


class TestFormatDimension:
    """Tests for formatting and storage."""

    def test_format(self) -> None:
        """Dimensions format as CSS lengths."""
        assert format_dimension(Dimension(16, "px")) == "16px"
        assert format_dimension(Dimension(1.5, "rem")) == "1.5rem"

    def test_stored_round_trip(self) -> None:
        """Stored values parse back to the same dimension."""
        dimension = parse_dimension("1.25rem", FONT_SIZE)
        assert parse_dimension(to_stored_value(dimension), FONT_SIZE) == dimension

    def test_preview_radius_full_round(self) -> None:
        """The 9999 sentinel previews as 50% but is stored verbatim."""
        full = parse_dimension(9999, RADIUS)
        assert preview_radius(full) == "50%"
        assert to_stored_value(full) == {"value": 9999, "unit": "px"}
        assert preview_radius(Dimension(8, "px")) == "8px"

    def test_match_spacing_preset(self) -> None:
        """Only px values on the spacing scale match a preset."""
        assert match_spacing_preset(Dimension(24, "px")) == 24
        assert match_spacing_preset(Dimension(24.0, "px")) == 24
        assert match_spacing_preset(Dimension(10, "px")) is None
        assert match_spacing_preset(Dimension(24, "rem")) is None

    def test_match_radius_preset(self) -> None:
        """Radius presets are matched by px value, including the full sentinel."""
        assert match_radius_preset(Dimension(0, "px")) == "None"
        assert match_radius_preset(Dimension(12, "px")) == "LG"
        assert match_radius_preset(parse_dimension(9999, RADIUS)) == "Full"
        assert match_radius_preset(Dimension(50, "%")) is None
