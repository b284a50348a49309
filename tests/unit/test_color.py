"""Unit tests for the color codec."""

import pytest

from token_engine.codecs.color import (
    HSL,
    RGB,
    Color,
    format_color,
    get_contrast_color,
    hex_to_hsl,
    hex_to_rgb,
    hsl_to_hex,
    hsl_to_rgb,
    is_light,
    is_valid_hex,
    normalize_hex,
    parse_color,
    parse_color_string,
    rgb_to_hex,
    rgb_to_hsl,
    to_css,
    to_stored_value,
    update_color,
)


class TestConversions:
    """Tests for the color space conversions."""

    def test_hex_to_rgb_and_hsl(self) -> None:
        """A known brand blue converts exactly."""
        assert hex_to_rgb("#3B82F6") == RGB(59, 130, 246)
        assert hex_to_hsl("#3B82F6") == HSL(217, 91, 60)

    def test_shorthand_hex(self) -> None:
        """Three-digit hex expands; the # is optional."""
        assert hex_to_rgb("#fff") == RGB(255, 255, 255)
        assert hex_to_rgb("0f0") == RGB(0, 255, 0)
        assert normalize_hex("#ABC") == "#aabbcc"

    def test_invalid_hex_is_black(self) -> None:
        """Unreadable hex converts to black."""
        assert hex_to_rgb("#zzzzzz") == RGB(0, 0, 0)

    def test_rgb_to_hex_clamps_and_rounds(self) -> None:
        """Channels are clamped to 0-255 and rounded half-up."""
        assert rgb_to_hex(300, -5, 127.5) == "#ff0080"

    @pytest.mark.parametrize(
        "hex_value", ["#3b82f6", "#000000", "#ffffff", "#ff8000", "#123456", "#808080"]
    )
    def test_hex_rgb_hex_is_lossless(self, hex_value) -> None:
        """Hex survives a round trip through rgb."""
        rgb = hex_to_rgb(hex_value)
        assert rgb_to_hex(rgb.r, rgb.g, rgb.b) == hex_value

    def test_hsl_round_trip_is_stable(self) -> None:
        """A second hsl -> rgb -> hsl pass changes nothing."""
        seed = hsl_to_rgb(217, 91, 60)
        first = rgb_to_hsl(seed.r, seed.g, seed.b)
        rgb = hsl_to_rgb(first.h, first.s, first.l)
        assert rgb_to_hsl(rgb.r, rgb.g, rgb.b) == first

    def test_repeated_hsl_round_trips_drift_at_most_two(self) -> None:
        """Saturation and lightness stay within 2 of the first round trip."""
        for h in range(0, 360, 15):
            for s in range(0, 101, 4):
                for l in range(5, 96, 3):  # noqa: E741
                    rgb = hsl_to_rgb(h, s, l)
                    first = rgb_to_hsl(rgb.r, rgb.g, rgb.b)
                    current = first
                    for _ in range(10):
                        rgb = hsl_to_rgb(current.h, current.s, current.l)
                        current = rgb_to_hsl(rgb.r, rgb.g, rgb.b)
                    assert abs(current.s - first.s) <= 2, (h, s, l)
                    assert abs(current.l - first.l) <= 2, (h, s, l)

    def test_grayscale_hsl(self) -> None:
        """Zero saturation yields gray channels."""
        assert hsl_to_rgb(0, 0, 50) == RGB(128, 128, 128)
        assert hsl_to_hex(120, 100, 50) == "#00ff00"

    def test_is_valid_hex(self) -> None:
        """Only 3- and 6-digit forms are accepted."""
        assert is_valid_hex("#abc")
        assert is_valid_hex("AABBCC")
        assert not is_valid_hex("#abcd")
        assert not is_valid_hex("#12345g")
        assert not is_valid_hex(None)

    def test_parse_color_string(self) -> None:
        """Hex, rgb() and hsl() strings are recognised."""
        assert parse_color_string("rgb(59, 130, 246)") == RGB(59, 130, 246)
        assert parse_color_string("rgba(0,0,0,0.5)") == RGB(0, 0, 0)
        assert parse_color_string("hsl(120, 100%, 50%)") == RGB(0, 255, 0)
        assert parse_color_string("#3b82f6") == RGB(59, 130, 246)
        assert parse_color_string("tomato") is None


class TestParseColor:
    """Tests for parse_color."""

    def test_full_object(self, color_token) -> None:
        """Stored color objects keep their fields."""
        color = parse_color(color_token.value)
        assert color.hex == "#3b82f6"
        assert color.rgb == RGB(59, 130, 246)
        assert color.hsl == HSL(217, 91, 60)
        assert color.opacity == 1.0

    def test_hex_only_object_derives_spaces(self) -> None:
        """Missing rgb/hsl are derived from hex."""
        color = parse_color({"hex": "#3B82F6"})
        assert color.hex == "#3b82f6"
        assert color.rgb == RGB(59, 130, 246)
        assert color.hsl == HSL(217, 91, 60)

    def test_strings(self) -> None:
        """Hex strings with or without # are accepted."""
        assert parse_color("#FFF").hex == "#ffffff"
        assert parse_color("3b82f6").rgb == RGB(59, 130, 246)

    def test_rgba_string_sets_opacity(self) -> None:
        """The alpha channel of rgba() becomes opacity."""
        color = parse_color("rgba(59, 130, 246, 0.5)")
        assert color.hex == "#3b82f6"
        assert color.opacity == 0.5

    def test_figma_channels(self) -> None:
        """0-1 float channels are scaled to 0-255."""
        assert parse_color({"r": 1.0, "g": 0.5, "b": 0.0}).hex == "#ff8000"
        color = parse_color({"components": [0.0, 0.0, 1.0], "alpha": 0.25})
        assert color.hex == "#0000ff"
        assert color.opacity == 0.25

    def test_rgb_only_object(self) -> None:
        """An object with only rgb derives hex and hsl."""
        color = parse_color({"rgb": {"r": 255, "g": 0, "b": 0}, "opacity": 0.8})
        assert color.hex == "#ff0000"
        assert color.hsl == HSL(0, 100, 50)
        assert color.opacity == 0.8

    def test_out_of_range_strings_are_clamped(self) -> None:
        """rgb() and hsl() channels beyond their range are clamped."""
        color = parse_color("rgb(300, 0, 0)")
        assert color.hex == "#ff0000"
        assert color.rgb == RGB(255, 0, 0)
        assert color.hsl == HSL(0, 100, 50)
        assert parse_color_string("hsl(0, 150%, 50%)") == RGB(255, 0, 0)

    def test_out_of_range_hsl_object_is_clamped(self) -> None:
        """Stored hsl channels are kept within range."""
        color = parse_color({"hex": "#ff0000", "hsl": {"h": 370, "s": 140, "l": -5}})
        assert color.hsl == HSL(10, 100, 0)

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "",
            "not-a-color",
            42,
            [],
            {"foo": 1},
            {"components": ["a", 0, 0]},
            {"components": [None, 0, 0]},
            {"components": [{"x": 1}, 0, 0]},
        ],
    )
    def test_unreadable_values_are_black(self, raw) -> None:
        """Unreadable values never raise."""
        color = parse_color(raw)
        assert color.hex == "#000000"
        assert color.is_persistable

    def test_invalid_object_hex_is_kept_but_not_persistable(self) -> None:
        """A bad hex typed by the user stays visible but cannot be saved."""
        color = parse_color({"hex": "#12345g", "opacity": 1})
        assert color.hex == "#12345g"
        assert not color.is_persistable

    def test_opacity_is_clamped(self) -> None:
        """Opacity stays within 0-1."""
        assert parse_color({"hex": "#000", "opacity": 3}).opacity == 1.0
        assert parse_color({"hex": "#000", "opacity": -1}).opacity == 0.0


class TestUpdateColor:
    """Tests for editing one color space at a time."""

    def test_partial_rgb_edit(self) -> None:
        """Editing one channel recomputes hex and hsl."""
        red = parse_color("#ff0000")
        yellow = update_color(red, rgb={"g": 255})
        assert yellow.hex == "#ffff00"
        assert yellow.hsl == HSL(60, 100, 50)
        assert red.hex == "#ff0000"

    def test_hex_edit(self) -> None:
        """A valid hex syncs rgb and hsl."""
        color = update_color(Color(), hex="3B82F6")
        assert color.hex == "#3b82f6"
        assert color.rgb == RGB(59, 130, 246)

    def test_invalid_hex_edit_is_held(self) -> None:
        """An incomplete hex is kept as typed without syncing."""
        base = parse_color("#3b82f6")
        assert update_color(base, hex="#3b8").hex == "#33bb88"
        partial = update_color(base, hex="#3b82")
        assert partial.hex == "#3b82"
        assert partial.rgb == base.rgb
        assert not partial.is_persistable

    def test_hsl_edit(self) -> None:
        """Editing lightness recomputes rgb and hex."""
        color = update_color(parse_color("#ff0000"), hsl={"l": 25})
        assert color.hex == "#800000"
        assert color.rgb == RGB(128, 0, 0)

    def test_opacity_is_independent(self) -> None:
        """Opacity edits never touch the channels."""
        base = parse_color("#3b82f6")
        faded = update_color(base, opacity=0.5)
        assert faded.opacity == 0.5
        assert faded.hex == base.hex
        assert faded.rgb == base.rgb


class TestColorOutput:
    """Tests for display and CSS output."""

    def test_contrast_color(self) -> None:
        """Mid blue takes white text; yellow takes black."""
        assert get_contrast_color("#3b82f6") == "#ffffff"
        assert get_contrast_color("#ffff00") == "#000000"
        assert is_light("#ffffff")

    def test_format_color(self) -> None:
        """Each notation renders its own string."""
        color = parse_color("#3b82f6")
        assert format_color(color) == "#3b82f6"
        assert format_color(color, "rgb") == "rgb(59, 130, 246)"
        assert format_color(color, "hsl") == "hsl(217, 91%, 60%)"

    def test_to_css(self) -> None:
        """Translucent colors render as rgba()."""
        color = parse_color("#3b82f6")
        assert to_css(color) == "#3b82f6"
        assert to_css(update_color(color, opacity=0.5)) == "rgba(59, 130, 246, 0.5)"

    def test_stored_value(self) -> None:
        """The stored object carries every color space."""
        assert to_stored_value(parse_color("#3b82f6")) == {
            "hex": "#3b82f6",
            "rgb": {"r": 59, "g": 130, "b": 246},
            "hsl": {"h": 217, "s": 91, "l": 60},
            "opacity": 1.0,
        }
