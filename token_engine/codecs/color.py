"""Color codec: HEX, RGB and HSL with independent opacity.

The three color spaces are kept mutually consistent; hex is the form that
is persisted, rgb/hsl are derived. Rounding is half-up everywhere so that
``hex -> rgb -> hex`` is lossless and ``hsl -> rgb -> hsl`` settles after
one round trip.

An invalid hex typed by a user is kept verbatim in :class:`Color` so the
editor can show it, but :attr:`Color.is_persistable` is False until it is
fixed. Callers check that flag before saving.
"""

import re
from dataclasses import dataclass, field, replace
from typing import Any

from ..engine_logging import LogCategory, get_category_logger
from .base import coerce_number, format_number, is_finite_number, round_half_up

logger = get_category_logger(LogCategory.CODEC)

DEFAULT_HEX = "#000000"

_HEX_PATTERN = re.compile(r"^#?([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_HEX_PAIRS = re.compile(r"^([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)
_RGB_PATTERN = re.compile(
    r"rgba?\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)(?:\s*,\s*([\d.]+))?\s*\)"
)
_HSL_PATTERN = re.compile(
    r"hsla?\s*\(\s*(\d+)\s*,\s*(\d+)%?\s*,\s*(\d+)%?(?:\s*,\s*([\d.]+))?\s*\)"
)


@dataclass(frozen=True)
class RGB:
    """Red, green and blue channels, 0-255."""

    r: int
    g: int
    b: int

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for JSON serialization."""
        return {"r": self.r, "g": self.g, "b": self.b}


@dataclass(frozen=True)
class HSL:
    """Hue 0-360, saturation and lightness 0-100."""

    h: int
    s: int
    l: int  # noqa: E741

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for JSON serialization."""
        return {"h": self.h, "s": self.s, "l": self.l}


@dataclass
class Color:
    """Canonical color value."""

    hex: str = DEFAULT_HEX
    rgb: RGB = field(default_factory=lambda: RGB(0, 0, 0))
    hsl: HSL = field(default_factory=lambda: HSL(0, 0, 0))
    opacity: float = 1.0

    @property
    def is_persistable(self) -> bool:
        """True when ``hex`` is a valid color that may be saved."""
        return is_valid_hex(self.hex)

    def to_dict(self) -> dict[str, Any]:
        """Stored color object: hex plus derived rgb/hsl and opacity."""
        return {
            "hex": self.hex,
            "rgb": self.rgb.to_dict(),
            "hsl": self.hsl.to_dict(),
            "opacity": self.opacity,
        }


def is_valid_hex(value: Any) -> bool:
    """Check for a 3- or 6-digit hex color, with or without ``#``."""
    if not value or not isinstance(value, str):
        return False
    return bool(_HEX_PATTERN.match(value.strip()))


def normalize_hex(value: str) -> str:
    """Canonical ``#rrggbb`` for a valid hex (shorthand expanded, lowercased)."""
    rgb = hex_to_rgb(value)
    return rgb_to_hex(rgb.r, rgb.g, rgb.b)


def hex_to_rgb(value: str) -> RGB:
    """Convert ``#rrggbb``/``#rgb`` (``#`` optional) to RGB; black if invalid."""
    clean = value.strip().lstrip("#")
    if len(clean) == 3:
        clean = "".join(c * 2 for c in clean)
    match = _HEX_PAIRS.match(clean)
    if not match:
        return RGB(0, 0, 0)
    return RGB(*(int(part, 16) for part in match.groups()))


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert channels to ``#rrggbb``, clamping and rounding each channel."""

    def to_hex(n: float) -> str:
        return format(max(0, min(255, round_half_up(n))), "02x")

    return f"#{to_hex(r)}{to_hex(g)}{to_hex(b)}"


def rgb_to_hsl(r: float, g: float, b: float) -> HSL:
    """Convert RGB (0-255) to HSL (h 0-360, s/l 0-100), rounded."""
    r_norm, g_norm, b_norm = r / 255, g / 255, b / 255
    high = max(r_norm, g_norm, b_norm)
    low = min(r_norm, g_norm, b_norm)
    delta = high - low

    h = 0.0
    s = 0.0
    lightness = (high + low) / 2

    if delta != 0:
        s = delta / (2 - high - low) if lightness > 0.5 else delta / (high + low)
        if high == r_norm:
            h = ((g_norm - b_norm) / delta + (6 if g_norm < b_norm else 0)) / 6
        elif high == g_norm:
            h = ((b_norm - r_norm) / delta + 2) / 6
        else:
            h = ((r_norm - g_norm) / delta + 4) / 6

    return HSL(round_half_up(h * 360), round_half_up(s * 100), round_half_up(lightness * 100))


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:  # noqa: E741
    """Convert HSL (h 0-360, s/l 0-100) to RGB (0-255), rounded."""
    h_norm, s_norm, l_norm = h / 360, s / 100, l / 100

    if s_norm == 0:
        gray = round_half_up(l_norm * 255)
        return RGB(gray, gray, gray)

    q = l_norm * (1 + s_norm) if l_norm < 0.5 else l_norm + s_norm - l_norm * s_norm
    p = 2 * l_norm - q

    return RGB(
        round_half_up(_hue_to_rgb(p, q, h_norm + 1 / 3) * 255),
        round_half_up(_hue_to_rgb(p, q, h_norm) * 255),
        round_half_up(_hue_to_rgb(p, q, h_norm - 1 / 3) * 255),
    )


def hex_to_hsl(value: str) -> HSL:
    """Convert hex to HSL."""
    rgb = hex_to_rgb(value)
    return rgb_to_hsl(rgb.r, rgb.g, rgb.b)


def hsl_to_hex(h: float, s: float, l: float) -> str:  # noqa: E741
    """Convert HSL to hex."""
    rgb = hsl_to_rgb(h, s, l)
    return rgb_to_hex(rgb.r, rgb.g, rgb.b)


def parse_color_string(value: Any) -> RGB | None:
    """Parse a hex, ``rgb()``/``rgba()`` or ``hsl()``/``hsla()`` string to RGB.

    Returns:
        RGB, or None if the string is not a recognised color.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip().lower()

    if text.startswith("#") or re.match(r"^[a-f0-9]{3,6}$", text):
        return hex_to_rgb(text)

    rgb_match = _RGB_PATTERN.match(text)
    if rgb_match:
        return RGB(*(_clamp(int(rgb_match.group(i)), 255) for i in (1, 2, 3)))

    hsl_match = _HSL_PATTERN.match(text)
    if hsl_match:
        h, s, l = (int(hsl_match.group(i)) for i in (1, 2, 3))  # noqa: E741
        return hsl_to_rgb(h % 360, _clamp(s, 100), _clamp(l, 100))

    return None


def _clamp(value: int, high: int) -> int:
    return max(0, min(high, value))


def _clamp_opacity(value: Any) -> float:
    number = coerce_number(value)
    if number is None:
        return 1.0
    return max(0.0, min(1.0, float(number)))


def _channel(value: Any) -> int:
    """Channel from 0-1 (Figma style) or 0-255 scale."""
    number = coerce_number(value)
    if number is None:
        return 0
    if 0 <= number <= 1 and isinstance(number, float):
        return round_half_up(number * 255)
    return _clamp(round_half_up(number), 255)


def _from_rgb(rgb: RGB, opacity: Any = 1) -> Color:
    return Color(
        hex=rgb_to_hex(rgb.r, rgb.g, rgb.b),
        rgb=rgb,
        hsl=rgb_to_hsl(rgb.r, rgb.g, rgb.b),
        opacity=_clamp_opacity(opacity),
    )


def _component(value: Any) -> int:
    """Figma ``components`` entry (0-1 scale); unreadable entries are 0."""
    number = coerce_number(value)
    if number is None:
        return 0
    return _channel(float(number))


def _rgb_from_dict(data: Any) -> RGB | None:
    if not isinstance(data, dict) or not all(k in data for k in ("r", "g", "b")):
        return None
    channels = [coerce_number(data[k]) for k in ("r", "g", "b")]
    if any(c is None for c in channels):
        return None
    return RGB(*(_clamp(round_half_up(c), 255) for c in channels))


def _hsl_from_dict(data: Any) -> HSL | None:
    if not isinstance(data, dict) or not all(k in data for k in ("h", "s", "l")):
        return None
    parts = [coerce_number(data[k]) for k in ("h", "s", "l")]
    if any(p is None for p in parts):
        return None
    h, s, l = (round_half_up(p) for p in parts)  # noqa: E741
    return HSL(h % 360, _clamp(s, 100), _clamp(l, 100))


def parse_color(raw: Any) -> Color:
    """Parse a stored color value into a canonical :class:`Color`.

    Accepts ``{hex, rgb?, hsl?, opacity?}`` objects, 0-1 or 0-255 channel
    objects (``{r, g, b, a}`` or ``{components: [...]}``), hex strings with
    or without ``#``, and ``rgb()``/``hsl()`` strings.

    An object whose ``hex`` is invalid keeps it verbatim (not persistable);
    an unreadable string falls back to black.
    """
    if raw is None or raw == "":
        return Color()

    if isinstance(raw, Color):
        return replace(raw)

    if isinstance(raw, str):
        text = raw.strip()
        if text.lower().startswith(("rgb", "hsl")):
            rgb = parse_color_string(text)
            alpha = _RGB_PATTERN.match(text.lower()) or _HSL_PATTERN.match(text.lower())
            opacity = alpha.group(4) if alpha and alpha.group(4) else 1
            if rgb is not None:
                return _from_rgb(rgb, opacity)
        hex_value = text if text.startswith("#") else f"#{text}"
        if is_valid_hex(hex_value):
            return _from_rgb(hex_to_rgb(hex_value))
        logger.debug(f"Unreadable color string {raw!r}, using default")
        return Color()

    if isinstance(raw, dict):
        if "hex" in raw:
            hex_value = raw.get("hex") or DEFAULT_HEX
            opacity = _clamp_opacity(raw.get("opacity", 1))
            if not is_valid_hex(hex_value):
                # Held for the editor, never saved
                return Color(hex=str(hex_value), opacity=opacity)
            if not hex_value.startswith("#"):
                hex_value = f"#{hex_value}"
            derived = hex_to_rgb(hex_value)
            rgb = _rgb_from_dict(raw.get("rgb")) or derived
            hsl = _hsl_from_dict(raw.get("hsl")) or rgb_to_hsl(rgb.r, rgb.g, rgb.b)
            return Color(hex=normalize_hex(hex_value), rgb=rgb, hsl=hsl, opacity=opacity)

        rgb_only = _rgb_from_dict(raw.get("rgb"))
        if rgb_only is not None:
            return _from_rgb(rgb_only, raw.get("opacity", 1))

        if isinstance(raw.get("components"), list) and len(raw["components"]) >= 3:
            r, g, b = raw["components"][:3]
            rgb = RGB(_component(r), _component(g), _component(b))
            return _from_rgb(rgb, raw.get("alpha", 1))

        if all(k in raw for k in ("r", "g", "b")):
            rgb = RGB(_channel(raw["r"]), _channel(raw["g"]), _channel(raw["b"]))
            return _from_rgb(rgb, raw.get("a", raw.get("alpha", 1)))

    logger.debug(f"Unreadable color value {raw!r}, using default")
    return Color()


def update_color(
    color: Color,
    hex: str | None = None,
    rgb: dict[str, Any] | None = None,
    hsl: dict[str, Any] | None = None,
    opacity: float | None = None,
) -> Color:
    """Apply one edit and recompute the other color spaces.

    Exactly one of ``hex``/``rgb``/``hsl`` is applied (in that priority);
    ``rgb``/``hsl`` may be partial, e.g. ``{"r": 255}``. An invalid hex is
    kept as typed without syncing rgb/hsl. Opacity never affects the color
    channels.

    Returns:
        A new Color; the input is not modified.
    """
    updated = replace(color)

    if hex is not None:
        if is_valid_hex(hex):
            hex_value = hex if hex.startswith("#") else f"#{hex}"
            updated.rgb = hex_to_rgb(hex_value)
            updated.hsl = rgb_to_hsl(updated.rgb.r, updated.rgb.g, updated.rgb.b)
            updated.hex = normalize_hex(hex_value)
        else:
            updated.hex = hex
    elif rgb is not None:
        merged = {**color.rgb.to_dict(), **rgb}
        updated.rgb = _rgb_from_dict(merged) or color.rgb
        updated.hex = rgb_to_hex(updated.rgb.r, updated.rgb.g, updated.rgb.b)
        updated.hsl = rgb_to_hsl(updated.rgb.r, updated.rgb.g, updated.rgb.b)
    elif hsl is not None:
        merged = {**color.hsl.to_dict(), **hsl}
        updated.hsl = _hsl_from_dict(merged) or color.hsl
        updated.rgb = hsl_to_rgb(updated.hsl.h, updated.hsl.s, updated.hsl.l)
        updated.hex = rgb_to_hex(updated.rgb.r, updated.rgb.g, updated.rgb.b)

    if opacity is not None and is_finite_number(opacity):
        updated.opacity = max(0.0, min(1.0, float(opacity)))

    return updated


def to_stored_value(color: Color) -> dict[str, Any]:
    """Value written back to the token record.

    Only call this for persistable colors (see :attr:`Color.is_persistable`).
    """
    return color.to_dict()


def get_contrast_color(hex_value: str) -> str:
    """Black or white text color for readability over ``hex_value``."""
    return "#000000" if is_light(hex_value) else "#ffffff"


def is_light(hex_value: str) -> bool:
    """Relative luminance ``0.299R + 0.587G + 0.114B`` above 0.5."""
    rgb = hex_to_rgb(hex_value)
    luminance = (0.299 * rgb.r + 0.587 * rgb.g + 0.114 * rgb.b) / 255
    return luminance > 0.5


def format_color(color: Color, fmt: str = "hex") -> str:
    """Display string in ``hex``, ``rgb`` or ``hsl`` notation."""
    if fmt == "rgb":
        return f"rgb({color.rgb.r}, {color.rgb.g}, {color.rgb.b})"
    if fmt == "hsl":
        return f"hsl({color.hsl.h}, {color.hsl.s}%, {color.hsl.l}%)"
    return color.hex or DEFAULT_HEX


def to_css(color: Color) -> str:
    """CSS value for previews: ``rgba(...)`` when translucent, else hex."""
    if color.opacity < 1:
        return (
            f"rgba({color.rgb.r}, {color.rgb.g}, {color.rgb.b}, "
            f"{format_number(color.opacity)})"
        )
    return color.hex
