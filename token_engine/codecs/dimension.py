"""Dimension codec for single-value-with-unit tokens.

Spacing, radius and font-size tokens all store a ``{value, unit}`` pair.
Each slot has a :class:`DimensionProfile` naming its default and the units
it accepts. Parsing is permissive: anything unreadable becomes the slot
default, it is never rejected.
"""

import re
from dataclasses import dataclass, replace
from typing import Any

from ..engine_logging import LogCategory, get_category_logger
from .base import coerce_number, format_number, is_finite_number, normalize_number

logger = get_category_logger(LogCategory.CODEC)

# Radius sentinel meaning "fully round"
FULL_ROUND = 9999


@dataclass
class Dimension:
    """A number with a CSS length unit."""

    value: float | int
    unit: str = "px"

    def to_dict(self) -> dict[str, Any]:
        """Convert to the stored ``{value, unit}`` shape."""
        return {"value": self.value, "unit": self.unit}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Dimension":
        """Create from dictionary."""
        return cls(value=data["value"], unit=data.get("unit", "px"))


@dataclass(frozen=True)
class DimensionProfile:
    """Default value and allowed units for one dimension slot."""

    name: str
    default_value: float | int
    default_unit: str = "px"
    allowed_units: tuple[str, ...] = ("px", "rem", "em", "%")

    @property
    def default(self) -> Dimension:
        """Fresh default dimension for this slot."""
        return Dimension(self.default_value, self.default_unit)

    @property
    def pattern(self) -> re.Pattern[str]:
        """String form accepted for this slot, e.g. ``16px`` or ``-0.5rem``."""
        units = "|".join(re.escape(u) for u in self.allowed_units)
        return re.compile(rf"^(-?[\d.]+)({units})?$")

    def with_default(self, value: float | int) -> "DimensionProfile":
        """Copy of this profile with a different default value."""
        return replace(self, default_value=value)


SPACING = DimensionProfile("spacing", 16, "px", ("px", "rem", "em"))
RADIUS = DimensionProfile("radius", 8, "px", ("px", "rem", "%"))
FONT_SIZE = DimensionProfile("font-size", 16, "px", ("px", "rem", "em", "%"))
# Font size inside a composite typography token defaults to rem
COMPOSITE_FONT_SIZE = DimensionProfile(
    "composite-font-size", 1, "rem", ("rem", "px", "em", "%")
)

PROFILES: dict[str, DimensionProfile] = {
    "spacing": SPACING,
    "radius": RADIUS,
    "font-size": FONT_SIZE,
}

# 4px base scale
SPACING_PRESETS: tuple[int, ...] = (0, 2, 4, 8, 12, 16, 20, 24, 32, 40, 48, 64, 80, 96)

RADIUS_PRESETS: tuple[tuple[str, int], ...] = (
    ("None", 0),
    ("SM", 4),
    ("MD", 8),
    ("LG", 12),
    ("XL", 16),
    ("Full", FULL_ROUND),
)


def profile_for(name: str) -> DimensionProfile:
    """Look up a profile by slot name, defaulting to spacing."""
    return PROFILES.get(name, SPACING)


def _fallback(raw: Any, profile: DimensionProfile) -> Dimension:
    logger.debug(f"Unreadable {profile.name} value {raw!r}, using default")
    return profile.default


def parse_dimension(raw: Any, profile: DimensionProfile = SPACING) -> Dimension:
    """Parse a stored dimension value into canonical form.

    Accepts ``None`` (default), ``Dimension`` instances, ``{value, unit}``
    objects, strings like ``"16px"`` / ``"1.5rem"`` / ``"12"`` and plain
    numbers. Units outside the profile's allowed set fall back to the
    profile's default unit.

    Args:
        raw: The stored value in any supported shape.
        profile: Slot profile providing defaults and allowed units.

    Returns:
        Canonical Dimension; never raises.
    """
    if raw is None:
        return profile.default

    if isinstance(raw, Dimension):
        raw = raw.to_dict()

    if isinstance(raw, dict):
        number = coerce_number(raw.get("value"))
        if number is None:
            number = profile.default_value
        unit = raw.get("unit") or profile.default_unit
        if unit not in profile.allowed_units:
            logger.debug(f"Unit {unit!r} not allowed for {profile.name}")
            unit = profile.default_unit
        return Dimension(normalize_number(number), unit)

    if isinstance(raw, str):
        match = profile.pattern.match(raw.strip())
        if not match:
            return _fallback(raw, profile)
        try:
            number = float(match.group(1))
        except ValueError:
            return _fallback(raw, profile)
        return Dimension(normalize_number(number), match.group(2) or profile.default_unit)

    if is_finite_number(raw):
        return Dimension(normalize_number(raw), profile.default_unit)

    return _fallback(raw, profile)


def format_dimension(dimension: Dimension) -> str:
    """Format as a CSS length, e.g. ``16px``."""
    return f"{format_number(dimension.value)}{dimension.unit}"


def preview_radius(dimension: Dimension) -> str:
    """CSS border-radius for previews; the 9999 sentinel renders as ``50%``.

    The stored value keeps the literal 9999, only the preview changes.
    """
    if dimension.value == FULL_ROUND:
        return "50%"
    return format_dimension(dimension)


def to_stored_value(dimension: Dimension) -> dict[str, Any]:
    """Value written back to the token record."""
    return dimension.to_dict()


def match_spacing_preset(dimension: Dimension) -> int | None:
    """The spacing preset a px dimension sits on, if any."""
    if dimension.unit == "px" and dimension.value in SPACING_PRESETS:
        return int(dimension.value)
    return None


def match_radius_preset(dimension: Dimension) -> str | None:
    """Label of the radius preset a px dimension sits on ("Full" for 9999)."""
    if dimension.unit != "px":
        return None
    for label, value in RADIUS_PRESETS:
        if dimension.value == value:
            return label
    return None
