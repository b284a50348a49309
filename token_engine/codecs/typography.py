"""Typography codec.

Handles the five simple typography values (font family, font size, font
weight, line height and letter spacing) and the composite token that
bundles them. Legacy simple tokens identify their role only through their
path or name, so :func:`detect_token_type` infers it from keywords.

A simple token opened in the composite editor is *previewed* as a
composite without touching storage; saving it promotes the token type to
``typography-composite`` for good (see :func:`promote_to_composite`).
"""

import re
from dataclasses import dataclass, field, replace
from typing import Any

from ..engine_logging import LogCategory, get_category_logger
from ..tokens import Token, TypographyType
from .base import (
    coerce_number,
    format_number,
    is_finite_number,
    normalize_number,
    parse_float_prefix,
    parse_int_prefix,
    round_half_up,
)
from .dimension import COMPOSITE_FONT_SIZE, Dimension, format_dimension, parse_dimension

logger = get_category_logger(LogCategory.CODEC)

DEFAULT_FONT_WEIGHT = 400
DEFAULT_LINE_HEIGHT = 1.5
NORMAL = "normal"

# Checked in order; the first keyword set found in the path wins
TYPE_KEYWORDS: tuple[tuple[TypographyType, tuple[str, ...]], ...] = (
    (TypographyType.FONT_FAMILY, ("family",)),
    (TypographyType.FONT_SIZE, ("size",)),
    (TypographyType.LINE_HEIGHT, ("line-height", "lineheight", "leading")),
    (TypographyType.LETTER_SPACING, ("letter-spacing", "letterspacing", "tracking")),
    (TypographyType.FONT_WEIGHT, ("weight",)),
)

WEIGHT_LABELS: dict[int, str] = {
    100: "Thin",
    200: "Extra Light",
    300: "Light",
    400: "Regular",
    500: "Medium",
    600: "Semi Bold",
    700: "Bold",
    800: "Extra Bold",
    900: "Black",
}

SIMPLE_PRESETS: dict[TypographyType, tuple[float, ...]] = {
    TypographyType.FONT_SIZE: (10, 12, 14, 16, 18, 20, 24, 28, 32, 36, 48, 64),
    TypographyType.LINE_HEIGHT: (1, 1.125, 1.25, 1.375, 1.5, 1.625, 1.75, 2),
    TypographyType.LETTER_SPACING: (-0.05, -0.025, 0, 0.025, 0.05, 0.1, 0.15, 0.2),
    TypographyType.FONT_WEIGHT: (100, 200, 300, 400, 500, 600, 700, 800, 900),
}

_LETTER_SPACING_PATTERN = re.compile(r"^(-?[\d.]+)(em|px)?$")


@dataclass
class LetterSpacing:
    """Letter spacing; ``is_normal`` means CSS ``normal``.

    While ``is_normal`` is set, ``value`` and ``unit`` are kept only so an
    editor can restore them; they are not serialized.
    """

    value: float | int = 0
    unit: str = ""
    is_normal: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"value": self.value, "unit": self.unit, "isNormal": self.is_normal}


@dataclass
class CompositeTypography:
    """All five typography properties of one text style."""

    font_family: str | None = None
    font_size: Dimension = field(default_factory=lambda: COMPOSITE_FONT_SIZE.default)
    font_weight: int = DEFAULT_FONT_WEIGHT
    line_height: float | int = DEFAULT_LINE_HEIGHT
    letter_spacing: LetterSpacing = field(default_factory=LetterSpacing)


@dataclass(frozen=True)
class TypeScalePreset:
    """A named size/weight/line-height/letter-spacing combination."""

    label: str
    size: str
    weight: int
    line_height: float
    letter_spacing: str


TYPE_SCALE_PRESETS: tuple[TypeScalePreset, ...] = (
    TypeScalePreset("Display", "3rem", 700, 1.1, "-0.02em"),
    TypeScalePreset("Heading XL", "2.25rem", 700, 1.2, "-0.01em"),
    TypeScalePreset("Heading LG", "1.875rem", 600, 1.25, "-0.01em"),
    TypeScalePreset("Heading MD", "1.5rem", 600, 1.3, NORMAL),
    TypeScalePreset("Heading SM", "1.25rem", 600, 1.4, NORMAL),
    TypeScalePreset("Body Large", "1.125rem", 400, 1.6, NORMAL),
    TypeScalePreset("Body", "1rem", 400, 1.5, NORMAL),
    TypeScalePreset("Body Small", "0.875rem", 400, 1.5, NORMAL),
    TypeScalePreset("Label", "0.875rem", 500, 1.4, "0.01em"),
    TypeScalePreset("Caption", "0.75rem", 400, 1.4, "0.02em"),
    TypeScalePreset("Code", "0.875rem", 400, 1.6, NORMAL),
)


def _match_keywords(path_or_name: str | None) -> TypographyType | None:
    lowered = (path_or_name or "").lower()
    for token_type, keywords in TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return token_type
    return None


def detect_token_type(path_or_name: str | None) -> TypographyType:
    """Infer which typography property a token holds from its path or name.

    Case-insensitive substring match against keyword sets, defaulting to
    font size.
    """
    return _match_keywords(path_or_name) or TypographyType.FONT_SIZE


def resolve_token_type(token: Token | None) -> TypographyType:
    """Resolve the typography type of a token record.

    Composite tokens are recognised by their type. Otherwise path/name
    keywords win, then an explicit simple type, then font size.
    """
    if token is None:
        return TypographyType.FONT_SIZE
    if token.type == TypographyType.COMPOSITE.value:
        return TypographyType.COMPOSITE

    detected = _match_keywords(token.path or token.name)
    if detected is not None:
        return detected

    explicit = {t.value.lower(): t for t in TypographyType}.get((token.type or "").lower())
    if explicit is not None:
        return explicit
    return TypographyType.FONT_SIZE


def parse_font_weight(raw: Any) -> int:
    """Parse a font weight, snapped to the nearest hundred in [100, 900]."""
    if isinstance(raw, dict):
        raw = raw.get("value")
    number = parse_int_prefix(raw) if isinstance(raw, str) else raw
    if not is_finite_number(number) or number == 0:
        return DEFAULT_FONT_WEIGHT
    snapped = round_half_up(number / 100.0) * 100
    return max(100, min(900, snapped))


def parse_line_height(raw: Any) -> float | int:
    """Parse a unitless line-height ratio, defaulting to 1.5."""
    if is_finite_number(raw):
        return raw
    if isinstance(raw, str):
        number = parse_float_prefix(raw)
        return DEFAULT_LINE_HEIGHT if number is None else number
    if isinstance(raw, dict) and "value" in raw:
        number = parse_float_prefix(raw["value"])
        # A zero or missing ratio is never a usable line height
        return number if number else DEFAULT_LINE_HEIGHT
    return DEFAULT_LINE_HEIGHT


def parse_letter_spacing(raw: Any) -> LetterSpacing:
    """Parse letter spacing into canonical form.

    ``None``, ``""`` and ``"normal"`` map to the normal sentinel, as does
    any string that is not a number with an optional ``em``/``px`` unit.
    Numbers (including 0) are explicit ``em`` values.
    """
    if isinstance(raw, LetterSpacing):
        return replace(raw)
    if raw is None or raw == "" or raw == NORMAL:
        return LetterSpacing()
    if isinstance(raw, str):
        match = _LETTER_SPACING_PATTERN.match(raw.strip())
        if match:
            try:
                number = float(match.group(1))
            except ValueError:
                return LetterSpacing()
            return LetterSpacing(normalize_number(number), match.group(2) or "em", False)
        return LetterSpacing()
    if isinstance(raw, dict):
        number = coerce_number(raw.get("value"))
        unit = raw.get("unit") or "em"
        if raw.get("isNormal"):
            return LetterSpacing(number if number is not None else 0, raw.get("unit", ""), True)
        if number is None:
            return LetterSpacing()
        return LetterSpacing(number, unit, False)
    if is_finite_number(raw):
        return LetterSpacing(raw, "em", False)
    return LetterSpacing()


def format_letter_spacing(letter_spacing: LetterSpacing) -> str:
    """CSS letter-spacing; ``is_normal`` alone decides ``normal``."""
    if letter_spacing.is_normal:
        return NORMAL
    return f"{format_number(letter_spacing.value)}{letter_spacing.unit or 'em'}"


def _parse_font_family(raw: Any) -> str | None:
    if isinstance(raw, str):
        return raw or None
    if isinstance(raw, dict):
        family = raw.get("fontFamily") or raw.get("family") or raw.get("value")
        return family if isinstance(family, str) and family else None
    if isinstance(raw, list):
        return format_font_stack(raw) or None
    return None


def format_font_stack(families: list[Any]) -> str:
    """Join font family names into a CSS stack, quoting names with spaces."""
    parts = []
    for name in families:
        text = str(name).strip()
        if not text:
            continue
        already_stacked = "," in text or (
            len(text) > 1 and text[0] == text[-1] and text[0] in "\"'"
        )
        parts.append(f'"{text}"' if " " in text and not already_stacked else text)
    return ", ".join(parts)


def is_composite_value(raw: Any) -> bool:
    """Check whether a stored value already has the composite shape."""
    return isinstance(raw, dict) and any(
        key in raw for key in ("fontFamily", "fontSize", "fontWeight")
    )


def parse_composite(raw: Any, token: Token | None = None) -> CompositeTypography:
    """Parse any typography value as a composite.

    Values that already carry ``fontFamily``/``fontSize``/``fontWeight``
    are parsed field by field. Any other value is a legacy simple token:
    the token's path, name or type decides which single field it fills and
    the rest keep their defaults. Storage is not touched.

    Args:
        raw: Stored token value.
        token: Owning token record, used to infer the type of simple values.

    Returns:
        CompositeTypography; never raises.
    """
    if is_composite_value(raw):
        return CompositeTypography(
            font_family=_parse_font_family(raw.get("fontFamily")),
            font_size=parse_dimension(raw.get("fontSize"), COMPOSITE_FONT_SIZE),
            font_weight=parse_font_weight(raw.get("fontWeight")),
            line_height=parse_line_height(raw.get("lineHeight")),
            letter_spacing=parse_letter_spacing(raw.get("letterSpacing")),
        )

    result = CompositeTypography()
    if raw is None or raw == "":
        return result

    token_type = resolve_token_type(token)
    if token_type == TypographyType.FONT_FAMILY:
        result.font_family = _parse_font_family(raw)
    elif token_type == TypographyType.FONT_WEIGHT:
        result.font_weight = parse_font_weight(raw)
    elif token_type == TypographyType.LINE_HEIGHT:
        result.line_height = parse_line_height(raw)
    elif token_type == TypographyType.LETTER_SPACING:
        result.letter_spacing = parse_letter_spacing(raw)
    else:
        result.font_size = parse_dimension(raw, COMPOSITE_FONT_SIZE)
    return result


def format_composite(composite: CompositeTypography) -> dict[str, Any]:
    """CSS style object for a composite typography value."""
    return {
        "fontFamily": composite.font_family,
        "fontSize": format_dimension(composite.font_size),
        "fontWeight": composite.font_weight,
        "lineHeight": composite.line_height,
        "letterSpacing": format_letter_spacing(composite.letter_spacing),
    }


def to_stored_value(composite: CompositeTypography) -> dict[str, Any]:
    """Composite object as persisted on the token record.

    An empty font family is left out; letter spacing is the string
    ``normal`` or a ``{value, unit}`` object.
    """
    value: dict[str, Any] = {}
    if composite.font_family:
        value["fontFamily"] = composite.font_family
    value["fontSize"] = composite.font_size.to_dict()
    value["fontWeight"] = composite.font_weight
    value["lineHeight"] = composite.line_height
    if composite.letter_spacing.is_normal:
        value["letterSpacing"] = NORMAL
    else:
        value["letterSpacing"] = {
            "value": composite.letter_spacing.value,
            "unit": composite.letter_spacing.unit or "em",
        }
    return value


def promote_to_composite(
    token: Token, composite: CompositeTypography | None = None
) -> Token:
    """Save a composite edit, promoting the token to ``typography-composite``.

    The promotion is one-way; a token that is already composite stays
    composite.

    Args:
        token: Token being saved.
        composite: Edited value; parsed from the token when omitted.

    Returns:
        A new Token with the composite type and stored composite value.
    """
    if composite is None:
        composite = parse_composite(token.value, token)
    promoted = token.with_type(TypographyType.COMPOSITE.value)
    return replace(promoted, value=to_stored_value(composite))


def apply_preset(
    composite: CompositeTypography, preset: TypeScalePreset
) -> CompositeTypography:
    """Overwrite size, weight, line height and letter spacing from a preset."""
    return replace(
        composite,
        font_size=parse_dimension(preset.size, COMPOSITE_FONT_SIZE),
        font_weight=preset.weight,
        line_height=preset.line_height,
        letter_spacing=parse_letter_spacing(preset.letter_spacing),
    )


def match_preset(composite: CompositeTypography) -> TypeScalePreset | None:
    """Find the preset with exactly this size and weight, if any."""
    size = format_dimension(composite.font_size)
    for preset in TYPE_SCALE_PRESETS:
        if preset.size == size and preset.weight == composite.font_weight:
            return preset
    return None


def weight_label(weight: int) -> str:
    """Display label for a font weight ("700" -> "Bold")."""
    return WEIGHT_LABELS.get(weight, str(weight))


def simple_presets(token_type: TypographyType) -> tuple[float, ...]:
    """Quick-pick values offered for a simple typography type."""
    return SIMPLE_PRESETS.get(token_type, ())
