"""CSS variable projection.

Turns tokens into CSS custom-property values for live preview and export.
Composite typography tokens expand into five addressable variables
(``-family``, ``-size``, ``-weight``, ``-line-height``, ``-letter-spacing``)
and full grid objects into per-field variables.

Every function here is pure; tokens are read, never modified.
"""

import json
from typing import Any, Iterable

from .codecs import color as color_codec
from .codecs import grid as grid_codec
from .codecs import shadow as shadow_codec
from .codecs import typography as typography_codec
from .codecs.base import format_number, is_finite_number
from .codecs.dimension import (
    FONT_SIZE,
    PROFILES,
    DimensionProfile,
    format_dimension,
    parse_dimension,
    profile_for,
)
from .tokens import Token, TokenCategory, TypographyType, generate_css_variable

INITIAL = "initial"
NONE = "none"

COMPOSITE_SUFFIXES: tuple[str, ...] = (
    "family",
    "size",
    "weight",
    "line-height",
    "letter-spacing",
)


def _value_with_unit(value: dict[str, Any], default_unit: str) -> str:
    number = value["value"]
    unit = value.get("unit")
    if unit is None:
        unit = default_unit
    text = format_number(number) if is_finite_number(number) else str(number)
    return f"{text}{unit}"


def _format_dimension_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if is_finite_number(value):
        return f"{format_number(value)}px"
    if isinstance(value, dict) and value.get("value") is not None:
        return _value_with_unit(value, "px")
    return "0"


def _format_color_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return color_codec.to_css(color_codec.parse_color(value))


def _format_shadow_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        layers = value
    elif isinstance(value, dict) and isinstance(value.get("shadows"), list):
        layers = value["shadows"]
    elif isinstance(value, dict) and any(
        key in value for key in ("x", "offsetX", "blur")
    ):
        layers = [value]
    else:
        return NONE
    if not layers:
        return NONE
    return shadow_codec.format_shadows(shadow_codec.parse_shadow_value(layers).shadows)


def _font_family_value(value: dict[str, Any]) -> str | None:
    family = value.get("fontFamily", value.get("family", value.get("font_family")))
    nested = value.get("value")
    if family is None and isinstance(nested, dict):
        family = nested.get("fontFamily", nested.get("family"))
    if isinstance(family, str) and family:
        return family
    if isinstance(family, list):
        return typography_codec.format_font_stack(family) or None
    if isinstance(family, dict):
        if isinstance(family.get("family"), str):
            return family["family"]
        if isinstance(family.get("stack"), list):
            return typography_codec.format_font_stack(family["stack"]) or None
    return None


def _format_typography_value(token: Token) -> str:
    value = token.value
    token_type = typography_codec.resolve_token_type(token)

    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return typography_codec.format_font_stack(value)

    if is_finite_number(value):
        if token_type == TypographyType.FONT_SIZE:
            return f"{format_number(value)}px"
        if token_type == TypographyType.LETTER_SPACING:
            return f"{format_number(value)}em"
        return format_number(value)

    if isinstance(value, dict):
        family = _font_family_value(value)
        if family:
            return family
        if token_type == TypographyType.LETTER_SPACING and (
            "isNormal" in value or "value" in value
        ):
            return typography_codec.format_letter_spacing(
                typography_codec.parse_letter_spacing(value)
            )
        if value.get("value") is not None:
            unit = value.get("unit")
            if unit is not None:
                return _value_with_unit(value, "")
            number = value["value"]
            # Bare small numbers are line-height ratios
            if is_finite_number(number) and 0 < number < 10:
                return format_number(number)
            return _value_with_unit(value, "px")
        if typography_codec.is_composite_value(value):
            return "inherit"

    return str(value)


def _format_other_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if is_finite_number(value):
        return f"{format_number(value)}px"
    if isinstance(value, dict) and value.get("value") is not None:
        return _value_with_unit(value, "px")
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def token_to_css_value(token: Token) -> str:
    """CSS value for a token's main variable.

    Args:
        token: Token of any category.

    Returns:
        The CSS value string; ``initial`` when the token has no value.
    """
    value = token.value
    if value is None:
        return INITIAL

    category = token.category
    if category is TokenCategory.COLOR:
        return _format_color_value(value)
    if category in (TokenCategory.SPACING, TokenCategory.RADIUS):
        return _format_dimension_value(value)
    if category is TokenCategory.SHADOW:
        return _format_shadow_value(value)
    if category is TokenCategory.TYPOGRAPHY:
        return _format_typography_value(token)
    if category is TokenCategory.GRID:
        return _format_other_value(value)

    if isinstance(value, dict) and value.get("value") is not None:
        return _value_with_unit(value, "")
    return _format_other_value(value)


def is_composite_token(token: Token) -> bool:
    """Composite typography token with an object value."""
    return token.is_composite_typography and typography_codec.is_composite_value(
        token.value
    )


def is_grid_object(token: Token) -> bool:
    """Grid token holding a full ``{breakpoints, columns, ...}`` object."""
    return (
        token.category is TokenCategory.GRID
        and isinstance(token.value, dict)
        and any(key in token.value for key in ("breakpoints", "columns", "margin"))
    )


def base_variable(token: Token) -> str:
    """Main CSS variable of a token, generated from its name when missing."""
    return token.css_variable or generate_css_variable(token.name, token.category)


def expand_composite(token: Token) -> dict[str, str]:
    """Expand a composite typography token into its five sub-variables.

    A token ``--typography-body`` yields ``--typography-body-family``,
    ``-size``, ``-weight``, ``-line-height`` and ``-letter-spacing``. A
    missing font family projects as ``inherit``.
    """
    base = base_variable(token)
    composite = typography_codec.parse_composite(token.value, token)
    return {
        f"{base}-family": composite.font_family or "inherit",
        f"{base}-size": format_dimension(composite.font_size),
        f"{base}-weight": str(composite.font_weight),
        f"{base}-line-height": format_number(composite.line_height),
        f"{base}-letter-spacing": typography_codec.format_letter_spacing(
            composite.letter_spacing
        ),
    }


def project_token(token: Token) -> dict[str, str]:
    """All CSS variables a single token contributes, in emission order."""
    if is_composite_token(token):
        return expand_composite(token)
    variables = {base_variable(token): token_to_css_value(token)}
    if is_grid_object(token):
        grid = grid_codec.parse_grid(token.value)
        variables.update(grid_codec.expand_grid(base_variable(token), grid))
    return variables


def css_variable_names(token: Token) -> list[str]:
    """Names of every variable a token contributes."""
    if is_composite_token(token):
        base = base_variable(token)
        return [f"{base}-{suffix}" for suffix in COMPOSITE_SUFFIXES]
    return list(project_token(token))


def build_variable_map(tokens: Iterable[Token]) -> dict[str, str]:
    """Live-preview variable map for a set of tokens.

    Tokens without a name or CSS variable are skipped. Later tokens win
    on duplicate variable names.
    """
    variables: dict[str, str] = {}
    for token in tokens:
        if not token.css_variable and not token.name:
            continue
        variables.update(project_token(token))
    return variables


def parse_token_value(
    token: Token, profiles: dict[str, DimensionProfile] | None = None
) -> Any:
    """Parse a token's stored value with the codec for its category.

    Args:
        token: Token to read.
        profiles: Dimension profiles by slot name (``spacing``, ``radius``,
            ``font-size``), e.g. from configuration; built-ins when omitted.

    Returns:
        The canonical value: Color, Dimension, CompositeTypography,
        LetterSpacing, ShadowValue, GridValue or a plain number/string.
    """
    profiles = profiles or PROFILES
    category = token.category
    value = token.value

    if category is TokenCategory.COLOR:
        return color_codec.parse_color(value)
    if category in (TokenCategory.SPACING, TokenCategory.RADIUS):
        return parse_dimension(value, profiles.get(category.value, profile_for(category.value)))
    if category is TokenCategory.SHADOW:
        return shadow_codec.parse_shadow_value(value)
    if category is TokenCategory.GRID and (value is None or is_grid_object(token)):
        return grid_codec.parse_grid(value)
    if category is TokenCategory.TYPOGRAPHY:
        if token.is_composite_typography:
            return typography_codec.parse_composite(value, token)
        token_type = typography_codec.resolve_token_type(token)
        if token_type == TypographyType.FONT_WEIGHT:
            return typography_codec.parse_font_weight(value)
        if token_type == TypographyType.LINE_HEIGHT:
            return typography_codec.parse_line_height(value)
        if token_type == TypographyType.LETTER_SPACING:
            return typography_codec.parse_letter_spacing(value)
        if token_type == TypographyType.FONT_FAMILY:
            return typography_codec.parse_composite(value, token).font_family
        return parse_dimension(value, profiles.get("font-size", FONT_SIZE))
    return value


def canonical_to_dict(value: Any) -> Any:
    """JSON-compatible form of a canonical value."""
    return value.to_dict() if hasattr(value, "to_dict") else value
