"""Value codecs, one module per token category.

Each codec parses a stored token value of any legacy or imported shape
into a canonical dataclass and formats it back. Parsing never raises;
unreadable input becomes the category default.
"""

from . import color, dimension, grid, shadow, typography
from .color import Color, parse_color, update_color
from .dimension import Dimension, DimensionProfile, format_dimension, parse_dimension
from .grid import GridValue, parse_grid
from .shadow import ShadowLayer, ShadowValue, format_shadows, parse_css_shadow, parse_shadow_value
from .typography import (
    CompositeTypography,
    LetterSpacing,
    format_composite,
    parse_composite,
    parse_letter_spacing,
    parse_line_height,
)

__all__ = [
    "color",
    "dimension",
    "grid",
    "shadow",
    "typography",
    "Color",
    "CompositeTypography",
    "Dimension",
    "DimensionProfile",
    "GridValue",
    "LetterSpacing",
    "ShadowLayer",
    "ShadowValue",
    "format_composite",
    "format_dimension",
    "format_shadows",
    "parse_color",
    "parse_composite",
    "parse_css_shadow",
    "parse_dimension",
    "parse_grid",
    "parse_letter_spacing",
    "parse_line_height",
    "parse_shadow_value",
    "update_color",
]
