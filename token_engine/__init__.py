"""Design token value engine.

Parses loosely typed design token values into canonical shapes, formats
them back for storage and projects them onto CSS custom properties.
"""

__version__ = "0.1.0"

from .css_generator import generate_css, generate_multi_theme_css, generate_scoped_css
from .errors import TokenEngineError
from .projection import (
    build_variable_map,
    expand_composite,
    parse_token_value,
    token_to_css_value,
)
from .tokens import Token, TokenCategory, TypographyType, create_token

__all__ = [
    "__version__",
    "Token",
    "TokenCategory",
    "TokenEngineError",
    "TypographyType",
    "build_variable_map",
    "create_token",
    "expand_composite",
    "generate_css",
    "generate_multi_theme_css",
    "generate_scoped_css",
    "parse_token_value",
    "token_to_css_value",
]
