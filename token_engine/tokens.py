"""Design token record and naming helpers.

A token is a named design value (a color, a spacing step, a text style)
with a category, a category-specific type and a polymorphic ``value``
payload. The value is interpreted by the codec for the token's category.
"""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .errors import InvalidTypeTransitionError

# Paths of tokens generated from the typography scale (read-only in editors)
GENERATED_ROLE_PREFIX = "typography/role/"


class TokenCategory(Enum):
    """Token categories, in stylesheet order."""

    COLOR = "color"
    TYPOGRAPHY = "typography"
    SPACING = "spacing"
    SHADOW = "shadow"
    RADIUS = "radius"
    GRID = "grid"
    OTHER = "other"

    @classmethod
    def parse(cls, value: "str | TokenCategory | None") -> "TokenCategory":
        """Lenient lookup; unknown categories map to OTHER."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.OTHER


class TypographyType(Enum):
    """Sub-kinds of typography tokens."""

    FONT_FAMILY = "fontFamily"
    FONT_SIZE = "fontSize"
    FONT_WEIGHT = "fontWeight"
    LINE_HEIGHT = "lineHeight"
    LETTER_SPACING = "letterSpacing"
    COMPOSITE = "typography-composite"


SIMPLE_TYPOGRAPHY_TYPES = frozenset(
    t.value for t in TypographyType if t is not TypographyType.COMPOSITE
)

# Allowed token types per category; the first entry is the default
TOKEN_TYPES: dict[TokenCategory, tuple[str, ...]] = {
    TokenCategory.COLOR: ("color", "gradient"),
    TokenCategory.TYPOGRAPHY: (
        "fontFamily",
        "fontSize",
        "fontWeight",
        "lineHeight",
        "letterSpacing",
    ),
    TokenCategory.SPACING: ("spacing", "margin", "padding", "gap"),
    TokenCategory.SHADOW: ("shadow", "boxShadow", "textShadow"),
    TokenCategory.RADIUS: ("borderRadius",),
    TokenCategory.GRID: ("columns", "gutter", "container"),
    TokenCategory.OTHER: ("custom",),
}

DEFAULT_VALUES: dict[TokenCategory, Any] = {
    TokenCategory.COLOR: "#000000",
    TokenCategory.TYPOGRAPHY: {"fontFamily": "sans-serif", "fontSize": "16px"},
    TokenCategory.SPACING: "16px",
    TokenCategory.SHADOW: "0 1px 3px rgba(0, 0, 0, 0.1)",
    TokenCategory.RADIUS: "4px",
    TokenCategory.GRID: {"columns": 12, "gutter": "16px"},
    TokenCategory.OTHER: "",
}


@dataclass
class Token:
    """A design token as persisted by the data layer.

    ``value`` is JSON-compatible (string, number, object or array); the
    category codec turns it into a canonical value and back.
    """

    name: str
    category: TokenCategory
    type: str
    value: Any = None
    css_variable: str | None = None
    path: str | None = None
    description: str = ""
    sort_order: int | None = None
    id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_composite_typography(self) -> bool:
        """Check for a composite typography token."""
        return (
            self.category is TokenCategory.TYPOGRAPHY
            and self.type == TypographyType.COMPOSITE.value
        )

    @property
    def is_generated(self) -> bool:
        """Composite tokens derived from the typography scale are read-only."""
        return self.is_composite_typography and (self.path or "").startswith(
            GENERATED_ROLE_PREFIX
        )

    def with_type(self, new_type: str) -> "Token":
        """Return a copy with a new type.

        Simple typography tokens may be promoted to composite; a composite
        token is never downgraded.

        Raises:
            InvalidTypeTransitionError: If a composite token would lose its type.
        """
        if self.is_composite_typography and new_type != self.type:
            raise InvalidTypeTransitionError(self.type, new_type)
        return replace(self, type=new_type)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted record shape."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "type": self.type,
            "value": self.value,
            "css_variable": self.css_variable,
            "path": self.path,
            "description": self.description,
            "sort_order": self.sort_order,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Token":
        """Create from a persisted record (``cssVariable`` also accepted)."""
        category = TokenCategory.parse(data.get("category"))
        return cls(
            name=data.get("name", ""),
            category=category,
            type=data.get("type") or TOKEN_TYPES[category][0],
            value=data.get("value"),
            css_variable=data.get("css_variable") or data.get("cssVariable"),
            path=data.get("path"),
            description=data.get("description") or "",
            sort_order=data.get("sort_order"),
            id=data.get("id"),
            metadata=data.get("metadata") or {},
        )


def slugify(text: str) -> str:
    """Lowercase slug with runs of other characters collapsed to ``-``."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def generate_css_variable(name: str, category: TokenCategory | str) -> str:
    """CSS variable for a new token: ``--{category}-{slug(name)}``."""
    if not name:
        return ""
    category = TokenCategory.parse(category)
    return f"--{category.value}-{slugify(name)}"


def css_variable_from_path(path: str) -> str:
    """CSS variable for an imported token path ("Color/Primary/500" -> "--color-primary-500")."""
    slug = path.replace("/", "-")
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^a-zA-Z0-9-]", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    return "--" + slug.lower()


def format_name(path: str) -> str:
    """Human-readable name from the last path segment ("body-md" -> "Body Md")."""
    last = path.split("/")[-1]
    spaced = re.sub(r"[-_]", " ", last)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def create_token(
    name: str,
    category: TokenCategory | str,
    token_type: str | None = None,
    path: str | None = None,
) -> Token:
    """Create a token with the category default value and type."""
    category = TokenCategory.parse(category)
    return Token(
        name=name,
        category=category,
        type=token_type or TOKEN_TYPES[category][0],
        value=_copy_default(DEFAULT_VALUES[category]),
        css_variable=generate_css_variable(name, category),
        path=path,
    )


def _copy_default(value: Any) -> Any:
    return dict(value) if isinstance(value, dict) else value


_CATEGORY_PATTERNS: tuple[tuple[TokenCategory, re.Pattern[str]], ...] = (
    (
        TokenCategory.COLOR,
        re.compile(
            r"^colors?/|^colors?-|/colors?/|color|background|foreground|fill|stroke|brand|text[/\-]"
        ),
    ),
    (
        TokenCategory.TYPOGRAPHY,
        re.compile(
            r"^typography[/\-]|/typography[/\-]|font|text-style|heading|body|display|line-height|letter-spacing"
        ),
    ),
    (
        TokenCategory.SPACING,
        re.compile(r"^space|^spacing|/space[/\-]|/spacing[/\-]|gap|margin|padding|inset"),
    ),
    (TokenCategory.SHADOW, re.compile(r"shadow|elevation|drop-shadow")),
    (TokenCategory.RADIUS, re.compile(r"radius|corner|rounded|border-radius")),
    (TokenCategory.GRID, re.compile(r"grid|breakpoint|column|container|layout")),
)


def detect_category(path: str, value_type: str | None = None) -> TokenCategory:
    """Infer a token category from its path, with the value type as a hint."""
    if value_type == "color":
        return TokenCategory.COLOR
    if value_type == "shadow":
        return TokenCategory.SHADOW

    lowered = path.lower()
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(lowered):
            return category
    return TokenCategory.OTHER


_HEX_VALUE = re.compile(r"^#[0-9a-fA-F]{3,8}$")
_DIMENSION_VALUE = re.compile(r"^-?[\d.]+(?:px|rem|em|%|vh|vw|vmin|vmax|ch|ex)$")
_DURATION_VALUE = re.compile(r"^[\d.]+m?s$")
_NUMBER_VALUE = re.compile(r"^-?[\d.]+$")


def detect_value_type(value: Any) -> str:
    """Infer a value type (color, dimension, duration, number, shadow, ...) from a raw value."""
    if isinstance(value, str):
        if _HEX_VALUE.match(value) or re.match(r"^(rgba?|hsla?)\s*\(", value):
            return "color"
        if _DIMENSION_VALUE.match(value):
            return "dimension"
        if _DURATION_VALUE.match(value):
            return "duration"
        if _NUMBER_VALUE.match(value):
            return "number"
        return "string"

    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"

    if isinstance(value, dict):
        if ("r" in value and "g" in value) or "hex" in value or "components" in value:
            return "color"
        if "value" in value and "unit" in value:
            return "dimension"
        if "shadows" in value or "shadow" in value:
            return "shadow"
        if "blur" in value and "color" in value:
            return "shadow"

    return "string"
