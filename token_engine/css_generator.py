"""Stylesheet export built on the CSS variable projector."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .engine_logging import LogCategory, get_category_logger
from .projection import build_variable_map, project_token
from .tokens import Token, TokenCategory, slugify

logger = get_category_logger(LogCategory.EXPORT)

CATEGORY_ORDER: tuple[TokenCategory, ...] = tuple(TokenCategory)

_VARIABLE_DECLARATION = re.compile(r"(--[\w-]+)\s*:\s*([^;]+);")


@dataclass
class Theme:
    """A named set of tokens exported under its own selector."""

    name: str
    tokens: list[Token] = field(default_factory=list)
    is_default: bool = False


def _timestamp(generated_at: datetime | None) -> str:
    moment = generated_at or datetime.now(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def group_by_category(tokens: Iterable[Token]) -> dict[TokenCategory, list[Token]]:
    """Group tokens by category, keeping input order within each group."""
    grouped: dict[TokenCategory, list[Token]] = {}
    for token in tokens:
        grouped.setdefault(token.category, []).append(token)
    return grouped


def _sort_key(token: Token) -> tuple:
    # Tokens without a sort order go after ordered ones, then by name
    if token.sort_order is None:
        return (1, 0, (token.name or "").lower())
    return (0, token.sort_order, (token.name or "").lower())


def minify_css(css: str) -> str:
    """Strip comments and whitespace from a generated stylesheet."""
    css = re.sub(r"/\*[\s\S]*?\*/", "", css)
    css = css.replace("\n", "")
    css = re.sub(r"\s{2,}", " ", css)
    css = re.sub(r":\s", ":", css)
    css = re.sub(r";\s*}", "}", css)
    css = re.sub(r"\s*{\s*", "{", css)
    css = re.sub(r"}\s*", "}", css)
    return css.strip()


def generate_css(
    tokens: Sequence[Token],
    selector: str = ":root",
    include_comments: bool = True,
    minify: bool = False,
    include_header: bool = True,
    generated_at: datetime | None = None,
) -> str:
    """Generate a stylesheet declaring every token as a custom property.

    Categories appear in the order color, typography, spacing, shadow,
    radius, grid, other. Within a category tokens are sorted by
    ``sort_order`` and then by name. Composite typography tokens emit their
    five sub-variables.

    Args:
        tokens: Tokens to export.
        selector: Rule selector, ``:root`` by default.
        include_comments: Emit a ``/* Color Tokens */`` style comment per category.
        minify: Collapse the output onto one line without comments.
        include_header: Emit the generation header comment.
        generated_at: Timestamp for the header; defaults to now (UTC).

    Returns:
        The stylesheet text.
    """
    if not tokens:
        return f"{selector} {{\n  /* No tokens defined */\n}}\n"

    grouped = group_by_category(tokens)
    present = [category for category in CATEGORY_ORDER if grouped.get(category)]

    lines: list[str] = []
    if include_header and not minify:
        lines.extend(
            [
                "/**",
                " * Design System CSS Variables",
                f" * Generated: {_timestamp(generated_at)}",
                f" * Tokens: {len(tokens)}",
                " */",
                "",
            ]
        )

    lines.append(f"{selector} {{")
    for index, category in enumerate(present):
        if include_comments and not minify:
            lines.append(f"  /* {category.value.capitalize()} Tokens */")
        for token in sorted(grouped[category], key=_sort_key):
            if not token.css_variable:
                logger.debug(f"Skipping token without CSS variable: {token.name}")
                continue
            for name, value in project_token(token).items():
                lines.append(f"  {name}: {value};")
        if index < len(present) - 1:
            lines.append("")
    lines.append("}")

    css = "\n".join(lines) + "\n"
    if minify:
        css = minify_css(css)

    logger.debug(f"Generated stylesheet for {len(tokens)} tokens under {selector}")
    return css


def theme_selector(theme_name: str) -> str:
    """Class selector for a theme, ``.theme-{slug}``."""
    return f".theme-{slugify(theme_name)}"


def generate_scoped_css(tokens: Sequence[Token], theme_name: str, **options) -> str:
    """Generate a stylesheet scoped to a theme class."""
    options["selector"] = theme_selector(theme_name)
    return generate_css(tokens, **options)


def generate_multi_theme_css(
    themes: Sequence[Theme],
    include_default: bool = True,
    default_theme_name: str | None = None,
    **options,
) -> str:
    """Generate one stylesheet holding every theme.

    Each theme gets a ``.theme-{slug}`` block. The first default theme
    (``is_default`` or named ``default_theme_name``) is also written to
    ``:root``.
    """
    options.pop("selector", None)
    include_header = options.pop("include_header", True)

    def is_default(theme: Theme) -> bool:
        return theme.is_default or theme.name == default_theme_name

    default_index = next((i for i, t in enumerate(themes) if is_default(t)), None)

    parts: list[str] = []
    for index, theme in enumerate(themes):
        if include_default and index == default_index:
            parts.append(
                generate_css(
                    theme.tokens,
                    selector=":root",
                    include_header=include_header and index == 0,
                    **options,
                )
            )
            parts.append("\n")
        parts.append(generate_scoped_css(theme.tokens, theme.name, include_header=False, **options))
        if index < len(themes) - 1:
            parts.append("\n")
    return "".join(parts)


def generate_style_object(tokens: Iterable[Token]) -> dict[str, str]:
    """Variable map suitable for an inline ``style`` attribute."""
    return build_variable_map(token for token in tokens if token.css_variable)


def generate_var_references(tokens: Iterable[Token]) -> dict[str, str]:
    """Map token names to ``var(--x)`` references."""
    return {
        token.name: f"var({token.css_variable})"
        for token in tokens
        if token.css_variable and token.name
    }


def infer_category_from_name(name: str) -> TokenCategory:
    """Guess a category from a CSS variable name."""
    lowered = name.lower()
    keywords: tuple[tuple[TokenCategory, tuple[str, ...]], ...] = (
        (TokenCategory.COLOR, ("color", "background", "border-color")),
        (TokenCategory.TYPOGRAPHY, ("font", "text", "line-height", "letter-spacing")),
        (TokenCategory.SPACING, ("spacing", "padding", "margin", "gap")),
        (TokenCategory.SHADOW, ("shadow",)),
        (TokenCategory.RADIUS, ("radius", "rounded")),
        (TokenCategory.GRID, ("grid", "column")),
    )
    for category, words in keywords:
        if any(word in lowered for word in words):
            return category
    return TokenCategory.OTHER


def parse_css_variables(css: str) -> list[dict[str, str]]:
    """Read ``--name: value;`` declarations back into token-like records.

    Returns:
        Dicts with ``css_variable``, ``name`` (dashes turned into ``/``),
        ``value`` and ``category`` keys, in source order.
    """
    records = []
    for match in _VARIABLE_DECLARATION.finditer(css):
        name, value = match.group(1), match.group(2)
        records.append(
            {
                "css_variable": name,
                "name": name[2:].replace("-", "/"),
                "value": value.strip(),
                "category": infer_category_from_name(name).value,
            }
        )
    return records

