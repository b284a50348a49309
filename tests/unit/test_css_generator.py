"""Unit tests for stylesheet generation."""

from datetime import datetime, timezone

from token_engine.css_generator import (
    Theme,
    generate_css,
    generate_multi_theme_css,
    generate_scoped_css,
    generate_style_object,
    generate_var_references,
    group_by_category,
    infer_category_from_name,
    minify_css,
    parse_css_variables,
    theme_selector,
)
from token_engine.tokens import Token, TokenCategory

FIXED_TIME = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


def spacing(name: str, value: int, sort_order=None) -> Token:
    return Token(
        name=name,
        category=TokenCategory.SPACING,
        type="spacing",
        value={"value": value, "unit": "px"},
        css_variable=f"--spacing-{name.lower()}",
        sort_order=sort_order,
    )


class TestGenerateCss:
    """Tests for generate_css."""

    def test_empty(self) -> None:
        """No tokens gives a placeholder block."""
        assert generate_css([]) == ":root {\n  /* No tokens defined */\n}\n"

    def test_header(self, spacing_token) -> None:
        """The header carries a millisecond UTC timestamp and token count."""
        css = generate_css([spacing_token], generated_at=FIXED_TIME)
        assert css.startswith("/**\n * Design System CSS Variables\n")
        assert " * Generated: 2024-05-01T12:30:00.000Z\n" in css
        assert " * Tokens: 1\n" in css

    def test_full_output(self, sample_tokens) -> None:
        """Categories are emitted in order with comments between them."""
        css = generate_css(sample_tokens, include_header=False)
        assert css == (
            ":root {\n"
            "  /* Color Tokens */\n"
            "  --color-primary: #3b82f6;\n"
            "\n"
            "  /* Typography Tokens */\n"
            "  --typography-body-family: Inter, sans-serif;\n"
            "  --typography-body-size: 1rem;\n"
            "  --typography-body-weight: 400;\n"
            "  --typography-body-line-height: 1.5;\n"
            "  --typography-body-letter-spacing: normal;\n"
            "\n"
            "  /* Spacing Tokens */\n"
            "  --spacing-md: 16px;\n"
            "\n"
            "  /* Shadow Tokens */\n"
            "  --shadow-elevated: 0px 4px 6px -1px rgba(0,0,0,0.1), "
            "0px 2px 4px -2px rgba(0,0,0,0.06);\n"
            "}\n"
        )

    def test_sort_order_then_name(self) -> None:
        """Ordered tokens come first, then the rest by name."""
        tokens = [spacing("Zeta", 1), spacing("Alpha", 2), spacing("Last", 3, 2), spacing("First", 4, 1)]
        css = generate_css(tokens, include_header=False, include_comments=False)
        names = [line.split(":")[0].strip() for line in css.splitlines() if "--" in line]
        assert names == ["--spacing-first", "--spacing-last", "--spacing-alpha", "--spacing-zeta"]

    def test_tokens_without_variable_are_skipped(self, spacing_token) -> None:
        """Tokens lacking a CSS variable are not declared."""
        orphan = Token(name="Loose", category=TokenCategory.SPACING, type="spacing", value=4)
        css = generate_css([spacing_token, orphan], include_header=False)
        assert "4px" not in css
        assert "--spacing-md: 16px;" in css

    def test_minify(self, color_token, spacing_token) -> None:
        """Minified output drops comments and whitespace."""
        css = generate_css([color_token, spacing_token], minify=True)
        assert css == ":root{--color-primary:#3b82f6; --spacing-md:16px}"

    def test_custom_selector(self, spacing_token) -> None:
        """The selector replaces :root."""
        css = generate_css([spacing_token], selector="[data-theme]", include_header=False)
        assert css.startswith("[data-theme] {\n")

    def test_grid_variables(self) -> None:
        """Grid objects emit their expanded variables."""
        grid = Token(
            name="Main",
            category=TokenCategory.GRID,
            type="columns",
            value={"columns": 12, "margin": 16, "gutter": 24},
            css_variable="--grid-main",
        )
        css = generate_css([grid], include_header=False)
        assert "  --grid-main-columns: 12;\n" in css
        assert "  --grid-main-bp-sm: 640px;\n" in css


class TestThemes:
    """Tests for scoped and multi-theme output."""

    def test_theme_selector(self) -> None:
        """Theme names are slugified."""
        assert theme_selector("Dark Mode") == ".theme-dark-mode"

    def test_scoped_css(self, spacing_token) -> None:
        """Scoped output uses the theme class."""
        css = generate_scoped_css([spacing_token], "Dark", include_header=False)
        assert css.startswith(".theme-dark {\n")

    def test_multi_theme(self, spacing_token, color_token) -> None:
        """The default theme is also written to :root."""
        themes = [
            Theme(name="Light", tokens=[spacing_token], is_default=True),
            Theme(name="Dark", tokens=[color_token]),
        ]
        css = generate_multi_theme_css(themes, include_header=False)
        assert css.index(":root {") < css.index(".theme-light {") < css.index(".theme-dark {")
        assert css.count("--spacing-md: 16px;") == 2

    def test_multi_theme_without_default(self, spacing_token) -> None:
        """Without include_default only theme blocks are written."""
        themes = [Theme(name="Light", tokens=[spacing_token], is_default=True)]
        css = generate_multi_theme_css(themes, include_default=False, include_header=False)
        assert ":root" not in css

    def test_default_theme_by_name(self, spacing_token, color_token) -> None:
        """default_theme_name selects the :root theme."""
        themes = [Theme(name="Light", tokens=[spacing_token]), Theme(name="Dark", tokens=[color_token])]
        css = generate_multi_theme_css(themes, default_theme_name="Dark", include_header=False)
        root_block = css[css.index(":root {") :]
        assert root_block.split("}")[0].count("--color-primary") == 1


class TestHelpers:
    """Tests for the smaller generator helpers."""

    def test_group_by_category(self, sample_tokens) -> None:
        """Grouping keeps input order within a category."""
        grouped = group_by_category(sample_tokens)
        assert set(grouped) == {
            TokenCategory.COLOR,
            TokenCategory.TYPOGRAPHY,
            TokenCategory.SPACING,
            TokenCategory.SHADOW,
        }

    def test_style_object_and_references(self, spacing_token) -> None:
        """Style objects map variables; references wrap them in var()."""
        assert generate_style_object([spacing_token]) == {"--spacing-md": "16px"}
        assert generate_var_references([spacing_token]) == {"MD": "var(--spacing-md)"}

    def test_minify_css(self) -> None:
        """Comments and blank space are removed."""
        assert minify_css("a {\n  /* x */\n  --b: 1px;\n}\n") == "a{--b:1px}"

    def test_infer_category_from_name(self) -> None:
        """Variable names suggest a category."""
        assert infer_category_from_name("--color-primary") is TokenCategory.COLOR
        assert infer_category_from_name("--font-size-lg") is TokenCategory.TYPOGRAPHY
        assert infer_category_from_name("--radius-sm") is TokenCategory.RADIUS
        assert infer_category_from_name("--z-index") is TokenCategory.OTHER

    def test_parse_css_variables(self) -> None:
        """Declarations are read back in source order."""
        records = parse_css_variables(":root{--color-primary: #fff; --spacing-md:16px;}")
        assert records == [
            {
                "css_variable": "--color-primary",
                "name": "color/primary",
                "value": "#fff",
                "category": "color",
            },
            {
                "css_variable": "--spacing-md",
                "name": "spacing/md",
                "value": "16px",
                "category": "spacing",
            },
        ]

    def test_generated_css_reads_back(self, sample_tokens) -> None:
        """Every exported variable is found again by the reader."""
        css = generate_css(sample_tokens)
        exported = {r["css_variable"]: r["value"] for r in parse_css_variables(css)}
        assert exported["--spacing-md"] == "16px"
        assert exported["--typography-body-weight"] == "400"
        assert len(exported) == 8
