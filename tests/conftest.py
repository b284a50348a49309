"""
Shared fixtures for the token engine test suite.

Provides test fixtures for:
- Sample token records of every category
- Token files in each supported layout
- Isolation of configuration and logging state
"""

import json
import logging
from pathlib import Path

import pytest

from token_engine.engine_logging import ROOT_LOGGER_NAME
from token_engine.tokens import Token, TokenCategory

# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep config lookup and logging state from leaking between tests."""
    monkeypatch.delenv("TOKEN_ENGINE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Sample tokens
# ---------------------------------------------------------------------------


@pytest.fixture()
def color_token() -> Token:
    """Primary brand color stored as a full color object."""
    return Token(
        name="Primary",
        category=TokenCategory.COLOR,
        type="color",
        value={
            "hex": "#3b82f6",
            "rgb": {"r": 59, "g": 130, "b": 246},
            "hsl": {"h": 217, "s": 91, "l": 60},
            "opacity": 1,
        },
        css_variable="--color-primary",
        sort_order=1,
    )


@pytest.fixture()
def spacing_token() -> Token:
    """Medium spacing step."""
    return Token(
        name="MD",
        category=TokenCategory.SPACING,
        type="spacing",
        value={"value": 16, "unit": "px"},
        css_variable="--spacing-md",
    )


@pytest.fixture()
def composite_token() -> Token:
    """Composite body text style."""
    return Token(
        name="Body",
        category=TokenCategory.TYPOGRAPHY,
        type="typography-composite",
        value={
            "fontFamily": "Inter, sans-serif",
            "fontSize": {"value": 1, "unit": "rem"},
            "fontWeight": 400,
            "lineHeight": 1.5,
            "letterSpacing": "normal",
        },
        css_variable="--typography-body",
    )


@pytest.fixture()
def shadow_token() -> Token:
    """Two-layer elevation shadow."""
    return Token(
        name="Elevated",
        category=TokenCategory.SHADOW,
        type="shadow",
        value={
            "shadows": [
                {"x": 0, "y": 4, "blur": 6, "spread": -1, "color": "rgba(0,0,0,0.1)"},
                {"x": 0, "y": 2, "blur": 4, "spread": -2, "color": "rgba(0,0,0,0.06)"},
            ]
        },
        css_variable="--shadow-elevated",
    )


@pytest.fixture()
def sample_tokens(color_token, spacing_token, composite_token, shadow_token) -> list[Token]:
    """One token per common category, deliberately out of stylesheet order."""
    return [spacing_token, shadow_token, composite_token, color_token]


# ---------------------------------------------------------------------------
# Token files
# ---------------------------------------------------------------------------


@pytest.fixture()
def dtcg_tokens() -> dict:
    """DTCG token document as exported from Figma."""
    return {
        "Color": {
            "Primary": {
                "$type": "color",
                "$value": {
                    "colorSpace": "srgb",
                    "components": [1.0, 0.5, 0.0],
                    "alpha": 1,
                },
                "$extensions": {
                    "com.figma.variableId": "VariableID:1:2",
                    "com.figma.modeName": "Light",
                },
            }
        },
        "Spacing": {
            "Small": {"$type": "dimension", "$value": "8px"},
        },
        "Shadow": {
            "Card": {
                "$type": "shadow",
                "$value": {
                    "offsetX": 0,
                    "offsetY": 2,
                    "blurRadius": 4,
                    "spreadRadius": 0,
                    "color": "rgba(0,0,0,0.2)",
                },
            }
        },
    }


@pytest.fixture()
def flat_tokens() -> dict:
    """Flat token document with nested groups."""
    return {
        "color": {
            "background": {"value": "#ffffff", "description": "Page background"},
            "text": {"value": "#111827", "cssVariable": "--text-default"},
        },
        "spacing": {
            "sm": {"value": "8px"},
            "lg": "24px",
        },
    }


@pytest.fixture()
def style_dictionary_tokens() -> dict:
    """Collections/modes/variables document."""
    return {
        "collections": [
            {
                "name": "Primitives",
                "modes": [
                    {
                        "name": "Default",
                        "variables": [
                            {
                                "id": "VariableID:9:1",
                                "name": "color/brand",
                                "type": "COLOR",
                                "value": {"r": 0.0, "g": 0.0, "b": 1.0, "a": 1},
                            },
                            {
                                "name": "spacing/base",
                                "type": "FLOAT",
                                "value": 4,
                            },
                        ],
                    }
                ],
            }
        ]
    }


@pytest.fixture()
def write_json(tmp_path):
    """Write a JSON document into the temp directory and return its path."""

    def _write(name: str, data) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def css_tokens_file(tmp_path) -> Path:
    """Stylesheet with a handful of custom properties."""
    path = tmp_path / "tokens.css"
    path.write_text(
        ":root {\n"
        "  --color-primary: #3b82f6;\n"
        "  --spacing-md: 16px;\n"
        "  --radius-lg: 12px;\n"
        "  --shadow-card: 0px 4px 6px 0px rgba(0,0,0,0.1);\n"
        "}\n",
        encoding="utf-8",
    )
    return path
