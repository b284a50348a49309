"""Token adapters for reading design tokens from token files.

This package provides adapters for different token file formats:
- JSON token files (json_tokens.py)
- CSS Variables (css_vars.py)
"""

from .base import ImportResult, TokenAdapter, TokenAdapterRegistry, get_default_registry
from .css_vars import CSSVariablesAdapter
from .json_tokens import JSONTokenAdapter, detect_format

__all__ = [
    "ImportResult",
    "TokenAdapter",
    "TokenAdapterRegistry",
    "get_default_registry",
    "CSSVariablesAdapter",
    "JSONTokenAdapter",
    "detect_format",
]
