"""Base class for token file adapters.

Token adapters read design tokens from token files (JSON token exports,
CSS custom-property stylesheets) and return them as :class:`Token`
records ready for the codecs. Problems with individual entries are
collected as warnings on the :class:`ImportResult`; only an unreadable
file raises.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..codecs import color as color_codec
from ..codecs import shadow as shadow_codec
from ..codecs.base import coerce_number, is_finite_number, normalize_number
from ..engine_logging import LogCategory, get_category_logger
from ..errors import TokenFileNotFoundError, TokenFileParseError, UnsupportedTokenFileError
from ..tokens import Token, TokenCategory

logger = get_category_logger(LogCategory.IMPORT)

_DIMENSION_STRING = re.compile(r"^(-?[\d.]+)(\w+|%)?$")


@dataclass
class ImportResult:
    """Tokens read from one or more files, with diagnostics."""

    tokens: list[Token] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_files: list[str] = field(default_factory=list)

    @property
    def total_skipped(self) -> int:
        """Number of entries skipped with a warning."""
        return sum(1 for warning in self.warnings if warning.startswith("Skipped"))

    def category_counts(self) -> dict[str, int]:
        """Token count per category value."""
        counts: dict[str, int] = {}
        for token in self.tokens:
            counts[token.category.value] = counts.get(token.category.value, 0) + 1
        return counts

    def finalize(self, format_name: str) -> "ImportResult":
        """Fill in the summary metadata."""
        self.metadata.update(
            {
                "format": format_name,
                "totalParsed": len(self.tokens),
                "totalSkipped": self.total_skipped,
                "categories": self.category_counts(),
            }
        )
        return self

    def merge(self, other: "ImportResult") -> "ImportResult":
        """Combine two results; tokens from ``other`` come after ours."""
        merged = ImportResult(
            tokens=self.tokens + other.tokens,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
            source_files=self.source_files + other.source_files,
        )
        formats = [r.metadata.get("format") for r in (self, other) if r.metadata.get("format")]
        return merged.finalize(formats[0] if len(set(formats)) == 1 else "mixed")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "tokens": [token.to_dict() for token in self.tokens],
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "metadata": dict(self.metadata),
            "source_files": list(self.source_files),
        }


def to_stored_color(value: Any) -> dict[str, Any]:
    """Stored color object for an imported color value.

    Raises:
        ValueError: If the value is not a readable color.
    """
    if isinstance(value, str):
        text = value.strip()
        readable = color_codec.is_valid_hex(text) or (
            text.lower().startswith(("rgb", "hsl"))
            and color_codec.parse_color_string(text) is not None
        )
        if not readable:
            raise ValueError(f"unsupported color value {value!r}")
    elif not isinstance(value, dict):
        raise ValueError(f"unsupported color value {value!r}")

    parsed = color_codec.parse_color(value)
    if not parsed.is_persistable:
        raise ValueError(f"invalid hex color {parsed.hex!r}")
    return color_codec.to_stored_value(parsed)


def to_stored_dimension(value: Any) -> dict[str, Any]:
    """Stored ``{value, unit}`` for an imported dimension.

    Raises:
        ValueError: If the value has no numeric part.
    """
    if is_finite_number(value):
        return {"value": normalize_number(value), "unit": "px"}
    if isinstance(value, dict) and value.get("value") is not None:
        number = coerce_number(value["value"])
        if number is None:
            raise ValueError(f"unsupported dimension value {value!r}")
        return {"value": normalize_number(number), "unit": value.get("unit") or "px"}
    if isinstance(value, str):
        match = _DIMENSION_STRING.match(value.strip())
        number = coerce_number(match.group(1)) if match else None
        if number is not None:
            return {"value": normalize_number(number), "unit": match.group(2) or "px"}
    raise ValueError(f"unsupported dimension value {value!r}")


def to_stored_shadow(value: Any) -> dict[str, Any]:
    """Stored ``{shadows: [...]}`` for an imported shadow."""
    return shadow_codec.to_stored_value(shadow_codec.parse_shadow_value(value))


def normalize_value(value_type: str, value: Any, category: TokenCategory) -> Any:
    """Normalize an imported value to the shape its codec stores.

    Raises:
        ValueError: If a color or dimension value cannot be read.
    """
    if value_type == "color":
        return to_stored_color(value)
    if value_type == "dimension":
        return to_stored_dimension(value)
    if value_type == "shadow" or (category is TokenCategory.SHADOW and value_type == "string"):
        return to_stored_shadow(value)
    if value_type == "number" and isinstance(value, str):
        number = coerce_number(value)
        return value if number is None else number
    return value


class TokenAdapter(ABC):
    """Abstract base class for token file adapters.

    Each adapter reads one file format and returns an ImportResult.
    """

    format_name = "unknown"

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """File extensions this adapter can handle."""
        ...

    def can_handle(self, file_path: Path) -> bool:
        """Check if this adapter can handle the given file.

        Args:
            file_path: Path to the token source file.

        Returns:
            True if this adapter can read tokens from the file.
        """
        return file_path.suffix.lower() in self.supported_extensions

    @abstractmethod
    def extract_from_content(self, content: str, source_name: str = "inline") -> ImportResult:
        """Extract tokens from file content.

        Args:
            content: The content to parse.
            source_name: Name to use for source tracking.

        Returns:
            ImportResult with the tokens and diagnostics.
        """
        ...

    def extract(self, file_path: Path) -> ImportResult:
        """Extract tokens from the given file.

        Args:
            file_path: Path to the token source file.

        Returns:
            ImportResult with the tokens and diagnostics.

        Raises:
            TokenFileNotFoundError: If the file doesn't exist.
            TokenFileParseError: If the file cannot be parsed at all.
        """
        if not file_path.exists():
            raise TokenFileNotFoundError(str(file_path))

        try:
            content = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise TokenFileParseError(str(file_path), str(e)) from e
        result = self.extract_from_content(content, str(file_path))
        logger.debug(
            f"Imported {len(result.tokens)} tokens from {file_path.name}",
            extra={"file_path": str(file_path), "token_count": len(result.tokens)},
        )
        return result


class TokenAdapterRegistry:
    """Registry for token adapters.

    Manages multiple adapters and selects the appropriate one
    based on file type.
    """

    def __init__(self) -> None:
        self._adapters: list[TokenAdapter] = []

    def register(self, adapter: TokenAdapter) -> None:
        """Register a token adapter."""
        self._adapters.append(adapter)

    @property
    def supported_extensions(self) -> list[str]:
        """Extensions handled by any registered adapter, in registration order."""
        extensions: list[str] = []
        for adapter in self._adapters:
            for extension in adapter.supported_extensions:
                if extension not in extensions:
                    extensions.append(extension)
        return extensions

    def get_adapter(self, file_path: Path) -> TokenAdapter | None:
        """Get an adapter that can handle the given file, or None."""
        for adapter in self._adapters:
            if adapter.can_handle(file_path):
                return adapter
        return None

    def extract(self, file_path: Path) -> ImportResult:
        """Extract tokens from a file using the appropriate adapter.

        Raises:
            UnsupportedTokenFileError: If no adapter can handle the file.
        """
        adapter = self.get_adapter(file_path)
        if adapter is None:
            raise UnsupportedTokenFileError(str(file_path), self.supported_extensions)
        return adapter.extract(file_path)

    def extract_all(self, file_paths: list[Path]) -> ImportResult:
        """Extract and merge tokens from multiple files.

        Files no adapter handles are reported as errors on the result.
        """
        result = ImportResult()
        for file_path in file_paths:
            adapter = self.get_adapter(file_path)
            if adapter is None:
                result.errors.append(f"No adapter for {file_path}")
                continue
            result = result.merge(adapter.extract(file_path))
        return result


# Global registry instance
_default_registry: TokenAdapterRegistry | None = None


def get_default_registry() -> TokenAdapterRegistry:
    """Get the default registry with the JSON and CSS adapters registered."""
    global _default_registry
    if _default_registry is None:
        from .css_vars import CSSVariablesAdapter
        from .json_tokens import JSONTokenAdapter

        _default_registry = TokenAdapterRegistry()
        _default_registry.register(CSSVariablesAdapter())
        _default_registry.register(JSONTokenAdapter())
    return _default_registry
