"""JSON design token adapter.

Reads JSON token files in three layouts:

- ``figma-variables``: DTCG tokens (``$type``/``$value``/``$extensions``)
  nested by group, as exported by Figma.
- ``style-dictionary``: ``collections[].modes[].variables[]``.
- ``flat``: nested groups whose leaves are ``{"value": ...}`` objects or
  bare primitives.
"""

import json
from typing import Any

from ..codecs.color import rgb_to_hex
from ..codecs.base import round_half_up
from ..engine_logging import LogCategory, get_category_logger
from ..errors import TokenFileParseError
from ..tokens import Token, css_variable_from_path, detect_category, detect_value_type, format_name
from .base import ImportResult, TokenAdapter, normalize_value

logger = get_category_logger(LogCategory.IMPORT)

MAX_DEPTH = 20
# Format detection only needs to find one token
_DETECT_DEPTH = 10

FIGMA_VARIABLES = "figma-variables"
STYLE_DICTIONARY = "style-dictionary"
FLAT = "flat"
UNKNOWN = "unknown"

DTCG_TYPES = frozenset(
    {
        "color",
        "dimension",
        "fontFamily",
        "fontWeight",
        "duration",
        "cubicBezier",
        "number",
        "string",
        "boolean",
        "shadow",
        "gradient",
        "typography",
        "border",
        "transition",
    }
)

FIGMA_TYPES = {
    "COLOR": "color",
    "FLOAT": "number",
    "STRING": "string",
    "BOOLEAN": "boolean",
}


def _has_dtcg_tokens(obj: dict[str, Any], depth: int = 0) -> bool:
    if depth > _DETECT_DEPTH:
        return False
    for value in obj.values():
        if isinstance(value, dict):
            if "$type" in value and "$value" in value:
                return True
            if _has_dtcg_tokens(value, depth + 1):
                return True
    return False


def _has_flat_tokens(obj: dict[str, Any], depth: int = 0) -> bool:
    if depth > _DETECT_DEPTH:
        return False
    for value in obj.values():
        if isinstance(value, dict):
            if "value" in value and "$value" not in value:
                return True
            if _has_flat_tokens(value, depth + 1):
                return True
    return False


def detect_format(data: Any) -> str:
    """Detect the layout of a parsed token file.

    Returns:
        ``figma-variables``, ``style-dictionary``, ``flat`` or ``unknown``.
    """
    if not isinstance(data, dict):
        return UNKNOWN

    collections = data.get("collections")
    if isinstance(collections, list) and collections:
        first = collections[0]
        if isinstance(first, dict) and isinstance(first.get("modes"), list):
            return STYLE_DICTIONARY

    if _has_dtcg_tokens(data):
        return FIGMA_VARIABLES
    if _has_flat_tokens(data):
        return FLAT
    return UNKNOWN


def _is_token_value(obj: dict[str, Any]) -> bool:
    return (
        "value" in obj
        or "$value" in obj
        or ("r" in obj and "g" in obj)
        or "hex" in obj
        or "shadows" in obj
    )


def _figma_channels(value: dict[str, Any]) -> dict[str, Any]:
    """Stored color for Figma 0-1 channels."""
    rgb = {k: round_half_up(float(value[k]) * 255) for k in ("r", "g", "b")}
    return {
        "hex": rgb_to_hex(rgb["r"], rgb["g"], rgb["b"]),
        "rgb": rgb,
        "opacity": value.get("a", value.get("alpha", 1)),
    }


def convert_dtcg_value(dtcg_type: str, value: Any) -> Any:
    """Convert a DTCG ``$value`` for the given ``$type``."""
    if dtcg_type == "color" and isinstance(value, dict):
        if isinstance(value.get("components"), list) and len(value["components"]) >= 3:
            r, g, b = value["components"][:3]
            converted = _figma_channels({"r": r, "g": g, "b": b, "a": value.get("alpha", 1)})
            if isinstance(value.get("hex"), str):
                converted["hex"] = value["hex"]
            return converted
        if "r" in value and "g" in value and "b" in value:
            if all(float(value[k]) <= 1 for k in ("r", "g", "b")):
                return _figma_channels(value)
            return value

    if dtcg_type == "shadow":
        shadows = value if isinstance(value, list) else [value]
        return [s for s in shadows if isinstance(s, dict)]

    return value


class JSONTokenAdapter(TokenAdapter):
    """Adapter for JSON token files.

    The layout is auto-detected. Token categories come from the value type
    where it is decisive (colors, shadows) and from path keywords otherwise.
    """

    @property
    def supported_extensions(self) -> list[str]:
        """File extensions this adapter can handle."""
        return [".json"]

    def extract_from_content(self, content: str, source_name: str = "inline") -> ImportResult:
        """Extract tokens from JSON content.

        Raises:
            TokenFileParseError: If the content is not valid JSON.
        """
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise TokenFileParseError(source_name, str(e)) from e

        result = self.extract_from_data(data)
        result.source_files.append(source_name)
        return result

    def extract_from_data(self, data: Any) -> ImportResult:
        """Extract tokens from already-parsed JSON data."""
        result = ImportResult()
        format_name = detect_format(data)

        if format_name == FIGMA_VARIABLES:
            self._parse_figma_variables(data, "", result)
        elif format_name == STYLE_DICTIONARY:
            self._parse_style_dictionary(data, result)
        elif format_name == FLAT:
            self._parse_flat(data, "", result)
        else:
            result.errors.append(
                "Unable to detect token file format. Expected figma-variables, "
                "style-dictionary, or flat JSON."
            )

        return result.finalize(format_name)

    def _build_token(
        self,
        path: str,
        value_type: str,
        raw_value: Any,
        css_variable: str | None = None,
        description: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> Token:
        category = detect_category(path, value_type)
        return Token(
            name=format_name(path),
            path=path,
            category=category,
            type=value_type,
            value=normalize_value(value_type, raw_value, category),
            css_variable=css_variable or css_variable_from_path(path),
            description=description or "",
            metadata=metadata or {},
        )

    def _add(self, result: ImportResult, path: str, build) -> None:
        try:
            result.tokens.append(build())
        except (ValueError, TypeError, KeyError) as e:
            logger.debug(f"Skipped {path}: {e}", extra={"token_path": path})
            result.warnings.append(f"Skipped {path}: {e}")

    def _parse_figma_variables(
        self, obj: dict[str, Any], prefix: str, result: ImportResult, depth: int = 0
    ) -> None:
        if depth > MAX_DEPTH:
            result.warnings.append(f"Max depth exceeded at path: {prefix}")
            return

        for key, value in obj.items():
            if key.startswith("$") or not isinstance(value, dict):
                continue
            path = f"{prefix}/{key}" if prefix else key

            if "$type" in value and "$value" in value:
                self._add(result, path, lambda p=path, v=value: self._dtcg_token(p, v))
            else:
                self._parse_figma_variables(value, path, result, depth + 1)

    def _dtcg_token(self, path: str, data: dict[str, Any]) -> Token:
        dtcg_type = data["$type"]
        value_type = dtcg_type if dtcg_type in DTCG_TYPES else "string"
        extensions = data.get("$extensions") or {}
        return self._build_token(
            path,
            value_type,
            convert_dtcg_value(dtcg_type, data["$value"]),
            description=data.get("$description", ""),
            metadata={
                "figma_id": extensions.get("com.figma.variableId"),
                "figma_mode": extensions.get("com.figma.modeName"),
                "original_type": dtcg_type,
                "extensions": extensions,
            },
        )

    def _parse_style_dictionary(self, data: dict[str, Any], result: ImportResult) -> None:
        for collection in data["collections"]:
            collection_name = collection.get("name") or "Default"
            modes = collection.get("modes")
            if not isinstance(modes, list):
                result.warnings.append(f"Collection {collection_name} has no modes, skipping")
                continue

            for mode in modes:
                mode_name = mode.get("name") or "Default"
                variables = mode.get("variables")
                if not isinstance(variables, list):
                    result.warnings.append(
                        f"Mode {mode_name} in {collection_name} has no variables"
                    )
                    continue
                for variable in variables:
                    name = variable.get("name") or ""
                    self._add(
                        result,
                        name,
                        lambda v=variable, c=collection_name, m=mode_name: self._figma_variable(
                            c, m, v
                        ),
                    )

    def _figma_variable(self, collection: str, mode: str, variable: dict[str, Any]) -> Token:
        path = variable.get("name")
        if not path:
            raise ValueError("variable has no name")
        figma_type = variable.get("type") or "STRING"
        value = variable.get("value")
        if figma_type == "COLOR" and isinstance(value, dict) and "r" in value:
            value = _figma_channels(value)
        return self._build_token(
            path,
            FIGMA_TYPES.get(figma_type, "string"),
            value,
            description=variable.get("description", ""),
            metadata={
                "figma_id": variable.get("id"),
                "collection": collection,
                "mode": mode,
                "original_type": figma_type,
            },
        )

    def _parse_flat(
        self, obj: dict[str, Any], prefix: str, result: ImportResult, depth: int = 0
    ) -> None:
        if depth > MAX_DEPTH:
            result.warnings.append(f"Max depth exceeded at path: {prefix}")
            return

        for key, value in obj.items():
            path = f"{prefix}/{key}" if prefix else key

            if not isinstance(value, (dict, list)):
                if value is None:
                    continue
                self._add(
                    result,
                    path,
                    lambda p=path, v=value: self._build_token(p, detect_value_type(v), v),
                )
            elif isinstance(value, dict) and "value" in value:
                self._add(result, path, lambda p=path, v=value: self._flat_token(p, v))
            elif isinstance(value, dict) and not _is_token_value(value):
                self._parse_flat(value, path, result, depth + 1)

    def _flat_token(self, path: str, data: dict[str, Any]) -> Token:
        raw_value = data["value"]
        metadata = {
            k: v for k, v in data.items() if k not in ("value", "cssVariable", "description")
        }
        return self._build_token(
            path,
            detect_value_type(raw_value),
            raw_value,
            css_variable=data.get("cssVariable"),
            description=data.get("description", ""),
            metadata=metadata,
        )
