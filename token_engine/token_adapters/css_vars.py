"""CSS Variables token adapter.

Reads ``--name: value;`` custom-property declarations from stylesheets,
such as those written by the stylesheet exporter.
"""

from ..css_generator import infer_category_from_name, parse_css_variables
from ..engine_logging import LogCategory, get_category_logger
from ..tokens import Token, TokenCategory, detect_category, detect_value_type, format_name
from .base import ImportResult, TokenAdapter, normalize_value

logger = get_category_logger(LogCategory.IMPORT)

CSS_VARIABLES = "css-variables"


class CSSVariablesAdapter(TokenAdapter):
    """Adapter for CSS custom properties.

    The category comes from the value when it is a color, otherwise from
    naming conventions in the variable name (``--color-*``,
    ``--spacing-*``, ``--radius-*``, ``--shadow-*`` ...). When a variable
    is declared more than once (several theme blocks) the first
    declaration wins.
    """

    format_name = CSS_VARIABLES

    @property
    def supported_extensions(self) -> list[str]:
        """File extensions this adapter can handle."""
        return [".css", ".scss", ".less"]

    def extract_from_content(self, content: str, source_name: str = "inline") -> ImportResult:
        """Extract tokens from CSS content."""
        result = ImportResult(source_files=[source_name])
        seen: set[str] = set()

        for record in parse_css_variables(content):
            variable = record["css_variable"]
            if variable in seen:
                result.warnings.append(f"Skipped {variable}: duplicate declaration")
                continue
            seen.add(variable)

            try:
                result.tokens.append(self._build_token(record))
            except (ValueError, TypeError) as e:
                logger.debug(f"Skipped {variable}: {e}", extra={"token_path": variable})
                result.warnings.append(f"Skipped {variable}: {e}")

        if not result.tokens and not result.warnings:
            result.errors.append("No CSS custom properties found")

        return result.finalize(self.format_name)

    def _build_token(self, record: dict[str, str]) -> Token:
        path = record["name"]
        raw_value = record["value"]
        value_type = detect_value_type(raw_value)

        category = infer_category_from_name(record["css_variable"])
        if value_type == "color":
            category = TokenCategory.COLOR
        elif category is TokenCategory.OTHER:
            category = detect_category(path, value_type)

        return Token(
            name=format_name(path),
            path=path,
            category=category,
            type=value_type,
            value=normalize_value(value_type, raw_value, category),
            css_variable=record["css_variable"],
        )
