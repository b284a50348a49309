"""Structured error types with recovery suggestions.

The codecs never raise: malformed values degrade to category defaults.
These errors belong to the layers around them (token model, token file
import, configuration and the command line).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of engine errors for organization and handling."""

    CONFIGURATION = "configuration"  # Invalid config file or values
    FILE_SYSTEM = "file_system"  # Missing files, permissions
    IMPORT = "import"  # Unreadable or unsupported token files
    MODEL = "model"  # Illegal token record changes


@dataclass
class TokenEngineError(Exception):
    """Base class for structured errors with recovery suggestions.

    Attributes:
        category: Error category for grouping.
        message: Human-readable error message.
        suggestion: Optional actionable recovery suggestion.
        details: Optional additional details dict.
        exit_code: Exit code to use when this error terminates the CLI.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)
    exit_code: int = 1

    def __post_init__(self) -> None:
        """Initialize the exception with the message."""
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        """Format the error for display.

        Args:
            use_color: Whether to include ANSI color codes.

        Returns:
            Formatted error string with suggestion if available.
        """
        red = "\033[91m" if use_color else ""
        cyan = "\033[96m" if use_color else ""
        dim = "\033[2m" if use_color else ""
        reset = "\033[0m" if use_color else ""

        lines = [f"{red}Error:{reset} {self.message}"]

        if self.suggestion:
            lines.append(f"{cyan}Suggestion:{reset} {self.suggestion}")

        if self.details:
            for key, value in self.details.items():
                lines.append(f"{dim}  {key}: {value}{reset}")

        return "\n".join(lines)

    def __str__(self) -> str:
        """Return the formatted error message."""
        return self.format(use_color=False)


class ConfigurationError(TokenEngineError):
    """Error in configuration file or settings."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        suggestion: str | None = None,
    ):
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion=suggestion
            or "Check your configuration file syntax and field values",
            details={"config_file": config_file} if config_file else None,
            exit_code=1,
        )


class TokenFileNotFoundError(TokenEngineError):
    """Error when a token source file doesn't exist."""

    def __init__(self, path: str):
        super().__init__(
            category=ErrorCategory.FILE_SYSTEM,
            message=f"Token file not found: {path}",
            suggestion="Verify the path exists and you have read permissions",
            details={"path": path},
            exit_code=1,
        )


class UnsupportedTokenFileError(TokenEngineError):
    """Error when no adapter can read a token file."""

    def __init__(self, path: str, supported_extensions: list[str] | None = None):
        extensions = supported_extensions or [".json", ".css"]
        super().__init__(
            category=ErrorCategory.IMPORT,
            message=f"No token adapter can read: {path}",
            suggestion=f"Rename or convert the file to one of: {', '.join(extensions)}",
            details={"path": path, "supported": ", ".join(extensions)},
            exit_code=2,
        )


class TokenFileParseError(TokenEngineError):
    """Error when a token file cannot be decoded at all."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            category=ErrorCategory.IMPORT,
            message=f"Cannot parse token file {path}: {reason}",
            suggestion="Check the file is valid JSON or CSS",
            details={"path": path},
            exit_code=1,
        )


class InvalidTypeTransitionError(TokenEngineError):
    """Error when a token type change would downgrade a composite token."""

    def __init__(self, from_type: str, to_type: str):
        super().__init__(
            category=ErrorCategory.MODEL,
            message=f"Cannot change token type from {from_type!r} to {to_type!r}",
            suggestion="Composite typography tokens cannot be converted back to simple tokens",
            details={"from": from_type, "to": to_type},
            exit_code=1,
        )


def handle_exception(
    error: Exception,
    use_color: bool = True,
    verbose: bool = False,
) -> tuple[str, int]:
    """Convert any exception to formatted output and exit code.

    Args:
        error: The exception to handle.
        use_color: Whether to use color in output.
        verbose: Whether to include full traceback.

    Returns:
        Tuple of (formatted_message, exit_code).
    """
    import traceback

    if isinstance(error, TokenEngineError):
        message = error.format(use_color=use_color)
        exit_code = error.exit_code
    else:
        red = "\033[91m" if use_color else ""
        reset = "\033[0m" if use_color else ""
        message = f"{red}Error:{reset} {str(error)}"
        exit_code = 1

    if verbose:
        message += "\n\nTraceback:\n" + traceback.format_exc()

    return message, exit_code
