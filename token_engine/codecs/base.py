"""Numeric helpers shared by the value codecs.

Stored token values come from hand-edited JSON, older schema versions and
third-party exports, so numbers arrive as ints, floats, numeric strings or
strings with trailing units. These helpers coerce them without raising.
"""

import math
import re
from typing import Any

# Leading numeric prefix, same acceptance as a browser's parseFloat()
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def is_number(value: Any) -> bool:
    """Check for a real int/float (bools are not numbers here)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_finite_number(value: Any) -> bool:
    """Check for a finite int/float."""
    return is_number(value) and math.isfinite(value)


def parse_float_prefix(value: Any) -> float | None:
    """Parse the leading number of a string ("1.5em" -> 1.5).

    Returns:
        The parsed float, or None when there is no numeric prefix.
    """
    if is_finite_number(value):
        return float(value)
    if not isinstance(value, str):
        return None
    match = _FLOAT_PREFIX.match(value)
    if not match:
        return None
    result = float(match.group(1))
    return result if math.isfinite(result) else None


def parse_int_prefix(value: Any) -> int | None:
    """Parse the leading integer of a value ("24px" -> 24, 12.7 -> 12)."""
    if is_finite_number(value):
        return int(value)
    if not isinstance(value, str):
        return None
    match = _INT_PREFIX.match(value)
    return int(match.group(1)) if match else None


def coerce_number(value: Any) -> float | int | None:
    """Coerce a stored number or fully numeric string, keeping ints as ints."""
    if is_finite_number(value):
        return value
    if isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(result):
            return None
        return int(result) if result.is_integer() and "." not in value else result
    return None


def normalize_number(value: float | int) -> float | int:
    """Collapse integral floats to ints (16.0 -> 16)."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, matching JavaScript Math.round."""
    return math.floor(value + 0.5)


def format_number(value: float | int) -> str:
    """Format a number the way it appears in CSS ("16", "1.5", "-0.02").

    Integral floats drop their fractional part and exponent notation is
    never produced.
    """
    value = normalize_number(value)
    if isinstance(value, int):
        return str(value)
    text = repr(value)
    if "e" in text or "E" in text:
        text = f"{value:.12f}".rstrip("0").rstrip(".")
    return text
