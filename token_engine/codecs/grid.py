"""Grid codec: breakpoints, column count, outer margin and gutter.

The canonical grid object is also its stored shape, so formatting is the
identity. Parsing and every mutation clamp columns to [1, 24] and keep
margin, gutter and breakpoints non-negative.
"""

from dataclasses import dataclass, field, replace
from typing import Any

from ..engine_logging import LogCategory, get_category_logger
from .base import parse_int_prefix

logger = get_category_logger(LogCategory.CODEC)

MIN_COLUMNS = 1
MAX_COLUMNS = 24
DEFAULT_COLUMNS = 12
DEFAULT_MARGIN = 16
DEFAULT_GUTTER = 24

DEFAULT_BREAKPOINTS: dict[str, int] = {
    "xs": 0,
    "sm": 640,
    "md": 768,
    "lg": 1024,
    "xl": 1280,
}

BREAKPOINT_LABELS: dict[str, str] = {
    "xs": "Extra Small",
    "sm": "Small",
    "md": "Medium",
    "lg": "Large",
    "xl": "Extra Large",
}


@dataclass
class GridValue:
    """Canonical grid value; lengths are in px."""

    breakpoints: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_BREAKPOINTS))
    columns: int = DEFAULT_COLUMNS
    margin: int = DEFAULT_MARGIN
    gutter: int = DEFAULT_GUTTER

    def to_dict(self) -> dict[str, Any]:
        """Stored grid shape."""
        return {
            "breakpoints": dict(self.breakpoints),
            "columns": self.columns,
            "margin": self.margin,
            "gutter": self.gutter,
        }


def clamp_columns(value: Any) -> int:
    """Column count in [1, 24]; unreadable input becomes 1."""
    number = parse_int_prefix(value)
    if not number:
        return MIN_COLUMNS
    return max(MIN_COLUMNS, min(MAX_COLUMNS, number))


def clamp_length(value: Any) -> int:
    """Non-negative integer px length; unreadable input becomes 0."""
    number = parse_int_prefix(value)
    return max(0, number or 0)


def _merge_breakpoints(raw: Any) -> dict[str, int]:
    breakpoints = dict(DEFAULT_BREAKPOINTS)
    if isinstance(raw, dict):
        for key, value in raw.items():
            breakpoints[key] = clamp_length(value)
    return breakpoints


def parse_grid(raw: Any) -> GridValue:
    """Parse a stored grid value, filling missing fields from the defaults.

    Missing breakpoints keep their default widths. Lengths stored as
    strings such as ``"16px"`` are read by their integer prefix.
    """
    if isinstance(raw, GridValue):
        raw = raw.to_dict()
    if not isinstance(raw, dict):
        if raw not in (None, ""):
            logger.debug(f"Unreadable grid value {raw!r}, using default")
        return GridValue()

    def pick(key: str, default: int, clamp) -> int:
        return clamp(raw[key]) if raw.get(key) is not None else default

    return GridValue(
        breakpoints=_merge_breakpoints(raw.get("breakpoints")),
        columns=pick("columns", DEFAULT_COLUMNS, clamp_columns),
        margin=pick("margin", DEFAULT_MARGIN, clamp_length),
        gutter=pick("gutter", DEFAULT_GUTTER, clamp_length),
    )


def update_grid(grid: GridValue, **changes: Any) -> GridValue:
    """Apply ``columns``/``margin``/``gutter`` edits with clamping."""
    updated = replace(grid, breakpoints=dict(grid.breakpoints))
    if "columns" in changes:
        updated.columns = clamp_columns(changes["columns"])
    if "margin" in changes:
        updated.margin = clamp_length(changes["margin"])
    if "gutter" in changes:
        updated.gutter = clamp_length(changes["gutter"])
    return updated


def update_breakpoint(grid: GridValue, key: str, value: Any) -> GridValue:
    """Set one breakpoint width (non-negative px)."""
    return replace(grid, breakpoints={**grid.breakpoints, key: clamp_length(value)})


def reset_grid() -> GridValue:
    """Fresh default grid."""
    return GridValue()


def format_grid(grid: GridValue) -> dict[str, Any]:
    """Stored value for a grid; the canonical shape is the storage shape."""
    return grid.to_dict()


def to_stored_value(grid: GridValue) -> dict[str, Any]:
    """Value written back to the token record."""
    return format_grid(grid)


def expand_grid(base_variable: str, grid: GridValue) -> dict[str, str]:
    """Individually addressable CSS variables for a grid token.

    ``--grid-main`` yields ``--grid-main-columns``, ``-margin``,
    ``-gutter`` and one ``-bp-{name}`` per breakpoint.
    """
    variables = {
        f"{base_variable}-columns": str(grid.columns),
        f"{base_variable}-margin": f"{grid.margin}px",
        f"{base_variable}-gutter": f"{grid.gutter}px",
    }
    for name, width in grid.breakpoints.items():
        variables[f"{base_variable}-bp-{name}"] = f"{width}px"
    return variables


def breakpoint_label(key: str) -> str:
    return BREAKPOINT_LABELS.get(key, key.upper())
