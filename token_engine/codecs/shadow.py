"""Shadow codec: multi-layer CSS ``box-shadow`` values.

A shadow value is an ordered list of layers; the first layer is drawn on
top, matching the comma order of CSS ``box-shadow``. The list is never
empty: operations that would empty it re-seed one default layer.

Only ``px`` lengths and ``rgb()``/``rgba()``/hex colors are recognised in
CSS strings. Other units and named colors are not parsed.
"""

import re
from dataclasses import dataclass, field, replace
from typing import Any

from ..engine_logging import LogCategory, get_category_logger
from .base import coerce_number, format_number, normalize_number

logger = get_category_logger(LogCategory.CODEC)

DEFAULT_SHADOW_COLOR = "rgba(0,0,0,0.1)"

# Commas that are not inside parentheses separate layers
_LAYER_SEPARATOR = re.compile(r",(?![^(]*\))")
_PX_LENGTH = re.compile(r"(-?(?:\d+\.?\d*|\.\d+))px")
_COLOR = re.compile(r"(rgba?\([^)]+\)|#[0-9a-fA-F]{3,8})")
_INSET = re.compile(r"(^|\s)inset(\s|$)")

# Alternate field names used by imported shadow objects
_ALIASES = {
    "x": ("x", "offsetX"),
    "y": ("y", "offsetY"),
    "blur": ("blur", "blurRadius"),
    "spread": ("spread", "spreadRadius"),
}


@dataclass
class ShadowLayer:
    """One ``box-shadow`` layer; lengths are in px."""

    x: float | int = 0
    y: float | int = 4
    blur: float | int = 6
    spread: float | int = 0
    color: str = DEFAULT_SHADOW_COLOR
    inset: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Stored layer shape; ``inset`` is only written when set."""
        data: dict[str, Any] = {
            "x": self.x,
            "y": self.y,
            "blur": self.blur,
            "spread": self.spread,
            "color": self.color,
        }
        if self.inset:
            data["inset"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShadowLayer":
        """Create from a stored layer, filling missing fields from the default."""
        layer = cls()
        for name, keys in _ALIASES.items():
            for key in keys:
                number = coerce_number(data.get(key))
                if number is not None:
                    setattr(layer, name, normalize_number(number))
                    break
        if isinstance(data.get("color"), str) and data["color"]:
            layer.color = data["color"]
        layer.inset = bool(data.get("inset", False))
        return layer


def default_layer() -> ShadowLayer:
    """Fresh default layer: ``0px 4px 6px 0px rgba(0,0,0,0.1)``."""
    return ShadowLayer()


@dataclass
class ShadowValue:
    """Canonical shadow value with at least one layer."""

    shadows: list[ShadowLayer] = field(default_factory=lambda: [default_layer()])

    def to_dict(self) -> dict[str, Any]:
        """Stored ``{shadows: [...]}`` shape."""
        return {"shadows": [layer.to_dict() for layer in self.shadows]}


def split_shadow_layers(css: str) -> list[str]:
    """Split a ``box-shadow`` string into layer segments.

    Commas inside ``rgba(...)`` and friends do not split.
    """
    return [part.strip() for part in _LAYER_SEPARATOR.split(css) if part.strip()]


def parse_css_shadow(css: str) -> list[ShadowLayer]:
    """Parse a CSS ``box-shadow`` string into layers.

    Each segment contributes its ``px`` lengths in order (x, y, blur,
    spread) and its first color. Segments with fewer than two lengths are
    skipped.

    Args:
        css: The ``box-shadow`` value.

    Returns:
        Layers in CSS order, possibly empty.
    """
    layers = []
    for segment in split_shadow_layers(css or ""):
        lengths = [normalize_number(float(n)) for n in _PX_LENGTH.findall(segment)]
        if len(lengths) < 2:
            logger.debug(f"Skipping malformed shadow layer {segment!r}")
            continue
        lengths.extend([0] * (4 - len(lengths)))
        color_match = _COLOR.search(segment)
        layers.append(
            ShadowLayer(
                x=lengths[0],
                y=lengths[1],
                blur=lengths[2],
                spread=lengths[3],
                color=color_match.group(1) if color_match else DEFAULT_SHADOW_COLOR,
                inset=bool(_INSET.search(segment)),
            )
        )
    return layers


def format_layer(layer: ShadowLayer) -> str:
    """Format one layer as ``[inset ]Xpx Ypx BLURpx SPREADpx COLOR``."""
    prefix = "inset " if layer.inset else ""
    lengths = " ".join(
        f"{format_number(n)}px" for n in (layer.x, layer.y, layer.blur, layer.spread)
    )
    return f"{prefix}{lengths} {layer.color}"


def format_shadows(layers: list[ShadowLayer]) -> str:
    """Format layers as a CSS ``box-shadow`` value, joined by ``", "``."""
    return ", ".join(format_layer(layer) for layer in layers)


def _ensure_layers(layers: list[ShadowLayer]) -> ShadowValue:
    return ShadowValue(layers if layers else [default_layer()])


def parse_shadow_value(raw: Any) -> ShadowValue:
    """Parse a stored shadow value into canonical form.

    Accepts ``{shadows: [...]}``, a bare list of layers, a single layer
    object and CSS strings. Anything unreadable, or a value with no usable
    layer, yields one default layer.
    """
    if isinstance(raw, ShadowValue):
        return ShadowValue([replace(layer) for layer in raw.shadows])

    if isinstance(raw, str):
        return _ensure_layers(parse_css_shadow(raw))

    if isinstance(raw, dict) and isinstance(raw.get("shadows"), list):
        raw = raw["shadows"]
    elif isinstance(raw, dict) and any(
        key in raw for keys in _ALIASES.values() for key in keys
    ):
        raw = [raw]

    if isinstance(raw, list):
        layers = []
        for item in raw:
            if isinstance(item, ShadowLayer):
                layers.append(replace(item))
            elif isinstance(item, dict):
                layers.append(ShadowLayer.from_dict(item))
            elif isinstance(item, str):
                layers.extend(parse_css_shadow(item))
        return _ensure_layers(layers)

    if raw not in (None, ""):
        logger.debug(f"Unreadable shadow value {raw!r}, using default")
    return ShadowValue()


def add_layer(value: ShadowValue) -> ShadowValue:
    """Append a default layer."""
    return ShadowValue([replace(layer) for layer in value.shadows] + [default_layer()])


def remove_layer(value: ShadowValue, index: int) -> ShadowValue:
    """Remove the layer at ``index``; removing the last one re-seeds a default."""
    layers = [replace(layer) for i, layer in enumerate(value.shadows) if i != index]
    return _ensure_layers(layers)


def move_layer(value: ShadowValue, from_index: int, to_index: int) -> ShadowValue:
    """Move a layer to a new position, keeping the others in order."""
    layers = [replace(layer) for layer in value.shadows]
    if not 0 <= from_index < len(layers):
        return ShadowValue(layers)
    moved = layers.pop(from_index)
    layers.insert(max(0, min(to_index, len(layers))), moved)
    return ShadowValue(layers)


def update_layer(value: ShadowValue, index: int, **changes: Any) -> ShadowValue:
    """Merge field changes into one layer.

    Numeric fields accept numbers or numeric strings; unreadable numbers
    leave the field unchanged.
    """
    layers = [replace(layer) for layer in value.shadows]
    if not 0 <= index < len(layers):
        return ShadowValue(layers)
    layer = layers[index]
    for name, change in changes.items():
        if name in _ALIASES:
            number = coerce_number(change)
            if number is not None:
                setattr(layer, name, normalize_number(number))
        elif name == "color" and isinstance(change, str) and change:
            layer.color = change
        elif name == "inset":
            layer.inset = bool(change)
    return ShadowValue(layers)


def to_stored_value(value: ShadowValue) -> dict[str, Any]:
    """Value written back to the token record."""
    return value.to_dict()
