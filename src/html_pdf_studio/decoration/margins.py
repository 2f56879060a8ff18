"""Margin unit handling.

The paginator accepts a single physical unit, so margins are converted to
millimetres before export. Clamping happens when margins are written,
never during normalization.
"""

from dataclasses import replace

from ..models.decoration import MARGIN_LIMITS, MM_PER_UNIT, MarginSpec
from ..models.enums import MarginUnit


def clamp_margin(value: float, unit: MarginUnit) -> float:
    """Clamp a margin value to ``[0, max]`` for its unit."""
    return max(0.0, min(MARGIN_LIMITS[unit], float(value)))


def clamp_margins(margins: MarginSpec) -> MarginSpec:
    """Return margins with every value clamped to its unit's bounds."""
    return replace(
        margins,
        top=clamp_margin(margins.top, margins.unit),
        right=clamp_margin(margins.right, margins.unit),
        bottom=clamp_margin(margins.bottom, margins.unit),
        left=clamp_margin(margins.left, margins.unit),
    )


def normalize_margins(margins: MarginSpec) -> MarginSpec:
    """
    Convert margins to millimetres.

    ``cm`` values are multiplied by 10 and ``in`` values by 25.4;
    ``mm`` margins are returned unchanged.
    """
    if margins.unit == MarginUnit.MM:
        return margins
    factor = MM_PER_UNIT[margins.unit]
    return MarginSpec(
        top=margins.top * factor,
        right=margins.right * factor,
        bottom=margins.bottom * factor,
        left=margins.left * factor,
        unit=MarginUnit.MM,
    )


def convert_margin_unit(margins: MarginSpec, unit: MarginUnit) -> MarginSpec:
    """
    Express margins in another unit, clamped to that unit's maximum.

    Used when the unit is changed while editing.
    """
    if margins.unit == unit:
        return margins
    factor = MM_PER_UNIT[margins.unit] / MM_PER_UNIT[unit]
    converted = MarginSpec(
        top=margins.top * factor,
        right=margins.right * factor,
        bottom=margins.bottom * factor,
        left=margins.left * factor,
        unit=unit,
    )
    return clamp_margins(converted)


def format_margin(value: float, unit: MarginUnit) -> str:
    """Format a margin value with its unit, e.g. ``20mm`` or ``25.4mm``."""
    if float(value).is_integer():
        number = str(int(value))
    else:
        number = f"{value:g}"
    return f"{number}{unit.value}"


def format_margins(margins: MarginSpec) -> dict[str, str]:
    """Format all four margins for the paginator."""
    return {
        "top": format_margin(margins.top, margins.unit),
        "right": format_margin(margins.right, margins.unit),
        "bottom": format_margin(margins.bottom, margins.unit),
        "left": format_margin(margins.left, margins.unit),
    }
