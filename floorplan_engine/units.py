"""Unit conversion and measurement formatting.

Public API:
- Unit, UnitSystem, DisplayFormat
- convert(value, from_unit, to_unit)
- auto_convert(value, unit, system)
- format_measurement(value, unit, fmt, precision)
- MeasurementValue, MeasurementFormatter
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Unit(str, Enum):
    INCHES = "inches"
    FEET = "feet"
    METERS = "meters"
    CENTIMETERS = "centimeters"
    MILLIMETERS = "millimeters"


class UnitSystem(str, Enum):
    IMPERIAL = "imperial"
    METRIC = "metric"


class DisplayFormat(str, Enum):
    DECIMAL = "decimal"
    FRACTIONAL = "fractional"
    ARCHITECTURAL = "architectural"


# Factors to the base unit (meters).
CONVERSION_FACTORS: dict[Unit, float] = {
    Unit.INCHES: 0.0254,
    Unit.FEET: 0.3048,
    Unit.METERS: 1.0,
    Unit.CENTIMETERS: 0.01,
    Unit.MILLIMETERS: 0.001,
}


def convert(value: float, from_unit: Unit | str, to_unit: Unit | str) -> float:
    in_meters = value * CONVERSION_FACTORS[Unit(from_unit)]
    return in_meters / CONVERSION_FACTORS[Unit(to_unit)]


def auto_convert(value: float, unit: Unit | str, system: UnitSystem | str) -> Tuple[float, Unit]:
    """Pick feet/inches or meters/centimeters depending on magnitude.

    Only two tiers per system are considered.
    """
    if UnitSystem(system) is UnitSystem.IMPERIAL:
        in_feet = convert(value, unit, Unit.FEET)
        if in_feet >= 1:
            return in_feet, Unit.FEET
        return convert(value, unit, Unit.INCHES), Unit.INCHES
    in_meters = convert(value, unit, Unit.METERS)
    if in_meters >= 1:
        return in_meters, Unit.METERS
    return convert(value, unit, Unit.CENTIMETERS), Unit.CENTIMETERS


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _unit_label(unit: Unit | str) -> str:
    return unit.value if isinstance(unit, Unit) else str(unit)


def format_decimal(value: float, unit: Unit | str, precision: int) -> str:
    return f"{value:.{precision}f} {_unit_label(unit)}"


def format_fractional(value: float, unit: Unit | str, precision: int) -> str:
    """Whole part plus the nearest ``n / 2**precision`` fraction."""
    label = _unit_label(unit)
    whole = math.floor(value)
    fraction = value - whole
    if fraction == 0:
        return f"{whole} {label}"
    denominator = 2 ** precision
    numerator = _round_half_up(fraction * denominator)
    if numerator == 0:
        return f"{whole} {label}"
    if whole == 0:
        return f"{numerator}/{denominator} {label}"
    return f"{whole} {numerator}/{denominator} {label}"


def format_architectural(value: float) -> str:
    """Feet-and-inches notation for a value expressed in feet."""
    feet = math.floor(value)
    inches = _round_half_up((value - feet) * 12)
    if inches == 0:
        return f"{feet}'"
    return f"{feet}' {inches}\""


def format_measurement(
    value: float,
    unit: Unit | str,
    fmt: DisplayFormat | str = DisplayFormat.DECIMAL,
    precision: int = 2,
) -> str:
    """Format ``value`` for display.

    Architectural notation only applies to feet; any other combination, as
    well as an unrecognised format name, falls back to decimal.
    """
    try:
        style = DisplayFormat(fmt)
    except ValueError:
        style = DisplayFormat.DECIMAL
    if style is DisplayFormat.FRACTIONAL:
        return format_fractional(value, unit, precision)
    if style is DisplayFormat.ARCHITECTURAL and _unit_label(unit) == Unit.FEET.value:
        return format_architectural(value)
    return format_decimal(value, unit, precision)


@dataclass(frozen=True)
class MeasurementValue:
    value: float
    unit: Unit

    def to(self, unit: Unit | str) -> "MeasurementValue":
        target = Unit(unit)
        return MeasurementValue(convert(self.value, self.unit, target), target)

    def auto(self, system: UnitSystem | str) -> "MeasurementValue":
        value, unit = auto_convert(self.value, self.unit, system)
        return MeasurementValue(value, unit)


@dataclass
class MeasurementFormatter:
    """Binds the project's display preferences for repeated formatting."""

    system: UnitSystem = UnitSystem.IMPERIAL
    fmt: DisplayFormat = DisplayFormat.DECIMAL
    precision: int = 2

    def convert(self, value: float, from_unit: Unit | str, to_unit: Unit | str | None = None) -> float:
        if to_unit is not None:
            return convert(value, from_unit, to_unit)
        converted, _unit = auto_convert(value, from_unit, self.system)
        return converted

    def auto_convert(self, value: float, unit: Unit | str) -> Tuple[float, Unit]:
        return auto_convert(value, unit, self.system)

    def format(self, value: float, unit: Unit | str) -> str:
        return format_measurement(value, unit, self.fmt, self.precision)

    def auto_format(self, value: float, unit: Unit | str) -> str:
        converted, target = auto_convert(value, unit, self.system)
        return format_measurement(converted, target, self.fmt, self.precision)
