"""
Unit information and the dual-unit values used for decoded observations.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from .common import parse_float, round_half_away
from .errors import UnitConversionError


@dataclass(frozen=True, eq=False)
class UnitInfo:
    """
    An immutable dataclass object that holds information for a unit loosely
    based on the QUDT unit vocabulary.

    Attributes:
    * unit_kind (str) -- The type of measurement the unit is used for. Possible
    values are 'temperature', 'length', 'velocity' and 'pressure'.
    * label (str) -- Full name or label of the unit, ie. 'fahrenheit'.
    * symbol (str) -- The official symbol used in print, conforms to UCUM names
    when possible, ie '°F'.
    * ucum_code (Optional[str]) -- Standard UCUM symbol, if it exists. See
    https://ucum.org/ucum.html.
    * wmo_code (Optional[str]) -- Standard WMO symbol, if it exists. See
    http://codes.wmo.int/common/unit.
    """

    unit_kind: str
    label: str
    symbol: str
    ucum_code: Optional[str]
    wmo_code: Optional[str]

    def __str__(self) -> str:
        return self.label.capitalize()


_ALL_UNITS: dict[str, UnitInfo] = {
    "celsius": UnitInfo(
        unit_kind="temperature",
        label="celsius",
        symbol="°C",
        ucum_code="Cel",
        wmo_code="degC",
    ),
    "fahrenheit": UnitInfo(
        unit_kind="temperature",
        label="fahrenheit",
        symbol="°F",
        ucum_code="[degF]",
        wmo_code=None,
    ),
    "knot": UnitInfo(
        unit_kind="velocity",
        label="knot",
        symbol="kt",
        ucum_code="[kn_i]",
        wmo_code="kt",
    ),
    "mile per hour": UnitInfo(
        unit_kind="velocity",
        label="mile per hour",
        symbol="mph",
        ucum_code="[mi_i].h-1",
        wmo_code=None,
    ),
    "meter": UnitInfo(
        unit_kind="length",
        label="meter",
        symbol="m",
        ucum_code="m",
        wmo_code="m",
    ),
    "foot": UnitInfo(
        unit_kind="length",
        label="foot",
        symbol="ft",
        ucum_code="[ft_i]",
        wmo_code="ft",
    ),
    "mile us statute": UnitInfo(
        unit_kind="length",
        label="mile us statute",
        symbol="mi",
        ucum_code="[mi_us]",
        wmo_code=None,
    ),
    "inch of mercury": UnitInfo(
        unit_kind="pressure",
        label="inch of mercury",
        symbol="inHg",
        ucum_code="[in_i'Hg]",
        wmo_code=None,
    ),
}


def unit_by_label(label: str) -> UnitInfo:
    """
    Retrieves unit information based on the units (case insensitive) full name.

    Raises:
    * KeyError -- The unit cannot be found.

    Example:
    >>> unit_by_label('Fahrenheit')
    UnitInfo(unit_kind='temperature', label='fahrenheit', symbol='°F', ucum_code='[degF]', wmo_code=None)
    """
    return _ALL_UNITS[label.casefold()]


CELSIUS = unit_by_label("celsius")
FAHRENHEIT = unit_by_label("fahrenheit")
KNOT = unit_by_label("knot")
MILE_PER_HOUR = unit_by_label("mile per hour")
METER = unit_by_label("meter")
FOOT = unit_by_label("foot")

# Source feed value for an elevation that was not reported.
ELEVATION_NOT_REPORTED = 9999.0


def _celsius_to_fahrenheit(value: float) -> float:
    return value * 1.8 + 32


def _fahrenheit_to_celsius(value: float) -> float:
    return (value - 32) / 1.8


def _knots_to_mph(value: float) -> float:
    # Truncated to two decimal places, not rounded
    return math.floor(value * 1.15078 * 100) / 100


def _mph_to_knots(value: float) -> float:
    return value / 1.15078


def _meters_to_feet(value: float) -> float:
    return round_half_away(value * 3.28084)


def _feet_to_meters(value: float) -> float:
    return value / 3.28084


@dataclass(frozen=True, eq=False)
class UnitPair:
    """
    Two units of the same kind and the pure functions converting between
    them. The primary unit is the one the feed reports in.
    """

    primary: UnitInfo
    secondary: UnitInfo
    to_secondary: Callable[[float], float]
    to_primary: Callable[[float], float]

    def __contains__(self, unit: object) -> bool:
        return unit is self.primary or unit is self.secondary

    def other(self, unit: UnitInfo) -> UnitInfo:
        """
        The other unit of the pair.

        Raises:
        * UnitConversionError -- The unit is not part of this pair.
        """
        if unit is self.primary:
            return self.secondary
        if unit is self.secondary:
            return self.primary
        raise UnitConversionError(
            f"Unit '{unit.label}' is not one of '{self.primary.label}' "
            f"and '{self.secondary.label}'."
        )

    def convert(self, value: float, from_unit: UnitInfo, to_unit: UnitInfo) -> float:
        """
        Converts a value between the two units of the pair. Converting to the
        same unit returns the value unchanged.

        Raises:
        * UnitConversionError -- Either unit is not part of this pair.
        """
        if from_unit not in self or to_unit not in self:
            raise UnitConversionError(
                f"Invalid units for conversion. from_unit is '{from_unit.label}' "
                f"and to_unit is '{to_unit.label}', expecting "
                f"'{self.primary.label}' or '{self.secondary.label}'."
            )
        if from_unit is to_unit:
            return value
        if from_unit is self.primary:
            return self.to_secondary(value)
        return self.to_primary(value)


TEMPERATURE = UnitPair(
    primary=CELSIUS,
    secondary=FAHRENHEIT,
    to_secondary=_celsius_to_fahrenheit,
    to_primary=_fahrenheit_to_celsius,
)

WIND_SPEED = UnitPair(
    primary=KNOT,
    secondary=MILE_PER_HOUR,
    to_secondary=_knots_to_mph,
    to_primary=_mph_to_knots,
)

ELEVATION = UnitPair(
    primary=METER,
    secondary=FOOT,
    to_secondary=_meters_to_feet,
    to_primary=_feet_to_meters,
)


@dataclass(frozen=True)
class DualUnitValue:
    """
    A measurement known in exactly one of the two units of a UnitPair. The
    value may be None when the feed did not report it or it could not be
    parsed. The other unit is always derived, never stored.

    Attributes:
    * value (Optional[float]) -- The measurement in `unit`.
    * unit (UnitInfo) -- The unit the value is expressed in.
    * pair (UnitPair) -- The two units this value can be expressed in.
    """

    value: Optional[float]
    unit: UnitInfo
    pair: UnitPair

    def __post_init__(self) -> None:
        if self.unit not in self.pair:
            raise UnitConversionError(
                f"Unit '{self.unit.label}' is not one of '{self.pair.primary.label}' "
                f"and '{self.pair.secondary.label}'."
            )

    def __str__(self) -> str:
        if self.value is None:
            return "None"
        return f"{self.value:.1f} {self.unit.symbol}"

    @classmethod
    def from_cell(
        cls,
        raw: Optional[str],
        pair: UnitPair,
        sentinel: Optional[float] = None,
    ) -> DualUnitValue:
        """
        Creates a value in the pairs primary unit from a raw feed cell. A
        missing or unparseable cell, or one equal to the sentinel, gives a
        value of None.
        """
        value = parse_float(raw)
        if sentinel is not None and value == sentinel:
            value = None
        return cls(value=value, unit=pair.primary, pair=pair)

    @property
    def other_unit(self) -> UnitInfo:
        """The unit this value is not expressed in."""
        return self.pair.other(self.unit)

    def to_other_unit(self) -> Optional[float]:
        """The value converted to the other unit of the pair, if present."""
        return self.as_unit(self.other_unit)

    def as_unit(self, to_unit: UnitInfo) -> Optional[float]:
        """
        The value expressed in the given unit, if present.

        Raises:
        * UnitConversionError -- The unit is not part of this values pair.
        """
        if self.value is None:
            if to_unit not in self.pair:
                raise UnitConversionError(
                    f"Unit '{to_unit.label}' is not one of "
                    f"'{self.pair.primary.label}' and '{self.pair.secondary.label}'."
                )
            return None
        return self.pair.convert(self.value, self.unit, to_unit)


def celsius(value: Optional[float]) -> DualUnitValue:
    """A temperature expressed in degrees Celsius."""
    return DualUnitValue(value=value, unit=CELSIUS, pair=TEMPERATURE)


def fahrenheit(value: Optional[float]) -> DualUnitValue:
    """A temperature expressed in degrees Fahrenheit."""
    return DualUnitValue(value=value, unit=FAHRENHEIT, pair=TEMPERATURE)


def knots(value: Optional[float]) -> DualUnitValue:
    """A wind speed expressed in knots."""
    return DualUnitValue(value=value, unit=KNOT, pair=WIND_SPEED)


def mph(value: Optional[float]) -> DualUnitValue:
    """A wind speed expressed in miles per hour."""
    return DualUnitValue(value=value, unit=MILE_PER_HOUR, pair=WIND_SPEED)


def meters(value: Optional[float]) -> DualUnitValue:
    """An elevation expressed in meters."""
    return DualUnitValue(value=value, unit=METER, pair=ELEVATION)


def feet(value: Optional[float]) -> DualUnitValue:
    """An elevation expressed in feet."""
    return DualUnitValue(value=value, unit=FOOT, pair=ELEVATION)


def to_fahrenheit(temperature: DualUnitValue) -> Optional[float]:
    """The temperature in degrees Fahrenheit, if present."""
    return temperature.as_unit(FAHRENHEIT)


def to_mph(wind_speed: DualUnitValue) -> Optional[float]:
    """The wind speed in miles per hour, if present."""
    return wind_speed.as_unit(MILE_PER_HOUR)


def to_feet(elevation: DualUnitValue) -> Optional[float]:
    """The elevation in feet, if present."""
    return elevation.as_unit(FOOT)
