"""
Common helper methods used in various modules.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Optional, TypeVar

T = TypeVar("T")

_CARDINAL_FULLNAMES = (
    "North",
    "North-Northeast",
    "Northeast",
    "East-Northeast",
    "East",
    "East-Southeast",
    "Southeast",
    "South-Southeast",
    "South",
    "South-Southwest",
    "Southwest",
    "West-Southwest",
    "West",
    "West-Northwest",
    "Northwest",
    "North-Northwest",
)

_CARDINAL_ARROWS = (
    "⬇",
    "⬇",
    "⬋",
    "⬅",
    "⬅",
    "⬅",
    "⬉",
    "⬆",
    "⬆",
    "⬆",
    "⬈",
    "➡",
    "➡",
    "➡",
    "⬊",
    "⬇",
)

# Index 16 wraps back around to north for headings close to 360.
_CARDINAL_ABBREVIATED = (
    "N",
    "NNE",
    "NE",
    "ENE",
    "E",
    "ESE",
    "SE",
    "SSE",
    "S",
    "SSW",
    "SW",
    "WSW",
    "W",
    "WNW",
    "NW",
    "NNW",
    "N",
)


def round_half_away(value: float) -> float:
    """
    Rounds to the nearest whole number with halves going away from zero, so
    2.5 -> 3.0 and -2.5 -> -3.0. Python's round() would go to the even number.
    """
    return math.copysign(math.floor(abs(value) + 0.5), value)


def parse_or_none(raw: Optional[str], parser: Callable[[str], T]) -> Optional[T]:
    """
    Feeds a nullable cell value through a parser. A missing cell or any
    parse failure collapses to None, errors are never raised.

    >>> parse_or_none("12.5", float)
    12.5
    >>> parse_or_none("M", float) is None
    True
    """
    if raw is None:
        return None
    try:
        return parser(raw)
    except (TypeError, ValueError):
        return None


def parse_float(raw: Optional[str]) -> Optional[float]:
    """A float from a cell value, or None if missing or not a number."""
    return parse_or_none(raw, float)


def parse_int(raw: Optional[str]) -> Optional[int]:
    """An integer from a cell value, or None if missing or not an integer."""
    return parse_or_none(raw, int)


def parse_str(raw: Optional[str]) -> Optional[str]:
    """The cell value itself, or None if missing."""
    return parse_or_none(raw, str)


def cardinal_direction(direction: int, style: str = "short") -> str:
    """
    The cardinal direction of the specified wind direction value.

    Parameters:
    * direction (int) -- Direction of wind in 0-360 degrees.
    * style (str) -- The style of string to be returned. Possible values
    are 'short', 'long', 'arrow', 'shortarrow', 'degrees'. Defaults to
    'short'.

    Raises:
    * ValueError -- Direction is outside of 0-360 degrees.

    Examples of each style for northeasterly wind:
    * 'short' -> 'NE'
    * 'long' -> 'Northeast'
    * 'arrow' -> '⬋'
    * 'shortarrow -> 'NE ⬋'
    * 'degrees' -> '45°'
    """
    if direction < 0 or direction > 360:
        raise ValueError(f"Invalid wind direction '{direction}', not 0-360 degrees.")
    cfstyle = style.casefold()
    abbr_index = int(round_half_away(direction / 22.5))
    cardinal_index = abbr_index % 16
    if cfstyle == "shortarrow":
        arrow = _CARDINAL_ARROWS[cardinal_index]
        abbr = _CARDINAL_ABBREVIATED[abbr_index]
        return f"{abbr} {arrow}"
    if cfstyle == "arrow":
        return _CARDINAL_ARROWS[cardinal_index]
    if cfstyle == "long":
        return _CARDINAL_FULLNAMES[cardinal_index]
    if cfstyle == "degrees":
        return f"{direction}°"
    return _CARDINAL_ABBREVIATED[abbr_index]
