from __future__ import annotations

import pytest

from wxfeed.common import (
    cardinal_direction,
    parse_float,
    parse_int,
    parse_or_none,
    parse_str,
    round_half_away,
)


def test_parse_or_none_collapses_failures():
    assert parse_or_none("12", int) == 12
    assert parse_or_none(None, int) is None
    assert parse_or_none("12.5", int) is None
    assert parse_or_none("abc", float) is None


def test_parse_helpers():
    assert parse_float("29.92") == 29.92
    assert parse_float("") is None
    assert parse_int("090") == 90
    assert parse_int("VRB") is None
    assert parse_str("VFR") == "VFR"
    assert parse_str(None) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [(2.5, 3.0), (-2.5, -3.0), (2.4, 2.0), (-2.6, -3.0), (0.0, 0.0)],
)
def test_round_half_away(value, expected):
    assert round_half_away(value) == expected


@pytest.mark.parametrize(
    ("direction", "expected"),
    [
        (0, "N"),
        (11, "N"),
        (12, "NNE"),
        (45, "NE"),
        (90, "E"),
        (180, "S"),
        (270, "W"),
        (310, "NW"),
        (349, "N"),
        (360, "N"),
    ],
)
def test_cardinal_direction_short(direction, expected):
    assert cardinal_direction(direction) == expected


def test_cardinal_direction_styles():
    assert cardinal_direction(45, style="long") == "Northeast"
    assert cardinal_direction(45, style="arrow") == "⬋"
    assert cardinal_direction(45, style="ShortArrow") == "NE ⬋"
    assert cardinal_direction(45, style="degrees") == "45°"
    assert cardinal_direction(360, style="long") == "North"


@pytest.mark.parametrize("direction", [-10, 361])
def test_cardinal_direction_out_of_range(direction):
    with pytest.raises(ValueError):
        cardinal_direction(direction)
