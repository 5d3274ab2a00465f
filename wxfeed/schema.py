"""
Column layout of the aviationweather.gov METAR cache file.

The cache is a headered CSV with a fixed 44 column layout. Only the columns
listed in FEED_COLUMNS are decoded, the rest are ignored. Rows are accessed by
logical field name through FeedRow so nothing else depends on the positions.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from .errors import FeedSchemaError

FEED_WIDTH = 44

FEED_COLUMNS: dict[str, int] = {
    "raw_text": 0,
    "station_id": 1,
    "observation_time": 2,
    "latitude": 3,
    "longitude": 4,
    "temp_c": 5,
    "dewpoint_c": 6,
    "wind_dir_degrees": 7,
    "wind_speed_kt": 8,
    "wind_gust_kt": 9,
    "visibility_statute_mi": 10,
    "altim_in_hg": 11,
    "wx_string": 21,
    "sky_cover_1": 22,
    "cloud_base_ft_agl_1": 23,
    "sky_cover_2": 24,
    "cloud_base_ft_agl_2": 25,
    "sky_cover_3": 26,
    "cloud_base_ft_agl_3": 27,
    "sky_cover_4": 28,
    "cloud_base_ft_agl_4": 29,
    "flight_category": 30,
    "metar_type": 42,
    "elevation_m": 43,
}

# (sky cover, cloud base) field names, lowest layer first
CLOUD_LAYER_FIELDS: tuple[tuple[str, str], ...] = tuple(
    (f"sky_cover_{i}", f"cloud_base_ft_agl_{i}") for i in range(1, 5)
)


def check_width(width: int, row_number: Optional[int] = None) -> None:
    """
    Checks a row (or table) width against the fixed layout.

    Raises:
    * FeedSchemaError -- The width is not FEED_WIDTH.
    """
    if width != FEED_WIDTH:
        raise FeedSchemaError(FEED_WIDTH, width, row_number)


class FeedRow:
    """
    Read only view of a single feed row, with cells looked up by field name.
    A cell is either a string or None when the feed had no value.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Sequence[Optional[str]]) -> None:
        self._cells = cells

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self._cells)!r})"

    def __getitem__(self, field: str) -> Optional[str]:
        """
        The cell for the field name, None if the feed had no value.

        Raises:
        * KeyError -- The field is not part of the layout.
        """
        return self._cells[FEED_COLUMNS[field]]
