from __future__ import annotations

import gzip
from collections.abc import Callable, Sequence
from typing import Optional

import pytest

from wxfeed.schema import FEED_COLUMNS, FEED_WIDTH

Cells = list[Optional[str]]

BANNER = "No errors\nNo warnings\n4 ms\ndata source=metars\n2 results\n"

KSJC_FIELDS = {
    "raw_text": "METAR KSJC 011253Z 31008G15KT 10SM FEW015 BKN250 18/12 A2992 RMK AO2 SLP131",
    "station_id": "KSJC",
    "observation_time": "2024-05-01T12:53:00Z",
    "latitude": "37.3591",
    "longitude": "-121.9245",
    "temp_c": "18.3",
    "dewpoint_c": "12.2",
    "wind_dir_degrees": "310",
    "wind_speed_kt": "8",
    "wind_gust_kt": "15",
    "visibility_statute_mi": "10+",
    "altim_in_hg": "29.92",
    "sky_cover_1": "FEW",
    "cloud_base_ft_agl_1": "1500",
    "sky_cover_2": "BKN",
    "cloud_base_ft_agl_2": "25000",
    "flight_category": "VFR",
    "metar_type": "METAR",
    "elevation_m": "18",
}

PHNL_FIELDS = {
    "raw_text": "METAR PHNL 011253Z 07012KT 10SM FEW030 27/19 A3004 RMK AO2",
    "station_id": "PHNL",
    "observation_time": "2024-05-01T12:53:00Z",
    "temp_c": "27.2",
    "wind_dir_degrees": "70",
    "wind_speed_kt": "12",
    "metar_type": "METAR",
    "elevation_m": "4",
}


def _header() -> list[str]:
    names = {index: name for name, index in FEED_COLUMNS.items()}
    return [names.get(i, f"column_{i}") for i in range(FEED_WIDTH)]


@pytest.fixture
def make_cells() -> Callable[..., Cells]:
    def _make_cells(**fields: Optional[str]) -> Cells:
        cells: Cells = [None] * FEED_WIDTH
        for name, value in fields.items():
            cells[FEED_COLUMNS[name]] = value
        return cells

    return _make_cells


@pytest.fixture
def ksjc_cells(make_cells) -> Cells:
    return make_cells(**KSJC_FIELDS)


@pytest.fixture
def phnl_cells(make_cells) -> Cells:
    return make_cells(**PHNL_FIELDS)


@pytest.fixture
def to_csv() -> Callable[[Sequence[Cells]], str]:
    def _to_csv(rows: Sequence[Cells]) -> str:
        lines = [",".join(_header())]
        for cells in rows:
            lines.append(",".join("" if cell is None else cell for cell in cells))
        return "\n".join(lines) + "\n"

    return _to_csv


@pytest.fixture
def cache_bytes(to_csv, ksjc_cells, phnl_cells) -> bytes:
    """A gzipped cache file, banner included, with a KSJC and a PHNL row."""
    text = BANNER + to_csv([ksjc_cells, phnl_cells])
    return gzip.compress(text.encode("utf-8"))
