"""
Decoding of rows from the aviationweather.gov METAR cache into observation
objects.

Every field is decoded on a best effort basis. A missing or malformed cell
only leaves that field as None, it never aborts the batch. Only a row that
does not fit the column layout is fatal (FeedSchemaError).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Optional

import pandas as pd
import pytz
from shapely.geometry import Point

from .common import cardinal_direction, parse_float, parse_int, parse_or_none, parse_str
from .schema import CLOUD_LAYER_FIELDS, FeedRow, check_width
from .units import (
    CELSIUS,
    ELEVATION,
    ELEVATION_NOT_REPORTED,
    KNOT,
    METER,
    TEMPERATURE,
    WIND_SPEED,
    DualUnitValue,
    to_fahrenheit,
    to_feet,
    to_mph,
)

logger = logging.getLogger(__name__)

CONUS_PREFIX = "K"
VARIABLE_WIND = "VRB"
REMARKS_TOKEN = "RMK"


def is_conus_station(station_id: Optional[str]) -> bool:
    """
    Whether a station identifier looks like one in the contiguous US. This is
    only a check on the leading 'K' of the ICAO identifier.
    """
    return station_id is not None and station_id.startswith(CONUS_PREFIX)


def _parse_iso_time(raw: str) -> datetime:
    # fromisoformat only understands a trailing 'Z' on 3.11 and up
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    timestamp = datetime.fromisoformat(raw)
    if timestamp.tzinfo is None:
        raise ValueError(f"Timestamp '{raw}' has no UTC offset.")
    return timestamp.astimezone(pytz.utc)


def parse_observation_time(raw: Optional[str]) -> Optional[datetime]:
    """
    The observation time as a timezone aware datetime in UTC. Timestamps
    without an explicit offset are not accepted and give None.
    """
    return parse_or_none(raw, _parse_iso_time)


def parse_visibility(raw: Optional[str]) -> Optional[float]:
    """Visibility in statute miles, the feed writes '10+' for 10 or more."""
    if raw is None:
        return None
    return parse_float(raw.replace("+", ""))


def extract_remarks(raw_text: Optional[str]) -> Optional[str]:
    """
    Everything after the first 'RMK' group of a raw METAR, or None if the
    METAR has no remarks group. A METAR ending in 'RMK' gives an empty string.

    >>> extract_remarks("METAR KSJC 010000Z RMK AO2 SLP123")
    'AO2 SLP123'
    """
    if raw_text is None or REMARKS_TOKEN not in raw_text:
        return None
    groups = raw_text.split()
    if REMARKS_TOKEN not in groups:
        return None
    index = groups.index(REMARKS_TOKEN)
    return " ".join(groups[index + 1 :])


@dataclass(frozen=True)
class WindDirection:
    """
    Decoded wind direction. Either a heading in degrees, variable (VRB) with
    no heading, or absent when both are unset.
    """

    degrees: Optional[int] = None
    variable: bool = False

    def __str__(self) -> str:
        if self.variable:
            return VARIABLE_WIND
        if self.degrees is None:
            return "None"
        return f"{self.degrees}°"

    @classmethod
    def from_cell(cls, raw: Optional[str]) -> WindDirection:
        """Decodes the wind direction cell of the feed."""
        if raw is None:
            return cls()
        if raw == VARIABLE_WIND:
            return cls(variable=True)
        return cls(degrees=parse_int(raw))

    @property
    def is_absent(self) -> bool:
        """True when the feed gave neither a heading nor VRB."""
        return self.degrees is None and not self.variable

    @property
    def cardinal(self) -> Optional[str]:
        """
        The 16 point compass abbreviation for the heading, 'Variable' for
        variable winds. A heading of 0 is the feeds value for calm wind and
        has no cardinal direction, neither does a heading outside 1-360.
        """
        if self.variable:
            return "Variable"
        if self.degrees is None or self.degrees <= 0 or self.degrees > 360:
            return None
        return cardinal_direction(self.degrees, style="short")

    def as_json(self) -> Optional[Any]:
        """The heading, 'VRB', or None."""
        if self.variable:
            return VARIABLE_WIND
        return self.degrees


@dataclass(frozen=True)
class CloudLayer:
    """
    Dataclass for a single sky cover layer of a METAR observation.

    Attributes:
    * sky_cover (Optional[str]) -- METAR sky cover abbreviation, ie 'BKN'.
    * cloud_base_ft_agl (Optional[int]) -- Base of the layer, feet above
    ground level.
    """

    descriptions: ClassVar[dict[str, str]] = {
        "CLR": "Clear",
        "SKC": "Clear",
        "FEW": "Few",
        "SCT": "Scattered",
        "BKN": "Broken",
        "OVC": "Overcast",
        "OVX": "Obscured",
    }

    sky_cover: Optional[str]
    cloud_base_ft_agl: Optional[int]

    def __str__(self) -> str:
        label = self.sky_cover_label or self.sky_cover or "Unknown"
        if self.cloud_base_ft_agl is None:
            return label
        return f"{label} at {self.cloud_base_ft_agl} ft"

    @property
    def sky_cover_label(self) -> Optional[str]:
        """
        A descriptive string for the sky cover abbreviation. Unknown
        abbreviations give an empty string, no sky cover gives None.
        """
        if self.sky_cover is None:
            return None
        return self.descriptions.get(self.sky_cover, "")

    def as_dict(self) -> dict[str, Any]:
        return {
            "sky_cover": self.sky_cover,
            "sky_cover_label": self.sky_cover_label,
            "cloud_base_ft_agl": self.cloud_base_ft_agl,
        }


def extract_cloud_layers(row: FeedRow) -> tuple[CloudLayer, ...]:
    """
    The reported cloud layers of a row, lowest first. Layers with neither a
    sky cover nor a cloud base are left out.
    """
    layers: list[CloudLayer] = []
    for cover_field, base_field in CLOUD_LAYER_FIELDS:
        sky_cover = parse_str(row[cover_field])
        cloud_base = parse_int(row[base_field])
        if sky_cover is None and cloud_base is None:
            continue
        layers.append(CloudLayer(sky_cover=sky_cover, cloud_base_ft_agl=cloud_base))
    return tuple(layers)


@dataclass(frozen=True)
class MetarObservation:
    """
    A single decoded observation from the METAR cache. Every optional field
    is None when the feed did not report it or the value could not be parsed.
    Values in a second unit (Fahrenheit, mph, feet) are derived properties.
    """

    raw_text: str
    station_id: str
    observation_time: Optional[datetime]
    latitude: Optional[float]
    longitude: Optional[float]
    temperature: DualUnitValue
    dewpoint: DualUnitValue
    wind_direction: WindDirection
    wind_speed: DualUnitValue
    wind_gust: DualUnitValue
    visibility_statute_mi: Optional[float]
    clouds: tuple[CloudLayer, ...]
    altim_in_hg: Optional[float]
    wx_string: Optional[str]
    flight_category: Optional[str]
    report_type: Optional[str]
    elevation: DualUnitValue
    remarks: Optional[str]

    def __str__(self) -> str:
        return self.raw_text

    @classmethod
    def from_row(cls, row: FeedRow) -> MetarObservation:
        """
        Decodes a single feed row. The station filter is not applied here.
        """
        raw_text = row["raw_text"]
        return cls(
            raw_text=raw_text or "",
            station_id=row["station_id"] or "",
            observation_time=parse_observation_time(row["observation_time"]),
            latitude=parse_float(row["latitude"]),
            longitude=parse_float(row["longitude"]),
            temperature=DualUnitValue.from_cell(row["temp_c"], TEMPERATURE),
            dewpoint=DualUnitValue.from_cell(row["dewpoint_c"], TEMPERATURE),
            wind_direction=WindDirection.from_cell(row["wind_dir_degrees"]),
            wind_speed=DualUnitValue.from_cell(row["wind_speed_kt"], WIND_SPEED),
            wind_gust=DualUnitValue.from_cell(row["wind_gust_kt"], WIND_SPEED),
            visibility_statute_mi=parse_visibility(row["visibility_statute_mi"]),
            clouds=extract_cloud_layers(row),
            altim_in_hg=parse_float(row["altim_in_hg"]),
            wx_string=parse_str(row["wx_string"]),
            flight_category=parse_str(row["flight_category"]),
            report_type=parse_str(row["metar_type"]),
            elevation=DualUnitValue.from_cell(
                row["elevation_m"], ELEVATION, sentinel=ELEVATION_NOT_REPORTED
            ),
            remarks=extract_remarks(raw_text),
        )

    @property
    def temp_c(self) -> Optional[float]:
        return self.temperature.as_unit(CELSIUS)

    @property
    def temp_f(self) -> Optional[float]:
        return to_fahrenheit(self.temperature)

    @property
    def dewpoint_c(self) -> Optional[float]:
        return self.dewpoint.as_unit(CELSIUS)

    @property
    def dewpoint_f(self) -> Optional[float]:
        return to_fahrenheit(self.dewpoint)

    @property
    def wind_dir_cardinal(self) -> Optional[str]:
        """Cardinal direction of the wind, 'Variable', or None."""
        return self.wind_direction.cardinal

    @property
    def wind_speed_kt(self) -> Optional[float]:
        return self.wind_speed.as_unit(KNOT)

    @property
    def wind_speed_mph(self) -> Optional[float]:
        return to_mph(self.wind_speed)

    @property
    def wind_gust_kt(self) -> Optional[float]:
        return self.wind_gust.as_unit(KNOT)

    @property
    def wind_gust_mph(self) -> Optional[float]:
        return to_mph(self.wind_gust)

    @property
    def elevation_m(self) -> Optional[float]:
        return self.elevation.as_unit(METER)

    @property
    def elevation_ft(self) -> Optional[float]:
        return to_feet(self.elevation)

    @property
    def location(self) -> Optional[Point]:
        """The stations longitude and latitude as a point, if both are known."""
        if self.latitude is None or self.longitude is None:
            return None
        return Point(self.longitude, self.latitude)

    def as_dict(self) -> dict[str, Any]:
        """
        The observation as a JSON compatible dictionary, with both units of
        every dual unit value and None for anything not reported.
        """
        observation_time = None
        if self.observation_time is not None:
            observation_time = self.observation_time.isoformat()
        return {
            "raw_text": self.raw_text,
            "station_id": self.station_id,
            "observation_time": observation_time,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "temp_c": self.temp_c,
            "temp_f": self.temp_f,
            "dewpoint_c": self.dewpoint_c,
            "dewpoint_f": self.dewpoint_f,
            "wind_dir_degrees": self.wind_direction.as_json(),
            "wind_dir_cardinal": self.wind_dir_cardinal,
            "wind_speed_kt": self.wind_speed_kt,
            "wind_speed_mph": self.wind_speed_mph,
            "wind_gust_kt": self.wind_gust_kt,
            "wind_gust_mph": self.wind_gust_mph,
            "visibility_statute_mi": self.visibility_statute_mi,
            "clouds": [layer.as_dict() for layer in self.clouds],
            "altim_in_hg": self.altim_in_hg,
            "wx_string": self.wx_string,
            "flight_category": self.flight_category,
            "report_type": self.report_type,
            "elevation_m": self.elevation_m,
            "elevation_ft": self.elevation_ft,
            "remarks": self.remarks,
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        """The observation as a JSON document, see as_dict()."""
        return json.dumps(self.as_dict(), indent=indent, ensure_ascii=False)


def decode_rows(rows: Iterable[Sequence[Optional[str]]]) -> list[MetarObservation]:
    """
    Decodes feed rows into observations for CONUS stations, in the same order
    as the rows. Rows for other stations are dropped.

    Every row width is checked before anything is decoded.

    Raises:
    * FeedSchemaError -- A row does not have the expected number of columns.
    """
    rows = list(rows)
    for row_number, cells in enumerate(rows):
        check_width(len(cells), row_number)
    observations: list[MetarObservation] = []
    for cells in rows:
        row = FeedRow(cells)
        station_id = row["station_id"]
        if not is_conus_station(station_id):
            logger.debug("Skipping non-CONUS station %r", station_id)
            continue
        observations.append(MetarObservation.from_row(row))
    logger.info(
        "Decoded %d CONUS observations from %d rows", len(observations), len(rows)
    )
    return observations


def decode_frame(frame: pd.DataFrame) -> list[MetarObservation]:
    """
    Decodes a table read from the METAR cache, see decode_rows(). Every cell
    is expected to be a string, missing values may be None or NaN.

    Raises:
    * FeedSchemaError -- The table does not have the expected number of columns.
    """
    check_width(len(frame.columns))
    rows = (
        [None if pd.isna(cell) else cell for cell in cells]
        for cells in frame.itertuples(index=False, name=None)
    )
    return decode_rows(rows)
