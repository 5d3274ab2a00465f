"""
Human readable summaries of decoded observations for the console.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from rich.table import Table

from .common import cardinal_direction
from .metar import MetarObservation


def _f_c_str(value_f: Optional[float], value_c: Optional[float]) -> str:
    if value_c is None or value_f is None:
        return "Unspecified"
    return f"{value_f:.1f} °F ({value_c:.1f} °C)"


def _get_temp_str(obs: MetarObservation) -> str:
    return _f_c_str(obs.temp_f, obs.temp_c)


def _get_dewpoint_str(obs: MetarObservation) -> str:
    return _f_c_str(obs.dewpoint_f, obs.dewpoint_c)


def _get_wind_str(obs: MetarObservation) -> str:
    if obs.wind_direction.is_absent and obs.wind_speed_mph is None:
        return "Unspecified"
    if obs.wind_speed_kt == 0 and obs.wind_gust_kt is None:
        return "Calm"
    if obs.wind_speed_mph is None:
        sb = "Unspecified speed"
    else:
        sb = f"{obs.wind_speed_mph:.1f} mph"
    if obs.wind_direction.variable:
        sb = f"{sb} from varying directions"
    elif obs.wind_dir_cardinal is not None and obs.wind_direction.degrees is not None:
        arrow = cardinal_direction(obs.wind_direction.degrees, style="shortarrow")
        sb = f"{sb} from the {arrow}"
    if obs.wind_gust_mph is not None:
        sb = f"{sb}, gusting {obs.wind_gust_mph:.1f} mph"
    return sb


def _get_vis_str(obs: MetarObservation) -> str:
    if obs.visibility_statute_mi is None:
        return "Unspecified"
    return f"{obs.visibility_statute_mi:.2f} mi"


def _get_sky_str(obs: MetarObservation) -> str:
    if len(obs.clouds) < 1:
        return "Unspecified"
    return "\n".join(str(layer) for layer in obs.clouds)


def _get_altimeter_str(obs: MetarObservation) -> str:
    if obs.altim_in_hg is None:
        return "Unspecified"
    return f"{obs.altim_in_hg:.2f} inHg"


def _get_time_str(obs: MetarObservation) -> str:
    if obs.observation_time is None:
        return "Unspecified"
    return obs.observation_time.strftime("%d %H:%MZ")


def observation_table(observations: Iterable[MetarObservation]) -> Table:
    """A rich table with one summary row per observation."""
    table = Table(
        title="METAR Observations",
        caption="via aviationweather.gov",
        show_header=True,
    )

    table.add_column("Station")
    table.add_column("Time")
    table.add_column("Temperature", max_width=20)
    table.add_column("Dew Point", max_width=20)
    table.add_column("Wind", max_width=30)
    table.add_column("Visibility", max_width=10)
    table.add_column("Sky", max_width=24)
    table.add_column("Altimeter", max_width=12)
    table.add_column("Category")

    for obs in observations:
        table.add_row(
            obs.station_id,
            _get_time_str(obs),
            _get_temp_str(obs),
            _get_dewpoint_str(obs),
            _get_wind_str(obs),
            _get_vis_str(obs),
            _get_sky_str(obs),
            _get_altimeter_str(obs),
            obs.flight_category or "",
        )

    return table
