"""
Command line entry point. Downloads the METAR cache and prints the decoded
observations for CONUS stations.

Examples:
    python -m wxfeed KSJC KSFO
    python -m wxfeed --json KSJC
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .cache import METAR_CACHE_URL, latest_observations
from .errors import FeedError
from .report import observation_table

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for the wxfeed command."""
    parser = argparse.ArgumentParser(
        prog="wxfeed",
        description="Decode the latest METARs for CONUS stations from aviationweather.gov",
    )
    parser.add_argument(
        "stations",
        nargs="*",
        metavar="STATION",
        help="ICAO station identifiers to show, all CONUS stations if none given",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON document per observation instead of a table",
    )
    parser.add_argument(
        "--url",
        default=os.environ.get("WXFEED_URL", METAR_CACHE_URL),
        help="Location of the gzipped METAR cache (env WXFEED_URL)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=float(os.environ.get("WXFEED_TIMEOUT", "10")),
        help="HTTP timeout in seconds (env WXFEED_TIMEOUT)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug messages",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True))],
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Runs the command, returning the process exit code."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        observations = latest_observations(url=args.url, timeout=args.timeout)
    except FeedError as ex:
        logger.error("%s", ex)
        return 1

    if args.stations:
        wanted = {station.upper() for station in args.stations}
        observations = [obs for obs in observations if obs.station_id in wanted]
        missing = wanted.difference(obs.station_id for obs in observations)
        for station in sorted(missing):
            logger.warning("No observation for station '%s'", station)

    console = Console()
    if args.json:
        for obs in observations:
            console.print_json(obs.to_json())
    else:
        console.print(observation_table(observations))
    return 0


if __name__ == "__main__":
    sys.exit(main())
