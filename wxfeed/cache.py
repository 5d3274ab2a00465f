"""
Retrieval of the aviationweather.gov METAR cache file using the requests
library. The cache is a gzipped CSV of the latest METAR from every reporting
station, regenerated every few minutes.

https://aviationweather.gov/data/api/#cache
"""

from __future__ import annotations

import gzip
import io
import logging
import zlib
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd
import requests

from .errors import FeedDataError, FeedResponseError
from .metar import MetarObservation, decode_frame

logger = logging.getLogger(__name__)

METAR_CACHE_URL = "https://aviationweather.gov/data/cache/metars.cache.csv.gz"
USER_AGENT = "wxfeed (+https://aviationweather.gov/data/api/)"

# The cache starts with a banner like this ahead of the CSV header:
#   No errors
#   No warnings
#   3 ms
#   data source=metars
#   4590 results
HEADER_BANNER = "No errors"
HEADER_LINES = 5

STAGED_ARCHIVE = "metars.gz"


def _get_url(url: Optional[Any]) -> str:
    if isinstance(url, str) and len(url) > 0:
        return url
    return METAR_CACHE_URL


def _get_proxies(proxies: Optional[Any]) -> Optional[dict[str, str]]:
    if not isinstance(proxies, dict):
        return None
    return proxies


def _get_timeout(timeout: Optional[Any]) -> float:
    if isinstance(timeout, (int, float)):
        return timeout
    if isinstance(timeout, str):
        return float(timeout)
    return 10


def _create_headers() -> dict[str, str]:
    return {
        "Accept": "application/gzip",
        "User-Agent": USER_AGENT,
    }


def fetch_metar_cache(**params: Any) -> bytes:
    """
    Downloads the compressed METAR cache and returns the raw gzip bytes.

    Optional Parameters:
    * url (str) -- Location of the cache. Defaults to METAR_CACHE_URL.
    * timeout (int | float | str) -- Request timeout in seconds. Defaults to 10.
    * proxies (dict[str, str]) -- A requests proxy configuration.

    Raises:
    * FeedResponseError -- The request failed or the response status is not
    a success.
    """
    url = _get_url(params.get("url"))
    timeout = _get_timeout(params.get("timeout"))
    proxies = _get_proxies(params.get("proxies"))
    logger.info("Fetching METAR cache from %s", url)
    try:
        resp = requests.get(
            url=url,
            timeout=timeout,
            proxies=proxies,
            headers=_create_headers(),
        )
    except requests.RequestException as ex:
        raise FeedResponseError(ex) from None
    if resp.status_code != 200:
        raise FeedResponseError(
            f"Failed to download '{url}': HTTP {resp.status_code}",
            status_code=resp.status_code,
        )
    logger.info("Downloaded %d bytes", len(resp.content))
    return resp.content


def decompress(data: bytes) -> str:
    """
    Decompresses the gzipped cache into text.

    Raises:
    * FeedDataError -- The data is not valid gzip or not UTF-8 text.
    """
    try:
        text = gzip.decompress(data).decode("utf-8")
    except (OSError, EOFError, zlib.error, UnicodeDecodeError) as ex:
        raise FeedDataError(f"Cannot decompress METAR cache: {ex}") from None
    logger.debug("Decompressed %d bytes to %d characters", len(data), len(text))
    return text


def strip_header(text: str) -> str:
    """
    Removes the status banner from the top of the cache. When the first line
    contains 'No errors' the first five lines are dropped and a single trailing
    newline is removed, otherwise the text is returned as is.

    >>> strip_header("No errors\\nNo warnings\\n3 ms\\ndata source=metars\\n1 results\\na,b\\n1,2\\n")
    'a,b\\n1,2'
    """
    lines = text.split("\n")
    if HEADER_BANNER not in lines[0]:
        return text
    data = "\n".join(lines[HEADER_LINES:])
    return data.removesuffix("\n")


def read_table(text: str) -> pd.DataFrame:
    """
    Reads the CSV payload of the cache. The first line is the column header,
    every cell is kept as text and only empty cells are treated as missing.

    Raises:
    * FeedDataError -- The payload cannot be read as CSV.
    """
    try:
        return pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            na_values=[""],
        )
    except (ValueError, pd.errors.ParserError, pd.errors.EmptyDataError) as ex:
        raise FeedDataError(f"Cannot read METAR cache as CSV: {ex}") from None


def parse_metar_cache(data: bytes) -> list[MetarObservation]:
    """
    Decodes a downloaded gzip cache into CONUS observations.

    Raises:
    * FeedDataError -- The data cannot be decompressed or read.
    * FeedSchemaError -- The table does not match the column layout.
    """
    return decode_frame(read_table(strip_header(decompress(data))))


def latest_observations(**params: Any) -> list[MetarObservation]:
    """
    Downloads and decodes the current METAR cache, returning an observation
    for every CONUS station. Accepts the same parameters as
    fetch_metar_cache().

    Raises:
    * FeedResponseError -- The cache could not be downloaded.
    * FeedDataError -- The cache could not be decompressed or read.
    * FeedSchemaError -- The cache does not match the column layout.
    """
    return parse_metar_cache(fetch_metar_cache(**params))


def stage_metar_cache(directory: Union[str, Path], **params: Any) -> Path:
    """
    Downloads the METAR cache into a directory, see fetch_metar_cache() for
    parameters. Returns the path of the staged archive.

    Raises:
    * FeedResponseError -- The cache could not be downloaded.
    """
    path = Path(directory) / STAGED_ARCHIVE
    path.write_bytes(fetch_metar_cache(**params))
    logger.info("Staged METAR cache at %s", path)
    return path


def load_staged(path: Union[str, Path]) -> list[MetarObservation]:
    """
    Decodes an archive written by stage_metar_cache() and removes it.

    Raises:
    * FeedDataError -- The archive could not be decompressed or read.
    * FeedSchemaError -- The archive does not match the column layout.
    """
    path = Path(path)
    observations = parse_metar_cache(path.read_bytes())
    path.unlink()
    return observations
