from __future__ import annotations

import gzip

import pytest
import requests

from wxfeed import cache
from wxfeed.cache import (
    METAR_CACHE_URL,
    decompress,
    fetch_metar_cache,
    latest_observations,
    load_staged,
    parse_metar_cache,
    read_table,
    stage_metar_cache,
    strip_header,
)
from wxfeed.errors import FeedDataError, FeedError, FeedResponseError, FeedSchemaError
from wxfeed.schema import FEED_WIDTH


class TestStripHeader:
    def test_drops_banner(self):
        text = "No errors\nNo warnings\n3 ms\ndata source=metars\n1 results\na,b\n1,2\n"
        assert strip_header(text) == "a,b\n1,2"

    def test_banner_matched_as_substring(self):
        text = "  No errors found\nx\nx\nx\nx\na,b\n1,2"
        assert strip_header(text) == "a,b\n1,2"

    def test_only_one_trailing_newline_is_removed(self):
        text = "No errors\n1\n2\n3\n4\na,b\n\n"
        assert strip_header(text) == "a,b\n"

    def test_no_banner_is_unchanged(self):
        text = "raw_text,station_id\nMETAR KSJC,KSJC\n"
        assert strip_header(text) == text

    def test_short_text(self):
        assert strip_header("No errors\n") == ""


class TestDecompress:
    def test_decompress(self):
        assert decompress(gzip.compress(b"a,b\n1,2")) == "a,b\n1,2"

    def test_not_gzip(self):
        with pytest.raises(FeedDataError):
            decompress(b"definitely not gzip")

    def test_truncated(self):
        data = gzip.compress(b"a,b\n1,2\n" * 100)
        with pytest.raises(FeedDataError):
            decompress(data[:20])


class TestReadTable:
    def test_cells_are_text_and_empty_is_missing(self):
        frame = read_table("a,b,c\n010,NA,\n")
        assert frame.iloc[0, 0] == "010"
        assert frame.iloc[0, 1] == "NA"
        assert frame.isna().iloc[0, 2]

    def test_empty_payload(self):
        with pytest.raises(FeedDataError):
            read_table("")


class TestParseCache:
    def test_parse_metar_cache(self, cache_bytes):
        observations = parse_metar_cache(cache_bytes)
        assert [obs.station_id for obs in observations] == ["KSJC"]
        obs = observations[0]
        assert obs.wind_dir_cardinal == "NW"
        assert obs.wind_direction.degrees == 310
        assert obs.visibility_statute_mi == 10.0
        assert obs.elevation_ft == 59.0
        assert obs.wx_string is None
        assert obs.remarks == "AO2 SLP131"

    def test_without_banner(self, to_csv, ksjc_cells):
        data = gzip.compress(to_csv([ksjc_cells]).encode("utf-8"))
        assert len(parse_metar_cache(data)) == 1

    def test_schema_mismatch(self):
        data = gzip.compress(b"raw_text,station_id\nMETAR KSJC,KSJC\n")
        with pytest.raises(FeedSchemaError) as exc_info:
            parse_metar_cache(data)
        assert exc_info.value.expected == FEED_WIDTH
        assert exc_info.value.actual == 2


class TestFetch:
    def test_fetch(self, requests_mock, cache_bytes):
        requests_mock.get(METAR_CACHE_URL, content=cache_bytes)
        assert fetch_metar_cache() == cache_bytes
        assert requests_mock.last_request.headers["User-Agent"] == cache.USER_AGENT

    def test_fetch_custom_url(self, requests_mock):
        url = "https://example.test/metars.cache.csv.gz"
        requests_mock.get(url, content=b"data")
        assert fetch_metar_cache(url=url, timeout="5") == b"data"
        assert requests_mock.last_request.timeout == 5.0

    def test_fetch_http_error(self, requests_mock):
        requests_mock.get(METAR_CACHE_URL, status_code=503)
        with pytest.raises(FeedResponseError) as exc_info:
            fetch_metar_cache()
        assert exc_info.value.status_code == 503
        assert "HTTP 503" in str(exc_info.value)

    def test_fetch_non_200_success(self, requests_mock):
        requests_mock.get(METAR_CACHE_URL, status_code=204)
        with pytest.raises(FeedResponseError):
            fetch_metar_cache()

    def test_fetch_transport_error(self, requests_mock):
        requests_mock.get(METAR_CACHE_URL, exc=requests.exceptions.ConnectTimeout)
        with pytest.raises(FeedResponseError) as exc_info:
            fetch_metar_cache()
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value, FeedError)

    def test_latest_observations(self, requests_mock, cache_bytes):
        requests_mock.get(METAR_CACHE_URL, content=cache_bytes)
        observations = latest_observations()
        assert [obs.station_id for obs in observations] == ["KSJC"]

    def test_latest_observations_bad_payload(self, requests_mock):
        requests_mock.get(METAR_CACHE_URL, content=b"<html>maintenance</html>")
        with pytest.raises(FeedDataError):
            latest_observations()


class TestStaging:
    def test_stage_and_load(self, requests_mock, cache_bytes, tmp_path):
        requests_mock.get(METAR_CACHE_URL, content=cache_bytes)
        path = stage_metar_cache(tmp_path)
        assert path == tmp_path / "metars.gz"
        assert path.read_bytes() == cache_bytes
        observations = load_staged(path)
        assert [obs.station_id for obs in observations] == ["KSJC"]
        assert not path.exists()

    def test_failed_download_stages_nothing(self, requests_mock, tmp_path):
        requests_mock.get(METAR_CACHE_URL, status_code=404)
        with pytest.raises(FeedResponseError):
            stage_metar_cache(tmp_path)
        assert not (tmp_path / "metars.gz").exists()
