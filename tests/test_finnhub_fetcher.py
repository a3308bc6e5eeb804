"""Tests for the Finnhub HTTP adapter with a mocked requests session."""

from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from premarket.data.finnhub_fetcher import FinnhubFetcher
from premarket.errors import MalformedPayloadError, ProviderError


def _response(payload=None, status_error=None, json_error=None):
    response = MagicMock()
    if status_error:
        response.raise_for_status.side_effect = status_error
    if json_error:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def fetcher(session):
    return FinnhubFetcher(api_key="test-key", session=session)


class TestFetchQuote:
    def test_maps_fields_and_sends_token(self, fetcher, session):
        session.get.return_value = _response(
            {"c": 512.3, "d": 6.2, "dp": 1.23, "h": 513.0, "l": 505.1, "o": 506.0, "pc": 506.1, "t": 1}
        )

        quote = fetcher.fetch_quote("SPY")

        assert quote.symbol == "SPY"
        assert quote.current == 512.3
        assert quote.change_percent == 1.23
        assert quote.previous_close == 506.1
        args, kwargs = session.get.call_args
        assert args[0] == "https://finnhub.io/api/v1/quote"
        assert kwargs["params"] == {"symbol": "SPY", "token": "test-key"}
        assert kwargs["timeout"] == 10

    def test_null_change_stays_unknown(self, fetcher, session):
        session.get.return_value = _response({"c": 10.0, "d": None, "dp": None, "pc": 10.0})
        quote = fetcher.fetch_quote("XLRE")

        assert quote.change_percent is None
        assert quote.change is None
        assert quote.high is None

    def test_all_zero_payload_is_malformed(self, fetcher, session):
        session.get.return_value = _response({"c": 0, "d": None, "dp": None, "h": 0, "l": 0, "o": 0, "pc": 0})
        with pytest.raises(MalformedPayloadError):
            fetcher.fetch_quote("NOPE")

    def test_non_object_payload_is_malformed(self, fetcher, session):
        session.get.return_value = _response(["unexpected"])
        with pytest.raises(MalformedPayloadError):
            fetcher.fetch_quote("SPY")

    def test_http_error_raises_provider_error(self, fetcher, session):
        session.get.return_value = _response(status_error=requests.HTTPError("429 Too Many Requests"))
        with pytest.raises(ProviderError, match="429"):
            fetcher.fetch_quote("SPY")

    def test_network_error_raises_provider_error(self, fetcher, session):
        session.get.side_effect = requests.ConnectionError("unreachable")
        with pytest.raises(ProviderError):
            fetcher.fetch_quote("SPY")

    def test_invalid_json_raises_malformed(self, fetcher, session):
        session.get.return_value = _response(json_error=ValueError("Expecting value"))
        with pytest.raises(MalformedPayloadError):
            fetcher.fetch_quote("SPY")

    def test_missing_key_raises_without_request(self, session):
        fetcher = FinnhubFetcher(api_key=None, session=session)
        with pytest.raises(ProviderError):
            fetcher.fetch_quote("SPY")
        session.get.assert_not_called()


class TestFetchNews:
    def test_caps_at_limit_and_keeps_provider_order(self, fetcher, session):
        raw = [
            {"headline": f"H{i}", "summary": "s", "source": "CNBC", "url": f"http://n/{i}", "datetime": 1760600000 + i}
            for i in range(35)
        ]
        session.get.return_value = _response(raw)

        items = fetcher.fetch_market_news(date(2026, 10, 15), date(2026, 10, 16))

        assert len(items) == 20
        assert [i.headline for i in items[:3]] == ["H0", "H1", "H2"]
        assert items[0].timestamp.endswith("Z")
        params = session.get.call_args.kwargs["params"]
        assert params["category"] == "general"
        assert params["from"] == "2026-10-15"
        assert params["to"] == "2026-10-16"

    def test_missing_datetime_gives_no_timestamp(self, fetcher, session):
        session.get.return_value = _response([{"headline": "H"}])
        items = fetcher.fetch_market_news(date(2026, 10, 15), date(2026, 10, 16))
        assert items[0].timestamp is None
        assert items[0].url == ""

    def test_non_list_payload_is_malformed(self, fetcher, session):
        session.get.return_value = _response({"error": "limit"})
        with pytest.raises(MalformedPayloadError):
            fetcher.fetch_market_news(date(2026, 10, 15), date(2026, 10, 16))


class TestFetchEarnings:
    def test_caps_at_ten_and_passes_entries_through(self, fetcher, session):
        entries = [{"symbol": f"S{i}", "hour": "bmo", "anything": i} for i in range(25)]
        session.get.return_value = _response({"earningsCalendar": entries})

        result = fetcher.fetch_earnings_calendar(date(2026, 10, 16))

        assert len(result) == 10
        assert result[0] == {"symbol": "S0", "hour": "bmo", "anything": 0}
        params = session.get.call_args.kwargs["params"]
        assert params["from"] == params["to"] == "2026-10-16"

    def test_missing_calendar_key_is_empty(self, fetcher, session):
        session.get.return_value = _response({})
        assert fetcher.fetch_earnings_calendar(date(2026, 10, 16)) == []
