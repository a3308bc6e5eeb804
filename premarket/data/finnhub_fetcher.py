"""Finnhub API fetcher for quotes, general market news and the earnings calendar.

Each method makes exactly one HTTP request. Failures are raised as
``ProviderError`` so the caller decides whether they are fatal.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from ..contracts.schemas import NewsItem, Quote, epoch_to_iso
from ..errors import MalformedPayloadError, ProviderError

logger = logging.getLogger(__name__)

# Finnhub quote payload keys -> Quote fields
QUOTE_FIELDS = {
    "c": "current",
    "d": "change",
    "dp": "change_percent",
    "h": "high",
    "l": "low",
    "o": "open",
    "pc": "previous_close",
}


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class FinnhubFetcher:
    """Fetch market data from Finnhub."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://finnhub.io/api/v1",
        timeout: int = 10,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        if not self.api_key:
            logger.warning("No FINNHUB_API_KEY configured; every request will fail.")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Any:
        """Perform a Finnhub GET and return the decoded JSON body."""
        if not self.api_key:
            raise ProviderError("FINNHUB_API_KEY is not set", endpoint=endpoint)
        try:
            response = self.session.get(
                f"{self.base_url}/{endpoint}",
                params={**params, "token": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise ProviderError(f"Finnhub request failed for {endpoint}: {exc}", endpoint=endpoint) from exc
        except ValueError as exc:
            raise MalformedPayloadError(f"Finnhub returned invalid JSON for {endpoint}: {exc}", endpoint=endpoint) from exc

    def fetch_quote(self, symbol: str) -> Quote:
        """Fetch a point-in-time quote for one symbol.

        Missing or null numeric fields stay ``None``. Finnhub answers unknown
        symbols with an all-zero payload, which is treated as malformed.
        """
        payload = self._get("quote", {"symbol": symbol})
        if not isinstance(payload, dict) or not payload:
            raise MalformedPayloadError(f"Empty quote payload for {symbol}", endpoint="quote")

        values = {name: _to_float(payload.get(key)) for key, name in QUOTE_FIELDS.items()}
        if not values["current"] and not values["previous_close"]:
            raise MalformedPayloadError(f"No price data for {symbol}", endpoint="quote")

        return Quote(symbol=symbol, **values)

    def fetch_market_news(self, start: date, end: date, limit: int = 20) -> List[NewsItem]:
        """Fetch general market news for a date window, keeping provider order."""
        payload = self._get(
            "news",
            {"category": "general", "from": start.isoformat(), "to": end.isoformat()},
        )
        if not isinstance(payload, list):
            raise MalformedPayloadError("News payload is not a list", endpoint="news")

        items = []
        for raw in payload[:limit]:
            if not isinstance(raw, dict):
                continue
            items.append(
                NewsItem(
                    headline=(raw.get("headline") or "").strip(),
                    summary=(raw.get("summary") or "").strip(),
                    source=(raw.get("source") or "").strip(),
                    url=(raw.get("url") or "").strip(),
                    timestamp=epoch_to_iso(raw.get("datetime")),
                )
            )
        return items

    def fetch_earnings_calendar(self, day: date, limit: int = 10) -> List[Dict[str, Any]]:
        """Fetch companies reporting earnings on ``day``. Entries are passed through unvalidated."""
        payload = self._get("calendar/earnings", {"from": day.isoformat(), "to": day.isoformat()})
        if not isinstance(payload, dict):
            raise MalformedPayloadError("Earnings payload is not an object", endpoint="calendar/earnings")
        entries = payload.get("earningsCalendar") or []
        if not isinstance(entries, list):
            raise MalformedPayloadError("earningsCalendar is not a list", endpoint="calendar/earnings")
        return entries[:limit]
