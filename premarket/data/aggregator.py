"""Sequential, rate-limited collection of quotes, news and earnings.

The quote provider enforces a requests-per-minute ceiling, so symbols are
fetched one at a time with a fixed pause between calls. A failure for one
symbol drops that symbol; news and earnings degrade to empty lists.
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..config import MAX_EARNINGS_ENTRIES, MAX_NEWS_ITEMS, ReportConfig
from ..contracts.schemas import AggregationResult, MarketSnapshot, NewsItem, Quote, utc_now
from ..observability.provider_metrics import ProviderMetrics
from .finnhub_fetcher import FinnhubFetcher

logger = logging.getLogger(__name__)


class MarketDataAggregator:
    """Collect one MarketSnapshot per run from a single provider."""

    def __init__(
        self,
        fetcher: FinnhubFetcher,
        config: ReportConfig,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = utc_now,
        metrics: Optional[ProviderMetrics] = None,
    ):
        """Initialize the aggregator.

        Args:
            fetcher: Object exposing fetch_quote, fetch_market_news and fetch_earnings_calendar.
            config: Run configuration (symbol universe, delay, caps).
            sleep: Pause function used between quote calls.
            clock: Source of the run timestamp and the news/earnings dates.
            metrics: Optional shared telemetry collector.
        """
        self.fetcher = fetcher
        self.config = config
        self.request_delay = config.request_delay
        self.sleep = sleep
        self.clock = clock
        self.metrics = metrics or ProviderMetrics()

    def fetch_quotes(self, symbols: Sequence[str]) -> Tuple[List[Quote], List[Tuple[str, str]]]:
        """Fold over the symbols, returning (successes, failures) in input order."""
        quotes: List[Quote] = []
        failures: List[Tuple[str, str]] = []

        for i, symbol in enumerate(symbols, 1):
            # Rate limiting
            if i > 1:  # Don't delay on first request
                self.sleep(self.request_delay)

            try:
                with self.metrics.track("finnhub.quote"):
                    quote = self.fetcher.fetch_quote(symbol)
            except Exception as exc:
                logger.error(f"Error fetching data for {symbol}: {exc}")
                failures.append((symbol, str(exc)))
                continue

            quotes.append(quote)

        return quotes, failures

    def fetch_news(self, today) -> List[NewsItem]:
        start = today - timedelta(days=1)
        limit = min(self.config.news_limit, MAX_NEWS_ITEMS)
        try:
            with self.metrics.track("finnhub.news"):
                news = self.fetcher.fetch_market_news(start, today, limit=limit)
            return list(news)[:limit]
        except Exception as exc:
            logger.warning(f"Error fetching news: {exc}")
            return []

    def fetch_earnings(self, today) -> List[Dict[str, Any]]:
        limit = min(self.config.earnings_limit, MAX_EARNINGS_ENTRIES)
        try:
            with self.metrics.track("finnhub.earnings"):
                earnings = self.fetcher.fetch_earnings_calendar(today, limit=limit)
            return list(earnings)[:limit]
        except Exception as exc:
            logger.warning(f"Error fetching earnings: {exc}")
            return []

    def collect(self, symbols: Optional[Sequence[str]] = None) -> AggregationResult:
        """Gather quotes for every symbol, then news and earnings.

        Never raises: anything that goes wrong degrades the affected part of
        the snapshot to empty.
        """
        symbols = list(self.config.all_symbols if symbols is None else symbols)
        now = self.clock()
        today = now.date()

        logger.info("Collecting market data...")
        logger.info(f"Total symbols: {len(symbols)}")
        logger.info(f"Rate limit: {self.request_delay:.1f}s between quote requests")

        try:
            quotes, failures = self.fetch_quotes(symbols)
        except Exception as exc:
            logger.error(f"Quote collection aborted: {exc}")
            quotes, failures = [], [(s, str(exc)) for s in symbols]

        news = self.fetch_news(today)
        earnings = self.fetch_earnings(today)

        snapshot = MarketSnapshot(
            timestamp=now.isoformat(),
            quotes=tuple(quotes),
            news=tuple(news),
            earnings=tuple(earnings),
        )

        logger.info(f"Collected data for {len(quotes)}/{len(symbols)} symbols")
        if failures:
            logger.warning(f"Dropped symbols: {', '.join(s for s, _ in failures)}")
        logger.info(f"Collected {len(news)} news articles")
        logger.info(f"Collected {len(earnings)} earnings reports")
        self.metrics.log_summary(logger)

        return AggregationResult(snapshot=snapshot, failures=tuple(failures))
