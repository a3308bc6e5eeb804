"""Market data fetching and aggregation."""

from .aggregator import MarketDataAggregator
from .finnhub_fetcher import FinnhubFetcher

__all__ = ["MarketDataAggregator", "FinnhubFetcher"]
