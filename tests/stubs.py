"""Hand-written stand-ins for the fetcher, synthesizer and notifier."""

from datetime import datetime, timezone

from premarket.contracts.schemas import Quote
from premarket.errors import ProviderError

FIXED_NOW = datetime(2026, 10, 16, 11, 30, tzinfo=timezone.utc)


class StubFetcher:
    """Records calls and serves canned quotes; symbols in ``failing`` raise."""

    def __init__(self, quotes=None, failing=(), news=None, earnings=None, news_error=None, earnings_error=None):
        self.quotes = quotes or {}
        self.failing = set(failing)
        self.news = news if news is not None else []
        self.earnings = earnings if earnings is not None else []
        self.news_error = news_error
        self.earnings_error = earnings_error
        self.calls = []

    def fetch_quote(self, symbol):
        self.calls.append(("quote", symbol))
        if symbol in self.failing:
            raise ProviderError(f"boom {symbol}", endpoint="quote")
        return self.quotes.get(symbol) or Quote(symbol=symbol, current=100.0, change_percent=0.5)

    def fetch_market_news(self, start, end, limit=20):
        self.calls.append(("news", start, end))
        if self.news_error:
            raise self.news_error
        return self.news

    def fetch_earnings_calendar(self, day, limit=10):
        self.calls.append(("earnings", day))
        if self.earnings_error:
            raise self.earnings_error
        return self.earnings


class StubSynthesizer:
    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.prompts = []

    def synthesize(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.response


class StubNotifier:
    def __init__(self, error=None):
        self.error = error
        self.sent = []

    def send_report(self, html, plain, subject):
        if self.error:
            raise self.error
        self.sent.append({"html": html, "plain": plain, "subject": subject})
