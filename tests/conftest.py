"""Shared fixtures for the report pipeline tests."""

import pytest

from premarket.config import EmailSettings, LLMSettings, ReportConfig, SymbolUniverse
from premarket.contracts.schemas import NewsItem
from tests.stubs import FIXED_NOW


@pytest.fixture
def config():
    """Four-symbol universe; pauses are recorded by the sleeps fixture, not slept."""
    return ReportConfig(
        symbols=SymbolUniverse(indices=("SPY", "QQQ"), majors=("AAPL",), sectors=("XLK",)),
        request_delay=1.0,
        finnhub_api_key="fh-test",
        llm=LLMSettings(model="test-model", api_key="llm-test"),
        email=EmailSettings(sender="me@example.com", password="secret", recipient="you@example.com"),
    )


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def sample_news():
    return [
        NewsItem(headline=f"Story {i}", summary="", source="Reuters", url=f"http://x/{i}", timestamp=None)
        for i in range(3)
    ]
