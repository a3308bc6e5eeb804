"""Pre-market report pipeline: Finnhub data, LLM synthesis, HTML email."""

__version__ = "0.1.0"
