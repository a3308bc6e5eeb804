"""Typed contracts passed between pipeline stages."""

from .schemas import (
    AggregationResult,
    MarketSnapshot,
    NewsItem,
    ParsedSection,
    Quote,
    Report,
    RunResult,
    SectionKind,
)
from .sections import DEFAULT_SECTIONS, SectionSpec, find_section, section_titles

__all__ = [
    "AggregationResult",
    "MarketSnapshot",
    "NewsItem",
    "ParsedSection",
    "Quote",
    "Report",
    "RunResult",
    "SectionKind",
    "SectionSpec",
    "DEFAULT_SECTIONS",
    "find_section",
    "section_titles",
]
