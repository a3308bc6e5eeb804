"""The report section taxonomy.

The prompt builder prints these titles and the section parser matches them,
so both sides must read from the same catalog.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class SectionSpec:
    title: str
    instructions: Tuple[str, ...] = ()


DEFAULT_SECTIONS: Tuple[SectionSpec, ...] = (
    SectionSpec(
        "EXECUTIVE SUMMARY",
        ("Brief 2-3 sentence overview of market sentiment and key overnight developments",),
    ),
    SectionSpec(
        "MARKET OVERVIEW",
        (
            "Analysis of major indices ({indices}) performance",
            "Overall market direction and momentum",
            "Key technical levels",
        ),
    ),
    SectionSpec(
        "OVERNIGHT NEWS ANALYSIS",
        (
            "Summarize the most important news stories",
            "Explain market impact of each major story",
            "Identify themes and trends",
        ),
    ),
    SectionSpec(
        "SECTOR ANALYSIS",
        (
            "Performance breakdown by sector",
            "Leading and lagging sectors",
            "Sector rotation signals",
        ),
    ),
    SectionSpec(
        "PRE-MARKET MOVERS",
        (
            "Biggest gainers and losers",
            "Volume and volatility analysis",
            "Catalysts for significant moves",
        ),
    ),
    SectionSpec(
        "EARNINGS HIGHLIGHTS",
        (
            "Companies reporting today",
            "Expected market impact",
            "Sectors to watch",
        ),
    ),
    SectionSpec(
        "KEY ECONOMIC EVENTS",
        (
            "Important data releases or events today",
            "Expected market impact",
        ),
    ),
    SectionSpec(
        "RISK FACTORS",
        (
            "Potential headwinds or concerns",
            "Volatility indicators",
            "Key levels to watch",
        ),
    ),
    SectionSpec(
        "TRADING OPPORTUNITIES",
        (
            "Potential setups based on overnight action",
            "Risk/reward considerations",
            "Recommended watchlist",
        ),
    ),
    SectionSpec(
        "BOTTOM LINE",
        (
            "Clear, actionable summary",
            "Market bias (bullish/bearish/neutral)",
            "Key levels and catalysts for the day",
        ),
    ),
)


def section_titles(sections: Sequence[SectionSpec] = DEFAULT_SECTIONS) -> Tuple[str, ...]:
    return tuple(spec.title for spec in sections)


def find_section(title: str, sections: Sequence[SectionSpec] = DEFAULT_SECTIONS) -> Optional[SectionSpec]:
    for spec in sections:
        if spec.title == title:
            return spec
    return None
