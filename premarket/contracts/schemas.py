"""Stable payload schemas shared by the fetchers, prompt builder, parser and renderer."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Quote:
    """Point-in-time quote for one symbol. ``None`` means unknown, never zero."""

    symbol: str
    current: Optional[float] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    open: Optional[float] = None
    previous_close: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "current": self.current,
            "change": self.change,
            "changePercent": self.change_percent,
            "high": self.high,
            "low": self.low,
            "open": self.open,
            "previousClose": self.previous_close,
        }


@dataclass(frozen=True)
class NewsItem:
    headline: str
    summary: str
    source: str
    url: str
    timestamp: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headline": self.headline,
            "summary": self.summary,
            "source": self.source,
            "url": self.url,
            "datetime": self.timestamp,
        }


@dataclass(frozen=True)
class MarketSnapshot:
    """Immutable bundle of everything gathered for one run.

    Quotes keep the configured symbol order. Symbols whose fetch failed are
    simply absent. Earnings entries are provider records passed through as-is.
    """

    timestamp: str
    quotes: Tuple[Quote, ...] = ()
    news: Tuple[NewsItem, ...] = ()
    earnings: Tuple[Mapping[str, Any], ...] = ()

    def quotes_for(self, symbols: Iterable[str]) -> List[Quote]:
        wanted = set(symbols)
        return [q for q in self.quotes if q.symbol in wanted]

    @property
    def symbols(self) -> List[str]:
        return [q.symbol for q in self.quotes]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "marketData": [q.to_dict() for q in self.quotes],
            "news": [n.to_dict() for n in self.news],
            "earnings": [dict(e) for e in self.earnings],
        }


@dataclass(frozen=True)
class AggregationResult:
    """Outcome of one aggregation pass: the snapshot plus the symbols that were dropped."""

    snapshot: MarketSnapshot
    failures: Tuple[Tuple[str, str], ...] = ()

    @property
    def failed_symbols(self) -> List[str]:
        return [symbol for symbol, _ in self.failures]


class SectionKind(Enum):
    RECOGNIZED = "recognized"
    UNRECOGNIZED = "unrecognized"
    UNTITLED = "untitled"


@dataclass(frozen=True)
class ParsedSection:
    """One chunk of the model response.

    ``ordinal`` is the number the model wrote, not the catalog position.
    Untitled chunks (prose outside any numbered header) carry ``ordinal=None``
    and an empty title.
    """

    ordinal: Optional[int]
    title: str
    raw_body: str
    kind: SectionKind = SectionKind.UNTITLED

    @property
    def is_recognized(self) -> bool:
        return self.kind is SectionKind.RECOGNIZED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ordinal": self.ordinal,
            "title": self.title,
            "raw_body": self.raw_body,
            "kind": self.kind.value,
        }


@dataclass(frozen=True)
class Report:
    generated_at: datetime
    snapshot: MarketSnapshot
    sections: Tuple[ParsedSection, ...] = ()

    def titles(self) -> List[str]:
        return [s.title for s in self.sections if s.title]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def epoch_to_iso(value: Any) -> Optional[str]:
    """Convert provider epoch seconds to an ISO-8601 UTC string."""
    if value in (None, ""):
        return None
    try:
        return datetime.fromtimestamp(float(value), tz=timezone.utc).isoformat().replace("+00:00", "Z")
    except (TypeError, ValueError, OverflowError, OSError):
        return None


@dataclass(frozen=True)
class RunResult:
    """What a pipeline run hands back to its caller."""

    report: Report
    html: str
    failures: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    delivered: bool = False
