"""Process configuration: symbol universe, pacing, model and mail settings.

Non-secret settings come from ``config.yaml``; credentials come from the
environment (a local ``.env`` is loaded first). The resulting
``ReportConfig`` is frozen and handed explicitly to every component.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from dotenv import load_dotenv

from .contracts.sections import DEFAULT_SECTIONS, SectionSpec
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SYMBOLS: Dict[str, Tuple[str, ...]] = {
    "indices": ("SPY", "QQQ", "DIA", "IWM"),
    "majors": ("AAPL", "MSFT", "GOOGL", "AMZN", "NVDA", "TSLA", "META"),
    "sectors": ("XLK", "XLF", "XLE", "XLV", "XLI", "XLY", "XLP", "XLRE", "XLB", "XLU", "XLC"),
}
SYMBOL_CATEGORIES = ("indices", "majors", "sectors")

# Hard ceilings on the secondary feeds; config may lower them, never raise them
MAX_NEWS_ITEMS = 20
MAX_EARNINGS_ENTRIES = 10


@dataclass(frozen=True)
class SymbolUniverse:
    indices: Tuple[str, ...] = DEFAULT_SYMBOLS["indices"]
    majors: Tuple[str, ...] = DEFAULT_SYMBOLS["majors"]
    sectors: Tuple[str, ...] = DEFAULT_SYMBOLS["sectors"]

    @property
    def all_symbols(self) -> Tuple[str, ...]:
        return self.indices + self.majors + self.sectors


@dataclass(frozen=True)
class LLMSettings:
    model: str = "claude-sonnet-4-20250514"
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    max_tokens: int = 4096
    temperature: float = 0.3


@dataclass(frozen=True)
class EmailSettings:
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    sender: Optional[str] = None
    password: str = ""
    recipient: Optional[str] = None
    timeout: int = 30


@dataclass(frozen=True)
class ReportConfig:
    symbols: SymbolUniverse = field(default_factory=SymbolUniverse)
    request_delay: float = 1.0
    request_timeout: int = 10
    news_limit: int = MAX_NEWS_ITEMS
    earnings_limit: int = MAX_EARNINGS_ENTRIES
    finnhub_api_key: Optional[str] = None
    llm: LLMSettings = field(default_factory=LLMSettings)
    email: EmailSettings = field(default_factory=EmailSettings)
    title: str = "Daily Market Report"
    require_all_sections: bool = False
    sections: Tuple[SectionSpec, ...] = DEFAULT_SECTIONS

    @property
    def all_symbols(self) -> Tuple[str, ...]:
        return self.symbols.all_symbols

    def missing_credentials(self, deliver: bool = True) -> List[str]:
        """Names of required environment variables that are not set."""
        missing = []
        if not self.finnhub_api_key:
            missing.append("FINNHUB_API_KEY")
        if not self.llm.api_key:
            missing.append("LLM_API_KEY")
        if deliver:
            if not self.email.sender:
                missing.append("EMAIL_SENDER")
            if not self.email.password:
                missing.append("EMAIL_PASSWORD")
            if not self.email.recipient:
                missing.append("EMAIL_RECIPIENT")
        return missing


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config path %s not found. Using built-in defaults.", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


def _build_universe(raw: Any) -> SymbolUniverse:
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ConfigError("symbols must be a mapping of category -> list")

    categories: Dict[str, Tuple[str, ...]] = {}
    for name in SYMBOL_CATEGORIES:
        values = raw.get(name, DEFAULT_SYMBOLS[name])
        if not isinstance(values, list) and not isinstance(values, tuple):
            raise ConfigError(f"symbols.{name} must be a list")
        categories[name] = tuple(str(v).strip().upper() for v in values if str(v).strip())

    unknown = set(raw) - set(SYMBOL_CATEGORIES)
    if unknown:
        logger.warning("Ignoring unknown symbol categories: %s", ", ".join(sorted(unknown)))

    seen: Dict[str, str] = {}
    for name in SYMBOL_CATEGORIES:
        for symbol in categories[name]:
            if symbol in seen:
                raise ConfigError(f"Symbol {symbol} is listed in both '{seen[symbol]}' and '{name}'")
            seen[symbol] = name

    return SymbolUniverse(**categories)


def _number(section: Dict[str, Any], key: str, default, cast):
    value = section.get(key, default)
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be a number, got {value!r}") from exc


def _limit(section: Dict[str, Any], key: str, ceiling: int) -> int:
    value = _number(section, key, ceiling, int)
    if not 0 <= value <= ceiling:
        raise ConfigError(f"fetch.{key} must be between 0 and {ceiling}, got {value}")
    return value


def _flag(section: Dict[str, Any], key: str, default: bool) -> bool:
    value = section.get(key, default)
    # a quoted "false" must not read as True
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}")
    return value


def load_config(config_path: str = "config.yaml", env_file: Optional[str] = None) -> ReportConfig:
    """Build the run configuration from YAML plus environment credentials.

    Args:
        config_path: Path to the YAML settings file. A missing file means defaults.
        env_file: Optional explicit ``.env`` path; the default search is used otherwise.

    Returns:
        A frozen ``ReportConfig``.
    """
    load_dotenv(env_file)
    data = _read_yaml(Path(config_path))

    fetch = data.get("fetch") or {}
    llm_raw = data.get("llm") or {}
    email_raw = data.get("email") or {}
    report_raw = data.get("report") or {}

    request_delay = _number(fetch, "request_delay", 1.0, float)
    if request_delay < 0:
        raise ConfigError("fetch.request_delay must not be negative")

    raw_password = os.getenv("EMAIL_PASSWORD", "")
    # Gmail app passwords are displayed as 'xxxx xxxx xxxx xxxx'
    password = raw_password.strip().replace(" ", "") if raw_password else ""
    sender = os.getenv("EMAIL_SENDER") or None

    return ReportConfig(
        symbols=_build_universe(data.get("symbols")),
        request_delay=request_delay,
        request_timeout=_number(fetch, "request_timeout", 10, int),
        news_limit=_limit(fetch, "news_limit", MAX_NEWS_ITEMS),
        earnings_limit=_limit(fetch, "earnings_limit", MAX_EARNINGS_ENTRIES),
        finnhub_api_key=os.getenv("FINNHUB_API_KEY") or None,
        llm=LLMSettings(
            model=str(llm_raw.get("model", LLMSettings.model)),
            base_url=llm_raw.get("base_url") or os.getenv("LLM_BASE_URL") or None,
            api_key=os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY") or None,
            max_tokens=_number(llm_raw, "max_tokens", 4096, int),
            temperature=_number(llm_raw, "temperature", 0.3, float),
        ),
        email=EmailSettings(
            smtp_server=str(email_raw.get("smtp_server", EmailSettings.smtp_server)),
            smtp_port=_number(email_raw, "smtp_port", 587, int),
            sender=sender,
            password=password,
            recipient=os.getenv("EMAIL_RECIPIENT") or sender,
            timeout=_number(email_raw, "timeout", 30, int),
        ),
        title=str(report_raw.get("title", ReportConfig.title)),
        require_all_sections=_flag(report_raw, "require_all_sections", False),
    )
