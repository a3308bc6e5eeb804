"""End-to-end report run: aggregate, prompt, synthesize, parse, render, deliver.

Every stage starts only after the previous one finished. Synthesis and
delivery failures abort the run; nothing is sent unless the whole document
was built.
"""

import logging
from datetime import datetime
from typing import Callable, Optional, Tuple

from .ai.ai_agent import AIAgent
from .ai.prompt_builder import build_report_prompt
from .config import ReportConfig
from .contracts.schemas import Report, RunResult, utc_now
from .data.aggregator import MarketDataAggregator
from .data.finnhub_fetcher import FinnhubFetcher
from .errors import ConfigError, IncompleteReportError
from .notifications.email_notifier import EmailNotifier
from .reporting.renderer import ReportRenderer, build_subject
from .reporting.section_parser import check_coverage, parse_sections

logger = logging.getLogger(__name__)


class ReportPipeline:
    """Runs one report generation with explicitly injected collaborators."""

    def __init__(
        self,
        config: ReportConfig,
        aggregator: MarketDataAggregator,
        synthesizer: AIAgent,
        notifier: Optional[EmailNotifier] = None,
        renderer: Optional[ReportRenderer] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.aggregator = aggregator
        self.synthesizer = synthesizer
        self.notifier = notifier
        self.renderer = renderer or ReportRenderer(config)
        self.clock = clock

    @classmethod
    def from_config(cls, config: ReportConfig, deliver: bool = True) -> "ReportPipeline":
        """Wire the default Finnhub, OpenAI-compatible and SMTP collaborators.

        Raises:
            ConfigError: A credential needed for this run is missing.
        """
        missing = config.missing_credentials(deliver=deliver)
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        fetcher = FinnhubFetcher(config.finnhub_api_key, timeout=config.request_timeout)
        return cls(
            config=config,
            aggregator=MarketDataAggregator(fetcher, config),
            synthesizer=AIAgent(config.llm),
            notifier=EmailNotifier(config.email) if deliver else None,
        )

    def build_report(self) -> Tuple[Report, Tuple[Tuple[str, str], ...]]:
        """Run the stages up to a parsed Report. Returns (report, failures)."""
        result = self.aggregator.collect()
        snapshot = result.snapshot

        prompt = build_report_prompt(snapshot, self.config.sections, self.config.symbols.indices)
        logger.debug(f"Prompt length: {len(prompt)} characters")

        analysis = self.synthesizer.synthesize(prompt)
        logger.info("Generated AI analysis")

        sections = parse_sections(analysis, self.config.sections)
        missing = check_coverage(sections, self.config.sections)
        if missing:
            logger.warning(f"Model response is missing sections: {', '.join(missing)}")
            if self.config.require_all_sections:
                raise IncompleteReportError(missing)

        report = Report(generated_at=self.clock(), snapshot=snapshot, sections=tuple(sections))
        logger.info(f"Parsed {len(sections)} sections")
        return report, result.failures

    def run(self, deliver: bool = True) -> RunResult:
        logger.info("=== Daily Market Report Generator ===")
        report, failures = self.build_report()

        html = self.renderer.render(report)
        logger.info("Formatted email content")

        delivered = False
        if deliver:
            if self.notifier is None:
                raise ConfigError("Delivery requested but no notifier is configured")
            self.notifier.send_report(
                html,
                self.renderer.render_plain(report),
                build_subject(report.generated_at, self.config.title),
            )
            delivered = True

        logger.info("=== Report generation complete! ===")
        return RunResult(report=report, html=html, failures=failures, delivered=delivered)
