"""Render a parsed Report into the HTML email and its plain-text alternative."""

import logging
import re
from datetime import datetime
from html import escape
from typing import List, Optional, Sequence

from ..config import ReportConfig
from ..contracts.schemas import ParsedSection, Quote, Report

logger = logging.getLogger(__name__)

BULLET_RE = re.compile(r"^\s*-\s+(.+)$")
BOLD_RE = re.compile(r"\*\*(.+?)\*\*")

UP_COLOR = "#10b981"
DOWN_COLOR = "#ef4444"
FLAT_COLOR = "#6c757d"

DISCLAIMER = (
    "This report is for informational purposes only and does not constitute investment advice, "
    "financial advice, trading advice, or any other sort of advice. Do your own research and "
    "consult with a licensed financial advisor before making any investment decisions."
)


def format_price(value: Optional[float]) -> str:
    return f"${value:,.2f}" if value is not None else "N/A"


def format_change(value: Optional[float]) -> str:
    return f"{value:+.2f}%" if value is not None else "N/A"


def format_long_date(moment: datetime) -> str:
    return f"{moment:%A, %B} {moment.day}, {moment.year}"


def build_subject(generated_at: datetime, title: str = "Daily Market Report") -> str:
    return f"{title} - {generated_at:%b} {generated_at.day}, {generated_at.year}"


def _bold(text: str) -> str:
    return BOLD_RE.sub(r"<strong>\1</strong>", text)


def format_body(raw_body: str) -> str:
    """Convert section text to HTML.

    Consecutive dash lines become one list, ``**x**`` becomes bold, and
    blank-line separated runs become paragraphs with single newlines kept as
    line breaks. Text is escaped before any markup is added.
    """
    html_parts: List[str] = []
    paragraph: List[str] = []
    items: List[str] = []

    def flush_paragraph():
        if paragraph:
            html_parts.append("<p>" + "<br>".join(_bold(line) for line in paragraph) + "</p>")
            paragraph.clear()

    def flush_list():
        if items:
            html_parts.append("<ul>" + "".join(f"<li>{_bold(item)}</li>" for item in items) + "</ul>")
            items.clear()

    for line in escape(raw_body or "", quote=False).split("\n"):
        stripped = line.strip()
        bullet = BULLET_RE.match(line)
        if bullet:
            flush_paragraph()
            items.append(bullet.group(1).strip())
        elif not stripped:
            flush_paragraph()
            flush_list()
        else:
            flush_list()
            paragraph.append(stripped)

    flush_paragraph()
    flush_list()

    return "\n".join(html_parts)


class ReportRenderer:
    """Builds the styled HTML document delivered for one run."""

    def __init__(self, config: ReportConfig):
        self.config = config
        self.title = config.title
        self.index_symbols = config.symbols.indices

    def index_quotes(self, report: Report) -> List[Quote]:
        return report.snapshot.quotes_for(self.index_symbols)

    def _render_card(self, quote: Quote) -> str:
        change = quote.change_percent
        if change is None:
            color, arrow = FLAT_COLOR, ""
        elif change >= 0:
            color, arrow = UP_COLOR, "&#9650; "
        else:
            color, arrow = DOWN_COLOR, "&#9660; "
        return (
            f'<div class="card" style="border-left: 4px solid {color};">'
            f'<div class="card-symbol">{escape(quote.symbol)}</div>'
            f'<div class="card-price">{format_price(quote.current)}</div>'
            f'<div class="card-change" style="color: {color};">{arrow}{format_change(change)}</div>'
            "</div>"
        )

    def render_summary_strip(self, quotes: Sequence[Quote]) -> str:
        if not quotes:
            return '<p class="muted">No index data available.</p>'
        return '<div class="strip">' + "".join(self._render_card(q) for q in quotes) + "</div>"

    def render_section(self, section: ParsedSection) -> str:
        body = format_body(section.raw_body)
        if section.is_recognized:
            return (
                '<div class="section">'
                f'<h2 class="section-title">{section.ordinal}. {escape(section.title)}</h2>'
                f'<div class="section-body">{body}</div>'
                "</div>"
            )
        # Unrecognized headers stay visible as body text instead of being dropped
        if section.title:
            heading = f"{section.ordinal}. {escape(section.title)}"
            body = f"<p><strong>{heading}</strong></p>\n{body}"
        return f'<div class="section-untitled">{body}</div>'

    def render(self, report: Report) -> str:
        generated = report.generated_at
        strip = self.render_summary_strip(self.index_quotes(report))
        sections = "\n".join(self.render_section(s) for s in report.sections)
        logger.info(f"Rendering report with {len(report.sections)} sections")

        return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(self.title)}</title>
  <style>
    body {{ margin: 0; padding: 0; background-color: #f0f2f5; font-family: 'Helvetica Neue', Helvetica, Arial, sans-serif; }}
    .wrapper {{ max-width: 900px; margin: 0 auto; background-color: #ffffff; }}
    .masthead {{ background: #1a1a1a; color: #ffffff; padding: 50px 40px; }}
    .kicker {{ font-size: 14px; color: #D4AF37; font-weight: 600; letter-spacing: 2px; }}
    .masthead h1 {{ margin: 12px 0 0 0; font-size: 42px; font-weight: 800; }}
    .dateline {{ margin-top: 16px; padding-top: 16px; border-top: 2px solid #D4AF37; color: #D4AF37; }}
    .snapshot {{ padding: 30px 40px; border-bottom: 1px solid #e5e7eb; }}
    .snapshot h3 {{ margin: 0 0 20px 0; font-size: 16px; color: #6c757d; text-transform: uppercase; letter-spacing: 1px; }}
    .strip {{ display: flex; gap: 16px; flex-wrap: wrap; }}
    .card {{ flex: 1; min-width: 150px; background: #f8f9fa; padding: 16px; border-radius: 8px; text-align: center; }}
    .card-symbol {{ font-size: 13px; color: #6c757d; font-weight: 600; margin-bottom: 8px; }}
    .card-price {{ font-size: 22px; font-weight: 700; color: #1a1a1a; margin-bottom: 4px; }}
    .card-change {{ font-size: 14px; font-weight: 600; }}
    .content {{ padding: 50px 40px; color: #2c3e50; font-size: 15px; line-height: 1.7; }}
    .section {{ margin-bottom: 40px; page-break-inside: avoid; }}
    .section-title {{ background: #D4AF37; color: #1a1a1a; font-size: 20px; margin: 0 0 20px 0; padding: 12px 20px; border-radius: 4px; }}
    .section-body, .section-untitled {{ padding: 0 10px; margin-bottom: 20px; }}
    .footer {{ background: #f8f9fa; padding: 40px; border-top: 3px solid #D4AF37; text-align: center; font-size: 12px; color: #868e96; }}
    .muted {{ color: #6c757d; }}
  </style>
</head>
<body>
  <div class="wrapper">
    <div class="masthead">
      <div class="kicker">INSTITUTIONAL RESEARCH</div>
      <h1>{escape(self.title)}</h1>
      <div class="dateline">
        <p>{format_long_date(generated)}</p>
        <p>Market Analysis &bull; Generated at {generated:%H:%M %Z}</p>
      </div>
    </div>
    <div class="snapshot">
      <h3>Market Snapshot</h3>
      {strip}
    </div>
    <div class="content">
{sections}
    </div>
    <div class="footer">
      <p>This report is generated automatically from Finnhub market data and AI analysis ({escape(self.config.llm.model)}).</p>
      <p><strong>IMPORTANT DISCLAIMER:</strong> {DISCLAIMER}</p>
    </div>
  </div>
</body>
</html>
"""

    def render_plain(self, report: Report) -> str:
        """Plain-text alternative part for mail clients without HTML."""
        generated = report.generated_at
        lines = [self.title, format_long_date(generated), ""]
        for quote in self.index_quotes(report):
            lines.append(f"{quote.symbol}: {format_price(quote.current)} ({format_change(quote.change_percent)})")
        lines.append("")
        for section in report.sections:
            if section.title:
                lines.append(f"{section.ordinal}. {section.title}")
            lines.append(section.raw_body.strip())
            lines.append("")
        lines.append(DISCLAIMER)
        return "\n".join(lines)
