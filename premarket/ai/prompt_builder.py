"""Deterministic construction of the report synthesis prompt.

The numbered header format emitted here (``N. TITLE``) is the grammar the
section parser splits on; change both together.
"""

import json
from typing import Any, List, Sequence

from ..contracts.schemas import MarketSnapshot
from ..contracts.sections import DEFAULT_SECTIONS, SectionSpec

PREAMBLE = (
    "You are an expert financial analyst. Analyze the following market data and news "
    "from the previous market close to now, and create a comprehensive pre-market report "
    "for professional traders."
)

FORMAT_RULES = (
    "FORMAT REQUIREMENTS:\n"
    "- Start every section with its number and its EXACT title in uppercase on its own line, "
    "for example \"1. EXECUTIVE SUMMARY\".\n"
    "- Use the section titles exactly as listed above. Do not rename, merge or add sections.\n"
    "- Use \"- \" at the start of a line for bullet points and **double asterisks** for emphasis.\n"
    "- Separate paragraphs with a blank line."
)

CLOSING = (
    "Keep the analysis professional, data-driven, and actionable. Use specific numbers and "
    "percentages. Be concise but thorough."
)


def section_header(ordinal: int, title: str) -> str:
    return f"{ordinal}. {title}"


def _to_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def render_section_catalog(sections: Sequence[SectionSpec], index_symbols: Sequence[str] = ()) -> str:
    """Render the numbered section list with the per-section instructions."""
    indices = ", ".join(index_symbols) if index_symbols else "major indices"
    blocks: List[str] = []
    for ordinal, spec in enumerate(sections, 1):
        header = section_header(ordinal, spec.title)
        # Continuation lines line up under the title
        indent = " " * (len(str(ordinal)) + 2)
        lines = [header] + [f"{indent}- {text.format(indices=indices)}" for text in spec.instructions]
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_report_prompt(
    snapshot: MarketSnapshot,
    sections: Sequence[SectionSpec] = DEFAULT_SECTIONS,
    index_symbols: Sequence[str] = (),
) -> str:
    """Build the single synthesis request for one snapshot.

    Args:
        snapshot: Data gathered for this run.
        sections: Ordered section catalog the response must follow.
        index_symbols: Symbols named in the market overview instructions.

    Returns:
        The prompt text. The same inputs always produce the same text.
    """
    data = snapshot.to_dict()
    parts = [
        PREAMBLE,
        f"MARKET DATA:\n{_to_json(data['marketData'])}",
        f"OVERNIGHT NEWS (Top Stories):\n{_to_json(data['news'])}",
        f"EARNINGS TODAY:\n{_to_json(data['earnings'])}",
        "Please provide a detailed analysis structured in the following sections:",
        render_section_catalog(sections, index_symbols),
        FORMAT_RULES,
        CLOSING,
    ]
    return "\n\n".join(parts)
