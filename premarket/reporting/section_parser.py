"""Parse the model's narrative back into numbered report sections.

A header is a whole line of the form ``<integer>. <UPPERCASE WORDS>``.
Words are runs of A-Z, optionally joined by single hyphens (``PRE-MARKET``).
Anything else on the line (digits, other punctuation, lowercase) means the
line is ordinary body text.
"""

import logging
import re
from typing import List, Sequence

from ..contracts.schemas import ParsedSection, SectionKind
from ..contracts.sections import DEFAULT_SECTIONS, SectionSpec, find_section, section_titles

logger = logging.getLogger(__name__)

_WORD = r"[A-Z]+(?:-[A-Z]+)*"
HEADER_RE = re.compile(rf"^(\d+)\.[ \t]+({_WORD}(?:[ \t]+{_WORD})*)[ \t]*$", re.MULTILINE)


def _strip_header_line(chunk: str, header_end: int) -> str:
    body = chunk[header_end:]
    return body[1:] if body.startswith("\n") else body


def parse_sections(text: str, sections: Sequence[SectionSpec] = DEFAULT_SECTIONS) -> List[ParsedSection]:
    """Split response text into sections in original order.

    Each header line opens the chunk it introduces. Text before the first
    header, or the whole text when there are no headers, is kept as an
    untitled section so nothing the model wrote is lost. Ordinals are passed
    through exactly as written.
    """
    text = (text or "").replace("\r\n", "\n")
    matches = list(HEADER_RE.finditer(text))

    if not matches:
        return [ParsedSection(ordinal=None, title="", raw_body=text, kind=SectionKind.UNTITLED)]

    parsed: List[ParsedSection] = []
    leading = text[: matches[0].start()]
    if leading.strip():
        parsed.append(ParsedSection(ordinal=None, title="", raw_body=leading, kind=SectionKind.UNTITLED))

    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        chunk = text[match.start():end]
        title = re.sub(r"[ \t]+", " ", match.group(2).strip())
        kind = SectionKind.RECOGNIZED if find_section(title, sections) is not None else SectionKind.UNRECOGNIZED
        parsed.append(
            ParsedSection(
                ordinal=int(match.group(1)),
                title=title,
                raw_body=_strip_header_line(chunk, match.end() - match.start()),
                kind=kind,
            )
        )

    unrecognized = [s.title for s in parsed if s.kind is SectionKind.UNRECOGNIZED]
    if unrecognized:
        logger.info(f"Unrecognized section titles: {', '.join(unrecognized)}")
    return parsed


def check_coverage(parsed: Sequence[ParsedSection], sections: Sequence[SectionSpec] = DEFAULT_SECTIONS) -> List[str]:
    """Return catalog titles with no recognized section, in catalog order."""
    present = {s.title for s in parsed if s.kind is SectionKind.RECOGNIZED}
    return [title for title in section_titles(sections) if title not in present]
