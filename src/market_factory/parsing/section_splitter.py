"""
Heuristic Section Splitter

Recovers the three market sections from free-form model prose when the answer
is not valid JSON. Works line by line as a small state machine:

    SEEKING     -> a header line opens a section          -> COLLECTING
    COLLECTING  -> a header line, or a blank run followed
                   by a delimited line, closes the section -> FINALIZING
    FINALIZING  -> the section is stored and the scan resumes at the
                   boundary line                           -> SEEKING

A header line holds one of the section keywords AND a colon or a markdown
heading marker, so keywords merely mentioned in prose do not open a section.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from market_factory.parsing.schemas import NOT_FOUND_SENTINEL, MarketDetails

LOGGER = logging.getLogger(__name__)

# Target field -> keywords, matched case-insensitively as substrings
KEYWORD_SETS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("resolution_criteria", ("resolution", "criteria")),
    ("description", ("description",)),
    ("edge_cases", ("edge", "cases")),
)
HEADER_DELIMITERS = (":", "#")


class SplitterState(Enum):
    SEEKING = "seeking"
    COLLECTING = "collecting"
    FINALIZING = "finalizing"


@dataclass
class SectionMatch:
    field_name: str
    keywords: Tuple[str, ...]
    start_index: int
    lines: List[str] = field(default_factory=list)

    def has_content(self) -> bool:
        return any(line.strip() for line in self.lines)

    def finalize(self) -> str:
        return "\n".join(self.lines).strip()


def is_delimited(line: str) -> bool:
    return any(delimiter in line for delimiter in HEADER_DELIMITERS)


def match_header(
    line: str,
    keyword_sets: Sequence[Tuple[str, Tuple[str, ...]]] = KEYWORD_SETS,
) -> Optional[Tuple[str, Tuple[str, ...]]]:
    """
    Check whether a line is a section header.

    Args:
        line: Raw text line
        keyword_sets: (field, keywords) pairs to test

    Returns:
        The (field, keywords) pair the header belongs to, or None. When several
        sets match, the one whose keyword appears first in the line wins.
    """
    lowered = line.lower()
    if not is_delimited(lowered):
        return None

    best = None
    best_position = None
    for field_name, keywords in keyword_sets:
        positions = [lowered.find(keyword) for keyword in keywords if keyword in lowered]
        if not positions:
            continue
        position = min(positions)
        if best_position is None or position < best_position:
            best = (field_name, keywords)
            best_position = position
    return best


def _next_non_blank(lines: List[str], start: int) -> int:
    index = start
    while index < len(lines) and not lines[index].strip():
        index += 1
    return index


class SectionSplitter:
    """Single pass, line oriented splitter. Never fails; unmatched sections get the sentinel."""

    def __init__(
        self,
        keyword_sets: Sequence[Tuple[str, Tuple[str, ...]]] = KEYWORD_SETS,
        not_found: str = NOT_FOUND_SENTINEL,
    ):
        self.keyword_sets = keyword_sets
        self.not_found = not_found

    def scan(self, raw: str) -> List[SectionMatch]:
        """Return every section found in the text, in source order."""
        lines = (raw or "").splitlines()
        state = SplitterState.SEEKING
        current: Optional[SectionMatch] = None
        sections: List[SectionMatch] = []
        index = 0

        while index < len(lines):
            line = lines[index]

            if state is SplitterState.SEEKING:
                header = match_header(line, self.keyword_sets)
                if header is not None:
                    field_name, keywords = header
                    current = SectionMatch(field_name, keywords, index)
                    state = SplitterState.COLLECTING
                    LOGGER.debug("Opened %s section at line %d", field_name, index)
                index += 1

            elif state is SplitterState.COLLECTING:
                if match_header(line, self.keyword_sets) is not None:
                    state = SplitterState.FINALIZING
                    continue

                if not line.strip() and current.has_content():
                    next_index = _next_non_blank(lines, index)
                    if next_index < len(lines) and is_delimited(lines[next_index]):
                        index = next_index
                        state = SplitterState.FINALIZING
                        continue
                    # blank run inside the section body
                    current.lines.extend(lines[index:next_index])
                    index = next_index
                    continue

                current.lines.append(line)
                index += 1

            else:
                # the boundary line at `index` is re-read in SEEKING
                LOGGER.debug(
                    "Closed %s section (lines %d-%d)",
                    current.field_name,
                    current.start_index,
                    index - 1,
                )
                sections.append(current)
                current = None
                state = SplitterState.SEEKING

        if current is not None:
            sections.append(current)
        return sections

    def split(self, raw: str) -> MarketDetails:
        bodies: Dict[str, List[str]] = {name: [] for name, _ in self.keyword_sets}
        for section in self.scan(raw):
            body = section.finalize()
            if body:
                bodies[section.field_name].append(body)

        values = {name: "\n\n".join(parts) or self.not_found for name, parts in bodies.items()}
        missing = [name for name, value in values.items() if value == self.not_found]
        if missing:
            LOGGER.info("Sections not found in response: %s", ", ".join(missing))
        return MarketDetails(**values)


def split_sections(raw: str) -> MarketDetails:
    return SectionSplitter().split(raw)
