"""
Block interpretation into dated candidates.

Term-date pages announce the academic year and term in headings and list
the dates underneath, so blocks are read in order with a small running
state (current academic year, current term). Each step is a pure
transition:

    step(state, block) -> (state, Optional[ParsedRow])

and interpret_blocks() folds the whole sequence.
"""

import re
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Optional

import structlog

from school_dates.core.models import (
    Candidate,
    HeadingBlock,
    ParsedBlock,
    ParsedRow,
    RowBlock,
    Term,
    TextBlock,
)
from school_dates.core.normalizer import (
    clean_text,
    contains_month,
    infer_term,
    parse_academic_year_label,
)

logger = structlog.get_logger(__name__)


_STAFF_DAYS_SUMMARY_RE = re.compile(r"\b20\d{2}\s*[/\-]\s*20\d{2}\b")
_DASH_SEPARATOR = " - "
BOILERPLATE_MARKERS = ["website design by"]


@dataclass(frozen=True)
class InterpreterState:
    current_year: Optional[str] = None
    current_term: Optional[Term] = None

    def with_context(self, text: str) -> "InterpreterState":
        """
        Apply year/term context found in text.

        A new academic year resets the term; a term keyword in the same
        text then sets it again.
        """
        state = self
        year = parse_academic_year_label(text)
        if year:
            state = replace(state, current_year=year, current_term=None)
        term = infer_term(text)
        if term:
            state = replace(state, current_term=term)
        return state


def should_ignore_text(text: str) -> bool:
    """
    Check for text blocks that never describe an item.

    - "Staff days 2025/2026" style summary headings
    - Footer boilerplate
    """
    lowered = clean_text(text).lower()
    if not lowered:
        return True
    if "staff days" in lowered and _STAFF_DAYS_SUMMARY_RE.search(lowered):
        return True
    return any(marker in lowered for marker in BOILERPLATE_MARKERS)


def split_label_and_date(text: str) -> Optional[ParsedRow]:
    """
    Split "Label: date" or "Label - date" text.

    The colon form only needs both sides non-empty; the dash form also
    needs a month name on the date side.
    """
    colon = text.find(":")
    if 0 < colon < len(text) - 1:
        label = clean_text(text[:colon])
        date_text = clean_text(text[colon + 1:])
        if label and date_text:
            return ParsedRow(label=label, date_text=date_text)

    if _DASH_SEPARATOR in text:
        left, right = text.split(_DASH_SEPARATOR, 1)
        label = clean_text(left)
        date_text = clean_text(right)
        if label and date_text and contains_month(date_text):
            return ParsedRow(label=label, date_text=date_text)

    return None


def parse_inline(text: str) -> Optional[ParsedRow]:
    """Parse a single line of text; a line naming a month describes itself."""
    trimmed = clean_text(text)
    if not trimmed:
        return None
    parsed = split_label_and_date(trimmed)
    if parsed:
        return parsed
    if contains_month(trimmed):
        return ParsedRow(label=trimmed, date_text=trimmed)
    return None


def parse_row(cells: tuple[str, ...]) -> Optional[ParsedRow]:
    if not cells:
        return None
    if len(cells) >= 2:
        label = clean_text(cells[0])
        date_text = clean_text(" ".join(cells[1:]))
        if label and date_text:
            return ParsedRow(label=label, date_text=date_text)
    if len(cells) == 1:
        return parse_inline(cells[0])
    return None


def step(
    state: InterpreterState,
    block: ParsedBlock,
) -> tuple[InterpreterState, Optional[ParsedRow]]:
    """
    Advance the interpreter by one block.

    Returns:
        New state and the label/date pair the block yields, if any. The
        caller places the pair in new_state.current_year/current_term.
    """
    if isinstance(block, HeadingBlock):
        return state.with_context(block.text), None

    if isinstance(block, RowBlock):
        parsed = parse_row(block.cells)
        if parsed is None:
            return state.with_context(block.cells[0] if block.cells else ""), None
    elif isinstance(block, TextBlock):
        if should_ignore_text(block.text):
            return state, None
        parsed = parse_inline(block.text)
        if parsed is None:
            return state.with_context(block.text), None
    else:
        return state, None

    term = infer_term(parsed.label)
    if term:
        state = replace(state, current_term=term)
    return state, parsed


def interpret_blocks(blocks: Iterable[ParsedBlock]) -> Iterator[Candidate]:
    """
    Fold blocks into candidates placed in an academic year and term.

    Pairs seen before any academic year is known are dropped.
    """
    state = InterpreterState()
    for block in blocks:
        state, parsed = step(state, block)
        if parsed is None:
            continue
        if not state.current_year:
            logger.debug("candidate_without_year", label=parsed.label)
            continue
        yield Candidate(
            label=parsed.label,
            date_text=parsed.date_text,
            academic_year=state.current_year,
            term=state.current_term,
        )
