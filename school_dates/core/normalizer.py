"""
Normalization utilities for English term-date text.

Handles:
- Whitespace cleanup (including non-breaking spaces)
- English month names and abbreviations
- Weekday and dash normalization in date expressions
- Academic year labels (2025-2026, 2025/2026) and term keywords
"""

import re
from typing import Optional

from .models import Term


# Month aliases, index + 1 is the month number.
MONTH_ALIASES: list[tuple[str, ...]] = [
    ("january", "jan"),
    ("february", "feb"),
    ("march", "mar"),
    ("april", "apr"),
    ("may",),
    ("june", "jun"),
    ("july", "jul"),
    ("august", "aug"),
    ("september", "sept", "sep"),
    ("october", "oct"),
    ("november", "nov"),
    ("december", "dec"),
]

_MONTH_PATTERNS = [
    [re.compile(rf"\b{alias}\b") for alias in aliases]
    for aliases in MONTH_ALIASES
]

_WEEKDAY_RE = re.compile(
    r"monday|tuesday|wednesday|thursday|friday|saturday|sunday", re.IGNORECASE
)
_WEEKDAY_ABBR_RE = re.compile(
    r"\b(?:mon|tues?|wed|thu(?:rs)?|fri|sat|sun)\b", re.IGNORECASE
)
_ACADEMIC_YEAR_RE = re.compile(r"(\d{4})\s*[-/\u2013\u2014]\s*(\d{4})")
_ACADEMIC_YEAR_LABEL_RE = re.compile(r"^(\d{4})-(\d{4})$")
_WHITESPACE_RE = re.compile(r"\s+")

TERM_KEYWORDS: list[tuple[str, Term]] = [
    ("michaelmas", Term.MICHAELMAS),
    ("lent", Term.LENT),
    ("summer", Term.SUMMER),
]


def clean_text(text: Optional[str]) -> str:
    """
    Collapse whitespace runs (NBSP included) to one space and trim.

    Args:
        text: Raw text from HTML

    Returns:
        Cleaned text, "" for None
    """
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text.replace("\u00a0", " ")).strip()


def parse_month(text: str) -> Optional[int]:
    """
    Find the first month (in calendar order) named in text.

    Args:
        text: Text possibly containing "September", "Sept", "sep", ...

    Returns:
        Month number 1-12 or None
    """
    lowered = text.lower()
    for index, patterns in enumerate(_MONTH_PATTERNS):
        if any(pattern.search(lowered) for pattern in patterns):
            return index + 1
    return None


def contains_month(text: str) -> bool:
    return parse_month(text) is not None


def normalize_date_text(text: str) -> str:
    """
    Prepare a date expression for range splitting.

    - Converts en/em dashes to "-"
    - Removes weekday names and their abbreviations
    - Collapses whitespace
    """
    normalized = clean_text(text)
    normalized = normalized.replace("\u2013", "-").replace("\u2014", "-")
    normalized = _WEEKDAY_RE.sub("", normalized)
    normalized = _WEEKDAY_ABBR_RE.sub("", normalized)
    return clean_text(normalized)


def parse_academic_year_label(text: str) -> Optional[str]:
    """
    Extract an academic year label from free text.

    "Term dates 2025/2026" -> "2025-2026"

    Returns:
        Normalized "{start}-{end}" label or None
    """
    match = _ACADEMIC_YEAR_RE.search(clean_text(text))
    if not match:
        return None
    return f"{int(match.group(1))}-{int(match.group(2))}"


def parse_academic_year_range(label: str) -> Optional[tuple[int, int]]:
    """Split a strict "YYYY-YYYY" label into its two calendar years."""
    match = _ACADEMIC_YEAR_LABEL_RE.match(label or "")
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def infer_term(text: str) -> Optional[Term]:
    """Map a Michaelmas/Lent/Summer keyword in text to a Term."""
    lowered = text.lower()
    for keyword, term in TERM_KEYWORDS:
        if keyword in lowered:
            return term
    return None
