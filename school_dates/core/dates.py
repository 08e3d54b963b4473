"""
Date range resolution for term-date expressions.

Turns text such as "Friday 19 December (p.m.) - Monday 5 January" into
ISO start/end dates with per-endpoint day parts. Years missing from the
text are inferred from the academic year the expression belongs to.
"""

import re
from datetime import date
from typing import Optional

from .errors import DateParseError, DateRangeError, InvalidAcademicYearError
from .models import DateRange, DayPart, ParsedDate
from .normalizer import (
    clean_text,
    contains_month,
    normalize_date_text,
    parse_academic_year_range,
    parse_month,
)


_DAY_PART_MARKER_RE = re.compile(r"\(a\.m\.\)|\(p\.m\.\)", re.IGNORECASE)
_DAY_RE = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)?\b", re.IGNORECASE)
_YEAR_RE = re.compile(r"\b(20\d{2})\b")
_HYPHEN_SPLIT_RE = re.compile(r"\s*-\s*")
_TO_SPLIT_RE = re.compile(r"\s+to\s+", re.IGNORECASE)

# Months from September onwards belong to the first calendar year.
AUTUMN_FIRST_MONTH = 9


def split_date_range(text: str) -> tuple[str, Optional[str]]:
    """
    Split a normalized expression into start and optional end text.

    Tries a hyphen split, then a " to " split; both require a month name
    on each side. Anything else is a single date.
    """
    dash_parts = _HYPHEN_SPLIT_RE.split(text)
    if len(dash_parts) >= 2 and contains_month(dash_parts[0]) and contains_month(dash_parts[1]):
        end = " ".join(dash_parts[1:]).strip()
        return dash_parts[0], end or None

    to_parts = _TO_SPLIT_RE.split(text)
    if len(to_parts) == 2 and contains_month(to_parts[0]) and contains_month(to_parts[1]):
        return to_parts[0], to_parts[1]

    return text, None


def extract_day_part(text: str) -> DayPart:
    lowered = text.lower()
    if "a.m." in lowered:
        return DayPart.AM
    if "p.m." in lowered:
        return DayPart.PM
    return DayPart.FULL


def parse_day(text: str) -> Optional[int]:
    match = _DAY_RE.search(text)
    return int(match.group(1)) if match else None


def parse_year(text: str) -> Optional[int]:
    match = _YEAR_RE.search(text)
    return int(match.group(1)) if match else None


def infer_year(
    month: int,
    academic_years: tuple[int, int],
    start_month: Optional[int] = None,
) -> int:
    """
    Pick the calendar year for a month with no explicit year.

    A range end whose month precedes the start month wraps into the
    academic year's end year. Otherwise September-December fall in the
    start year and January-August in the end year.
    """
    start_year, end_year = academic_years
    if start_month and month < start_month:
        return end_year
    if month >= AUTUMN_FIRST_MONTH:
        return start_year
    return end_year


def parse_single_date(
    raw: str,
    academic_years: tuple[int, int],
    start: Optional[ParsedDate] = None,
) -> ParsedDate:
    """
    Resolve one endpoint of a date expression.

    Args:
        raw: Endpoint text, e.g. "19th December 2025 (p.m.)"
        academic_years: (start, end) calendar years of the academic year
        start: Already-resolved first endpoint when parsing a range end

    Returns:
        ParsedDate with ISO date, day part and month

    Raises:
        DateParseError: If day or month is missing or the date is impossible
    """
    cleaned = clean_text(raw)
    day_part = extract_day_part(cleaned)
    text = _DAY_PART_MARKER_RE.sub("", cleaned).strip()

    month = parse_month(text)
    day = parse_day(text)
    if not month or not day:
        raise DateParseError(raw)

    year = parse_year(text)
    if year is None:
        year = infer_year(month, academic_years, start.month if start else None)

    try:
        resolved = date(year, month, day)
    except ValueError as e:
        raise DateParseError(raw) from e

    return ParsedDate(date=resolved.isoformat(), day_part=day_part, month=month)


def parse_date_range(text: str, academic_year: str) -> DateRange:
    """
    Parse a free-text date or date range within an academic year.

    Args:
        text: Date expression, e.g. "19 December - 5 January"
        academic_year: Label of the form "2025-2026"

    Returns:
        DateRange with start/end ISO dates and day parts

    Raises:
        InvalidAcademicYearError: Label is not "YYYY-YYYY"
        DateParseError: An endpoint has no day or month
        DateRangeError: Start resolves after end
    """
    years = parse_academic_year_range(academic_year)
    if years is None:
        raise InvalidAcademicYearError(academic_year)

    start_raw, end_raw = split_date_range(normalize_date_text(text))
    start = parse_single_date(start_raw, years)
    end = parse_single_date(end_raw, years, start) if end_raw else start

    # Zero-padded ISO strings compare in calendar order.
    if start.date > end.date:
        raise DateRangeError(text)

    return DateRange(
        start_date=start.date,
        end_date=end.date,
        start_day_part=start.day_part,
        end_day_part=end.day_part,
    )
