"""
Read-side helpers over a stored school dates document.

Used by consumers that show upcoming dates; the refresh pipeline never
calls these.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from .core.models import TIMEZONE, DayPart, SchoolDateItem, SchoolDatesDocument
from .storage.kv import KeyValueStore, school_dates_key

DEFAULT_DAYS_AHEAD = 90

DateLike = Union[date, str]


def _iso(value: DateLike) -> str:
    return value.isoformat() if isinstance(value, date) else value


async def load_school_dates(
    store: KeyValueStore,
    school_slug: str,
) -> Optional[SchoolDatesDocument]:
    """
    Read the latest document for a school.

    Returns:
        The stored document, or None when the school was never refreshed
    """
    data = await store.get_json(school_dates_key(school_slug))
    if data is None:
        return None
    return SchoolDatesDocument.from_dict(data)


def flatten_items(document: SchoolDatesDocument) -> list[SchoolDateItem]:
    return [item for year in document.academic_years for item in year.items]


def intersects_range(item: SchoolDateItem, start: DateLike, end: DateLike) -> bool:
    """True when the item's inclusive date span overlaps [start, end]."""
    return item.start_date <= _iso(end) and item.end_date >= _iso(start)


def items_between(
    document: SchoolDatesDocument,
    start: DateLike,
    end: DateLike,
) -> list[SchoolDateItem]:
    """
    Items overlapping an inclusive date window.

    Args:
        document: Stored document
        start: First day of the window
        end: Last day of the window

    Returns:
        Matching items sorted by start date, then label
    """
    matches = [
        item for item in flatten_items(document)
        if intersects_range(item, start, end)
    ]
    return sorted(matches, key=lambda item: (item.start_date, item.label))


def upcoming_items(
    document: SchoolDatesDocument,
    today: date,
    days_ahead: int = DEFAULT_DAYS_AHEAD,
) -> list[SchoolDateItem]:
    """Items from today up to days_ahead days later, including ongoing ones."""
    return items_between(document, today, today + timedelta(days=days_ahead))


def school_today(now: Optional[datetime] = None) -> date:
    """Current date in the document timezone, not the host's."""
    moment = now or datetime.now(timezone.utc)
    return moment.astimezone(ZoneInfo(TIMEZONE)).date()


def academic_year_label_for(day: date) -> str:
    """Academic year containing a day; years start in September."""
    if day.month >= 9:
        return f"{day.year}-{day.year + 1}"
    return f"{day.year - 1}-{day.year}"


def format_day_part(part: Union[DayPart, str]) -> str:
    value = DayPart(part)
    if value == DayPart.AM:
        return "AM"
    if value == DayPart.PM:
        return "PM"
    return ""
