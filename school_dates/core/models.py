"""
Data models for the school dates document.

Python attributes are snake_case; to_dict()/from_dict() use the camelCase
keys of the persisted JSON document.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


SCHEMA_VERSION = 1
TIMEZONE = "Europe/London"


class ItemType(str, Enum):
    """Semantic type of a calendar entry."""
    TERM_START = "term_start"
    TERM_END = "term_end"
    HOLIDAY = "holiday"
    READING_WEEK = "reading_week"
    STAFF_DAY = "staff_day"
    BANK_HOLIDAY = "bank_holiday"
    EXAM = "exam"
    REOPEN = "reopen"
    INFO = "info"


class Term(str, Enum):
    """Academic term. Items outside any term carry None."""
    MICHAELMAS = "Michaelmas"
    LENT = "Lent"
    SUMMER = "Summer"


class DayPart(str, Enum):
    """Which part of the day an endpoint covers."""
    FULL = "full"
    AM = "am"
    PM = "pm"


@dataclass
class SchoolDateItem:
    """One calendar entry."""

    id: str
    type: ItemType
    label: str
    term: Optional[Term]
    academic_year: str
    start_date: str  # YYYY-MM-DD
    end_date: str  # YYYY-MM-DD
    start_day_part: DayPart = DayPart.FULL
    end_day_part: DayPart = DayPart.FULL
    notes: Optional[str] = None
    audience: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    source_text: str = ""

    def sort_key(self) -> tuple[str, str, str, str, str]:
        return (self.start_date, self.end_date, self.label, self.type.value, self.id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "label": self.label,
            "term": self.term.value if self.term else None,
            "academicYear": self.academic_year,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "startDayPart": self.start_day_part.value,
            "endDayPart": self.end_day_part.value,
            "notes": self.notes,
            "audience": list(self.audience),
            "tags": list(self.tags),
            "sourceText": self.source_text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SchoolDateItem":
        term = data.get("term")
        return cls(
            id=data["id"],
            type=ItemType(data["type"]),
            label=data["label"],
            term=Term(term) if term else None,
            academic_year=data["academicYear"],
            start_date=data["startDate"],
            end_date=data["endDate"],
            start_day_part=DayPart(data.get("startDayPart", "full")),
            end_day_part=DayPart(data.get("endDayPart", "full")),
            notes=data.get("notes"),
            audience=list(data.get("audience", [])),
            tags=list(data.get("tags", [])),
            source_text=data.get("sourceText", ""),
        )


@dataclass
class SchoolAcademicYear:
    """Items attributed to one academic year, e.g. 2025-2026."""

    label: str
    items: list[SchoolDateItem] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SchoolAcademicYear":
        return cls(
            label=data["label"],
            items=[SchoolDateItem.from_dict(item) for item in data.get("items", [])],
        )


@dataclass
class SchoolDatesSource:
    """Where and when a document was scraped."""

    name: str
    slug: str
    url: str
    fetched_at: str
    etag: Optional[str] = None
    last_modified: Optional[str] = None
    content_hash: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "slug": self.slug,
            "url": self.url,
            "fetchedAt": self.fetched_at,
        }
        if self.etag is not None:
            data["etag"] = self.etag
        if self.last_modified is not None:
            data["lastModified"] = self.last_modified
        if self.content_hash is not None:
            data["contentHash"] = self.content_hash
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SchoolDatesSource":
        return cls(
            name=data["name"],
            slug=data["slug"],
            url=data["url"],
            fetched_at=data["fetchedAt"],
            etag=data.get("etag"),
            last_modified=data.get("lastModified"),
            content_hash=data.get("contentHash"),
        )


@dataclass
class SchoolDatesDocument:
    """
    Root aggregate persisted per school slug.

    Fully replaced on every refresh that detects a change.
    """

    source: SchoolDatesSource
    academic_years: list[SchoolAcademicYear] = field(default_factory=list)
    schema_version: int = SCHEMA_VERSION
    timezone: str = TIMEZONE

    @property
    def item_count(self) -> int:
        return sum(len(year.items) for year in self.academic_years)

    def to_dict(self) -> dict:
        return {
            "schemaVersion": self.schema_version,
            "source": self.source.to_dict(),
            "timezone": self.timezone,
            "academicYears": [year.to_dict() for year in self.academic_years],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SchoolDatesDocument":
        return cls(
            schema_version=data.get("schemaVersion", SCHEMA_VERSION),
            source=SchoolDatesSource.from_dict(data["source"]),
            timezone=data.get("timezone", TIMEZONE),
            academic_years=[
                SchoolAcademicYear.from_dict(year)
                for year in data.get("academicYears", [])
            ],
        )


# Pipeline-only types, never persisted.


@dataclass(frozen=True)
class HeadingBlock:
    level: int
    text: str


@dataclass(frozen=True)
class RowBlock:
    cells: tuple[str, ...]


@dataclass(frozen=True)
class TextBlock:
    text: str


ParsedBlock = Union[HeadingBlock, RowBlock, TextBlock]


@dataclass(frozen=True)
class ParsedRow:
    """A label and the raw text holding its date(s)."""
    label: str
    date_text: str


@dataclass(frozen=True)
class ParsedDate:
    """One resolved endpoint; month is kept to infer the second endpoint's year."""
    date: str
    day_part: DayPart
    month: int


@dataclass(frozen=True)
class DateRange:
    start_date: str
    end_date: str
    start_day_part: DayPart = DayPart.FULL
    end_day_part: DayPart = DayPart.FULL


@dataclass(frozen=True)
class Candidate:
    """A label/date pair placed in an academic year and term."""
    label: str
    date_text: str
    academic_year: str
    term: Optional[Term] = None
