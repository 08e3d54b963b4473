"""
Core layer - stable foundation for the ingestion pipeline.

Components:
- models: document dataclasses and enums
- errors: exception taxonomy
- normalizer: text cleanup, month names, year/term context
- dates: date range resolution
- classifier: label to item type
- identifiers: deterministic item IDs
- assembler: grouping, canonical sort and content hash
- validation: schema checks returning error codes
- http_client: async page fetcher
"""

from .models import (
    DayPart,
    ItemType,
    SchoolAcademicYear,
    SchoolDateItem,
    SchoolDatesDocument,
    SchoolDatesSource,
    Term,
)
from .errors import (
    ConfigurationError,
    DateParseError,
    DateRangeError,
    FetchError,
    InvalidAcademicYearError,
    ParseError,
    SchoolDatesError,
    ValidationFailedError,
)
from .dates import parse_date_range
from .classifier import audience_for, classify_label
from .identifiers import IdRegistry
from .assembler import hash_academic_years, normalize_academic_years
from .validation import is_valid_iso_date, validate_document

__all__ = [
    "DayPart",
    "ItemType",
    "SchoolAcademicYear",
    "SchoolDateItem",
    "SchoolDatesDocument",
    "SchoolDatesSource",
    "Term",
    "ConfigurationError",
    "DateParseError",
    "DateRangeError",
    "FetchError",
    "InvalidAcademicYearError",
    "ParseError",
    "SchoolDatesError",
    "ValidationFailedError",
    "parse_date_range",
    "audience_for",
    "classify_label",
    "IdRegistry",
    "hash_academic_years",
    "normalize_academic_years",
    "is_valid_iso_date",
    "validate_document",
]
