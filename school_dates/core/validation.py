"""
Schema validation for school dates documents.

Works on the JSON dict form so both freshly built and stored documents
can be checked. Returns a list of named error codes; an empty list means
the document may be committed.
"""

import re
from datetime import date
from typing import Any, Union

from .assembler import hash_academic_years
from .models import (
    SCHEMA_VERSION,
    TIMEZONE,
    DayPart,
    ItemType,
    SchoolAcademicYear,
    SchoolDatesDocument,
    Term,
)

ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

SCHOOL_DATE_TYPES = {item_type.value for item_type in ItemType}
SCHOOL_DAY_PARTS = {part.value for part in DayPart}
SCHOOL_TERMS = {term.value for term in Term} | {None}


def is_valid_iso_date(value: Any) -> bool:
    """Check for a real calendar date in YYYY-MM-DD form."""
    if not isinstance(value, str):
        return False
    match = ISO_DATE_RE.match(value)
    if not match:
        return False
    try:
        date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return False
    return True


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(entry, str) for entry in value)


def _item_sort_key(item: dict) -> tuple:
    return (
        item.get("startDate", ""),
        item.get("endDate", ""),
        item.get("label", ""),
        item.get("type", ""),
        item.get("id", ""),
    )


def validate_item(item: Any, year_label: Any) -> list[str]:
    if not isinstance(item, dict):
        return ["item_invalid"]

    errors = []
    if not _is_non_empty_str(item.get("id")):
        errors.append("item_id_invalid")
    if item.get("type") not in SCHOOL_DATE_TYPES:
        errors.append("item_type_invalid")
    if not _is_non_empty_str(item.get("label")):
        errors.append("item_label_invalid")
    if item.get("term") not in SCHOOL_TERMS:
        errors.append("item_term_invalid")
    if item.get("academicYear") != year_label:
        errors.append("item_year_mismatch")

    start_date = item.get("startDate")
    end_date = item.get("endDate")
    if not is_valid_iso_date(start_date) or not is_valid_iso_date(end_date):
        errors.append("item_date_invalid")
    elif start_date > end_date:
        errors.append("item_date_range_invalid")

    if item.get("startDayPart") not in SCHOOL_DAY_PARTS:
        errors.append("item_start_day_part_invalid")
    if item.get("endDayPart") not in SCHOOL_DAY_PARTS:
        errors.append("item_end_day_part_invalid")
    notes = item.get("notes")
    if notes is not None and not isinstance(notes, str):
        errors.append("item_notes_invalid")
    if not _is_str_list(item.get("audience")):
        errors.append("item_audience_invalid")
    if not _is_str_list(item.get("tags")):
        errors.append("item_tags_invalid")
    if not _is_non_empty_str(item.get("sourceText")):
        errors.append("item_source_text_invalid")
    return errors


def validate_academic_year(year: Any) -> list[str]:
    if not isinstance(year, dict):
        return ["academic_year_invalid"]

    errors = []
    label = year.get("label")
    if not _is_non_empty_str(label):
        errors.append("academic_year_label_invalid")

    items = year.get("items")
    if not isinstance(items, list):
        errors.append("academic_year_items_invalid")
        return errors

    for item in items:
        errors.extend(validate_item(item, label))

    if not errors:
        keys = [_item_sort_key(item) for item in items]
        if keys != sorted(keys):
            errors.append("items_unsorted")
    return errors


def validate_document(doc: Union[SchoolDatesDocument, dict, Any]) -> list[str]:
    """
    Validate a document against the schema.

    Args:
        doc: SchoolDatesDocument or its JSON dict form

    Returns:
        Error codes, deduplicated in first-seen order
    """
    if isinstance(doc, SchoolDatesDocument):
        doc = doc.to_dict()
    if not isinstance(doc, dict):
        return ["document_invalid"]

    errors: list[str] = []
    if doc.get("schemaVersion") != SCHEMA_VERSION:
        errors.append("schema_version_invalid")

    source = doc.get("source")
    if not isinstance(source, dict):
        errors.append("source_invalid")
        source = {}
    else:
        if not _is_non_empty_str(source.get("name")):
            errors.append("source_name_invalid")
        if not _is_non_empty_str(source.get("slug")):
            errors.append("source_slug_invalid")
        if not _is_non_empty_str(source.get("url")):
            errors.append("source_url_invalid")
        if not _is_non_empty_str(source.get("fetchedAt")):
            errors.append("source_fetched_invalid")

    if doc.get("timezone") != TIMEZONE:
        errors.append("timezone_invalid")

    years = doc.get("academicYears")
    if not isinstance(years, list) or not years:
        errors.append("academic_years_invalid")
        return _unique(errors)

    year_errors: list[str] = []
    for year in years:
        year_errors.extend(validate_academic_year(year))
    errors.extend(year_errors)
    if year_errors:
        return _unique(errors)

    labels = [year["label"] for year in years]
    if labels != sorted(labels):
        errors.append("academic_years_unsorted")

    ids = [item["id"] for year in years for item in year["items"]]
    if len(ids) != len(set(ids)):
        errors.append("item_id_duplicate")

    content_hash = source.get("contentHash")
    if content_hash is not None:
        expected = hash_academic_years(SchoolAcademicYear.from_dict(year) for year in years)
        if content_hash != expected:
            errors.append("content_hash_mismatch")

    return _unique(errors)


def _unique(errors: list[str]) -> list[str]:
    return list(dict.fromkeys(errors))
