"""
Document assembly and content hashing.

Builds SchoolDateItems from interpreted candidates, groups them into
academic years, sorts everything canonically and hashes the canonical
form. The hash depends only on the normalized item set, so the order in
which items were discovered never changes it.
"""

import hashlib
import json
from typing import Iterable, Optional

import structlog

from .classifier import audience_for, classify_label
from .dates import parse_date_range
from .identifiers import IdRegistry
from .models import (
    Candidate,
    SchoolAcademicYear,
    SchoolDateItem,
)
from .normalizer import clean_text

logger = structlog.get_logger(__name__)


HASH_PREFIX = "sha256:"


def build_item(
    candidate: Candidate,
    school_slug: str,
    tags: list[str],
    registry: IdRegistry,
) -> SchoolDateItem:
    """
    Resolve one candidate into a calendar item.

    Raises:
        ParseError: If the date text cannot be resolved
    """
    item_type = classify_label(candidate.label)
    date_range = parse_date_range(candidate.date_text, candidate.academic_year)
    item_id = registry.assign(
        school_slug=school_slug,
        academic_year=candidate.academic_year,
        term=candidate.term,
        item_type=item_type,
        start_date=date_range.start_date,
        label=candidate.label,
    )
    return SchoolDateItem(
        id=item_id,
        type=item_type,
        label=candidate.label,
        term=candidate.term,
        academic_year=candidate.academic_year,
        start_date=date_range.start_date,
        end_date=date_range.end_date,
        start_day_part=date_range.start_day_part,
        end_day_part=date_range.end_day_part,
        notes=None,
        audience=audience_for(item_type),
        tags=list(tags),
        source_text=clean_text(f"{candidate.label} {candidate.date_text}"),
    )


def build_items(
    candidates: Iterable[Candidate],
    school_slug: str,
    tags: list[str],
    registry: Optional[IdRegistry] = None,
) -> list[SchoolDateItem]:
    """Build items for all candidates, sharing one ID registry."""
    registry = registry if registry is not None else IdRegistry()
    return [build_item(candidate, school_slug, tags, registry) for candidate in candidates]


def group_academic_years(items: Iterable[SchoolDateItem]) -> list[SchoolAcademicYear]:
    """One group per distinct academic year, in first-seen order."""
    groups: dict[str, list[SchoolDateItem]] = {}
    for item in items:
        groups.setdefault(item.academic_year, []).append(item)
    return [SchoolAcademicYear(label=label, items=group) for label, group in groups.items()]


def normalize_academic_years(years: Iterable[SchoolAcademicYear]) -> list[SchoolAcademicYear]:
    """
    Sort items by (startDate, endDate, label, type, id) and years by label.

    Returns new year objects; the input is not mutated.
    """
    normalized = [
        SchoolAcademicYear(label=year.label, items=sorted(year.items, key=SchoolDateItem.sort_key))
        for year in years
    ]
    return sorted(normalized, key=lambda year: year.label)


def canonical_payload(years: Iterable[SchoolAcademicYear]) -> str:
    """Compact JSON of the academic years with every semantic item field."""
    data = [year.to_dict() for year in years]
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def hash_academic_years(years: Iterable[SchoolAcademicYear]) -> str:
    """
    Content hash of the normalized academic years.

    Returns:
        "sha256:" followed by the hex digest
    """
    payload = canonical_payload(normalize_academic_years(years))
    return HASH_PREFIX + hashlib.sha256(payload.encode("utf-8")).hexdigest()


def count_items(years: Iterable[SchoolAcademicYear]) -> int:
    return sum(len(year.items) for year in years)
