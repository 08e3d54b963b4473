"""
Deterministic item identifiers.

An item ID is built from the fields that place it in the calendar:

    {slug}|{academicYear}|{termSlug}|{type}|{startDate}

Genuine duplicates (two staff days announced for the same date) get a
suffix derived from their label, so IDs stay stable across refreshes as
long as label, date, type and term do not change.
"""

import hashlib
from typing import Optional

import structlog

from .models import ItemType, Term

logger = structlog.get_logger(__name__)


TERM_SLUGS = {
    Term.MICHAELMAS: "michaelmas",
    Term.LENT: "lent",
    Term.SUMMER: "summer",
}
OTHER_TERM_SLUG = "other"
SUFFIX_LENGTH = 8


def term_slug(term: Optional[Term]) -> str:
    return TERM_SLUGS.get(term, OTHER_TERM_SLUG) if term else OTHER_TERM_SLUG


def hash_text(value: str) -> str:
    """SHA-256 hex digest of a UTF-8 string."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def base_key(
    school_slug: str,
    academic_year: str,
    term: Optional[Term],
    item_type: ItemType,
    start_date: str,
) -> str:
    return f"{school_slug}|{academic_year}|{term_slug(term)}|{item_type.value}|{start_date}"


class IdRegistry:
    """
    Issues unique item IDs for one document build.

    Tracks how often each base key has been seen and every ID handed out.
    Create one registry per document so builds for different schools
    never share state.
    """

    def __init__(self):
        self._base_counts: dict[str, int] = {}
        self._issued: set[str] = set()

    def assign(
        self,
        school_slug: str,
        academic_year: str,
        term: Optional[Term],
        item_type: ItemType,
        start_date: str,
        label: str,
    ) -> str:
        """
        Return the ID for an item and record it as issued.

        Args:
            school_slug: School identifier
            academic_year: Academic year label, e.g. "2025-2026"
            term: Term the item falls in, or None
            item_type: Classified item type
            start_date: ISO start date
            label: Item label, used to disambiguate duplicates

        Returns:
            Base key for the first occurrence, otherwise base key plus a
            label-derived suffix
        """
        base = base_key(school_slug, academic_year, term, item_type, start_date)
        seen = self._base_counts.get(base, 0)

        if seen == 0 and base not in self._issued:
            self._base_counts[base] = 1
            return self._issue(base)

        occurrence = seen + 1
        self._base_counts[base] = occurrence
        suffix = hash_text(f"{label}:{occurrence}")[:SUFFIX_LENGTH]
        candidate = f"{base}|{suffix}"
        if candidate in self._issued:
            candidate = f"{candidate}-{occurrence}"

        logger.debug("duplicate_item_key", base=base, occurrence=occurrence, id=candidate)
        return self._issue(candidate)

    def _issue(self, item_id: str) -> str:
        self._issued.add(item_id)
        return item_id

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._issued

    def __len__(self) -> int:
        return len(self._issued)
