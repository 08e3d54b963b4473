"""Tests for document schema validation."""

import copy

import pytest

from school_dates.core.assembler import (
    build_items,
    group_academic_years,
    hash_academic_years,
    normalize_academic_years,
)
from school_dates.core.models import (
    Candidate,
    SchoolDatesDocument,
    SchoolDatesSource,
    Term,
)
from school_dates.core.validation import is_valid_iso_date, validate_document


def make_document(candidates):
    years = normalize_academic_years(
        group_academic_years(build_items(candidates, "st-example", ["school", "st-example"]))
    )
    return SchoolDatesDocument(
        source=SchoolDatesSource(
            name="St Example School",
            slug="st-example",
            url="https://example.com/term-dates",
            fetched_at="2025-08-01T09:00:00.000Z",
            content_hash=hash_academic_years(years),
        ),
        academic_years=years,
    )


@pytest.fixture
def document():
    """A valid two-year document."""
    return make_document([
        Candidate("Autumn term starts", "1 September 2025", "2025-2026", Term.MICHAELMAS),
        Candidate("Half term", "27 October - 31 October", "2025-2026", Term.MICHAELMAS),
        Candidate("Staff Day", "5 January", "2025-2026", Term.LENT),
        Candidate("Autumn term starts", "2 September 2026", "2026-2027", Term.MICHAELMAS),
    ])


@pytest.fixture
def data(document):
    """JSON dict form without a content hash, for targeted corruption."""
    raw = copy.deepcopy(document.to_dict())
    del raw["source"]["contentHash"]
    return raw


class TestIsValidIsoDate:
    """Tests for is_valid_iso_date function."""

    @pytest.mark.parametrize("value,expected", [
        ("2025-09-01", True),
        ("2024-02-29", True),
        ("2025-02-29", False),
        ("2025-9-1", False),
        ("01/09/2025", False),
        (None, False),
        (20250901, False),
    ])
    def test_values(self, value, expected):
        """Test real calendar dates in YYYY-MM-DD form."""
        assert is_valid_iso_date(value) is expected


class TestValidateDocument:
    """Tests for validate_document function."""

    def test_valid_document(self, document):
        """Test a freshly built document passes."""
        assert validate_document(document) == []

    def test_valid_dict_form(self, document):
        """Test the stored JSON form passes too."""
        assert validate_document(document.to_dict()) == []

    def test_empty_academic_years(self, data):
        """Test a document with no years is rejected."""
        data["academicYears"] = []
        assert validate_document(data) == ["academic_years_invalid"]

    def test_not_a_dict(self):
        """Test garbage input."""
        assert validate_document("nope") == ["document_invalid"]

    def test_header_fields(self, data):
        """Test schema version, source and timezone checks."""
        data["schemaVersion"] = 2
        data["timezone"] = "UTC"
        data["source"]["url"] = ""
        data["source"]["fetchedAt"] = None
        errors = validate_document(data)
        assert errors == [
            "schema_version_invalid",
            "source_url_invalid",
            "source_fetched_invalid",
            "timezone_invalid",
        ]

    def test_missing_source(self, data):
        """Test a missing source object."""
        del data["source"]
        assert "source_invalid" in validate_document(data)

    def test_duplicate_ids(self, data):
        """Test IDs must be unique across years."""
        data["academicYears"][1]["items"][0]["id"] = data["academicYears"][0]["items"][0]["id"]
        assert validate_document(data) == ["item_id_duplicate"]

    def test_unsorted_items(self, data):
        """Test items must be in canonical order."""
        data["academicYears"][0]["items"].reverse()
        assert validate_document(data) == ["items_unsorted"]

    def test_unsorted_years(self, data):
        """Test years must be sorted by label."""
        data["academicYears"].reverse()
        assert validate_document(data) == ["academic_years_unsorted"]

    def test_year_mismatch(self, data):
        """Test item year must match its group."""
        data["academicYears"][0]["items"][0]["academicYear"] = "2026-2027"
        assert validate_document(data) == ["item_year_mismatch"]

    def test_bad_enums(self, data):
        """Test closed enumerations."""
        item = data["academicYears"][0]["items"][0]
        item["type"] = "party"
        item["term"] = "Autumn"
        item["startDayPart"] = "evening"
        item["endDayPart"] = None
        assert validate_document(data) == [
            "item_type_invalid",
            "item_term_invalid",
            "item_start_day_part_invalid",
            "item_end_day_part_invalid",
        ]

    def test_invalid_dates(self, data):
        """Test impossible and reversed dates."""
        items = data["academicYears"][0]["items"]
        items[0]["startDate"] = "2025-02-30"
        items[1]["startDate"] = "2025-11-30"
        errors = validate_document(data)
        assert "item_date_invalid" in errors
        assert "item_date_range_invalid" in errors

    def test_list_fields(self, data):
        """Test audience, tags, notes and source text types."""
        item = data["academicYears"][0]["items"][0]
        item["audience"] = "students"
        item["tags"] = ["school", 3]
        item["notes"] = 12
        item["sourceText"] = ""
        assert validate_document(data) == [
            "item_notes_invalid",
            "item_audience_invalid",
            "item_tags_invalid",
            "item_source_text_invalid",
        ]

    def test_codes_deduplicated(self, data):
        """Test one code per problem kind."""
        for item in data["academicYears"][0]["items"]:
            item["label"] = ""
        assert validate_document(data) == ["item_label_invalid"]

    def test_content_hash_mismatch(self, document):
        """Test a stale content hash is reported."""
        raw = document.to_dict()
        raw["academicYears"][0]["items"][0]["label"] = "Autumn term begins"
        assert validate_document(raw) == ["content_hash_mismatch"]
