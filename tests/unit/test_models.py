"""Tests for document data models."""

from school_dates.core.models import (
    SCHEMA_VERSION,
    TIMEZONE,
    DayPart,
    ItemType,
    SchoolAcademicYear,
    SchoolDateItem,
    SchoolDatesDocument,
    SchoolDatesSource,
    Term,
)


def make_item(**overrides):
    fields = dict(
        id="st-example|2025-2026|other|holiday|2025-10-27",
        type=ItemType.HOLIDAY,
        label="Half Term",
        term=None,
        academic_year="2025-2026",
        start_date="2025-10-27",
        end_date="2025-10-31",
        end_day_part=DayPart.PM,
        audience=["students"],
        tags=["school"],
        source_text="Half Term 27 October - 31 October",
    )
    fields.update(overrides)
    return SchoolDateItem(**fields)


class TestSchoolDateItem:
    """Tests for SchoolDateItem model."""

    def test_to_dict_camel_case(self):
        """Test serialized keys and enum values."""
        data = make_item().to_dict()

        assert data["academicYear"] == "2025-2026"
        assert data["startDate"] == "2025-10-27"
        assert data["endDayPart"] == "pm"
        assert data["startDayPart"] == "full"
        assert data["type"] == "holiday"
        assert data["term"] is None
        assert data["notes"] is None
        assert data["sourceText"].startswith("Half Term")

    def test_term_value(self):
        """Test terms serialize to their display names."""
        assert make_item(term=Term.MICHAELMAS).to_dict()["term"] == "Michaelmas"

    def test_from_dict(self):
        """Test reading a stored item back."""
        item = SchoolDateItem.from_dict(make_item(term=Term.LENT).to_dict())
        assert item == make_item(term=Term.LENT)

    def test_sort_key(self):
        """Test canonical sort order fields."""
        item = make_item()
        assert item.sort_key() == (
            "2025-10-27", "2025-10-31", "Half Term", "holiday", item.id,
        )


class TestSchoolDatesDocument:
    """Tests for SchoolDatesDocument model."""

    def test_defaults(self):
        """Test schema version and timezone defaults."""
        document = SchoolDatesDocument(
            source=SchoolDatesSource(
                name="St Example", slug="st-example",
                url="https://example.com", fetched_at="2025-08-01T09:00:00.000Z",
            ),
        )
        data = document.to_dict()

        assert data["schemaVersion"] == SCHEMA_VERSION == 1
        assert data["timezone"] == TIMEZONE == "Europe/London"
        assert data["academicYears"] == []

    def test_source_omits_missing_optionals(self):
        """Test absent etag/lastModified/contentHash are left out."""
        source = SchoolDatesSource(
            name="St Example", slug="st-example",
            url="https://example.com", fetched_at="2025-08-01T09:00:00.000Z",
            etag='"abc"',
        )
        data = source.to_dict()
        assert data["etag"] == '"abc"'
        assert "lastModified" not in data
        assert "contentHash" not in data

    def test_item_count_and_round_trip(self):
        """Test item counting and reading a stored document."""
        document = SchoolDatesDocument(
            source=SchoolDatesSource(
                name="St Example", slug="st-example",
                url="https://example.com", fetched_at="2025-08-01T09:00:00.000Z",
                content_hash="sha256:00",
            ),
            academic_years=[
                SchoolAcademicYear("2025-2026", [make_item()]),
                SchoolAcademicYear("2026-2027", []),
            ],
        )
        assert document.item_count == 1

        restored = SchoolDatesDocument.from_dict(document.to_dict())
        assert restored == document
