"""Tests for normalizer functions."""

import pytest

from school_dates.core.models import Term
from school_dates.core.normalizer import (
    clean_text,
    contains_month,
    infer_term,
    normalize_date_text,
    parse_academic_year_label,
    parse_academic_year_range,
    parse_month,
)


class TestCleanText:
    """Tests for clean_text function."""

    def test_collapses_whitespace(self):
        """Test runs of whitespace become one space."""
        assert clean_text("  Autumn \n\t term  ") == "Autumn term"

    def test_non_breaking_space(self):
        """Test NBSP is treated as whitespace."""
        assert clean_text("1\u00a0September\u00a0 2025") == "1 September 2025"

    def test_none_input(self):
        """Test None input returns empty string."""
        assert clean_text(None) == ""


class TestParseMonth:
    """Tests for parse_month function."""

    @pytest.mark.parametrize("text,expected", [
        ("1 September", 9),
        ("1 Sept", 9),
        ("3 sep 2025", 9),
        ("Jan 5", 1),
        ("12 MAY", 5),
        ("31 december", 12),
    ])
    def test_month_names(self, text, expected):
        """Test full names and abbreviations."""
        assert parse_month(text) == expected

    def test_no_month(self):
        """Test text without a month."""
        assert parse_month("Staff training day") is None

    def test_partial_word_not_matched(self):
        """Test month abbreviations only match whole words."""
        assert parse_month("Marching band") is None
        assert not contains_month("Decorations")


class TestNormalizeDateText:
    """Tests for normalize_date_text function."""

    def test_strips_weekdays(self):
        """Test weekday names are removed."""
        assert normalize_date_text("Friday 19 December") == "19 December"

    def test_strips_weekday_abbreviations(self):
        """Test weekday abbreviations are removed."""
        assert normalize_date_text("Thurs 2 April - Mon 20 April") == "2 April - 20 April"

    def test_converts_dashes(self):
        """Test en and em dashes become hyphens."""
        assert normalize_date_text("19 December \u2013 5 January") == "19 December - 5 January"
        assert normalize_date_text("19 December\u20145 January") == "19 December-5 January"


class TestAcademicYear:
    """Tests for academic year label parsing."""

    @pytest.mark.parametrize("text", [
        "Term dates 2025-2026",
        "Term dates 2025/2026",
        "2025 / 2026",
        "2025 \u2013 2026",
    ])
    def test_label_forms(self, text):
        """Test separators and spacing are normalized."""
        assert parse_academic_year_label(text) == "2025-2026"

    def test_no_label(self):
        """Test text without a year pair."""
        assert parse_academic_year_label("Michaelmas Term") is None

    def test_strict_range(self):
        """Test strict label split."""
        assert parse_academic_year_range("2025-2026") == (2025, 2026)
        assert parse_academic_year_range("2025/2026") is None
        assert parse_academic_year_range("") is None


class TestInferTerm:
    """Tests for infer_term function."""

    def test_keywords(self):
        """Test term keywords are case-insensitive."""
        assert infer_term("MICHAELMAS TERM 2025") == Term.MICHAELMAS
        assert infer_term("Lent term") == Term.LENT
        assert infer_term("Summer Term starts") == Term.SUMMER

    def test_no_keyword(self):
        """Test text without a term."""
        assert infer_term("Half term") is None
