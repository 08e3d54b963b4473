"""
Exception taxonomy for the school dates pipeline.

Every failure that aborts a refresh derives from SchoolDatesError, so
callers can catch one type and still tell configuration, fetch, parse
and validation problems apart.
"""

from typing import Optional


class SchoolDatesError(Exception):
    """Base exception for school dates refresh errors."""


class ConfigurationError(SchoolDatesError):
    """Required configuration is missing or empty."""

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"config_required:{field}")
        self.field = field


class FetchError(SchoolDatesError):
    """The source page returned a non-2xx status."""

    def __init__(self, status_code: int, url: str = ""):
        super().__init__(f"fetch_failed:{status_code}")
        self.status_code = status_code
        self.url = url


class ParseError(SchoolDatesError):
    """Base for errors raised while turning text into dates."""


class DateParseError(ParseError):
    """A date expression has no recognizable day or month."""

    def __init__(self, text: str):
        super().__init__(f"date_unparsable:{text}")
        self.text = text


class InvalidAcademicYearError(ParseError):
    """Academic year label is not of the form YYYY-YYYY."""

    def __init__(self, label: str):
        super().__init__(f"invalid_academic_year:{label}")
        self.label = label


class DateRangeError(ParseError):
    """Resolved start date falls after the end date."""

    def __init__(self, text: str):
        super().__init__(f"date_range_invalid:{text}")
        self.text = text


class ValidationFailedError(SchoolDatesError):
    """Assembled document violates the schema; nothing is written."""

    def __init__(self, errors: list[str]):
        super().__init__(f"validation_failed:{','.join(errors)}")
        self.errors = list(errors)
