"""Tests for regex patterns and entry validation.

These tests cover the input checks done before a new entry is stored.
"""

import pytest

from models import FieldError, Settings, validate_record
from patterns import Patterns


# ---------------------------------------------------------------------------
# TICKET_KEY: PROJ-123
# ---------------------------------------------------------------------------

class TestTicketKey:

    @pytest.mark.parametrize("ticket", ["PROJ-42", "JIRA-1", "AB-7", "ACME2-1234", "EE_BATCH-680"])
    def test_matches(self, ticket):
        assert Patterns.TICKET_KEY.match(ticket)

    @pytest.mark.parametrize("ticket", ["proj-42", "PROJ42", "PROJ-", "-42", "P-1", "PROJ-42 x"])
    def test_rejects(self, ticket):
        assert Patterns.TICKET_KEY.match(ticket) is None


# ---------------------------------------------------------------------------
# TIME_SPENT: 1d 2h 30m
# ---------------------------------------------------------------------------

class TestTimeSpent:

    @pytest.mark.parametrize("value", ["1d", "2h", "30m", "1d 2h", "2h 30m", "1d 7h 40m", "2H 30M"])
    def test_matches(self, value):
        assert Patterns.TIME_SPENT.match(value)

    @pytest.mark.parametrize("value", ["30m 2h", "2x", "h", "1.5h", "2 h", "1h30m", "1d2h", "2h  30m", ""])
    def test_rejects(self, value):
        assert Patterns.TIME_SPENT.match(value) is None


# ---------------------------------------------------------------------------
# validate_record
# ---------------------------------------------------------------------------

class TestValidateRecord:

    def test_valid(self):
        assert validate_record("PROJ-1", "2h", "14 Apr 2020 10:00", Settings()) == []

    def test_every_field_reported(self):
        errors = validate_record("", "", "yesterday", Settings())
        assert errors == [
            FieldError.TICKET_EMPTY,
            FieldError.TIME_SPENT_EMPTY,
            FieldError.STARTED_TS_FORMAT,
        ]

    def test_bad_ticket_and_duration(self):
        errors = validate_record("not a ticket", "2 hours", "14 Apr 2020 10:00", Settings())
        assert errors == [FieldError.TICKET_FORMAT, FieldError.TIME_SPENT_FORMAT]

    def test_custom_project_key_pattern(self):
        settings = Settings(project_key_pattern=r"^OPS-\d+$")
        assert validate_record("OPS-9", "1h", "14 Apr 2020 10:00", settings) == []
        assert validate_record("PROJ-9", "1h", "14 Apr 2020 10:00", settings) == [
            FieldError.TICKET_FORMAT
        ]
