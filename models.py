"""Data models for the work log."""

import re
from dataclasses import dataclass, field
from enum import Enum

from duration import (
    DEFAULT_DATE_PATTERN,
    DEFAULT_DATETIME_PATTERN,
    EIGHT_HOURS_IN_MIN,
    parse_time,
)
from patterns import Patterns

CSV_HEADER = ["ID", "StartedTs", "Comment", "TimeSpent", "Ticket", "Category"]


@dataclass
class Record:
    """One logged work entry, one row of the data file."""

    id: str  # Remote worklog id, empty until pushed
    started_ts: str  # In Settings.datetime_pattern
    comment: str
    time_spent: str  # "1h 30m"
    ticket: str
    category: str = ""
    index: int = -1  # Row position, set by RecordStore

    @property
    def is_pushed(self) -> bool:
        return self.id != ""

    def as_row(self) -> list[str]:
        return [self.id, self.started_ts, self.comment, self.time_spent, self.ticket, self.category]

    @classmethod
    def from_row(cls, row: list[str], index: int) -> "Record":
        if len(row) != len(CSV_HEADER):
            raise ValueError(
                f"Row {index + 1} has {len(row)} columns, expected {len(CSV_HEADER)}"
            )
        return cls(*row, index=index)


@dataclass
class PushRequest:
    """One worklog to send, mirrors an unpushed Record."""

    row_idx: int
    ticket: str
    time_spent: str
    comment: str
    started: str  # As stored, converted to ISO when the call is built


@dataclass
class PushResponse:
    """Outcome of one worklog call."""

    row_idx: int
    is_success: bool
    id: str = ""
    issue_id: str = ""
    time_spent: str = ""
    comment: str = ""
    started: str = ""
    error: str | None = None


@dataclass
class Credentials:
    username: str
    password: str

    def trimmed(self) -> "Credentials":
        return Credentials(self.username.strip(), self.password.strip())

    def is_valid(self) -> bool:
        return bool(self.username) and bool(self.password)


@dataclass(frozen=True)
class Settings:
    """Read-only inputs to logging, reporting and pushing."""

    host: str = ""
    datetime_pattern: str = DEFAULT_DATETIME_PATTERN
    date_pattern: str = DEFAULT_DATE_PATTERN
    daily_cap: int = EIGHT_HOURS_IN_MIN
    split_minutes: int = EIGHT_HOURS_IN_MIN // 2
    project_key_pattern: str = Patterns.TICKET_KEY.pattern
    aliases: dict[str, str] = field(default_factory=dict, hash=False)


@dataclass
class LogArgs:
    """Parsed arguments of the log command."""

    ticket: str
    time_spent: str
    comment: str
    started_ts: str
    category: str = "jira"
    auto_fitting: bool = True


class FieldError(Enum):
    """Validation failure for one Record field."""

    TICKET_EMPTY = "Ticket must not be empty"
    TICKET_FORMAT = "Ticket does not look like an issue key"
    TIME_SPENT_EMPTY = "Time spent must not be empty"
    TIME_SPENT_FORMAT = "Time spent must look like '1d 2h 30m'"
    STARTED_TS_FORMAT = "Start time does not match the date-time pattern"


def validate_record(
    ticket: str,
    time_spent: str,
    started_ts: str,
    settings: Settings,
) -> list[FieldError]:
    """Validate the user-supplied fields of a new Record.

    Returns:
        Empty list if valid, otherwise one FieldError per broken field.
    """
    errors = []

    ticket = ticket.strip()
    if not ticket:
        errors.append(FieldError.TICKET_EMPTY)
    elif not re.match(settings.project_key_pattern, ticket):
        errors.append(FieldError.TICKET_FORMAT)

    time_spent = time_spent.strip()
    if not time_spent:
        errors.append(FieldError.TIME_SPENT_EMPTY)
    elif not Patterns.TIME_SPENT.match(time_spent):
        errors.append(FieldError.TIME_SPENT_FORMAT)

    try:
        parse_time(started_ts, settings.datetime_pattern)
    except ValueError:
        errors.append(FieldError.STARTED_TS_FORMAT)

    return errors

