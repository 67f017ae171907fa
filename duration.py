"""Duration strings and timestamp helpers.

Durations are written the way the tracker accepts them: "1d 7h 40m",
"2h 30m", "45m". One working day counts as 8 hours.
"""

from datetime import date, datetime, timedelta

DEFAULT_DATETIME_PATTERN = "%d %b %Y %H:%M"
DEFAULT_DATE_PATTERN = "%d %b %Y"

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 8 * MINUTES_PER_HOUR
EIGHT_HOURS_IN_MIN = MINUTES_PER_DAY

UNIT_MINUTES = {"d": MINUTES_PER_DAY, "h": MINUTES_PER_HOUR, "m": 1}

ISO_PATTERN = "%Y-%m-%dT%H:%M:%S.000%z"


class InvalidDurationUnit(ValueError):
    """Duration token does not end with one of d, h, m."""

    def __init__(self, token: str):
        unit = token[-1:] or "<empty>"
        super().__init__(f"Invalid duration unit '{unit}' in '{token}', expected d, h or m")
        self.token = token


def parse_duration(value: str) -> int:
    """Convert a duration like "1d 7h 40m" to minutes.

    Tokens are case-insensitive. A token whose number cannot be read counts
    as 0 minutes (a warning is printed); an unknown unit raises
    InvalidDurationUnit.
    """
    tokens = value.lower().split()
    if not tokens:
        raise InvalidDurationUnit(value)

    head, rest = tokens[0], tokens[1:]
    if rest:
        return parse_duration(head) + parse_duration(" ".join(rest))

    unit = head[-1]
    if unit not in UNIT_MINUTES:
        raise InvalidDurationUnit(head)

    number = head.rstrip("dhm")
    try:
        amount = int(number)
    except ValueError:
        print(f"[!] WARNING: Cannot read amount '{number}' in '{head}', counting it as 0")
        amount = 0
    return amount * UNIT_MINUTES[unit]


def format_duration(minutes: int) -> str:
    """Render minutes as "<H>h <M>m", dropping zero parts. Hours are not capped."""
    if minutes <= 0:
        return "0m"
    hours, rest = divmod(minutes, MINUTES_PER_HOUR)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if rest:
        parts.append(f"{rest}m")
    return " ".join(parts)


def parse_time(value: str, pattern: str = DEFAULT_DATETIME_PATTERN) -> datetime:
    return datetime.strptime(value.strip(), pattern)


def format_time(value: datetime, pattern: str = DEFAULT_DATETIME_PATTERN) -> str:
    return value.strftime(pattern)


def truncate_to_date(value: str, pattern: str = DEFAULT_DATETIME_PATTERN) -> date:
    """Parse a timestamp and drop its time of day."""
    return parse_time(value, pattern).date()


def compare(a: str, b: str, pattern: str = DEFAULT_DATETIME_PATTERN) -> int:
    """Total ordering over timestamps: -1, 0 or 1."""
    left, right = parse_time(a, pattern), parse_time(b, pattern)
    return (left > right) - (left < right)


def add_minutes(value: str, minutes: int, pattern: str = DEFAULT_DATETIME_PATTERN) -> str:
    """Shift a timestamp string by a number of minutes, keeping its pattern."""
    return format_time(parse_time(value, pattern) + timedelta(minutes=minutes), pattern)


def to_iso(value: str, pattern: str = DEFAULT_DATETIME_PATTERN) -> str:
    """Convert a local timestamp to the tracker's ISO-8601 form.

    Example: "17 Apr 2020 08:20" -> "2020-04-17T08:20:00.000+0200"
    """
    return parse_time(value, pattern).astimezone().strftime(ISO_PATTERN)
