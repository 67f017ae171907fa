"""Centralized regex patterns for worklog entries."""

import re


class Patterns:
    """Regex patterns used to validate log entries."""

    # Issue key: PROJ-123, AB2-7
    TICKET_KEY = re.compile(r"^[A-Z][A-Z0-9_]+-\d+$")

    # Canonical time spent: "1d", "2h 30m", "1d 7h 40m"
    # Units in d, h, m order, one space between them.
    TIME_SPENT = re.compile(
        r"^(\d+[dD]( \d+[hH])?( \d+[mM])?|\d+[hH]( \d+[mM])?|\d+[mM])$"
    )
