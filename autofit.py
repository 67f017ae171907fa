"""Daily time allocation for new log entries.

Auto-fitting keeps the sum of a day's entries under the daily cap. When a
new entry would overflow the day, the day's unpushed entries are shrunk so
that everything fits; pushed entries are never touched.
"""

from dataclasses import replace
from datetime import date

from duration import add_minutes, format_duration, parse_duration, truncate_to_date
from models import LogArgs, Record, Settings, validate_record
from store import RecordStore


class ZeroDurationRejected(Exception):
    """Nothing left to log for the entry."""

    def __init__(self, message: str = "Calculated time spent is 0m, will not log!"):
        super().__init__(message)


class DailyCapExceeded(Exception):
    """The day is full and every entry on it is already pushed."""

    def __init__(self, minutes_logged: int):
        super().__init__(
            f"You have already logged {format_duration(minutes_logged)}, will not log more"
        )
        self.minutes_logged = minutes_logged


class InvalidRecord(ValueError):
    """User input failed field validation."""

    def __init__(self, errors):
        super().__init__("; ".join(e.value for e in errors))
        self.errors = errors


def sort_by_date(records: list[Record], pattern: str) -> list[Record]:
    """Records ordered by calendar day, file order within a day."""
    return sorted(records, key=lambda r: truncate_to_date(r.started_ts, pattern))


def minutes_logged_on(ordered: list[Record], day: date, pattern: str) -> int:
    """Sum durations on `day`, walking a date-sorted list from the end."""
    total = 0
    for record in reversed(ordered):
        record_day = truncate_to_date(record.started_ts, pattern)
        if record_day > day:
            continue
        if record_day < day:
            # Sorted, so no earlier record can match
            break
        total += parse_duration(record.time_spent)
    return total


def log_entry(store: RecordStore, args: LogArgs, settings: Settings) -> Record:
    """Validate, allocate and append one entry, then write the data file."""
    parse_duration(args.time_spent)
    errors = validate_record(args.ticket, args.time_spent, args.started_ts, settings)
    if errors:
        raise InvalidRecord(errors)

    if args.auto_fitting:
        record = log_auto_fitting(store, args, settings)
    else:
        record = log_plain(store, args)

    store.write()
    print(f"[+] Logged {record.time_spent} on {record.ticket} at {record.started_ts}")
    return record


def log_plain(store: RecordStore, args: LogArgs) -> Record:
    """Append the entry exactly as requested."""
    if parse_duration(args.time_spent) <= 0:
        raise ZeroDurationRejected("Time spent must be greater than 0")
    return store.add(
        Record(
            id="",
            started_ts=args.started_ts,
            comment=args.comment,
            time_spent=args.time_spent,
            ticket=args.ticket,
            category=args.category,
        )
    )


def log_auto_fitting(store: RecordStore, args: LogArgs, settings: Settings) -> Record:
    """Fit the entry into its day and append it.

    Raises:
        DailyCapExceeded: the day is full and nothing on it can be shrunk.
        ZeroDurationRejected: the fitted duration is 0m.

    The store is only changed when the entry is accepted.
    """
    pattern = settings.datetime_pattern
    cap = settings.daily_cap
    log_day = truncate_to_date(args.started_ts, pattern)

    ordered = sort_by_date(store.records, pattern)
    same_day = [r for r in ordered if truncate_to_date(r.started_ts, pattern) == log_day]
    logged = minutes_logged_on(ordered, log_day, pattern)
    wanted = parse_duration(args.time_spent)

    rewrites: dict[int, Record] = {}
    if wanted + logged >= cap:
        adjustable = [r for r in same_day if not r.is_pushed]
        if not adjustable:
            raise DailyCapExceeded(logged)

        locked = logged - sum(parse_duration(r.time_spent) for r in adjustable)
        budget = max(min(logged + wanted, cap) - locked, 0)
        per_record = budget // (len(adjustable) + 1)
        time_spent = format_duration(per_record)

        previous = None
        for record in adjustable:
            updated = replace(record, time_spent=time_spent)
            if previous is not None:
                updated.started_ts = add_minutes(
                    previous.started_ts, parse_duration(previous.time_spent), pattern
                )
            rewrites[record.index] = updated
            previous = updated
        print(
            f"[*] Day is full, split {format_duration(budget)} into "
            f"{len(adjustable) + 1} entries of {time_spent}"
        )
    else:
        time_spent = format_duration(min(cap - logged, settings.split_minutes))
        if time_spent != format_duration(wanted):
            print(
                f"[*] Time spent is trimmed to {time_spent}, "
                f"to not exceed {format_duration(cap)}"
            )

    started_ts = args.started_ts
    day_records = [rewrites.get(r.index, r) for r in same_day]
    if day_records:
        last = day_records[-1]
        started_ts = add_minutes(last.started_ts, parse_duration(last.time_spent), pattern)

    if time_spent == "0m":
        raise ZeroDurationRejected()

    for updated in rewrites.values():
        store.update(updated)
    return store.add(
        Record(
            id="",
            started_ts=started_ts,
            comment=args.comment,
            time_spent=time_spent,
            ticket=args.ticket,
            category=args.category,
        )
    )
