"""Daily and monthly summaries of a data file."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from duration import format_duration, format_time, parse_duration, parse_time
from models import Record, Settings

WORK_WEEK_DAYS = 5


def week_boundaries(moment: datetime, date_pattern: str) -> tuple[str, str]:
    """Monday and Friday of the work week containing `moment`.

    Saturday and Sunday belong to the Monday of their week.
    """
    week_start = moment - timedelta(days=moment.weekday())
    week_end = week_start + timedelta(days=WORK_WEEK_DAYS - 1)
    return week_start.strftime(date_pattern), week_end.strftime(date_pattern)


@dataclass
class WeeklyReport:
    week_start: str
    week_end: str
    total_tasks: int = 0
    pushed_tasks: int = 0
    total_minutes: int = 0

    def add(self, record: Record) -> None:
        self.total_tasks += 1
        if record.is_pushed:
            self.pushed_tasks += 1
        self.total_minutes += parse_duration(record.time_spent)


@dataclass
class MonthlyReport:
    """Weekly summaries of one data file (one file = one month)."""

    weekly_reports: list[WeeklyReport] = field(default_factory=list)

    @classmethod
    def from_records(cls, records: list[Record], settings: Settings) -> "MonthlyReport":
        report = cls()
        by_week_start: dict[str, WeeklyReport] = {}
        for record in records:
            started = parse_time(record.started_ts, settings.datetime_pattern)
            week_start, week_end = week_boundaries(started, settings.date_pattern)
            if week_start not in by_week_start:
                by_week_start[week_start] = WeeklyReport(week_start, week_end)
                report.weekly_reports.append(by_week_start[week_start])
            by_week_start[week_start].add(record)
        report.weekly_reports.sort(key=lambda wr: parse_time(wr.week_start, settings.date_pattern))
        return report

    @property
    def total_tasks(self) -> int:
        return sum(wr.total_tasks for wr in self.weekly_reports)

    @property
    def pushed_tasks(self) -> int:
        return sum(wr.pushed_tasks for wr in self.weekly_reports)

    @property
    def total_minutes(self) -> int:
        return sum(wr.total_minutes for wr in self.weekly_reports)


@dataclass
class DailyReport:
    """Today's entries plus running totals over the whole file."""

    today: str
    rows: list[Record]
    show_all: bool = False
    tasks_today: int = 0
    pushed_today: int = 0
    minutes_today: int = 0
    total_tasks: int = 0
    total_minutes: int = 0

    @classmethod
    def from_records(
        cls,
        records: list[Record],
        settings: Settings,
        today: date | None = None,
        show_all: bool = False,
    ) -> "DailyReport":
        today_str = (today or date.today()).strftime(settings.date_pattern)
        report = cls(today=today_str, rows=[], show_all=show_all)
        for record in records:
            minutes = parse_duration(record.time_spent)
            started = parse_time(record.started_ts, settings.datetime_pattern)
            # Compared as formatted strings, not by elapsed time
            is_today = format_time(started, settings.date_pattern) == today_str
            if is_today:
                report.tasks_today += 1
                report.minutes_today += minutes
                if record.is_pushed:
                    report.pushed_today += 1
            if is_today or show_all:
                report.rows.append(record)
            report.total_tasks += 1
            report.total_minutes += minutes
        return report


def render_table(header: list[str], rows: list[list[str]], footer: list[str]) -> list[str]:
    """Lay out a plain-text table: header, rows and a footer line."""
    widths = [len(h) for h in header]
    for row in [*rows, footer]:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    layout = " | ".join(f"{{:<{w}}}" for w in widths)
    separator = "-+-".join("-" * w for w in widths)

    lines = [layout.format(*header), separator]
    lines.extend(layout.format(*row) for row in rows)
    lines.append(separator)
    lines.append(layout.format(*footer))
    return lines


def print_monthly_report(report: MonthlyReport, file_name: str) -> None:
    rows = [
        [
            f"{wr.week_start} - {wr.week_end}",
            f"{wr.total_tasks} ({wr.pushed_tasks} pushed)",
            format_duration(wr.total_minutes),
        ]
        for wr in report.weekly_reports
    ]
    footer = [
        f"Total for: {file_name}",
        f"{report.total_tasks} ({report.pushed_tasks} pushed)",
        format_duration(report.total_minutes),
    ]
    for line in render_table(["Week", "Total tasks", "Total time"], rows, footer):
        print(line)


def print_daily_report(report: DailyReport) -> None:
    rows = [
        [r.started_ts, r.ticket, r.time_spent, r.comment, "Y" if r.is_pushed else "N"]
        for r in report.rows
    ]
    footer = [
        f"today: {report.today}",
        "",
        f"{format_duration(report.total_minutes)} ({format_duration(report.minutes_today)})",
        "",
        f"{report.pushed_today}/{report.tasks_today}",
    ]
    header = ["Started at", "Ticket", "Time tracked (today)", "Comment", "Pushed? (today)"]
    for line in render_table(header, rows, footer):
        print(line)
