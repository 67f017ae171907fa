"""
Log work on Jira tickets into a monthly CSV file, report it and push it.

Usage:
    # Log 2 hours on a ticket (auto-fitted into today's 8 hours)
    python worklog.py log PROJ-123 -t 2h -m "code review"

    # Log exactly what was asked, at a given time
    python worklog.py log standup -t 15m -d "14 Apr 2020 09:45" -f false

    # Today's entries and the monthly summary
    python worklog.py report --all

    # Show what would be sent, then send it
    python worklog.py push --preview
    python worklog.py push
"""

import argparse
import os
from datetime import datetime

from autofit import DailyCapExceeded, InvalidRecord, ZeroDurationRejected, log_entry
from clients import JiraClient
from duration import format_time
from models import LogArgs, Settings
from push import push
from report import DailyReport, MonthlyReport, print_daily_report, print_monthly_report
from store import RecordStore
from utils import (
    CONFIG_FILE,
    data_file_path,
    ensure_data_file,
    load_config_safe,
    read_credentials,
    resolve_ticket,
    settings_from_config,
)


def parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "t", "yes", "y", "1"):
        return True
    if lowered in ("false", "f", "no", "n", "0"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got '{value}'")


def cmd_log(args: argparse.Namespace, store: RecordStore, settings: Settings) -> int:
    ticket, category = resolve_ticket(args.ticket, settings.aliases)
    started_ts = args.date or format_time(datetime.now(), settings.datetime_pattern)

    log_args = LogArgs(
        ticket=ticket,
        time_spent=args.time,
        comment=args.message,
        started_ts=started_ts,
        category=category,
        auto_fitting=args.auto_fitting,
    )
    try:
        log_entry(store, log_args, settings)
    except InvalidRecord as e:
        print("[!] ERROR: Cannot log this entry:")
        for err in e.errors:
            print(f"    - {err.value}")
        return 1
    except (ValueError, ZeroDurationRejected, DailyCapExceeded) as e:
        print(f"[!] ERROR: {e}")
        return 1
    return 0


def cmd_report(args: argparse.Namespace, store: RecordStore, settings: Settings) -> int:
    try:
        daily = DailyReport.from_records(store.records, settings, show_all=args.all)
        monthly = MonthlyReport.from_records(store.records, settings)
    except ValueError as e:
        print(f"[!] ERROR: Cannot read {store.path}: {e}")
        return 1

    print_daily_report(daily)
    print()
    print_monthly_report(monthly, os.path.basename(store.path))
    return 0


def cmd_push(args: argparse.Namespace, store: RecordStore, settings: Settings, config: dict) -> int:
    credentials = None
    if settings.host and not args.preview and store.unpushed():
        credentials = read_credentials(config)
        if not credentials.is_valid():
            print("[!] ERROR: Username and password are required to push.")
            return 1

    client = JiraClient(settings.host, credentials, settings.datetime_pattern)
    responses = push(store, client, preview_only=args.preview)
    return 1 if any(not r.is_success for r in responses) else 0


# ============================================================================
# CLI
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="worklog",
        description="Track time on Jira tickets in a CSV file and push it as worklogs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    worklog log PROJ-123 -t 2h -m "code review"
    worklog report --all
    worklog push --preview
        """,
    )
    parser.add_argument("--config", default=CONFIG_FILE, help=f"Config file (default: {CONFIG_FILE})")
    parser.add_argument("--data", help="Data file (default: ~/.jtl/data/<Mon-YYYY>.csv)")

    sub = parser.add_subparsers(dest="command", required=True)

    log_parser = sub.add_parser("log", help="Add a work log entry to the data file")
    log_parser.add_argument("ticket", help="Ticket key (PROJ-123) or alias from config")
    log_parser.add_argument("-t", "--time", default="1h", help="Time spent, e.g. 1d 2h 30m (default: 1h)")
    log_parser.add_argument("-m", "--message", default="", help="Comment shown in Jira")
    log_parser.add_argument("-d", "--date", help="Start, e.g. '14 Apr 2020 10:00' (default: now)")
    log_parser.add_argument(
        "-f",
        "--auto-fitting",
        type=parse_bool,
        default=True,
        metavar="BOOL",
        help="Fit the entry into the daily cap (default: true)",
    )

    report_parser = sub.add_parser("report", help="Show today's entries and the monthly summary")
    report_parser.add_argument("-a", "--all", action="store_true", help="List every entry of the file")

    push_parser = sub.add_parser("push", help="Push unpushed entries to Jira")
    push_parser.add_argument(
        "-p", "--preview", action="store_true", help="Show the requests without sending them"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config_safe(args.config)
    if config is None:
        return 1
    settings = settings_from_config(config)

    path = data_file_path(args.data)
    ensure_data_file(path)
    try:
        store = RecordStore.read(path)
    except ValueError as e:
        print(f"[!] ERROR: {e}")
        return 1

    if args.command == "log":
        return cmd_log(args, store, settings)
    if args.command == "report":
        return cmd_report(args, store, settings)
    return cmd_push(args, store, settings, config)


if __name__ == "__main__":
    exit(main())
