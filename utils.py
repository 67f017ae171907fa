"""Configuration, data-file and credential helpers."""

import getpass
import json
import os
from datetime import date

from duration import DEFAULT_DATE_PATTERN, DEFAULT_DATETIME_PATTERN, EIGHT_HOURS_IN_MIN
from models import CSV_HEADER, Credentials, Settings
from patterns import Patterns

# File paths
APP_DIR = os.path.join(os.path.expanduser("~"), ".jtl")
CONFIG_FILE = os.path.join(APP_DIR, "config.json")
DATA_DIR = os.path.join(APP_DIR, "data")

DEFAULT_CONFIG = {
    "host": "",
    "credentials": {"username": "", "password": ""},
    "alias": {},
    "datetime_pattern": DEFAULT_DATETIME_PATTERN,
    "date_pattern": DEFAULT_DATE_PATTERN,
    "daily_cap_minutes": EIGHT_HOURS_IN_MIN,
    "split_minutes": EIGHT_HOURS_IN_MIN // 2,
    "project_key_pattern": Patterns.TICKET_KEY.pattern,
}


def load_config(path: str = CONFIG_FILE) -> dict:
    """Load config.json with host, credentials and aliases."""
    with open(path) as f:
        return json.load(f)


def save_config(config: dict, path: str = CONFIG_FILE) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w") as f:
        json.dump(config, f, indent=2, ensure_ascii=False)


def validate_config(config: dict) -> list[str]:
    """Validate config structure and return list of error messages.

    Returns:
        Empty list if valid, otherwise list of error messages.
    """
    errors = []

    for key in ("host", "datetime_pattern", "date_pattern", "project_key_pattern"):
        if key in config and not isinstance(config[key], str):
            errors.append(f"'{key}' must be a string")

    for key in ("credentials", "alias"):
        if key in config and not isinstance(config[key], dict):
            errors.append(f"'{key}' must be an object")

    for key in ("daily_cap_minutes", "split_minutes"):
        if key not in config:
            continue
        value = config[key]
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            errors.append(f"'{key}' must be a positive number of minutes")

    aliases = config.get("alias")
    if isinstance(aliases, dict):
        for name, ticket in aliases.items():
            if not isinstance(ticket, str) or not ticket:
                errors.append(f"alias.{name} must name a ticket")

    return errors


def load_config_safe(path: str = CONFIG_FILE) -> dict | None:
    """Load config with user-friendly error messages.

    A missing file is created with default values.

    Returns:
        Config dict if valid, None if errors occurred.
    """
    if not os.path.exists(path):
        print(f"[*] Config file not found. Initializing default config: {path}")
        save_config(DEFAULT_CONFIG, path)
        return dict(DEFAULT_CONFIG)

    try:
        config = load_config(path)
    except json.JSONDecodeError as e:
        print(f"[!] ERROR: {path} is not valid JSON!")
        print(f"    Line {e.lineno}, column {e.colno}: {e.msg}")
        print()
        print("    Check for missing commas, quotes, or brackets.")
        return None

    if not isinstance(config, dict):
        print(f"[!] ERROR: {path} must contain a JSON object.")
        return None

    errors = validate_config(config)
    if errors:
        print(f"[!] ERROR: {path} is invalid:")
        for err in errors:
            print(f"    - {err}")
        return None

    return config


def settings_from_config(config: dict) -> Settings:
    """Build the read-only settings used by logging, reports and push."""
    daily_cap = config.get("daily_cap_minutes", EIGHT_HOURS_IN_MIN)
    return Settings(
        host=config.get("host", ""),
        datetime_pattern=config.get("datetime_pattern", DEFAULT_DATETIME_PATTERN),
        date_pattern=config.get("date_pattern", DEFAULT_DATE_PATTERN),
        daily_cap=daily_cap,
        split_minutes=config.get("split_minutes", daily_cap // 2),
        project_key_pattern=config.get("project_key_pattern", Patterns.TICKET_KEY.pattern),
        aliases=dict(config.get("alias") or {}),
    )


def data_file_name(today: date | None = None) -> str:
    """Monthly data file name, e.g. "Apr-2020.csv"."""
    return (today or date.today()).strftime("%b-%Y") + ".csv"


def data_file_path(data_arg: str | None = None, data_dir: str = DATA_DIR) -> str:
    """Pick the data file: the given one if it exists, else this month's file."""
    if data_arg:
        if os.path.isfile(data_arg):
            return data_arg
        print(f"[!] Data file {data_arg} doesn't exist. Default one will be used.")
    return os.path.join(data_dir, data_file_name())


def ensure_data_file(path: str) -> None:
    """Create the data file with its header row if it is missing."""
    if os.path.exists(path):
        return
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(",".join(CSV_HEADER) + "\n")


def resolve_ticket(name: str, aliases: dict[str, str]) -> tuple[str, str]:
    """Map an alias to its ticket.

    Returns:
        (ticket, category): category is the alias name, or "jira" for a
        plain ticket key.
    """
    if name in aliases:
        return aliases[name], name
    return name, "jira"


def read_credentials(config: dict) -> Credentials:
    """Credentials from config, prompting for whatever is missing."""
    section = config.get("credentials") or {}
    creds = Credentials(section.get("username", ""), section.get("password", "")).trimmed()
    if creds.is_valid():
        return creds

    if not creds.username:
        print("  Enter Username: ", end="")
        creds.username = input().strip()
    if not creds.password:
        creds.password = getpass.getpass("  Enter Password: ").strip()
    return creds
