"""End-to-end tests for the command line."""

import json

import pytest

from models import CSV_HEADER
from store import RecordStore
from worklog import build_parser, main, parse_bool


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"host": "", "alias": {"standup": "PROJ-1"}}))
    return path


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "Apr-2020.csv"
    path.write_text(",".join(CSV_HEADER) + "\n")
    return path


def run(config_file, data_file, *argv):
    return main(["--config", str(config_file), "--data", str(data_file), *argv])


class TestParser:

    @pytest.mark.parametrize("value, expected", [("true", True), ("F", False), ("no", False), ("1", True)])
    def test_parse_bool(self, value, expected):
        assert parse_bool(value) is expected

    def test_log_defaults(self):
        args = build_parser().parse_args(["log", "PROJ-1"])
        assert args.time == "1h"
        assert args.message == ""
        assert args.date is None
        assert args.auto_fitting is True

    def test_short_flags(self):
        args = build_parser().parse_args(
            ["log", "PROJ-1", "-t", "2h", "-m", "x", "-d", "14 Apr 2020 10:00", "-f", "false"]
        )
        assert (args.time, args.message, args.date, args.auto_fitting) == (
            "2h",
            "x",
            "14 Apr 2020 10:00",
            False,
        )

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestLogCommand:

    def test_logs_entry(self, config_file, data_file):
        code = run(config_file, data_file, "log", "PROJ-7", "-t", "4h", "-m", "review", "-d", "14 Apr 2020 10:00")

        assert code == 0
        [record] = RecordStore.read(str(data_file)).records
        assert record.as_row() == ["", "14 Apr 2020 10:00", "review", "4h", "PROJ-7", "jira"]

    def test_plain_mode_default_is_one_hour(self, config_file, data_file):
        assert run(config_file, data_file, "log", "PROJ-7", "-d", "14 Apr 2020 10:00", "-f", "false") == 0

        [record] = RecordStore.read(str(data_file)).records
        assert record.time_spent == "1h"

    def test_alias(self, config_file, data_file):
        run(config_file, data_file, "log", "standup", "-t", "15m", "-d", "14 Apr 2020 09:45", "-f", "false")

        [record] = RecordStore.read(str(data_file)).records
        assert (record.ticket, record.category, record.time_spent) == ("PROJ-1", "standup", "15m")

    def test_invalid_ticket(self, config_file, data_file, capsys):
        code = run(config_file, data_file, "log", "nope", "-d", "14 Apr 2020 10:00")

        assert code == 1
        assert "does not look like an issue key" in capsys.readouterr().out
        assert len(RecordStore.read(str(data_file))) == 0

    def test_unknown_unit(self, config_file, data_file, capsys):
        code = run(config_file, data_file, "log", "PROJ-7", "-t", "2w", "-d", "14 Apr 2020 10:00")

        assert code == 1
        assert "Invalid duration unit" in capsys.readouterr().out

    def test_tokens_without_space(self, config_file, data_file, capsys):
        code = run(config_file, data_file, "log", "PROJ-7", "-t", "1h30m", "-d", "14 Apr 2020 10:00")

        assert code == 1
        assert "Time spent must look like '1d 2h 30m'" in capsys.readouterr().out
        assert len(RecordStore.read(str(data_file))) == 0

    def test_full_day_rejected(self, config_file, data_file, capsys):
        data_file.write_text(
            ",".join(CSV_HEADER) + "\n" + "42,14 Apr 2020 09:00,,8h,PROJ-7,jira\n"
        )

        code = run(config_file, data_file, "log", "PROJ-7", "-t", "1h", "-d", "14 Apr 2020 10:00")

        assert code == 1
        assert "already logged 8h, will not log more" in capsys.readouterr().out
        assert len(RecordStore.read(str(data_file))) == 1


class TestReportCommand:

    def test_report(self, config_file, data_file, capsys):
        data_file.write_text(
            ",".join(CSV_HEADER)
            + "\n"
            + "1,14 Apr 2020 12:00,,3h,JIRA-1,jira\n"
            + ",20 Apr 2020 12:00,,20m,JIRA-2,jira\n"
        )

        assert run(config_file, data_file, "report", "--all") == 0

        out = capsys.readouterr().out
        assert "13 Apr 2020 - 17 Apr 2020" in out
        assert "1 (1 pushed)" in out
        assert "Total for: Apr-2020.csv" in out
        assert "3h 20m" in out


class TestPushCommand:

    def test_preview_without_host(self, config_file, data_file, capsys):
        data_file.write_text(",".join(CSV_HEADER) + "\n" + ",14 Apr 2020 12:00,fix,3h,JIRA-1,jira\n")

        assert run(config_file, data_file, "push") == 0

        out = capsys.readouterr().out
        assert "POST /rest/api/2/issue/JIRA-1/worklog" in out
        assert '"timeSpent": "3h"' in out
        assert RecordStore.read(str(data_file)).records[0].id == ""


class TestBadInput:

    def test_broken_config(self, tmp_path, data_file):
        config = tmp_path / "bad.json"
        config.write_text("{")
        assert run(config, data_file, "report") == 1

    def test_broken_data_file(self, config_file, data_file, capsys):
        data_file.write_text("id,date\n")
        assert run(config_file, data_file, "report") == 1
        assert "Unexpected header" in capsys.readouterr().out
