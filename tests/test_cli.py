from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from prodcal.cli import concat_months, main, render_month, render_year


@pytest.fixture
def overrides_file(tmp_path, overrides_2024) -> str:
    path = tmp_path / "overrides.json"
    payload = {"2024": [d.as_map() for d in overrides_2024], "2025": []}
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


@pytest.fixture
def run(overrides_file):
    runner = CliRunner()

    def invoke(*args: str):
        return runner.invoke(main, ["--overrides-file", overrides_file, *args])

    return invoke


# ============================================================
# 1) Commands
# ============================================================
def test_stats_json(run) -> None:
    result = run("stats", "2024", "--json")
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"holidays": 17, "workdays": 243, "weekends": 101, "prelolidays": 5}


def test_stats_text_of_a_quarter(run) -> None:
    result = run("stats", "2024", "--quarter", "2")
    assert result.exit_code == 0, result.output
    assert result.output.startswith("2024 Q2")
    assert "work hours:" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ("stats", "2024", "--quarter", "5"),
        ("stats", "1899"),
        ("show", "2016"),
        ("day", "not-a-date"),
        ("period", "2024-12-31", "2"),
    ],
)
def test_errors_exit_with_code_1(run, args) -> None:
    assert run(*args).exit_code == 1


def test_next_workday(run) -> None:
    result = run("next-workday", "2024-06-11")
    assert result.exit_code == 0, result.output
    assert "2024-06-13" in result.output


def test_day_accepts_day_first_dates(run) -> None:
    result = run("day", "06.05.2024")
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "Day(day=2024-05-06, kind=Work, weekday=Mon)"


def test_day_json(run) -> None:
    result = run("day", "2024-11-02", "--json")
    assert json.loads(result.output) == {"weekday": "Sat", "day": "2024-11-02", "kind": "Preholiday"}


def test_period_of_work_days(run) -> None:
    result = run("period", "2024-05-06", "3", "--work-days", "--json")
    assert result.exit_code == 0, result.output
    days = json.loads(result.output)
    assert [d["day"] for d in days] == ["2024-05-06", "2024-05-07", "2024-05-08"]


def test_period_text(run) -> None:
    result = run("period", "2024-05-08", "3")
    assert result.exit_code == 0, result.output
    assert len(result.output.splitlines()) == 3
    assert "kind=Holiday" in result.output.splitlines()[1]


def test_export(run) -> None:
    result = run("export", "2024")
    assert result.exit_code == 0, result.output
    records = json.loads(result.output)
    assert len(records) == 366
    assert records[0] == {"weekday": "Mon", "day": "2024-01-01", "kind": "Holiday"}


def test_show_month(run) -> None:
    result = run("show", "2024", "5")
    assert result.exit_code == 0, result.output
    assert "May 2024" in result.output
    assert "[ 1]" in result.output
    assert " 8*" in result.output


# ============================================================
# 2) Rendering
# ============================================================
def test_render_month_layout(cal_2024) -> None:
    lines = render_month(cal_2024, 2024, 4).splitlines()

    assert lines[0].strip() == "April"
    assert lines[1] == " Mo  Tu  We  Th  Fr  Sa  Su"
    # April 1st 2024 is a Monday
    assert lines[2].startswith("  1 ")
    # Working Saturday 27, then holidays on Monday 29 and Tuesday 30
    assert " 27 " in lines[5]
    assert lines[6].startswith("[29][30]")


def test_concat_months_pads_shorter_months() -> None:
    out = concat_months(["a\nb\nc", "d"], width=3)
    assert out.splitlines() == ["a     d", "b", "c"]


def test_render_year_has_every_month(cal_2024) -> None:
    out = render_year(cal_2024, 2024)
    assert out.splitlines()[0].strip() == "2024"
    for month in ("January", "June", "December"):
        assert month in out
