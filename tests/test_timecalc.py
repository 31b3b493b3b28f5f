import calendar
import os
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path
from types import SimpleNamespace

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from app.services.timecalc import (
    expected_hours_for_month,
    find_missed_entries,
    humanize_day,
    month_bounds,
    remaining_hours,
    shift_months,
    to_hours,
    total_hours_for_user_in_month,
    total_hours_in_month,
    trailing_window,
    working_days,
)


def entry(day, hours, user_id=1, project_id=1):
    return SimpleNamespace(date=day, hours=hours, user_id=user_id, project_id=project_id)


AS_OF = date(2024, 3, 15)  # a Friday


def test_missed_entries_mid_march_scenario():
    entries = [entry("2024-03-14", 8), entry("2024-03-13", 4)]

    missed = find_missed_entries(entries, AS_OF)
    by_date = {item.date: item for item in missed}

    assert "2024-03-14" not in by_date
    assert by_date["2024-03-13"].total_hours == Decimal("4")
    # 22 working days between 2024-02-15 and 2024-03-15; only the 14th is complete
    assert len(missed) == 21
    assert all(item.total_hours == 0 for key, item in by_date.items() if key != "2024-03-13")
    assert missed[0].date == "2024-03-15"
    assert missed[1].date == "2024-03-13"
    assert missed[-1].date == "2024-02-15"


def test_missed_entries_sums_hours_per_day():
    entries = [entry("2024-03-11", 5), entry("2024-03-11", 3), entry("2024-03-12", 7.5)]

    dates = {item.date: item.total_hours for item in find_missed_entries(entries, AS_OF)}

    assert "2024-03-11" not in dates
    assert dates["2024-03-12"] == Decimal("7.5")


def test_missed_entries_only_weekdays_inside_window():
    entries = [
        entry("2024-03-09", 2),  # Saturday
        entry("2024-02-14", 3),  # day before the window opens
        entry("2024-03-18", 1),  # after as_of
    ]

    missed = find_missed_entries(entries, AS_OF)
    start, end = trailing_window(AS_OF)

    for item in missed:
        day = date.fromisoformat(item.date)
        assert start <= day <= end
        assert day.weekday() < 5
    assert "2024-03-09" not in {item.date for item in missed}
    assert all(item.total_hours == 0 for item in missed)


def test_missed_entries_sorted_newest_first_and_idempotent():
    entries = [entry("2024-03-01", 6), entry("2024-02-20", 1)]

    first = find_missed_entries(entries, AS_OF)
    second = find_missed_entries(entries, AS_OF)

    assert first == second
    assert [item.date for item in first] == sorted((item.date for item in first), reverse=True)


def test_missed_entries_accepts_mappings_and_date_objects():
    entries = [
        {"date": "2024-03-15", "hours": 8},
        SimpleNamespace(date=date(2024, 3, 14), hours=Decimal("8.0")),
    ]

    dates = {item.date for item in find_missed_entries(entries, AS_OF)}

    assert "2024-03-15" not in dates
    assert "2024-03-14" not in dates


def test_missed_entries_ignores_malformed_hours():
    entries = [
        entry("2024-03-14", "not a number"),
        entry("2024-03-14", float("nan")),
        entry("2024-03-14", None),
        entry("2024-03-14", 6),
        entry("2024-03-13", float("inf")),
        entry(None, 8),
    ]

    dates = {item.date: item.total_hours for item in find_missed_entries(entries, AS_OF)}

    assert dates["2024-03-14"] == Decimal("6")
    assert dates["2024-03-13"] == Decimal("0")


def test_missed_entries_does_not_mutate_input():
    entries = [entry("2024-03-14", 4)]
    snapshot = [(e.date, e.hours) for e in entries]

    find_missed_entries(entries, AS_OF)

    assert [(e.date, e.hours) for e in entries] == snapshot


def test_missed_entries_defaults_to_today():
    missed = find_missed_entries([])

    assert missed
    assert all(date.fromisoformat(item.date) <= date.today() for item in missed)


def test_formatted_date_is_short_weekday_month_and_day():
    assert humanize_day(date(2024, 3, 15)) == "Fri, Mar 15"
    assert humanize_day(date(2024, 3, 4)) == "Mon, Mar 4"

    missed = find_missed_entries([], AS_OF)
    assert missed[0].formatted_date == "Fri, Mar 15"


@pytest.mark.parametrize(
    "as_of, expected_start",
    [
        (date(2024, 3, 15), date(2024, 2, 15)),
        (date(2024, 3, 31), date(2024, 2, 29)),
        (date(2023, 3, 31), date(2023, 2, 28)),
        (date(2024, 1, 10), date(2023, 12, 10)),
        (date(2024, 5, 31), date(2024, 4, 30)),
    ],
)
def test_trailing_window_clamps_to_shorter_months(as_of, expected_start):
    assert trailing_window(as_of) == (expected_start, as_of)


def test_shift_months_moves_across_years():
    assert shift_months(date(2024, 11, 30), 3) == date(2025, 2, 28)
    assert shift_months(date(2024, 2, 29), -12) == date(2023, 2, 28)


def test_expected_hours_for_leap_february():
    start, end = month_bounds(2024, 2)

    assert (start, end) == (date(2024, 2, 1), date(2024, 2, 29))
    assert len(working_days(start, end)) == 21
    assert expected_hours_for_month(start, end) == Decimal("168")
    assert expected_hours_for_month("2024-02-01", "2024-02-29") == Decimal("168")


def test_total_hours_in_month_uses_inclusive_bounds():
    entries = [
        entry("2024-01-31", 3),
        entry("2024-02-01", 2),
        entry("2024-02-29", 4.5, user_id=2),
        entry("2024-03-01", 6),
        entry("garbage", 9),
    ]

    assert total_hours_in_month(entries, date(2024, 2, 1), date(2024, 2, 29)) == Decimal("6.5")
    assert total_hours_for_user_in_month(entries, 1, "2024-02-01", "2024-02-29") == Decimal("2")
    assert total_hours_for_user_in_month(entries, 2, "2024-02-01", "2024-02-29") == Decimal("4.5")


def test_month_bounds_must_be_dates():
    with pytest.raises(ValueError):
        total_hours_in_month([], "February", "2024-02-29")


@pytest.mark.parametrize(
    "expected, actual, remaining",
    [
        (Decimal("168"), Decimal("100"), Decimal("68")),
        (Decimal("168"), Decimal("168"), Decimal("0")),
        (Decimal("168"), Decimal("200.5"), Decimal("0")),
        (Decimal("0"), Decimal("3"), Decimal("0")),
    ],
)
def test_remaining_hours_never_negative(expected, actual, remaining):
    assert remaining_hours(expected, actual) == remaining


def test_to_hours_coerces_numbers_and_rejects_garbage():
    assert to_hours(2) == Decimal("2")
    assert to_hours(1.25) == Decimal("1.25")
    assert to_hours(" 3.5 ") == Decimal("3.5")
    assert to_hours("") == 0
    assert to_hours(True) == 0
    assert to_hours(float("-inf")) == 0


def test_calendar_edges_do_not_overflow():
    start, end = month_bounds(9999, 12)

    assert expected_hours_for_month(start, end) == Decimal("8") * len(working_days(start, end))
    assert working_days(start, end)[-1] == date(9999, 12, 31)
    assert find_missed_entries([], date(9999, 12, 31))[0].date == "9999-12-31"

    missed = find_missed_entries([], date(1, 1, 15))
    assert trailing_window(date(1, 1, 15)) == (date(1, 1, 1), date(1, 1, 15))
    assert missed[-1].date == "0001-01-01"
    assert shift_months(date(9999, 12, 15), 1) == date.max


def test_iter_days_empty_when_start_after_end():
    assert working_days(date(2024, 3, 15), date(2024, 3, 14)) == []


def test_humanize_day_ignores_host_locale(monkeypatch):
    monkeypatch.setattr(calendar, "day_abbr", ["lun", "mar", "mer", "gio", "ven", "sab", "dom"])
    monkeypatch.setattr(calendar, "month_abbr", ["", "gen", "feb", "mar", "apr", "mag", "giu",
                                                 "lug", "ago", "set", "ott", "nov", "dic"])

    assert humanize_day(date(2024, 3, 15)) == "Fri, Mar 15"


def test_month_totals_use_exact_day_keys():
    entries = [
        entry("2024-03-14", 3),
        entry("20240314", 5),
        entry(" 2024-03-14", 7),
        entry("2024-03-14T10:00:00", 2),
    ]

    assert total_hours_in_month(entries, "2024-03-01", "2024-03-31") == Decimal("3")
    missed = {item.date: item.total_hours for item in find_missed_entries(entries, AS_OF)}
    assert missed["2024-03-14"] == Decimal("3")
