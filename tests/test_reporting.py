import os
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path
from types import SimpleNamespace

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from app.services.reporting import (
    UNKNOWN_PROJECT,
    budget_vs_cost,
    enrich_entries,
    filter_entries,
    monthly_summary,
    paginate,
    report_window_start,
    sum_hours,
)


def _user(user_id, name, daily_cost=0):
    return SimpleNamespace(id=user_id, label=name, daily_cost=daily_cost)


def _project(project_id, name, budget=None, color="#3b82f6"):
    return SimpleNamespace(id=project_id, name=name, budget=budget, color=color)


def _entry(entry_id, project, user, day, hours, description=""):
    return SimpleNamespace(
        id=entry_id,
        project_id=project.id,
        project=project,
        user_id=user.id,
        user=user,
        date=day,
        hours=hours,
        description=description,
        created_at=f"{day}T09:00:00Z",
    )


ADA = _user(1, "Ada", daily_cost=400)
LIN = _user(2, "Linus", daily_cost=320)
SITE = _project(10, "Website Redesign", budget=10000)
APP = _project(11, "Mobile App", budget=None)


def test_enrich_entries_attaches_labels():
    orphan = SimpleNamespace(
        id=3, project_id=99, project=None, user_id=1, user=ADA,
        date="2024-03-01", hours=1, description=None, created_at="x",
    )

    rows = enrich_entries([_entry(1, SITE, ADA, "2024-03-04", 4, "Analysis"), orphan])

    assert rows[0].project_name == "Website Redesign"
    assert rows[0].user_name == "Ada"
    assert rows[0].hours == Decimal("4")
    assert rows[0].display_date == "04/03/2024"
    assert rows[1].project_name == UNKNOWN_PROJECT
    assert rows[1].description == ""


def test_filter_entries_matches_project_user_description_and_date():
    rows = enrich_entries(
        [
            _entry(1, SITE, ADA, "2024-03-04", 4, "Analysis"),
            _entry(2, APP, LIN, "2024-03-05", 2, "Meeting"),
        ]
    )

    assert [r.id for r in filter_entries(rows, "website")] == [1]
    assert [r.id for r in filter_entries(rows, "LINUS")] == [2]
    assert [r.id for r in filter_entries(rows, "meet")] == [2]
    assert [r.id for r in filter_entries(rows, "05/03")] == [2]
    assert [r.id for r in filter_entries(rows, "  ")] == [1, 2]


def test_paginate_counts_pages():
    items, pages = paginate(list(range(45)), page=3, page_size=20)

    assert items == list(range(40, 45))
    assert pages == 3
    assert paginate([], 1, 20) == ([], 0)


def test_report_window_start_goes_back_whole_months():
    assert report_window_start(date(2024, 5, 31), 3) == "2024-02-29"


def test_sum_hours_rounds_to_two_places():
    rows = enrich_entries([_entry(1, SITE, ADA, "2024-03-04", 1.005, ""), _entry(2, SITE, ADA, "2024-03-04", 2, "")])

    assert sum_hours(rows) == Decimal("3.01")


def test_budget_vs_cost_uses_all_entries_for_filtered_projects():
    recent = [_entry(1, SITE, ADA, "2024-03-04", 8, ""), _entry(2, APP, LIN, "2024-03-04", 8, "")]
    older = [_entry(3, SITE, LIN, "2023-01-10", 4, "")]
    filtered = enrich_entries(recent)

    rows = budget_vs_cost(filtered, recent + older, [SITE, APP], [ADA, LIN])

    # APP has no budget and is left out
    assert len(rows) == 1
    row = rows[0]
    assert row["project_name"] == "Website Redesign"
    # 1 day * 400 + 0.5 day * 320
    assert row["actual_cost"] == Decimal("560.00")
    assert row["budget"] == Decimal("10000.00")
    assert row["remaining_budget"] == Decimal("9440.00")


def test_budget_vs_cost_skips_projects_outside_the_filter():
    recent = [_entry(1, SITE, ADA, "2024-03-04", 8, "")]

    assert budget_vs_cost([], recent, [SITE], [ADA]) == []


def test_monthly_summary_combines_team_and_user_hours():
    own = [_entry(1, SITE, ADA, "2024-02-05", 8, ""), _entry(2, SITE, ADA, "2024-02-06", 6, "")]
    team = own + [_entry(3, SITE, LIN, "2024-02-05", 7, ""), _entry(4, SITE, LIN, "2024-03-01", 8, "")]

    summary = monthly_summary(team, own, ADA.id, 2024, 2)

    assert summary["month_start"] == "2024-02-01"
    assert summary["month_end"] == "2024-02-29"
    assert summary["working_days"] == 21
    assert summary["total_hours"] == Decimal("21")
    assert summary["user_hours"] == Decimal("14")
    assert summary["expected_hours"] == Decimal("168")
    assert summary["remaining_hours"] == Decimal("154")
