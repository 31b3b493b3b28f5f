from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Sequence

from .timecalc import (
    FULL_DAY_HOURS,
    expected_hours_for_month,
    format_day,
    month_bounds,
    parse_day,
    remaining_hours,
    shift_months,
    to_hours,
    total_hours_for_user_in_month,
    total_hours_in_month,
    working_days,
)

TWOPLACES = Decimal("0.01")
UNKNOWN_PROJECT = "Unknown project"
UNKNOWN_USER = "Unknown user"
UNKNOWN_COLOR = "#9ca3af"


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(TWOPLACES, rounding=ROUND_HALF_UP) if value else Decimal("0.00")


@dataclass
class EnrichedEntry:
    id: int
    date: str
    project_id: int
    project_name: str
    project_color: str
    user_id: int
    user_name: str
    description: str
    hours: Decimal
    created_at: str

    @property
    def display_date(self) -> str:
        day = parse_day(self.date)
        return day.strftime("%d/%m/%Y") if day else self.date


def enrich_entries(entries: Iterable[Any]) -> list[EnrichedEntry]:
    """Attach project and user labels to raw entries for the admin tables."""

    rows = []
    for entry in entries:
        project = getattr(entry, "project", None)
        user = getattr(entry, "user", None)
        rows.append(
            EnrichedEntry(
                id=entry.id,
                date=entry.date,
                project_id=entry.project_id,
                project_name=project.name if project is not None else UNKNOWN_PROJECT,
                project_color=project.color if project is not None else UNKNOWN_COLOR,
                user_id=entry.user_id,
                user_name=user.label if user is not None else UNKNOWN_USER,
                description=entry.description or "",
                hours=to_hours(entry.hours),
                created_at=entry.created_at,
            )
        )
    return rows


def filter_entries(rows: Sequence[EnrichedEntry], term: str | None) -> list[EnrichedEntry]:
    """Case-insensitive match on project, user, description or dd/mm/yyyy date."""

    needle = (term or "").strip().lower()
    if not needle:
        return list(rows)
    return [
        row
        for row in rows
        if needle in row.project_name.lower()
        or needle in row.user_name.lower()
        or needle in row.description.lower()
        or needle in row.display_date
    ]


def paginate(rows: Sequence[Any], page: int, page_size: int) -> tuple[list[Any], int]:
    total_pages = math.ceil(len(rows) / page_size) if page_size > 0 else 0
    page = max(page, 1)
    start = (page - 1) * page_size
    return list(rows[start : start + page_size]), total_pages


def report_window_start(today: date, months: int) -> str:
    """Earliest entry date the admin listing shows."""

    return format_day(shift_months(today, -months))


def sum_hours(rows: Iterable[EnrichedEntry]) -> Decimal:
    return _quantize(sum((row.hours for row in rows), Decimal("0")))


def budget_vs_cost(
    filtered_rows: Iterable[EnrichedEntry],
    all_entries: Iterable[Any],
    projects: Iterable[Any],
    users: Iterable[Any],
) -> list[dict[str, Any]]:
    """Compare each budgeted project's budget with the cost of all hours logged on it.

    Only projects that appear in ``filtered_rows`` are considered, but their
    cost is computed over ``all_entries`` so the window of the listing does not
    hide older spending. A day of work (8 hours) costs the user's ``daily_cost``.
    """

    wanted = {row.project_id for row in filtered_rows}
    project_map = {project.id: project for project in projects}
    daily_costs = {user.id: to_hours(user.daily_cost) for user in users}

    costs: dict[int, Decimal] = {}
    for entry in all_entries:
        if entry.project_id not in wanted:
            continue
        days = to_hours(entry.hours) / FULL_DAY_HOURS
        costs[entry.project_id] = costs.get(entry.project_id, Decimal("0")) + days * daily_costs.get(
            entry.user_id, Decimal("0")
        )

    rows = []
    for project_id, cost in costs.items():
        project = project_map.get(project_id)
        budget = to_hours(project.budget) if project is not None else Decimal("0")
        if budget <= 0:
            continue
        rows.append(
            {
                "project_id": project_id,
                "project_name": project.name,
                "budget": _quantize(budget),
                "actual_cost": _quantize(cost),
                "remaining_budget": _quantize(budget - cost),
            }
        )
    rows.sort(key=lambda row: row["project_name"].lower())
    return rows


def monthly_summary(
    team_entries: Iterable[Any],
    user_entries: Iterable[Any],
    user_id: int,
    year: int,
    month: int,
) -> dict[str, Any]:
    month_start, month_end = month_bounds(year, month)
    total = total_hours_in_month(team_entries, month_start, month_end)
    own = total_hours_for_user_in_month(user_entries, user_id, month_start, month_end)
    expected = expected_hours_for_month(month_start, month_end)
    return {
        "year": year,
        "month": month,
        "month_start": format_day(month_start),
        "month_end": format_day(month_end),
        "working_days": len(working_days(month_start, month_end)),
        "total_hours": total,
        "user_hours": own,
        "expected_hours": expected,
        "remaining_hours": remaining_hours(expected, own),
    }


__all__ = [
    "EnrichedEntry",
    "budget_vs_cost",
    "enrich_entries",
    "filter_entries",
    "monthly_summary",
    "paginate",
    "report_window_start",
    "sum_hours",
]
