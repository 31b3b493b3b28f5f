from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..crud.projects import list_projects
from ..crud.time_entries import EntrySource, list_user_entries
from ..db.session import get_db
from ..deps.auth import get_current_user, get_entry_source
from ..deps.clock import get_today
from ..models.user import User
from ..schemas.report import DashboardOut, MissedEntryOut, MonthlySummaryOut
from ..schemas.time_entry import EntryOut
from ..services.reporting import monthly_summary
from ..services.timecalc import MissedEntry, find_missed_entries, to_hours

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])

RECENT_ENTRY_COUNT = 5


def missed_to_schema(missed: MissedEntry) -> MissedEntryOut:
    return MissedEntryOut(
        date=missed.date,
        total_hours=float(missed.total_hours),
        formatted_date=missed.formatted_date,
    )


def summary_to_schema(summary: dict) -> MonthlySummaryOut:
    data = dict(summary)
    for key in ("total_hours", "user_hours", "expected_hours", "remaining_hours"):
        data[key] = float(data[key])
    return MonthlySummaryOut(**data)


def resolve_month(year: int | None, month: int | None, today: date) -> tuple[int, int]:
    if (year is None) != (month is None):
        raise HTTPException(422, "year and month must be given together")
    if year is None:
        return today.year, today.month
    return year, month


def build_summary(source: EntrySource, user_id: int, year: int, month: int) -> MonthlySummaryOut:
    summary = monthly_summary(
        source.for_projects_of(user_id),
        source.for_user(user_id),
        user_id,
        year,
        month,
    )
    return summary_to_schema(summary)


@router.get("/dashboard", response_model=DashboardOut)
def api_dashboard(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    entries = list_user_entries(db, user.id)
    total = sum((to_hours(entry.hours) for entry in entries), to_hours(0))
    return DashboardOut(
        total_projects=len(list_projects(db, member_id=user.id)),
        total_hours=round(float(total), 2),
        entry_count=len(entries),
        recent_entries=[EntryOut.model_validate(entry) for entry in entries[:RECENT_ENTRY_COUNT]],
    )


@router.get("/missed", response_model=list[MissedEntryOut])
def api_missed_entries(
    as_of: date | None = Query(default=None),
    user: User = Depends(get_current_user),
    source: EntrySource = Depends(get_entry_source),
    today: date = Depends(get_today),
):
    missed = find_missed_entries(source.for_user(user.id), as_of or today)
    return [missed_to_schema(item) for item in missed]


@router.get("/monthly", response_model=MonthlySummaryOut)
def api_monthly_summary(
    year: int | None = Query(default=None, ge=1970, le=9999),
    month: int | None = Query(default=None, ge=1, le=12),
    user: User = Depends(get_current_user),
    source: EntrySource = Depends(get_entry_source),
    today: date = Depends(get_today),
):
    year, month = resolve_month(year, month, today)
    return build_summary(source, user.id, year, month)
