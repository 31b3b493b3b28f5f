from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..core.config import settings
from ..crud.projects import list_projects
from ..crud.time_entries import EntrySource
from ..crud.users import get_user, list_users, set_roles, update_profile
from ..db.session import get_db
from ..deps.auth import get_entry_source, require_admin
from ..deps.clock import get_today
from ..models.user import User
from ..schemas.report import AdminEntryOut, AdminEntryPage, BudgetRowOut, MissedEntryOut, MonthlySummaryOut
from ..schemas.user import AdminUserOut, AdminUserUpdate, RolesUpdate
from ..services.export import XLSX_MEDIA_TYPE, build_entries_workbook, export_filename
from ..services.reporting import (
    EnrichedEntry,
    budget_vs_cost,
    enrich_entries,
    filter_entries,
    paginate,
    report_window_start,
    sum_hours,
)
from ..services.timecalc import find_missed_entries
from .api_reports import build_summary, missed_to_schema, resolve_month

router = APIRouter(prefix="/api/v1/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _user_to_schema(user: User) -> AdminUserOut:
    return AdminUserOut(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        roles=user.role_names,
        created_at=user.created_at,
        daily_cost=user.daily_cost or 0,
    )


def _entry_to_schema(row: EnrichedEntry) -> AdminEntryOut:
    return AdminEntryOut(
        id=row.id,
        date=row.date,
        project_id=row.project_id,
        project_name=row.project_name,
        project_color=row.project_color,
        user_id=row.user_id,
        user_name=row.user_name,
        description=row.description,
        hours=float(row.hours),
        created_at=row.created_at,
    )


def _recent_rows(source: EntrySource, today: date, search: str | None) -> tuple[list[EnrichedEntry], str]:
    since = report_window_start(today, settings.ADMIN_REPORT_MONTHS)
    rows = enrich_entries(source.all(since=since))
    return filter_entries(rows, search), since


def _load_user(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    if not user:
        raise HTTPException(404, "Not found")
    return user


@router.get("/entries", response_model=AdminEntryPage)
def api_admin_entries(
    search: str | None = Query(default=None, max_length=200),
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=500),
    source: EntrySource = Depends(get_entry_source),
    today: date = Depends(get_today),
):
    rows, since = _recent_rows(source, today, search)
    size = page_size or settings.REPORT_PAGE_SIZE
    items, total_pages = paginate(rows, page, size)
    return AdminEntryPage(
        items=[_entry_to_schema(row) for row in items],
        page=page,
        page_size=size,
        total_items=len(rows),
        total_pages=total_pages,
        total_hours=float(sum_hours(rows)),
        since=since,
    )


@router.get("/budget", response_model=list[BudgetRowOut])
def api_admin_budget(
    search: str | None = Query(default=None, max_length=200),
    source: EntrySource = Depends(get_entry_source),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    rows, _ = _recent_rows(source, today, search)
    budget_rows = budget_vs_cost(rows, source.all(), list_projects(db, limit=None), list_users(db))
    return [
        BudgetRowOut(
            project_id=row["project_id"],
            project_name=row["project_name"],
            budget=float(row["budget"]),
            actual_cost=float(row["actual_cost"]),
            remaining_budget=float(row["remaining_budget"]),
        )
        for row in budget_rows
    ]


@router.get("/export")
def api_admin_export(
    search: str | None = Query(default=None, max_length=200),
    source: EntrySource = Depends(get_entry_source),
    today: date = Depends(get_today),
):
    rows, _ = _recent_rows(source, today, search)
    content = build_entries_workbook(rows)
    headers = {"Content-Disposition": f'attachment; filename="{export_filename(today)}"'}
    return Response(content=content, media_type=XLSX_MEDIA_TYPE, headers=headers)


@router.get("/users", response_model=list[AdminUserOut])
def api_admin_users(db: Session = Depends(get_db)):
    return [_user_to_schema(user) for user in list_users(db)]


@router.patch("/users/{user_id}", response_model=AdminUserOut)
def api_admin_update_user(user_id: int, payload: AdminUserUpdate, db: Session = Depends(get_db)):
    user = _load_user(db, user_id)
    try:
        updated = update_profile(db, user, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _user_to_schema(updated)


@router.put("/users/{user_id}/roles", response_model=AdminUserOut)
def api_admin_set_roles(user_id: int, payload: RolesUpdate, db: Session = Depends(get_db)):
    user = _load_user(db, user_id)
    try:
        updated = set_roles(db, user, payload.roles)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _user_to_schema(updated)


@router.get("/users/{user_id}/missed", response_model=list[MissedEntryOut])
def api_admin_user_missed(
    user_id: int,
    as_of: date | None = Query(default=None),
    source: EntrySource = Depends(get_entry_source),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    user = _load_user(db, user_id)
    missed = find_missed_entries(source.for_user(user.id), as_of or today)
    return [missed_to_schema(item) for item in missed]


@router.get("/users/{user_id}/monthly", response_model=MonthlySummaryOut)
def api_admin_user_monthly(
    user_id: int,
    year: int | None = Query(default=None, ge=1970, le=9999),
    month: int | None = Query(default=None, ge=1, le=12),
    source: EntrySource = Depends(get_entry_source),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    user = _load_user(db, user_id)
    year, month = resolve_month(year, month, today)
    return build_summary(source, user.id, year, month)
