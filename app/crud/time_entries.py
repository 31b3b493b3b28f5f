"""CRUD helpers for time entries plus the read-only entry source used by reports."""

from __future__ import annotations

import logging
import math
from datetime import date, datetime

from sqlalchemy import desc, select
from sqlalchemy.orm import Session, selectinload

from ..models.project import Project, ProjectMember
from ..models.time_entry import TimeEntry
from ..models.user import User
from ..services.timecalc import format_day
from .projects import get_project, is_member

logger = logging.getLogger(__name__)


def _utcnow() -> str:
    return datetime.utcnow().isoformat(timespec="seconds") + "Z"


def _clean_hours(value) -> float:
    if value is None or isinstance(value, bool):
        raise ValueError("hours is required")
    try:
        hours = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError("hours must be a number") from exc
    if not math.isfinite(hours) or hours <= 0:
        raise ValueError("hours must be a positive number")
    return hours


def _clean_date(value) -> str:
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return format_day(value)
    text = (value or "").strip() if isinstance(value, str) else ""
    try:
        parsed = datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValueError("date must be formatted YYYY-MM-DD") from exc
    return format_day(parsed)


def _require_membership(project: Project, user: User) -> None:
    if not (is_member(project, user) or user.is_admin):
        raise PermissionError("join the project before logging time on it")


def can_edit(entry: TimeEntry, user: User) -> bool:
    return entry.user_id == user.id or user.is_admin


def get_entry(db: Session, entry_id: int) -> TimeEntry | None:
    stmt = select(TimeEntry).options(selectinload(TimeEntry.project)).where(TimeEntry.id == entry_id)
    return db.execute(stmt).scalars().first()


def list_user_entries(db: Session, user_id: int, limit: int | None = None, offset: int = 0):
    stmt = (
        select(TimeEntry)
        .options(selectinload(TimeEntry.project))
        .where(TimeEntry.user_id == user_id)
        .order_by(desc(TimeEntry.date), desc(TimeEntry.created_at), desc(TimeEntry.id))
        .offset(offset)
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return db.execute(stmt).scalars().all()


def create_entry(db: Session, user: User, payload: dict) -> TimeEntry:
    project_id = payload.get("project_id")
    project = get_project(db, project_id) if project_id is not None else None
    if project is None:
        raise ValueError("project_id does not match an existing project")
    _require_membership(project, user)
    entry = TimeEntry(
        project_id=project.id,
        user_id=user.id,
        hours=_clean_hours(payload.get("hours")),
        date=_clean_date(payload.get("date")),
        description=(payload.get("description") or "").strip(),
        created_at=_utcnow(),
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info(
        "entry.created",
        extra={"extra_data": {"entry_id": entry.id, "project_id": project.id, "user_id": user.id}},
    )
    return entry


def update_entry(db: Session, entry: TimeEntry, user: User, payload: dict) -> TimeEntry:
    if "project_id" in payload and payload["project_id"] != entry.project_id:
        project = get_project(db, payload["project_id"]) if payload["project_id"] is not None else None
        if project is None:
            raise ValueError("project_id does not match an existing project")
        _require_membership(project, user)
        entry.project_id = project.id
    if "hours" in payload:
        entry.hours = _clean_hours(payload.get("hours"))
    if "date" in payload:
        entry.date = _clean_date(payload.get("date"))
    if "description" in payload:
        entry.description = (payload.get("description") or "").strip()
    db.commit()
    db.refresh(entry)
    return entry


def delete_entry(db: Session, entry: TimeEntry) -> None:
    db.delete(entry)
    db.commit()


class EntrySource:
    """Read-only access to stored entries for the report calculations.

    Reports only need "every entry for a user" or "every entry"; keeping that
    behind this small surface leaves the calculations unaware of SQLAlchemy.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def for_user(self, user_id: int) -> list[TimeEntry]:
        stmt = select(TimeEntry).where(TimeEntry.user_id == user_id)
        return list(self.db.execute(stmt).scalars().all())

    def for_projects_of(self, user_id: int) -> list[TimeEntry]:
        """Every entry on any project the user is a member of."""

        member_projects = select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
        stmt = select(TimeEntry).where(TimeEntry.project_id.in_(member_projects))
        return list(self.db.execute(stmt).scalars().all())

    def all(self, since: str | None = None) -> list[TimeEntry]:
        stmt = select(TimeEntry).options(
            selectinload(TimeEntry.project), selectinload(TimeEntry.user)
        )
        if since:
            stmt = stmt.where(TimeEntry.date >= since)
        stmt = stmt.order_by(desc(TimeEntry.date), desc(TimeEntry.created_at), desc(TimeEntry.id))
        return list(self.db.execute(stmt).scalars().all())
