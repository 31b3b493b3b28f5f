"""CRUD helpers for projects and their membership."""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session, selectinload

from ..models.project import Project, ProjectMember
from ..models.time_entry import TimeEntry
from ..models.user import User

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#3b82f6"
_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def _utcnow() -> str:
    return datetime.utcnow().isoformat(timespec="seconds") + "Z"


def _clean_color(value: str | None) -> str:
    color = (value or "").strip() or DEFAULT_COLOR
    if not _COLOR_RE.match(color):
        raise ValueError("color must look like #RRGGBB")
    return color.lower()


def _clean_budget(value) -> float | None:
    if value is None or value == "":
        return None
    budget = float(value)
    if not math.isfinite(budget) or budget < 0:
        raise ValueError("budget must be a non-negative number")
    return budget


def can_manage(project: Project, user: User) -> bool:
    return project.owner_id == user.id or user.is_admin


def is_member(project: Project, user: User) -> bool:
    return user.id in project.member_ids


def list_projects(db: Session, *, member_id: int | None = None, limit: int | None = 200, offset: int = 0):
    stmt = select(Project).options(selectinload(Project.members))
    if member_id is not None:
        stmt = stmt.join(ProjectMember).where(ProjectMember.user_id == member_id)
    stmt = stmt.order_by(desc(Project.created_at), desc(Project.id)).limit(limit).offset(offset)
    return db.execute(stmt).scalars().all()


def get_project(db: Session, project_id: int) -> Project | None:
    stmt = select(Project).options(selectinload(Project.members)).where(Project.id == project_id)
    return db.execute(stmt).scalars().first()


def project_hours(db: Session, project_ids: list[int]) -> dict[int, float]:
    """Total logged hours keyed by project id; projects with no entries are absent."""

    if not project_ids:
        return {}
    stmt = (
        select(TimeEntry.project_id, func.sum(TimeEntry.hours))
        .where(TimeEntry.project_id.in_(project_ids))
        .group_by(TimeEntry.project_id)
    )
    return {project_id: float(total or 0) for project_id, total in db.execute(stmt).all()}


def create_project(db: Session, owner: User, payload: dict) -> Project:
    name = (payload.get("name") or "").strip()
    if not name:
        raise ValueError("name is required")
    now = _utcnow()
    project = Project(
        name=name,
        description=(payload.get("description") or "").strip(),
        color=_clean_color(payload.get("color")),
        budget=_clean_budget(payload.get("budget")),
        owner_id=owner.id,
        created_at=now,
        updated_at=now,
    )
    project.members.append(ProjectMember(user_id=owner.id, joined_at=now))
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("project.created", extra={"extra_data": {"project_id": project.id, "owner_id": owner.id}})
    return project


def update_project(db: Session, project: Project, payload: dict) -> Project:
    if "name" in payload:
        name = (payload.get("name") or "").strip()
        if not name:
            raise ValueError("name is required")
        project.name = name
    if "description" in payload:
        project.description = (payload.get("description") or "").strip()
    if "color" in payload:
        project.color = _clean_color(payload.get("color"))
    if "budget" in payload:
        project.budget = _clean_budget(payload.get("budget"))
    project.updated_at = _utcnow()
    db.commit()
    db.refresh(project)
    return project


def delete_project(db: Session, project: Project) -> None:
    # Members and time entries go with the project (ORM cascade).
    project_id = project.id
    db.delete(project)
    db.commit()
    logger.info("project.deleted", extra={"extra_data": {"project_id": project_id}})


def join_project(db: Session, project: Project, user: User) -> Project:
    if not is_member(project, user):
        project.members.append(ProjectMember(user_id=user.id, joined_at=_utcnow()))
        db.commit()
        db.refresh(project)
    return project


def leave_project(db: Session, project: Project, user: User) -> Project:
    if project.owner_id == user.id:
        raise ValueError("the owner cannot leave their own project")
    for member in list(project.members):
        if member.user_id == user.id:
            project.members.remove(member)
    db.commit()
    db.refresh(project)
    return project
