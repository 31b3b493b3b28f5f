from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..crud.projects import (
    can_manage,
    create_project,
    delete_project,
    get_project,
    join_project,
    leave_project,
    list_projects,
    project_hours,
    update_project,
)
from ..db.session import get_db
from ..deps.auth import get_current_user
from ..models.project import Project
from ..models.user import User
from ..schemas.project import ProjectCreate, ProjectOut, ProjectUpdate

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


def _project_to_schema(project: Project, user: User, hours: dict[int, float]) -> ProjectOut:
    return ProjectOut.model_validate(project, from_attributes=True).model_copy(
        update={
            "total_hours": round(hours.get(project.id, 0.0), 2),
            "member_count": len(project.members or []),
            "is_member": user.id in project.member_ids,
        }
    )


def _single(db: Session, project: Project, user: User) -> ProjectOut:
    return _project_to_schema(project, user, project_hours(db, [project.id]))


def _load(db: Session, project_id: int) -> Project:
    project = get_project(db, project_id)
    if not project:
        raise HTTPException(404, "Not found")
    return project


def _load_managed(db: Session, project_id: int, user: User) -> Project:
    project = _load(db, project_id)
    if not can_manage(project, user):
        raise HTTPException(403, "Only the project owner or an admin can change this project")
    return project


@router.get("", response_model=list[ProjectOut])
def api_list_projects(
    scope: Literal["mine", "all"] = "mine",
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    projects = list_projects(db, member_id=user.id if scope == "mine" else None)
    hours = project_hours(db, [project.id for project in projects])
    return [_project_to_schema(project, user, hours) for project in projects]


@router.post("", response_model=ProjectOut, status_code=201)
def api_create_project(
    payload: ProjectCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        project = create_project(db, user, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _single(db, project, user)


@router.get("/{project_id}", response_model=ProjectOut)
def api_get_project(project_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _single(db, _load(db, project_id), user)


@router.patch("/{project_id}", response_model=ProjectOut)
def api_update_project(
    project_id: int,
    payload: ProjectUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = _load_managed(db, project_id, user)
    try:
        updated = update_project(db, project, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _single(db, updated, user)


@router.delete("/{project_id}")
def api_delete_project(project_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    project = _load_managed(db, project_id, user)
    delete_project(db, project)
    return {"status": "deleted"}


@router.post("/{project_id}/join", response_model=ProjectOut)
def api_join_project(project_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    project = join_project(db, _load(db, project_id), user)
    return _single(db, project, user)


@router.delete("/{project_id}/members/me", response_model=ProjectOut)
def api_leave_project(project_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        project = leave_project(db, _load(db, project_id), user)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _single(db, project, user)
