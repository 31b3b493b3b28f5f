from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..crud.time_entries import (
    can_edit,
    create_entry,
    delete_entry,
    get_entry,
    list_user_entries,
    update_entry,
)
from ..db.session import get_db
from ..deps.auth import get_current_user
from ..models.user import User
from ..schemas.time_entry import EntryCreate, EntryOut, EntryUpdate

router = APIRouter(prefix="/api/v1/entries", tags=["entries"])


def _load_editable(db: Session, entry_id: int, user: User):
    entry = get_entry(db, entry_id)
    if not entry:
        raise HTTPException(404, "Not found")
    if not can_edit(entry, user):
        raise HTTPException(403, "You can only change your own entries")
    return entry


@router.get("", response_model=list[EntryOut])
def api_list_entries(
    limit: int = Query(default=200, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return list_user_entries(db, user.id, limit=limit, offset=offset)


@router.post("", response_model=EntryOut, status_code=201)
def api_create_entry(
    payload: EntryCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return create_entry(db, user, payload.model_dump())
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.patch("/{entry_id}", response_model=EntryOut)
def api_update_entry(
    entry_id: int,
    payload: EntryUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entry = _load_editable(db, entry_id, user)
    try:
        return update_entry(db, entry, user, payload.model_dump(exclude_unset=True))
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.delete("/{entry_id}")
def api_delete_entry(entry_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    delete_entry(db, _load_editable(db, entry_id, user))
    return {"status": "deleted"}
