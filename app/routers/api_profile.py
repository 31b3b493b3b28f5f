from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..crud.users import update_profile
from ..db.session import get_db
from ..deps.auth import get_current_user
from ..models.user import User
from ..schemas.user import ProfileOut, ProfileUpdate

router = APIRouter(prefix="/api/v1/profile", tags=["profile"])


def profile_to_schema(user: User) -> ProfileOut:
    return ProfileOut(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        roles=user.role_names,
        created_at=user.created_at,
    )


@router.get("", response_model=ProfileOut)
def api_get_profile(user: User = Depends(get_current_user)):
    return profile_to_schema(user)


@router.patch("", response_model=ProfileOut)
def api_update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    updated = update_profile(db, user, payload.model_dump(exclude_unset=True, include={"display_name"}))
    return profile_to_schema(updated)
