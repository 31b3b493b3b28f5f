from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..core.security import issue_token_pair, refresh_access_token
from ..crud.users import DuplicateEmailError, authenticate, create_user
from ..db.session import get_db
from ..schemas.auth import RefreshRequest, RegisterRequest, TokenRequest, TokenResponse
from ..schemas.user import ProfileOut
from .api_profile import profile_to_schema

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=ProfileOut, status_code=201, summary="Create an account")
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    try:
        user = create_user(db, payload.model_dump())
    except DuplicateEmailError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return profile_to_schema(user)


@router.post("/token", response_model=TokenResponse, summary="Exchange credentials for JWTs")
def exchange_token(payload: TokenRequest, db: Session = Depends(get_db)):
    user = authenticate(db, payload.email, payload.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    pair = issue_token_pair(user.id)
    return TokenResponse(**pair.model_dump())


@router.post("/refresh", response_model=TokenResponse, summary="Refresh access token")
def refresh_token(payload: RefreshRequest):
    try:
        pair = refresh_access_token(payload.refresh_token)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    return TokenResponse(**pair.model_dump())
