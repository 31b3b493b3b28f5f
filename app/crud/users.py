"""CRUD helpers for accounts, profiles and role assignments."""

from __future__ import annotations

import logging
import math
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..core.config import settings
from ..core.roles import ROLE_ADMIN, ROLE_USER, normalize_role
from ..core.security import hash_password, verify_password
from ..models.user import User, UserRole

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class DuplicateEmailError(ValueError):
    pass


def _utcnow() -> str:
    return datetime.utcnow().isoformat(timespec="seconds") + "Z"


def _normalize_email(value: str | None) -> str:
    email = (value or "").strip().lower()
    if not email or "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValueError("a valid email is required")
    return email


def get_user(db: Session, user_id: int) -> User | None:
    stmt = select(User).options(selectinload(User.roles)).where(User.id == user_id)
    return db.execute(stmt).scalars().first()


def get_user_by_email(db: Session, email: str) -> User | None:
    stmt = select(User).options(selectinload(User.roles)).where(User.email == (email or "").strip().lower())
    return db.execute(stmt).scalars().first()


def list_users(db: Session):
    stmt = select(User).options(selectinload(User.roles)).order_by(User.email)
    return db.execute(stmt).scalars().all()


def create_user(db: Session, payload: dict) -> User:
    email = _normalize_email(payload.get("email"))
    password = payload.get("password") or ""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
    if get_user_by_email(db, email):
        raise DuplicateEmailError("email is already registered")

    user = User(
        email=email,
        password_hash=hash_password(password),
        display_name=(payload.get("display_name") or "").strip() or None,
        daily_cost=0,
        created_at=_utcnow(),
    )
    user.roles.append(UserRole(role=ROLE_USER))
    if email in settings.admin_emails:
        user.roles.append(UserRole(role=ROLE_ADMIN))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user.registered", extra={"extra_data": {"user_id": user.id, "roles": user.role_names}})
    return user


def authenticate(db: Session, email: str, password: str) -> User | None:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def update_profile(db: Session, user: User, payload: dict) -> User:
    if "display_name" in payload:
        user.display_name = (payload.get("display_name") or "").strip() or None
    if "daily_cost" in payload:
        value = payload.get("daily_cost")
        cost = float(value) if value is not None else 0.0
        if not math.isfinite(cost) or cost < 0:
            raise ValueError("daily_cost must be a non-negative number")
        user.daily_cost = cost
    db.commit()
    db.refresh(user)
    return user


def set_roles(db: Session, user: User, roles: list[str]) -> User:
    wanted = {normalize_role(role) for role in roles}
    # Every account keeps the base role.
    wanted.add(ROLE_USER)
    for existing in list(user.roles):
        if existing.role not in wanted:
            user.roles.remove(existing)
    current = {role.role for role in user.roles}
    for role in sorted(wanted - current):
        user.roles.append(UserRole(role=role))
    db.commit()
    db.refresh(user)
    logger.info("user.roles_changed", extra={"extra_data": {"user_id": user.id, "roles": user.role_names}})
    return user
