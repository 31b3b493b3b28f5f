"""SQLAlchemy models for user accounts and their roles."""

from __future__ import annotations

from sqlalchemy import Column, Float, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.roles import ROLE_ADMIN
from ..db.session import Base


class User(Base):
    """An account that logs time. ``daily_cost`` feeds the budget report."""

    __tablename__ = "users"
    __allow_unmapped__ = True

    id = Column(Integer, primary_key=True, index=True)
    email = Column(Text, nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    display_name = Column(Text, nullable=True)
    daily_cost = Column(Float, nullable=False, default=0)
    created_at = Column(Text, nullable=False)

    roles = relationship("UserRole", back_populates="user", cascade="all, delete-orphan")
    time_entries = relationship("TimeEntry", back_populates="user")

    @property
    def role_names(self) -> list[str]:
        return sorted(role.role for role in self.roles or [])

    def has_role(self, role: str) -> bool:
        return role in self.role_names

    @property
    def is_admin(self) -> bool:
        return self.has_role(ROLE_ADMIN)

    @property
    def label(self) -> str:
        return (self.display_name or "").strip() or self.email


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Text, nullable=False)

    user = relationship("User", back_populates="roles")


__all__ = ["User", "UserRole"]
