"""Pydantic schemas for profiles and admin user management."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ProfileOut(BaseModel):
    id: int
    email: str
    display_name: Optional[str] = None
    roles: list[str] = Field(default_factory=list)
    created_at: str


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(default=None, max_length=120)


class AdminUserOut(ProfileOut):
    daily_cost: float = 0


class AdminUserUpdate(BaseModel):
    display_name: Optional[str] = Field(default=None, max_length=120)
    daily_cost: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)


class RolesUpdate(BaseModel):
    roles: list[str]
