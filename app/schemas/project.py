"""Pydantic schemas that describe project payloads for the API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    color: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    budget: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    budget: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)


class ProjectOut(BaseModel):
    id: int
    name: str
    description: str
    color: str
    budget: Optional[float] = None
    owner_id: int
    created_at: str
    updated_at: str
    total_hours: float = 0
    member_count: int = 0
    is_member: bool = False

    class Config:
        from_attributes = True
