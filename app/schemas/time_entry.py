from __future__ import annotations

from datetime import date as Date
from typing import Optional

from pydantic import BaseModel, Field


class EntryCreate(BaseModel):
    project_id: int
    hours: float = Field(..., gt=0, allow_inf_nan=False)
    date: Date
    description: str = ""


class EntryUpdate(BaseModel):
    project_id: Optional[int] = None
    hours: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    date: Optional[Date] = None
    description: Optional[str] = None


class EntryOut(BaseModel):
    id: int
    project_id: int
    user_id: int
    hours: float
    date: str
    description: str
    created_at: str

    class Config:
        from_attributes = True
