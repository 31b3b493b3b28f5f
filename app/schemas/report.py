"""Response shapes for the personal and admin reports."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .time_entry import EntryOut


class MissedEntryOut(BaseModel):
    date: str
    total_hours: float
    formatted_date: str


class MonthlySummaryOut(BaseModel):
    year: int
    month: int
    month_start: str
    month_end: str
    working_days: int
    total_hours: float
    user_hours: float
    expected_hours: float
    remaining_hours: float


class DashboardOut(BaseModel):
    total_projects: int
    total_hours: float
    entry_count: int
    recent_entries: list[EntryOut] = Field(default_factory=list)


class AdminEntryOut(BaseModel):
    id: int
    date: str
    project_id: int
    project_name: str
    project_color: str
    user_id: int
    user_name: str
    description: str
    hours: float
    created_at: str


class AdminEntryPage(BaseModel):
    items: list[AdminEntryOut]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    total_hours: float
    since: str


class BudgetRowOut(BaseModel):
    project_id: int
    project_name: str
    budget: float
    actual_cost: float
    remaining_budget: float
