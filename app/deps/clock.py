from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from ..core.config import settings


def get_today() -> date:
    """Today's calendar date in the configured wall-clock zone."""

    return datetime.now(ZoneInfo(settings.TZ)).date()
