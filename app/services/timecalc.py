"""Working-day arithmetic, missed-day detection and monthly hour totals.

Everything here is a pure function over its arguments: no database access, no
clock reads unless the caller leaves ``as_of`` empty. Entry dates are treated
as opaque ``YYYY-MM-DD`` calendar keys and are never shifted between
timezones, so a bare date can't slide to the previous day the way it would
after being parsed as UTC midnight.
"""

from __future__ import annotations

import calendar
import re
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Iterator, Mapping

FULL_DAY_HOURS = Decimal("8")
ZERO = Decimal("0")

_DAY_KEY_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
# Fixed English labels; ``calendar.day_abbr`` follows the host locale.
_WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass(frozen=True)
class MissedEntry:
    date: str
    total_hours: Decimal
    formatted_date: str


def _field(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def to_hours(value: Any) -> Decimal:
    """Coerce a stored hours value to ``Decimal``.

    Anything that is not a finite number contributes nothing.
    """

    if isinstance(value, bool) or value is None:
        return ZERO
    if isinstance(value, Decimal):
        hours = value
    elif isinstance(value, (int, float)):
        hours = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return ZERO
        try:
            hours = Decimal(cleaned)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO
    if not hours.is_finite():
        return ZERO
    return hours


def format_day(value: date) -> str:
    """Canonical calendar key built from the local calendar fields."""

    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_day(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    # Same rule as the missed-day keys: exactly YYYY-MM-DD, nothing around it.
    if not _DAY_KEY_RE.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def day_key(value: Any) -> str | None:
    """Return the calendar key for an entry date, or ``None`` if it has none."""

    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return format_day(value)
    if isinstance(value, str):
        return value
    return None


def humanize_day(value: date) -> str:
    """Render a date as e.g. ``Fri, Mar 15``."""

    return f"{_WEEKDAY_ABBR[value.weekday()]}, {_MONTH_ABBR[value.month - 1]} {value.day}"


def shift_months(value: date, months: int) -> date:
    """Move ``value`` by whole calendar months, clamping the day if needed.

    Results outside the supported years clamp to ``date.min`` or ``date.max``.
    """

    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    if year < date.min.year:
        return date.min
    if year > date.max.year:
        return date.max
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def is_working_day(value: date) -> bool:
    return value.weekday() < 5


def iter_days(start: date, end: date) -> Iterator[date]:
    if start > end:
        return
    current = start
    while True:
        yield current
        # Stop before stepping, so ``end == date.max`` does not overflow.
        if current >= end:
            break
        current += timedelta(days=1)


def working_days(start: date, end: date) -> list[date]:
    return [day for day in iter_days(start, end) if is_working_day(day)]


def trailing_window(as_of: date) -> tuple[date, date]:
    """One calendar month back from ``as_of`` through ``as_of``, inclusive."""

    return shift_months(as_of, -1), as_of


def _bounds(start: Any, end: Any) -> tuple[date, date]:
    start_day, end_day = parse_day(start), parse_day(end)
    if start_day is None or end_day is None:
        raise ValueError("month bounds must be dates or YYYY-MM-DD strings")
    return start_day, end_day


def find_missed_entries(entries: Iterable[Any], as_of: date | None = None) -> list[MissedEntry]:
    """List working days in the trailing month with less than a full day logged.

    ``entries`` may hold every entry a user ever logged; those outside the
    window or on weekends are ignored. Results are most recent first.
    """

    if as_of is None:
        as_of = date.today()
    start, end = trailing_window(as_of)
    days = {format_day(day): day for day in working_days(start, end)}

    daily_hours: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        key = day_key(_field(entry, "date"))
        if key in days:
            daily_hours[key] += to_hours(_field(entry, "hours"))

    missed = []
    for key, day in sorted(days.items(), key=lambda item: item[1], reverse=True):
        total = daily_hours.get(key, ZERO)
        if total < FULL_DAY_HOURS:
            missed.append(MissedEntry(date=key, total_hours=total, formatted_date=humanize_day(day)))
    return missed


def total_hours_in_month(entries: Iterable[Any], month_start: Any, month_end: Any) -> Decimal:
    start, end = _bounds(month_start, month_end)
    total = ZERO
    for entry in entries:
        day = parse_day(_field(entry, "date"))
        if day is not None and start <= day <= end:
            total += to_hours(_field(entry, "hours"))
    return total


def total_hours_for_user_in_month(
    entries: Iterable[Any], user_id: Any, month_start: Any, month_end: Any
) -> Decimal:
    own = (entry for entry in entries if _field(entry, "user_id") == user_id)
    return total_hours_in_month(own, month_start, month_end)


def expected_hours_for_month(month_start: Any, month_end: Any) -> Decimal:
    start, end = _bounds(month_start, month_end)
    return FULL_DAY_HOURS * len(working_days(start, end))


def remaining_hours(expected: Decimal, actual: Decimal) -> Decimal:
    """Hours still owed; overlogging yields zero, never a negative deficit."""

    return max(ZERO, to_hours(expected) - to_hours(actual))


__all__ = [
    "FULL_DAY_HOURS",
    "MissedEntry",
    "day_key",
    "expected_hours_for_month",
    "find_missed_entries",
    "format_day",
    "humanize_day",
    "is_working_day",
    "iter_days",
    "month_bounds",
    "parse_day",
    "remaining_hours",
    "shift_months",
    "to_hours",
    "total_hours_for_user_in_month",
    "total_hours_in_month",
    "trailing_window",
    "working_days",
]
