from __future__ import annotations

from datetime import date, datetime, timedelta

from ..core.constants import DEFAULT_REST_WEEKDAY, SCHOOL_DAYS_PER_WEEK
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_date_arg(value: str | None, field_name: str = "Tanggal") -> date:
    """Parse a request argument, raising ValidationError instead of ValueError."""
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} wajib diisi")
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} tidak valid (YYYY-MM-DD)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def is_rest_day(value: date, *, rest_weekday: int = DEFAULT_REST_WEEKDAY) -> bool:
    """True when `value` falls on the weekly non-instructional day."""
    return value.weekday() == int(rest_weekday)


def school_week_range(value: date) -> tuple[date, date]:
    """Monday..Saturday range of the school week containing `value`.

    A Sunday belongs to the week that ended the day before.
    """
    monday = value - timedelta(days=value.weekday())
    return monday, monday + timedelta(days=SCHOOL_DAYS_PER_WEEK - 1)


def month_range(value: date) -> tuple[date, date]:
    first = value.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    return first, next_month - timedelta(days=1)
