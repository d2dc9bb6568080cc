"""Academic calendar resolution: which (year, semester) a date belongs to."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import Semester
from ..core.exceptions import ConfigurationError
from .model import AcademicPeriod, PeriodMatch

PERIOD_GAP_MESSAGE = "Tanggal absensi tidak termasuk dalam tahun ajaran yang terdaftar. Hubungi Admin."


def resolve(value: date, periods: Iterable[AcademicPeriod]) -> Optional[PeriodMatch]:
    """Return the first period (in iteration order) whose odd, then even, range contains `value`.

    Both range ends are inclusive. Overlapping periods are not detected; the
    earlier one wins.
    """
    for period in periods:
        if period.contains(value, Semester.ODD):
            return PeriodMatch(period=period, semester=Semester.ODD)
        if period.contains(value, Semester.EVEN):
            return PeriodMatch(period=period, semester=Semester.EVEN)
    return None


def require_period(value: date, periods: Iterable[AcademicPeriod]) -> PeriodMatch:
    """Like `resolve` but a missing period is a configuration gap, never a default."""
    match = resolve(value, periods)
    if match is None:
        raise ConfigurationError(PERIOD_GAP_MESSAGE)
    return match


def default_selection(periods: Sequence[AcademicPeriod], today: date) -> Optional[PeriodMatch]:
    """Initial (year, semester) shown on dashboards.

    Display heuristic only: must not be used to stamp attendance records.
    """
    if not periods:
        return None

    match = resolve(today, periods)
    if match:
        return match

    latest = max(periods, key=lambda p: p.even_end)
    return PeriodMatch(period=latest, semester=Semester.ODD)
