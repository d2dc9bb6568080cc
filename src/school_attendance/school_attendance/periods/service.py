from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_date_arg, today_local
from ..common.validators import require_date_order, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import AcademicPeriod, PeriodMatch
from .repository import PeriodRepository
from .resolver import default_selection, require_period, resolve

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodInput:
    label: str
    odd_start: date
    odd_end: date
    even_start: date
    even_end: date

    @classmethod
    def from_payload(cls, payload: dict) -> "PeriodInput":
        """Build from the JSON body used by the period screen (original field names)."""
        label = require_non_empty(str(payload.get("tahun_ajaran") or ""), "Tahun ajaran")
        return cls(
            label=label,
            odd_start=parse_date_arg(payload.get("semester_ganjil_start"), "Awal semester ganjil"),
            odd_end=parse_date_arg(payload.get("semester_ganjil_end"), "Akhir semester ganjil"),
            even_start=parse_date_arg(payload.get("semester_genap_start"), "Awal semester genap"),
            even_end=parse_date_arg(payload.get("semester_genap_end"), "Akhir semester genap"),
        )


class PeriodService:
    """Use case: configure academic periods (admin) and resolve dates against them."""

    def __init__(self, periods: PeriodRepository):
        self._periods = periods

    def list_periods(self) -> Sequence[AcademicPeriod]:
        return self._periods.list_all()

    def resolve(self, value: date) -> Optional[PeriodMatch]:
        return resolve(value, self._periods.list_all())

    def require_period(self, value: date) -> PeriodMatch:
        return require_period(value, self._periods.list_all())

    def active_selection(self, *, today: date | None = None) -> Optional[PeriodMatch]:
        return default_selection(self._periods.list_all(), today or today_local())

    @staticmethod
    def _validate(data: PeriodInput) -> None:
        require_date_order(data.odd_start, data.odd_end, "Semester ganjil")
        require_date_order(data.even_start, data.even_end, "Semester genap")
        if data.odd_start <= data.even_end and data.even_start <= data.odd_end:
            raise ValidationError("Rentang semester ganjil dan genap tidak boleh tumpang tindih")

    def create(self, *, current_role: Role, data: PeriodInput) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

        self._validate(data)
        period_id = self._periods.create(
            label=data.label,
            odd_start=data.odd_start,
            odd_end=data.odd_end,
            even_start=data.even_start,
            even_end=data.even_end,
        )
        log.info("academic period %s created (id=%s)", data.label, period_id)
        return period_id

    def update(self, *, current_role: Role, period_id: int, data: PeriodInput) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

        if not self._periods.get_by_id(int(period_id)):
            raise NotFoundError("Tahun ajaran tidak ditemukan")

        self._validate(data)
        # rowcount is 0 when nothing changed, so the result is not checked.
        self._periods.update(
            period_id=int(period_id),
            label=data.label,
            odd_start=data.odd_start,
            odd_end=data.odd_end,
            even_start=data.even_start,
            even_end=data.even_end,
        )
        log.info("academic period id=%s updated", period_id)

    def delete(self, *, current_role: Role, period_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

        if not self._periods.delete(period_id=int(period_id)):
            raise NotFoundError("Tahun ajaran tidak ditemukan")
        log.info("academic period id=%s deleted", period_id)
