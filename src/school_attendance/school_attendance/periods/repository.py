from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AcademicPeriod


class PeriodRepository(Protocol):
    def list_all(self) -> Sequence[AcademicPeriod]:
        """Periods in resolution order (ascending id)."""

        raise NotImplementedError

    def get_by_id(self, period_id: int) -> Optional[AcademicPeriod]:
        raise NotImplementedError

    def create(
        self,
        *,
        label: str,
        odd_start: date,
        odd_end: date,
        even_start: date,
        even_end: date,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        period_id: int,
        label: str,
        odd_start: date,
        odd_end: date,
        even_start: date,
        even_end: date,
    ) -> bool:
        raise NotImplementedError

    def delete(self, *, period_id: int) -> bool:
        raise NotImplementedError
