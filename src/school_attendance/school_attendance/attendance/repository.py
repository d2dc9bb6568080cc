from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, NewAttendanceRecord, RecordChange


class AttendanceRepository(Protocol):
    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_between(self, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_many(self, records: Sequence[NewAttendanceRecord]) -> list[int]:
        """Insert a whole class batch in one transaction; all or nothing."""

        raise NotImplementedError

    def update_many(self, changes: Sequence[RecordChange]) -> int:
        """Replace status/note of existing records in one transaction.

        Validation status is never touched here.
        """

        raise NotImplementedError

    def mark_validated(self, attendance_ids: Sequence[int]) -> int:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError
