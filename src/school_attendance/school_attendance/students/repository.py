from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import Gender
from .model import Student


class StudentRepository(Protocol):
    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_nis(self, nis: str) -> Optional[Student]:
        raise NotImplementedError

    def create(
        self,
        *,
        nis: str,
        full_name: str,
        class_label: str,
        gender: Gender,
        birth_date: Optional[date],
        password_hash: str,
        is_class_representative: bool,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        student_id: int,
        nis: str,
        full_name: str,
        class_label: str,
        gender: Gender,
        birth_date: Optional[date],
        is_class_representative: bool,
        password_hash: Optional[str] = None,
    ) -> bool:
        """`password_hash=None` keeps the stored password."""

        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        """Deletes the student and, by cascade, their attendance records."""

        raise NotImplementedError
