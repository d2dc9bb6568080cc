"""In-memory projection of attendance records joined with the student roster.

A store is a snapshot: services build a fresh one per operation, compute the
affected records once from it, then write through the repository.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.class_labels import sort_class_labels
from ..core.enums import CellState, Semester
from ..students.model import Student
from .model import AttendanceRecord


class AttendanceStore:
    def __init__(self, records: Iterable[AttendanceRecord], students: Iterable[Student]):
        self._records = list(records)
        self._students = list(students)
        self._student_by_id = {s.student_id: s for s in self._students}
        self._record_by_id = {r.attendance_id: r for r in self._records}

    @property
    def records(self) -> Sequence[AttendanceRecord]:
        return self._records

    @property
    def students(self) -> Sequence[Student]:
        return self._students

    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._record_by_id.get(int(attendance_id))

    def student(self, student_id: int) -> Optional[Student]:
        return self._student_by_id.get(int(student_id))

    def class_of(self, student_id: int) -> Optional[str]:
        s = self._student_by_id.get(int(student_id))
        return s.class_label if s else None

    def classes(self) -> list[str]:
        return sort_class_labels(s.class_label for s in self._students)

    def students_in_class(self, class_label: str) -> list[Student]:
        return sorted(
            (s for s in self._students if s.class_label == class_label),
            key=lambda s: s.full_name,
        )

    def filter(
        self,
        *,
        work_date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        class_label: Optional[str] = None,
        student_id: Optional[int] = None,
        period_label: Optional[str] = None,
        semester: Optional[Semester] = None,
    ) -> list[AttendanceRecord]:
        out = []
        for r in self._records:
            if work_date is not None and r.work_date != work_date:
                continue
            if start_date is not None and r.work_date < start_date:
                continue
            if end_date is not None and r.work_date > end_date:
                continue
            if student_id is not None and r.student_id != int(student_id):
                continue
            if period_label is not None and r.period_label != period_label:
                continue
            if semester is not None and r.semester != semester:
                continue
            if class_label is not None and self.class_of(r.student_id) != class_label:
                continue
            out.append(r)
        return out

    def cell_records(self, class_label: str, work_date: date) -> list[AttendanceRecord]:
        """Records of the class's current students on `work_date`."""
        return self.filter(work_date=work_date, class_label=class_label)

    def cell_state(self, class_label: str, work_date: date) -> CellState:
        records = self.cell_records(class_label, work_date)
        if not records:
            return CellState.EMPTY
        if all(r.is_validated for r in records):
            return CellState.VALIDATED
        return CellState.DRAFT

    def classes_with_records(self, work_date: date) -> set[str]:
        out = set()
        for r in self._records:
            if r.work_date != work_date:
                continue
            class_label = self.class_of(r.student_id)
            if class_label:
                out.add(class_label)
        return out

    def records_by_class(self, work_date: date) -> dict[str, list[AttendanceRecord]]:
        grouped: dict[str, list[AttendanceRecord]] = defaultdict(list)
        for r in self.filter(work_date=work_date):
            class_label = self.class_of(r.student_id)
            if class_label:
                grouped[class_label].append(r)
        return dict(grouped)
