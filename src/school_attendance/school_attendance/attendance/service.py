from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from ..access.policy import AccessPolicy, Actor
from ..common.class_labels import class_sort_key, clean_class_label
from ..common.datetime_utils import is_rest_day
from ..core.constants import DEFAULT_REST_WEEKDAY
from ..core.enums import AttendanceStatus, CellState, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..periods.repository import PeriodRepository
from ..periods.resolver import require_period
from ..students.repository import StudentRepository
from .factory import CellStateFactory
from .model import (
    AttendanceEntry,
    AttendanceForm,
    ClassDaySummary,
    FormRow,
    NewAttendanceRecord,
    RecordChange,
)
from .repository import AttendanceRepository
from .states.base import SubmitMode
from .store import AttendanceStore

log = logging.getLogger(__name__)

REST_DAY_MESSAGE = "Input absensi tidak dapat dilakukan pada hari libur (Minggu)."


@dataclass(frozen=True)
class SubmitResult:
    mode: SubmitMode
    class_label: str
    work_date: date
    affected: int

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "kelas": self.class_label,
            "tanggal": self.work_date.isoformat(),
            "affected": self.affected,
        }


class AttendanceService:
    """Daily attendance lifecycle of a (class, date) cell: create, edit, validate and lock."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        periods: PeriodRepository,
        *,
        policy: AccessPolicy | None = None,
        state_factory: CellStateFactory | None = None,
        rest_weekday: int = DEFAULT_REST_WEEKDAY,
    ):
        self._attendance = attendance
        self._students = students
        self._periods = periods
        self._policy = policy or AccessPolicy()
        self._factory = state_factory or CellStateFactory()
        self._rest_weekday = int(rest_weekday)

    @property
    def policy(self) -> AccessPolicy:
        return self._policy

    def load_store(self) -> AttendanceStore:
        return AttendanceStore(self._attendance.list_all(), self._students.list_all())

    def is_rest_day(self, work_date: date) -> bool:
        return is_rest_day(work_date, rest_weekday=self._rest_weekday)

    def _ensure_school_day(self, work_date: date) -> None:
        if self.is_rest_day(work_date):
            raise ValidationError(REST_DAY_MESSAGE)

    # ---- input screen ----

    def selectable_classes(self, actor: Actor, *, work_date: date) -> list[str]:
        self._ensure_school_day(work_date)
        return self._policy.selectable_classes(actor, work_date=work_date, store=self.load_store())

    def open_form(self, actor: Actor, *, work_date: date, class_label: str | None = None) -> AttendanceForm:
        self._ensure_school_day(work_date)
        class_label = self._policy.resolve_write_class(actor, class_label)
        self._policy.ensure_can_write(actor, class_label)

        store = self.load_store()
        students = store.students_in_class(class_label)
        if not students:
            raise NotFoundError(f"Tidak ada siswa di kelas {class_label}")

        state = store.cell_state(class_label, work_date)
        override = self._policy.can_override(actor)

        if state == CellState.EMPTY:
            rows = [
                FormRow(student_id=s.student_id, nis=s.nis, full_name=s.full_name, status=AttendanceStatus.PRESENT, note="")
                for s in students
            ]
            mode = SubmitMode.CREATE
        else:
            by_student = {r.student_id: r for r in store.cell_records(class_label, work_date)}
            rows = [
                FormRow(
                    student_id=s.student_id,
                    nis=s.nis,
                    full_name=s.full_name,
                    status=by_student[s.student_id].status,
                    note=by_student[s.student_id].note,
                    attendance_id=by_student[s.student_id].attendance_id,
                )
                for s in students
                if s.student_id in by_student
            ]
            mode = SubmitMode.UPDATE

        validated = state == CellState.VALIDATED
        return AttendanceForm(
            class_label=class_label,
            work_date=work_date,
            state=state,
            mode=mode.value,
            locked=validated and not override,
            admin_override=validated and override,
            rows=rows,
        )

    def submit(
        self,
        actor: Actor,
        *,
        work_date: date,
        class_label: str | None,
        entries: Sequence[AttendanceEntry],
    ) -> SubmitResult:
        """Send the class form: first submission creates the batch, later ones update it."""
        self._ensure_school_day(work_date)
        class_label = self._policy.resolve_write_class(actor, class_label)
        self._policy.ensure_can_write(actor, class_label)
        capability = self._policy.capability(actor)

        store = self.load_store()
        by_student: dict[int, AttendanceEntry] = {}
        for e in entries:
            if e.student_id in by_student:
                raise ValidationError("Data siswa ganda dalam form absensi")
            by_student[e.student_id] = e

        state = self._factory.for_state(store.cell_state(class_label, work_date))
        mode = state.decide_submit(capability=capability)

        if mode == SubmitMode.CREATE:
            affected = self._create_batch(store, class_label=class_label, work_date=work_date, entries=by_student)
        else:
            affected = self._update_batch(store, class_label=class_label, work_date=work_date, entries=by_student)

        log.info(
            "attendance %s for class %s on %s by user %s (%d records)",
            mode.value,
            class_label,
            work_date.isoformat(),
            getattr(actor, "user_id", "?"),
            affected,
        )
        return SubmitResult(mode=mode, class_label=class_label, work_date=work_date, affected=affected)

    def _create_batch(
        self,
        store: AttendanceStore,
        *,
        class_label: str,
        work_date: date,
        entries: dict[int, AttendanceEntry],
    ) -> int:
        students = store.students_in_class(class_label)
        if not students:
            raise NotFoundError(f"Tidak ada siswa di kelas {class_label}")

        enrolled = {s.student_id for s in students}
        unknown = set(entries) - enrolled
        if unknown:
            raise ValidationError("Siswa berikut bukan anggota kelas ini: " + ", ".join(str(i) for i in sorted(unknown)))

        # Resolved before any write: a configuration gap must leave no partial batch.
        match = require_period(work_date, self._periods.list_all())

        batch = []
        for s in students:
            entry = entries.get(s.student_id) or AttendanceEntry(student_id=s.student_id, status=AttendanceStatus.PRESENT)
            batch.append(
                NewAttendanceRecord(
                    student_id=s.student_id,
                    work_date=work_date,
                    status=entry.status,
                    note=entry.note,
                    period_label=match.label,
                    semester=match.semester,
                )
            )
        return len(self._attendance.create_many(batch))

    def _update_batch(
        self,
        store: AttendanceStore,
        *,
        class_label: str,
        work_date: date,
        entries: dict[int, AttendanceEntry],
    ) -> int:
        existing = {r.student_id: r for r in store.cell_records(class_label, work_date)}
        missing = set(entries) - set(existing)
        if missing:
            raise ValidationError("Siswa berikut tidak memiliki data absensi pada tanggal ini: " + ", ".join(str(i) for i in sorted(missing)))

        changes = [
            RecordChange(attendance_id=existing[sid].attendance_id, status=e.status, note=e.note)
            for sid, e in entries.items()
        ]
        if not changes:
            return 0
        return self._attendance.update_many(changes)

    # ---- record edits (validation screen) ----

    def bulk_update(self, actor: Actor, changes: Sequence[RecordChange]) -> int:
        """Replace status/note for a list of record ids as one operation."""
        if not changes:
            raise ValidationError("Tidak ada data absensi yang diubah")

        store = self.load_store()
        capability = self._policy.capability(actor)

        checked_cells: set[tuple[str, date]] = set()
        for change in changes:
            record = store.get(change.attendance_id)
            if not record:
                raise NotFoundError(f"Data absensi #{change.attendance_id} tidak ditemukan")
            class_label = store.class_of(record.student_id)
            if class_label is None:
                raise NotFoundError("Siswa untuk data absensi ini tidak ditemukan")

            cell = (class_label, record.work_date)
            if cell in checked_cells:
                continue
            self._policy.ensure_can_edit_records(actor, class_label)
            self._factory.for_state(store.cell_state(*cell)).decide_edit(capability=capability)
            checked_cells.add(cell)

        affected = self._attendance.update_many(list(changes))
        log.info("attendance bulk update by user %s (%d records)", getattr(actor, "user_id", "?"), affected)
        return affected

    def update_record(self, actor: Actor, change: RecordChange) -> None:
        self.bulk_update(actor, [change])

    def delete_record(self, actor: Actor, attendance_id: int) -> None:
        if actor.role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")
        if not self._attendance.delete(int(attendance_id)):
            raise NotFoundError("Data absensi tidak ditemukan")
        log.info("attendance record id=%s deleted", attendance_id)

    # ---- validation ----

    def validate_class_day(self, actor: Actor, *, class_label: str, work_date: date) -> int:
        """Flip every record of (class, date) to Validated. A second call is a no-op."""
        class_label = clean_class_label(class_label)
        if not class_label:
            raise ValidationError("Kelas wajib diisi")

        self._policy.ensure_can_validate(actor)
        self._policy.ensure_can_read_class(actor, class_label)
        capability = self._policy.capability(actor)

        store = self.load_store()
        state = self._factory.for_state(store.cell_state(class_label, work_date))
        if not state.decide_validate(capability=capability):
            return 0

        ids = [r.attendance_id for r in store.cell_records(class_label, work_date) if not r.is_validated]
        affected = self._attendance.mark_validated(ids)
        log.info("attendance validated for class %s on %s (%d records)", class_label, work_date.isoformat(), affected)
        return affected

    def validation_board(self, actor: Actor, *, work_date: date, period_label: str | None = None, semester=None) -> list[ClassDaySummary]:
        self._policy.ensure_can_validate(actor)
        store = self.load_store()

        cards = []
        for class_label, records in store.records_by_class(work_date).items():
            if period_label is not None and not any(r.period_label == period_label and (semester is None or r.semester == semester) for r in records):
                continue
            cards.append(
                ClassDaySummary(
                    class_label=class_label,
                    work_date=work_date,
                    state=store.cell_state(class_label, work_date),
                    record_count=len(records),
                    student_count=len(store.students_in_class(class_label)),
                )
            )
        cards.sort(key=lambda c: class_sort_key(c.class_label))
        return cards
