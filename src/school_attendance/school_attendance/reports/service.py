from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..access.policy import AccessPolicy, Actor
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..attendance.store import AttendanceStore
from ..common.class_labels import class_sort_key
from ..common.datetime_utils import month_range, school_week_range
from ..core.enums import AttendanceStatus, Scope, Semester, ValidationStatus
from ..core.exceptions import AuthorizationError, ValidationError
from ..students.repository import StudentRepository

REPORT_DAILY = "harian"
REPORT_WEEKLY = "mingguan"
REPORT_MONTHLY = "bulanan"

NOT_APPLICABLE = "N/A"


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def report_range(kind: str, value: date) -> tuple[date, date]:
    """Date range of a daily, weekly (Monday..Saturday) or monthly report around `value`."""
    if kind == REPORT_DAILY:
        return value, value
    if kind == REPORT_WEEKLY:
        return school_week_range(value)
    if kind == REPORT_MONTHLY:
        return month_range(value)
    raise ValidationError(f"Jenis laporan tidak valid: {kind}")


def _empty_counts() -> dict[str, int]:
    return {s.value: 0 for s in AttendanceStatus}


def attendance_percentage(counts: dict[str, int], total: int) -> float:
    """(Hadir + Terlambat) / total * 100, 0 when there is nothing to count."""
    if total <= 0:
        return 0.0
    attended = counts.get(AttendanceStatus.PRESENT.value, 0) + counts.get(AttendanceStatus.LATE.value, 0)
    return round(attended / total * 100, 1)


class ReportService:
    """Read-side summaries over the attendance records a role may see."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        policy: AccessPolicy | None = None,
    ):
        self._attendance = attendance
        self._students = students
        self._policy = policy or AccessPolicy()

    def _store(self, *, start: date, end: date) -> AttendanceStore:
        if start > end:
            raise ValidationError("Tanggal mulai tidak boleh setelah tanggal akhir")
        return AttendanceStore(
            self._attendance.list_between(start_date=start, end_date=end),
            self._students.list_all(),
        )

    def _records(
        self,
        actor: Actor,
        store: AttendanceStore,
        *,
        class_label: Optional[str],
        period_label: Optional[str],
        semester: Optional[Semester],
    ) -> list[AttendanceRecord]:
        records = store.filter(class_label=class_label, period_label=period_label, semester=semester)
        return [r for r in records if self._policy.can_read_record(actor, r, store)]

    def _detail_rows(self, store: AttendanceStore, records: Sequence[AttendanceRecord]) -> list[dict]:
        rows = []
        for r in sorted(records, key=lambda x: (x.work_date, x.student_id)):
            s = store.student(r.student_id)
            rows.append(
                {
                    "tanggal": r.work_date.isoformat(),
                    "id_siswa": r.student_id,
                    "nis": s.nis if s else "-",
                    "nama": s.full_name if s else "-",
                    "kelas": s.class_label if s else "-",
                    "status": r.status.value,
                    "keterangan": r.note or "",
                    "status_validasi": r.validation.value,
                }
            )
        return rows

    def _report_class(self, actor: Actor, class_label: Optional[str]) -> Optional[str]:
        cap = self._policy.capability(actor)
        if cap.read_scope == Scope.SELF:
            raise AuthorizationError("Anda tidak memiliki akses ke laporan kelas")
        if cap.read_scope == Scope.OWN_CLASS:
            return self._policy.fixed_class(actor)
        return (class_label or "").strip() or None

    def build_class_report(
        self,
        actor: Actor,
        *,
        start: date,
        end: date,
        class_label: Optional[str] = None,
        period_label: Optional[str] = None,
        semester: Optional[Semester] = None,
    ) -> ReportData:
        """Per-class counts for every class (or the one requested).

        Validation status is only meaningful for a single-day report.
        """
        class_label = self._report_class(actor, class_label)
        store = self._store(start=start, end=end)
        records = self._records(actor, store, class_label=class_label, period_label=period_label, semester=semester)

        classes = [class_label] if class_label else store.classes()
        summary_map: dict[str, dict] = {}
        for k in classes:
            summary_map[k] = {
                "kelas": k,
                **_empty_counts(),
                "total_absen": 0,
                "total_siswa": len(store.students_in_class(k)),
                "status_validasi": NOT_APPLICABLE,
            }

        by_class: dict[str, list[AttendanceRecord]] = {}
        for r in records:
            k = store.class_of(r.student_id)
            if k not in summary_map:
                continue
            summary_map[k][r.status.value] += 1
            summary_map[k]["total_absen"] += 1
            by_class.setdefault(k, []).append(r)

        if start == end:
            for k, class_records in by_class.items():
                all_valid = all(r.is_validated for r in class_records)
                summary_map[k]["status_validasi"] = (
                    ValidationStatus.VALIDATED.value if all_valid else ValidationStatus.UNVALIDATED.value
                )

        summary = sorted(summary_map.values(), key=lambda x: class_sort_key(x["kelas"]))
        return ReportData(rows=self._detail_rows(store, records), summary=summary)

    def build_student_report(
        self,
        actor: Actor,
        *,
        start: date,
        end: date,
        class_label: Optional[str] = None,
        period_label: Optional[str] = None,
        semester: Optional[Semester] = None,
    ) -> ReportData:
        """Per-student counts and attendance percentage for one class."""
        class_label = self._report_class(actor, class_label)
        if not class_label:
            raise ValidationError("Pilih kelas terlebih dahulu")

        store = self._store(start=start, end=end)
        records = self._records(actor, store, class_label=class_label, period_label=period_label, semester=semester)
        return ReportData(
            rows=self._detail_rows(store, records),
            summary=self._student_summary(store, store.students_in_class(class_label), records),
        )

    def build_personal_report(
        self,
        actor: Actor,
        *,
        start: date,
        end: date,
        period_label: Optional[str] = None,
        semester: Optional[Semester] = None,
    ) -> ReportData:
        """A student's own records and summary."""
        if actor.student_id is None:
            raise AuthorizationError("Laporan pribadi hanya untuk akun siswa")

        store = self._store(start=start, end=end)
        student = store.student(actor.student_id)
        records = [
            r
            for r in store.filter(student_id=actor.student_id, period_label=period_label, semester=semester)
            if self._policy.can_read_record(actor, r, store)
        ]
        students = [student] if student else []
        return ReportData(rows=self._detail_rows(store, records), summary=self._student_summary(store, students, records))

    @staticmethod
    def _student_summary(store: AttendanceStore, students, records: Sequence[AttendanceRecord]) -> list[dict]:
        summary_map: dict[int, dict] = {}
        for s in students:
            summary_map[s.student_id] = {
                "id_siswa": s.student_id,
                "nis": s.nis,
                "nama": s.full_name,
                "kelas": s.class_label,
                **_empty_counts(),
                "total": 0,
            }

        for r in records:
            row = summary_map.get(r.student_id)
            if row is None:
                continue
            row[r.status.value] += 1
            row["total"] += 1

        summary = []
        for row in summary_map.values():
            row["persentase"] = attendance_percentage(row, row["total"])
            summary.append(row)

        summary.sort(key=lambda x: x["nama"])
        return summary
