from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus, CellState, Semester, ValidationStatus
from ..core.exceptions import ValidationError


def normalize_note(status: AttendanceStatus, note: Optional[str]) -> str:
    """A Present entry never keeps a note."""
    if status == AttendanceStatus.PRESENT:
        return ""
    return str(note or "").strip()


def parse_status(value) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    if not value:
        raise ValidationError("Status kehadiran wajib dipilih")
    try:
        return AttendanceStatus(str(value))
    except ValueError:
        raise ValidationError(f"Status kehadiran tidak valid: {value}")


def _require_mapping(payload) -> None:
    if not isinstance(payload, dict):
        raise ValidationError("Format data absensi tidak valid")


@dataclass(frozen=True)
class AttendanceRecord:
    """Entitas domain: satu baris absensi harian siswa.

    `period_label`/`semester` are stamped at creation and never recomputed.
    """

    attendance_id: int
    student_id: int
    work_date: date
    status: AttendanceStatus
    note: str
    validation: ValidationStatus
    period_label: str
    semester: Semester

    @property
    def is_validated(self) -> bool:
        return self.validation == ValidationStatus.VALIDATED

    def to_dict(self) -> dict:
        return {
            "id_absensi": self.attendance_id,
            "id_siswa": self.student_id,
            "tanggal": self.work_date.isoformat(),
            "status": self.status.value,
            "keterangan": self.note or "",
            "status_validasi": self.validation.value,
            "tahun_ajaran": self.period_label,
            "semester": self.semester.value,
        }


@dataclass(frozen=True)
class NewAttendanceRecord:
    student_id: int
    work_date: date
    status: AttendanceStatus
    note: str
    period_label: str
    semester: Semester
    validation: ValidationStatus = ValidationStatus.UNVALIDATED


@dataclass(frozen=True)
class RecordChange:
    """Status/note replacement for one existing record (validation untouched)."""

    attendance_id: int
    status: AttendanceStatus
    note: str

    def __post_init__(self):
        object.__setattr__(self, "note", normalize_note(self.status, self.note))

    @classmethod
    def from_payload(cls, payload: dict) -> "RecordChange":
        _require_mapping(payload)
        raw_id = payload.get("id_absensi", payload.get("id"))
        try:
            attendance_id = int(raw_id)
        except (TypeError, ValueError):
            raise ValidationError("ID absensi tidak valid")
        status = parse_status(payload.get("status"))
        return cls(
            attendance_id=attendance_id,
            status=status,
            note=payload.get("keterangan", payload.get("note")) or "",
        )


@dataclass(frozen=True)
class AttendanceEntry:
    """One row of the class submission form."""

    student_id: int
    status: AttendanceStatus
    note: str = ""

    def __post_init__(self):
        object.__setattr__(self, "note", normalize_note(self.status, self.note))

    @classmethod
    def from_payload(cls, payload: dict) -> "AttendanceEntry":
        _require_mapping(payload)
        try:
            student_id = int(payload.get("id_siswa", payload.get("student_id")))
        except (TypeError, ValueError):
            raise ValidationError("ID siswa tidak valid")
        status = parse_status(payload.get("status"))
        return cls(
            student_id=student_id,
            status=status,
            note=payload.get("keterangan", payload.get("note")) or "",
        )


@dataclass(frozen=True)
class FormRow:
    student_id: int
    nis: str
    full_name: str
    status: AttendanceStatus
    note: str
    attendance_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id_absensi": self.attendance_id,
            "id_siswa": self.student_id,
            "nis": self.nis,
            "nama": self.full_name,
            "status": self.status.value,
            "keterangan": self.note,
            "keterangan_editable": self.status != AttendanceStatus.PRESENT,
        }


@dataclass(frozen=True)
class AttendanceForm:
    """Read-model for the daily input screen of one class."""

    class_label: str
    work_date: date
    state: CellState
    mode: str
    locked: bool
    admin_override: bool
    rows: list[FormRow] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "kelas": self.class_label,
            "tanggal": self.work_date.isoformat(),
            "state": self.state.value,
            "mode": self.mode,
            "locked": self.locked,
            "admin_override": self.admin_override,
            "rows": [r.to_dict() for r in self.rows],
        }


@dataclass(frozen=True)
class ClassDaySummary:
    """One card of the validation board."""

    class_label: str
    work_date: date
    state: CellState
    record_count: int
    student_count: int

    @property
    def validation(self) -> ValidationStatus:
        if self.state == CellState.VALIDATED:
            return ValidationStatus.VALIDATED
        return ValidationStatus.UNVALIDATED

    def to_dict(self) -> dict:
        return {
            "kelas": self.class_label,
            "tanggal": self.work_date.isoformat(),
            "state": self.state.value,
            "status_validasi": self.validation.value,
            "jumlah_absen": self.record_count,
            "jumlah_siswa": self.student_count,
        }
