"""Role-scoped visibility and authorization.

Every role maps to one declarative `Capability`. Services ask the policy
before calling the lifecycle states or repositories, so a forbidden write is
refused even when no UI control was there to disable it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.store import AttendanceStore
from ..common.class_labels import clean_class_label
from ..core.enums import Role, Scope
from ..core.exceptions import AuthorizationError, ValidationError
from ..students.model import Student


class Actor(Protocol):
    role: Role
    class_label: Optional[str]
    student_id: Optional[int]


@dataclass(frozen=True)
class Capability:
    role: Role
    read_scope: Scope
    write_scope: Optional[Scope] = None
    validate: bool = False
    override: bool = False
    submission_only: bool = False
    screens: tuple[str, ...] = ()

    @property
    def write(self) -> bool:
        return self.write_scope is not None

    @property
    def selects_class(self) -> bool:
        """All-classes writers pick a target class before the input form."""
        return self.write_scope == Scope.ALL


CAPABILITIES: dict[Role, Capability] = {
    Role.ADMIN: Capability(
        role=Role.ADMIN,
        read_scope=Scope.ALL,
        write_scope=Scope.ALL,
        validate=True,
        override=True,
        screens=(
            "Dashboard",
            "Siswa",
            "Guru",
            "Tahun Ajaran",
            "Laporan",
            "Catatan Kasus",
            "Input Absensi",
            "Validasi Absensi",
            "Kartu Siswa",
            "Kartu Guru",
            "Setting Aplikasi",
        ),
    ),
    Role.COUNSELING_TEACHER: Capability(
        role=Role.COUNSELING_TEACHER,
        read_scope=Scope.ALL,
        write_scope=Scope.ALL,
        validate=True,
        screens=("Dashboard", "Validasi Absensi", "Catatan Kasus", "Input Absensi", "Laporan"),
    ),
    Role.HOMEROOM_TEACHER: Capability(
        role=Role.HOMEROOM_TEACHER,
        read_scope=Scope.OWN_CLASS,
        write_scope=Scope.OWN_CLASS,
        screens=("Dashboard", "Monitoring Kelas", "Catatan Kasus", "Input Absensi", "Laporan"),
    ),
    Role.PRINCIPAL: Capability(
        role=Role.PRINCIPAL,
        read_scope=Scope.ALL,
        screens=("Dashboard", "Catatan Kasus", "Laporan"),
    ),
    Role.TEACHER: Capability(
        role=Role.TEACHER,
        read_scope=Scope.ALL,
        screens=("Dashboard", "Laporan"),
    ),
    Role.STUDENT: Capability(
        role=Role.STUDENT,
        read_scope=Scope.SELF,
        screens=("Laporan Pribadi",),
    ),
    Role.CLASS_REPRESENTATIVE: Capability(
        role=Role.CLASS_REPRESENTATIVE,
        read_scope=Scope.SELF,
        write_scope=Scope.OWN_CLASS,
        submission_only=True,
        screens=("Input Absensi", "Laporan Pribadi"),
    ),
}


class AccessPolicy:
    def __init__(self, capabilities: dict[Role, Capability] | None = None):
        self._capabilities = capabilities or CAPABILITIES

    def capability(self, actor: Actor) -> Capability:
        cap = self._capabilities.get(actor.role)
        if cap is None:
            raise AuthorizationError("Role tidak dikenali")
        return cap

    def screens(self, actor: Actor) -> tuple[str, ...]:
        return self.capability(actor).screens

    def can_override(self, actor: Actor) -> bool:
        return self.capability(actor).override

    def fixed_class(self, actor: Actor) -> Optional[str]:
        """Class an own-class role is bound to (None for all-classes and self roles)."""
        cap = self.capability(actor)
        if Scope.OWN_CLASS in {cap.read_scope, cap.write_scope}:
            return actor.class_label or None
        return None

    # ---- read ----

    def can_read_class(self, actor: Actor, class_label: str) -> bool:
        scope = self.capability(actor).read_scope
        if scope == Scope.ALL:
            return True
        if scope == Scope.OWN_CLASS:
            return bool(actor.class_label) and class_label == actor.class_label
        return False

    def can_read_record(self, actor: Actor, record: AttendanceRecord, store: AttendanceStore) -> bool:
        scope = self.capability(actor).read_scope
        if scope == Scope.SELF:
            return actor.student_id is not None and record.student_id == actor.student_id
        class_label = store.class_of(record.student_id)
        return class_label is not None and self.can_read_class(actor, class_label)

    def ensure_can_read_class(self, actor: Actor, class_label: str) -> None:
        if not self.can_read_class(actor, class_label):
            raise AuthorizationError("Anda tidak memiliki akses ke kelas ini")

    def visible_records(self, actor: Actor, store: AttendanceStore) -> list[AttendanceRecord]:
        return [r for r in store.records if self.can_read_record(actor, r, store)]

    def visible_students(self, actor: Actor, students: Sequence[Student]) -> list[Student]:
        scope = self.capability(actor).read_scope
        if scope == Scope.ALL:
            return list(students)
        if scope == Scope.OWN_CLASS:
            return [s for s in students if s.class_label == actor.class_label]
        return [s for s in students if s.student_id == actor.student_id]

    # ---- write ----

    def resolve_write_class(self, actor: Actor, requested: Optional[str]) -> str:
        """Target class of an attendance submission for this actor."""
        cap = self.capability(actor)
        if not cap.write:
            raise AuthorizationError("Peran Anda tidak dapat mengisi absensi")

        requested = clean_class_label(requested) or None
        if cap.write_scope == Scope.ALL:
            if not requested:
                raise ValidationError("Pilih kelas terlebih dahulu")
            return requested

        own = actor.class_label
        if not own:
            raise ValidationError("Data kelas tidak ditemukan untuk user ini")
        if requested and requested != own:
            raise AuthorizationError("Anda hanya dapat mengisi absensi kelas Anda sendiri")
        return own

    def ensure_can_write(self, actor: Actor, class_label: str) -> None:
        cap = self.capability(actor)
        if not cap.write:
            raise AuthorizationError("Peran Anda tidak dapat mengubah absensi")
        if cap.write_scope == Scope.OWN_CLASS and class_label != actor.class_label:
            raise AuthorizationError("Anda hanya dapat mengubah absensi kelas Anda sendiri")

    def ensure_can_edit_records(self, actor: Actor, class_label: str) -> None:
        """Direct record edits (outside the class submission form)."""
        self.ensure_can_write(actor, class_label)
        if self.capability(actor).submission_only:
            raise AuthorizationError("Peran Anda hanya dapat mengirim absensi melalui form kelas")

    def ensure_can_validate(self, actor: Actor) -> None:
        if not self.capability(actor).validate:
            raise AuthorizationError("Peran Anda tidak dapat memvalidasi absensi")

    def selectable_classes(self, actor: Actor, *, work_date: date, store: AttendanceStore) -> list[str]:
        """Classes offered on the input screen for `work_date`.

        All-classes writers only see classes with no record yet on that date;
        own-class writers always get their own class.
        """
        cap = self.capability(actor)
        if not cap.write:
            return []
        if not cap.selects_class:
            return [actor.class_label] if actor.class_label else []

        taken = store.classes_with_records(work_date)
        return [c for c in store.classes() if c not in taken]
