from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.class_labels import clean_class_label, sort_class_labels
from ..common.datetime_utils import parse_date_arg
from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Gender, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import Student
from .repository import StudentRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewStudent:
    """Student form data. On edit an empty password keeps the current one."""

    nis: str
    full_name: str
    class_label: str
    gender: Gender
    birth_date: Optional[date]
    password: str
    is_class_representative: bool = False

    @classmethod
    def from_payload(cls, payload: dict) -> "NewStudent":
        if not isinstance(payload, dict):
            raise ValidationError("Format data siswa tidak valid")
        try:
            gender = Gender(payload.get("jenis_kelamin", ""))
        except ValueError:
            raise ValidationError("Jenis kelamin tidak valid")
        birth = payload.get("tanggal_lahir")
        return cls(
            nis=str(payload.get("nis") or ""),
            full_name=str(payload.get("nama") or ""),
            class_label=clean_class_label(payload.get("kelas")),
            gender=gender,
            birth_date=parse_date_arg(birth, "Tanggal lahir") if birth else None,
            password=str(payload.get("password") or ""),
            is_class_representative=bool(payload.get("isKetuaKelas")),
        )


def _login_role(is_class_representative: bool) -> Role:
    return Role.CLASS_REPRESENTATIVE if is_class_representative else Role.STUDENT


class StudentService:
    """Use case: student roster (read for everyone with access, write for admin).

    A student's login row (username = NIS) follows the roster: it is created,
    renamed and re-roled together with the student. Attendance records are
    keyed by student id, so a class move regroups them under the new class
    without touching their stamped period.
    """

    def __init__(self, students: StudentRepository, users: Optional[UserRepository] = None):
        self._students = students
        self._users = users

    def list_classes(self) -> list[str]:
        return sort_class_labels(s.class_label for s in self._students.list_all())

    def _check(self, data: NewStudent, *, student_id: Optional[int] = None) -> tuple[str, str, str]:
        nis = require_non_empty(data.nis, "NIS")
        full_name = require_non_empty(data.full_name, "Nama")
        class_label = require_non_empty(data.class_label, "Kelas").upper()
        if student_id is None or data.password:
            require_min_length(data.password, "Password", 6)

        other = self._students.get_by_nis(nis)
        if other and other.student_id != student_id:
            raise ValidationError("NIS sudah terdaftar")
        if self._users is not None:
            login = self._users.get_by_username(nis)
            if login and (student_id is None or login.student_id != student_id):
                raise ValidationError("NIS sudah digunakan sebagai username")
        return nis, full_name, class_label

    def _insert(self, data: NewStudent, nis: str, full_name: str, class_label: str) -> int:
        student_id = self._students.create(
            nis=nis,
            full_name=full_name,
            class_label=class_label,
            gender=data.gender,
            birth_date=data.birth_date,
            password_hash=generate_password_hash(data.password),
            is_class_representative=bool(data.is_class_representative),
        )

        if self._users is not None:
            # Student logins live in the users table; their password stays on the student row.
            self._users.create_user(
                username=nis,
                full_name=full_name,
                password_hash="",
                role=_login_role(data.is_class_representative),
                class_label=class_label,
                student_id=student_id,
            )
        log.info("student %s created in class %s", nis, class_label)
        return student_id

    def create_student(self, *, current_role: Role, data: NewStudent) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

        nis, full_name, class_label = self._check(data)
        return self._insert(data, nis, full_name, class_label)

    def bulk_create(self, *, current_role: Role, rows: Sequence[NewStudent]) -> list[int]:
        """Import a list of students. Every row is checked before the first insert."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")
        if not rows:
            raise ValidationError("Tidak ada data siswa untuk diimpor")

        checked = []
        seen: set[str] = set()
        for i, data in enumerate(rows, start=1):
            try:
                nis, full_name, class_label = self._check(data)
            except ValidationError as e:
                raise ValidationError(f"Baris {i}: {e}")
            if nis in seen:
                raise ValidationError(f"Baris {i}: NIS {nis} ganda dalam data impor")
            seen.add(nis)
            checked.append((data, nis, full_name, class_label))

        ids = [self._insert(*row) for row in checked]
        log.info("imported %d students", len(ids))
        return ids

    def update_student(self, *, current_role: Role, student_id: int, data: NewStudent) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

        student_id = int(student_id)
        current: Optional[Student] = self._students.get_by_id(student_id)
        if not current:
            raise NotFoundError("Siswa tidak ditemukan")

        nis, full_name, class_label = self._check(data, student_id=student_id)
        self._students.update(
            student_id=student_id,
            nis=nis,
            full_name=full_name,
            class_label=class_label,
            gender=data.gender,
            birth_date=data.birth_date,
            is_class_representative=bool(data.is_class_representative),
            password_hash=generate_password_hash(data.password) if data.password else None,
        )
        self._sync_login(student_id, nis=nis, full_name=full_name, class_label=class_label, data=data)

        if current.class_label != class_label:
            log.info("student %s moved from %s to %s", nis, current.class_label, class_label)
        else:
            log.info("student %s updated", nis)

    def _sync_login(self, student_id: int, *, nis: str, full_name: str, class_label: str, data: NewStudent) -> None:
        if self._users is None:
            return
        role = _login_role(data.is_class_representative)
        login = self._users.get_by_student_id(student_id)
        if login is None:
            self._users.create_user(
                username=nis,
                full_name=full_name,
                password_hash="",
                role=role,
                class_label=class_label,
                student_id=student_id,
            )
            return
        self._users.update_user(
            user_id=login.user_id,
            username=nis,
            full_name=full_name,
            role=role,
            class_label=class_label,
        )

    def delete_student(self, *, current_role: Role, student_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

        if not self._students.delete_by_id(int(student_id)):
            raise NotFoundError("Siswa tidak ditemukan")
        log.info("student id=%s deleted with their attendance records", student_id)
