from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.class_labels import clean_class_label
from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .repository import UserRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login; also the actor of every use case."""

    user_id: int
    full_name: str
    role: Role
    class_label: Optional[str] = None
    student_id: Optional[int] = None

    def to_session(self) -> dict:
        data = asdict(self)
        data["role"] = self.role.value
        return data

    @classmethod
    def from_session(cls, data: dict) -> "SessionUser":
        return cls(
            user_id=int(data["user_id"]),
            full_name=data.get("full_name") or "",
            role=Role(data["role"]),
            class_label=data.get("class_label"),
            student_id=int(data["student_id"]) if data.get("student_id") is not None else None,
        )


def _password_matches(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except (ValueError, TypeError):
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


class AuthService:
    """Use case: authenticate a staff member or a student (login)."""

    def __init__(self, users: UserRepository, students: StudentRepository):
        self._users = users
        self._students = students

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user:
            raise AuthenticationError("Username atau password salah")

        if user.is_student_login:
            student = self._students.get_by_id(user.student_id) if user.student_id else None
            if not student or not _password_matches(student.password_hash, password):
                raise AuthenticationError("Username atau password salah")
            # The roster is authoritative for the class of a student login.
            return SessionUser(
                user_id=user.user_id,
                full_name=student.full_name,
                role=user.role,
                class_label=student.class_label,
                student_id=student.student_id,
            )

        if not _password_matches(user.password_hash, password):
            raise AuthenticationError("Username atau password salah")

        return SessionUser(
            user_id=user.user_id,
            full_name=user.full_name,
            role=user.role,
            class_label=user.class_label if user.role == Role.HOMEROOM_TEACHER else None,
        )


@dataclass(frozen=True)
class NewStaff:
    username: str
    full_name: str
    password: str
    role: Role
    class_label: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "NewStaff":
        if not isinstance(payload, dict):
            raise ValidationError("Format data user tidak valid")
        try:
            role = Role(payload.get("role", ""))
        except ValueError:
            raise ValidationError("Role tidak valid")
        return cls(
            username=str(payload.get("username") or ""),
            full_name=str(payload.get("nama") or ""),
            password=str(payload.get("password") or ""),
            role=role,
            class_label=clean_class_label(payload.get("kelas")) or None,
        )


class UserService:
    """Use case: manage staff accounts (admin).

    Student logins are maintained from the student roster, not here.
    """

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self):
        return self._users.list_all()

    def _check(self, data: NewStaff, *, user_id: Optional[int] = None) -> tuple[str, str, Optional[str]]:
        username = require_non_empty(data.username, "Username")
        full_name = require_non_empty(data.full_name, "Nama")
        if user_id is None or data.password:
            require_min_length(data.password, "Password", 6)

        if data.role in {Role.STUDENT, Role.CLASS_REPRESENTATIVE}:
            raise ValidationError("Akun siswa dibuat dari data siswa")
        if data.role == Role.HOMEROOM_TEACHER:
            class_label = require_non_empty(data.class_label or "", "Kelas wali").upper()
        else:
            class_label = None

        other = self._users.get_by_username(username)
        if other and other.user_id != user_id:
            raise ValidationError("Username sudah digunakan")
        return username, full_name, class_label

    def _insert(self, data: NewStaff, username: str, full_name: str, class_label: Optional[str]) -> int:
        user_id = self._users.create_user(
            username=username,
            full_name=full_name,
            password_hash=generate_password_hash(data.password),
            role=data.role,
            class_label=class_label,
        )
        log.info("user %s created with role %s", username, data.role.value)
        return user_id

    def create_staff(
        self,
        *,
        current_role: Role,
        username: str,
        full_name: str,
        password: str,
        role: Role,
        class_label: Optional[str] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

        data = NewStaff(username=username, full_name=full_name, password=password, role=role, class_label=class_label)
        return self._insert(data, *self._check(data))

    def create_staff_many(self, *, current_role: Role, rows: Sequence[NewStaff]) -> list[int]:
        """Import staff accounts; nothing is written when any row is invalid."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")
        if not rows:
            raise ValidationError("Tidak ada data user untuk diimpor")

        checked = []
        seen: set[str] = set()
        for i, data in enumerate(rows, start=1):
            try:
                fields = self._check(data)
            except ValidationError as e:
                raise ValidationError(f"Baris {i}: {e}")
            if fields[0] in seen:
                raise ValidationError(f"Baris {i}: username {fields[0]} ganda dalam data impor")
            seen.add(fields[0])
            checked.append((data, *fields))

        return [self._insert(*row) for row in checked]

    def update_user(self, *, current_role: Role, user_id: int, data: NewStaff) -> None:
        """Edit a staff account; an empty password keeps the current one."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User tidak ditemukan")
        if user.is_student_login:
            raise ValidationError("Akun siswa diubah melalui data siswa")

        username, full_name, class_label = self._check(data, user_id=user.user_id)
        self._users.update_user(
            user_id=user.user_id,
            username=username,
            full_name=full_name,
            role=data.role,
            class_label=class_label,
            password_hash=generate_password_hash(data.password) if data.password else None,
        )
        log.info("user %s updated (role %s)", username, data.role.value)

    def delete_user(self, *, current_role: Role, current_user_id: int, user_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")
        if int(user_id) == int(current_user_id):
            raise ValidationError("Tidak dapat menghapus akun sendiri")

        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User tidak ditemukan")
        self._users.delete_by_id(int(user_id))
