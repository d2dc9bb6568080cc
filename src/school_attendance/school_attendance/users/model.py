from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class StaffUser:
    """Entitas domain: akun login.

    Student and class-representative logins share this table and point back
    to their Student row through `student_id`; their password lives there.
    """

    user_id: int
    username: str
    full_name: str
    password_hash: str
    role: Role
    class_label: Optional[str] = None
    student_id: Optional[int] = None

    @property
    def is_student_login(self) -> bool:
        return self.role in {Role.STUDENT, Role.CLASS_REPRESENTATIVE}

    def to_dict(self) -> dict:
        return {
            "id_user": self.user_id,
            "username": self.username,
            "nama": self.full_name,
            "role": self.role.value,
            "kelas": self.class_label,
            "original_id": self.student_id,
        }
