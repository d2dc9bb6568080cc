from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Gender


@dataclass(frozen=True)
class Student:
    """Entitas domain: Siswa.

    `class_label` is free text ("VII-A"); it is the grouping key for attendance.
    """

    student_id: int
    nis: str
    full_name: str
    class_label: str
    gender: Gender
    birth_date: Optional[date]
    password_hash: str = ""
    is_class_representative: bool = False

    def to_dict(self) -> dict:
        return {
            "id_siswa": self.student_id,
            "nis": self.nis,
            "nama": self.full_name,
            "kelas": self.class_label,
            "jenis_kelamin": self.gender.value,
            "tanggal_lahir": self.birth_date.isoformat() if self.birth_date else None,
            "isKetuaKelas": self.is_class_representative,
        }
