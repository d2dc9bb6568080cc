from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Peran pengguna untuk hak akses (nilai = string yang disimpan di DB)."""

    ADMIN = "Admin"
    COUNSELING_TEACHER = "Guru BK"
    HOMEROOM_TEACHER = "Wali Kelas"
    PRINCIPAL = "Kepala Sekolah"
    TEACHER = "Guru"
    STUDENT = "Siswa"
    CLASS_REPRESENTATIVE = "Ketua Kelas"


class AttendanceStatus(str, Enum):
    """Status kehadiran harian siswa."""

    PRESENT = "Hadir"
    PERMITTED = "Izin"
    SICK = "Sakit"
    UNEXCUSED = "Alfa"
    LATE = "Terlambat"


class ValidationStatus(str, Enum):
    UNVALIDATED = "Belum Valid"
    VALIDATED = "Valid"


class Semester(str, Enum):
    ODD = "Ganjil"
    EVEN = "Genap"


class Gender(str, Enum):
    MALE = "L"
    FEMALE = "P"


class CellState(str, Enum):
    """Lifecycle state of one (class, date) attendance cell."""

    EMPTY = "EMPTY"
    DRAFT = "DRAFT"
    VALIDATED = "VALIDATED"


class Scope(str, Enum):
    """Which classes/students a role may see."""

    ALL = "ALL"
    OWN_CLASS = "OWN_CLASS"
    SELF = "SELF"
