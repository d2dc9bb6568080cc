from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

import pytest
from werkzeug.security import generate_password_hash

from src.school_attendance.school_attendance.attendance.model import AttendanceRecord, NewAttendanceRecord, RecordChange
from src.school_attendance.school_attendance.case_notes.model import CaseNote
from src.school_attendance.school_attendance.container import build_services
from src.school_attendance.school_attendance.core.enums import Gender, Role, ValidationStatus
from src.school_attendance.school_attendance.periods.model import AcademicPeriod
from src.school_attendance.school_attendance.settings.repository import DEFAULT_SETTINGS
from src.school_attendance.school_attendance.students.model import Student
from src.school_attendance.school_attendance.users.model import StaffUser
from src.school_attendance.school_attendance.users.service import SessionUser

STUDENT_PASSWORD = "password123"


class InMemoryPeriods:
    def __init__(self, periods: Sequence[AcademicPeriod] = ()):
        self._by_id = {p.period_id: p for p in periods}

    def list_all(self):
        return [self._by_id[k] for k in sorted(self._by_id)]

    def get_by_id(self, period_id: int) -> Optional[AcademicPeriod]:
        return self._by_id.get(period_id)

    def create(self, *, label, odd_start, odd_end, even_start, even_end) -> int:
        period_id = max(self._by_id, default=0) + 1
        self._by_id[period_id] = AcademicPeriod(period_id, label, odd_start, odd_end, even_start, even_end)
        return period_id

    def update(self, *, period_id, label, odd_start, odd_end, even_start, even_end) -> bool:
        if period_id not in self._by_id:
            return False
        self._by_id[period_id] = AcademicPeriod(period_id, label, odd_start, odd_end, even_start, even_end)
        return True

    def delete(self, *, period_id: int) -> bool:
        return self._by_id.pop(period_id, None) is not None


class InMemoryStudents:
    def __init__(self, students: Sequence[Student] = ()):
        self._by_id = {s.student_id: s for s in students}
        self.attendance: Optional["InMemoryAttendance"] = None

    def list_all(self):
        return list(self._by_id.values())

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._by_id.get(student_id)

    def get_by_nis(self, nis: str) -> Optional[Student]:
        return next((s for s in self._by_id.values() if s.nis == nis), None)

    def create(self, *, nis, full_name, class_label, gender, birth_date, password_hash, is_class_representative) -> int:
        student_id = max(self._by_id, default=0) + 1
        self._by_id[student_id] = Student(
            student_id, nis, full_name, class_label, gender, birth_date, password_hash, is_class_representative
        )
        return student_id

    def update(self, *, student_id, nis, full_name, class_label, gender, birth_date, is_class_representative, password_hash=None) -> bool:
        current = self._by_id.get(student_id)
        if current is None:
            return False
        self._by_id[student_id] = replace(
            current,
            nis=nis,
            full_name=full_name,
            class_label=class_label,
            gender=gender,
            birth_date=birth_date,
            is_class_representative=is_class_representative,
            password_hash=current.password_hash if password_hash is None else password_hash,
        )
        return True

    def delete_by_id(self, student_id: int) -> bool:
        if self._by_id.pop(student_id, None) is None:
            return False
        if self.attendance is not None:
            self.attendance.delete_for_student(student_id)
        return True


class InMemoryUsers:
    def __init__(self, users: Sequence[StaffUser] = ()):
        self._by_id = {u.user_id: u for u in users}

    def list_all(self):
        return [self._by_id[k] for k in sorted(self._by_id)]

    def get_by_id(self, user_id: int) -> Optional[StaffUser]:
        return self._by_id.get(user_id)

    def get_by_username(self, username: str) -> Optional[StaffUser]:
        return next((u for u in self._by_id.values() if u.username == username), None)

    def get_by_student_id(self, student_id: int) -> Optional[StaffUser]:
        return next((u for u in self._by_id.values() if u.student_id == student_id), None)

    def create_user(self, *, username, full_name, password_hash, role, class_label=None, student_id=None) -> int:
        user_id = max(self._by_id, default=0) + 1
        self._by_id[user_id] = StaffUser(user_id, username, full_name, password_hash, role, class_label, student_id)
        return user_id

    def update_user(self, *, user_id, username, full_name, role, class_label=None, password_hash=None) -> bool:
        current = self._by_id.get(user_id)
        if current is None:
            return False
        self._by_id[user_id] = replace(
            current,
            username=username,
            full_name=full_name,
            role=role,
            class_label=class_label,
            password_hash=current.password_hash if password_hash is None else password_hash,
        )
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self._by_id.pop(user_id, None) is not None


class InMemoryAttendance:
    """Transactions are all-or-nothing: a failing batch leaves nothing behind."""

    def __init__(self, records: Sequence[AttendanceRecord] = ()):
        self._by_id = {r.attendance_id: r for r in records}
        self.writes = 0

    def list_all(self):
        return [self._by_id[k] for k in sorted(self._by_id)]

    def list_between(self, *, start_date: date, end_date: date):
        return [r for r in self.list_all() if start_date <= r.work_date <= end_date]

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(attendance_id)

    def create_many(self, records: Sequence[NewAttendanceRecord]) -> list[int]:
        ids = []
        next_id = max(self._by_id, default=0)
        staged = {}
        for rec in records:
            next_id += 1
            staged[next_id] = AttendanceRecord(
                attendance_id=next_id,
                student_id=rec.student_id,
                work_date=rec.work_date,
                status=rec.status,
                note=rec.note,
                validation=rec.validation,
                period_label=rec.period_label,
                semester=rec.semester,
            )
            ids.append(next_id)
        self._by_id.update(staged)
        self.writes += 1
        return ids

    def update_many(self, changes: Sequence[RecordChange]) -> int:
        affected = 0
        for ch in changes:
            rec = self._by_id.get(ch.attendance_id)
            if rec is None:
                continue
            self._by_id[ch.attendance_id] = replace(rec, status=ch.status, note=ch.note)
            affected += 1
        self.writes += 1
        return affected

    def mark_validated(self, attendance_ids: Sequence[int]) -> int:
        affected = 0
        for i in attendance_ids:
            rec = self._by_id.get(i)
            if rec is None:
                continue
            self._by_id[i] = replace(rec, validation=ValidationStatus.VALIDATED)
            affected += 1
        self.writes += 1
        return affected

    def delete(self, attendance_id: int) -> bool:
        return self._by_id.pop(attendance_id, None) is not None

    def delete_for_student(self, student_id: int) -> None:
        for k in [k for k, r in self._by_id.items() if r.student_id == student_id]:
            del self._by_id[k]


class InMemoryCaseNotes:
    def __init__(self, notes: Sequence[CaseNote] = ()):
        self._notes = list(notes)

    def list_all(self):
        return list(self._notes)


class InMemorySettings:
    def __init__(self, values: Optional[dict] = None):
        self._values = dict(DEFAULT_SETTINGS)
        self._values.update(values or {})

    def get_all(self) -> dict[str, str]:
        return dict(self._values)


def school_periods() -> list[AcademicPeriod]:
    return [
        AcademicPeriod(1, "2024/2025", date(2024, 7, 15), date(2024, 12, 20), date(2025, 1, 6), date(2025, 6, 20)),
        AcademicPeriod(2, "2025/2026", date(2025, 7, 14), date(2025, 12, 19), date(2026, 1, 5), date(2026, 6, 19)),
    ]


def school_students() -> list[Student]:
    pw = generate_password_hash(STUDENT_PASSWORD)
    return [
        Student(1, "1001", "Budi Santoso", "VII-A", Gender.MALE, date(2012, 5, 10), pw, True),
        Student(2, "1002", "Citra Lestari", "VII-A", Gender.FEMALE, date(2012, 8, 22), pw, False),
        Student(3, "1003", "Dewi Anggraini", "VII-A", Gender.FEMALE, date(2012, 3, 15), pw, False),
        Student(4, "2001", "Eko Prasetyo", "VII-B", Gender.MALE, date(2012, 1, 30), pw, True),
        Student(5, "2002", "Fitri Handayani", "VII-B", Gender.FEMALE, date(2012, 11, 5), pw, False),
        Student(6, "3001", "Gilang Ramadhan", "VIII-A", Gender.MALE, date(2011, 7, 19), pw, False),
    ]


def school_users() -> list[StaffUser]:
    def staff(user_id, username, name, role, class_label=None):
        return StaffUser(user_id, username, name, generate_password_hash(f"{username}123"), role, class_label)

    return [
        staff(1, "admin", "Administrator", Role.ADMIN),
        staff(2, "gurubk", "Bu Susi (BK)", Role.COUNSELING_TEACHER),
        staff(3, "walikelas", "Pak Budi", Role.HOMEROOM_TEACHER, "VII-A"),
        staff(4, "kepsek", "Kepala Sekolah", Role.PRINCIPAL),
        staff(5, "guru", "Pak Guru", Role.TEACHER),
        StaffUser(101, "1001", "Budi Santoso", "", Role.CLASS_REPRESENTATIVE, "VII-A", 1),
        StaffUser(102, "1002", "Citra Lestari", "", Role.STUDENT, "VII-A", 2),
    ]


ACTORS = {
    "admin": SessionUser(1, "Administrator", Role.ADMIN),
    "bk": SessionUser(2, "Bu Susi (BK)", Role.COUNSELING_TEACHER),
    "homeroom": SessionUser(3, "Pak Budi", Role.HOMEROOM_TEACHER, class_label="VII-A"),
    "principal": SessionUser(4, "Kepala Sekolah", Role.PRINCIPAL),
    "teacher": SessionUser(5, "Pak Guru", Role.TEACHER),
    "rep": SessionUser(101, "Budi Santoso", Role.CLASS_REPRESENTATIVE, class_label="VII-A", student_id=1),
    "student": SessionUser(102, "Citra Lestari", Role.STUDENT, class_label="VII-A", student_id=2),
}


@pytest.fixture
def actors() -> dict[str, SessionUser]:
    return dict(ACTORS)


@pytest.fixture
def repos():
    attendance = InMemoryAttendance()
    students = InMemoryStudents(school_students())
    students.attendance = attendance
    return {
        "users_repo": InMemoryUsers(school_users()),
        "students_repo": students,
        "attendance_repo": attendance,
        "periods_repo": InMemoryPeriods(school_periods()),
        "case_notes_repo": InMemoryCaseNotes(
            [CaseNote(1, 2, date(2024, 9, 3), "Terlambat berulang", "Panggilan orang tua", 2)]
        ),
        "settings_repo": InMemorySettings({"nama_sekolah": "SMP Negeri 1 Contoh"}),
    }


@pytest.fixture
def services(repos):
    return build_services(**repos)
