from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import Gender
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import Student
from .repository import StudentRepository

_SELECT = """
    SELECT student_id, nis, full_name, class_label, gender, birth_date,
           password_hash, is_class_representative
    FROM students
"""


def _row_to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        nis=str(r["nis"]),
        full_name=r["full_name"],
        class_label=r["class_label"],
        gender=Gender(r["gender"]),
        birth_date=normalize_mysql_date(r.get("birth_date")),
        password_hash=r.get("password_hash") or "",
        is_class_representative=bool(int(r.get("is_class_representative") or 0)),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY class_label ASC, full_name ASC")
            return [_row_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return _row_to_student(r) if r else None

    def get_by_nis(self, nis: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE nis=%s", (nis,))
            r = fetchone(cur)
            return _row_to_student(r) if r else None

    def create(
        self,
        *,
        nis: str,
        full_name: str,
        class_label: str,
        gender: Gender,
        birth_date: Optional[date],
        password_hash: str,
        is_class_representative: bool,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(nis, full_name, class_label, gender, birth_date,
                                     password_hash, is_class_representative)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    nis,
                    full_name,
                    class_label,
                    gender.value,
                    birth_date,
                    password_hash,
                    1 if is_class_representative else 0,
                ),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        student_id: int,
        nis: str,
        full_name: str,
        class_label: str,
        gender: Gender,
        birth_date: Optional[date],
        is_class_representative: bool,
        password_hash: Optional[str] = None,
    ) -> bool:
        sets = ["nis=%s", "full_name=%s", "class_label=%s", "gender=%s", "birth_date=%s", "is_class_representative=%s"]
        params = [nis, full_name, class_label, gender.value, birth_date, 1 if is_class_representative else 0]
        if password_hash is not None:
            sets.append("password_hash=%s")
            params.append(password_hash)
        params.append(int(student_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE students SET {', '.join(sets)} WHERE student_id=%s", tuple(params))
            return cur.rowcount > 0

    def delete_by_id(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0
