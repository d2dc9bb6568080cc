from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, Semester, ValidationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, normalize_mysql_date
from .model import AttendanceRecord, NewAttendanceRecord, RecordChange
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, student_id, work_date, status, note, validation, period_label, semester"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        work_date=normalize_mysql_date(r["work_date"]),
        status=AttendanceStatus(r["status"]),
        note=r.get("note") or "",
        validation=ValidationStatus(r["validation"]),
        period_label=r["period_label"],
        semester=Semester(r["semester"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records ORDER BY work_date DESC, attendance_id ASC")
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_between(self, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date BETWEEN %s AND %s
                ORDER BY work_date DESC, attendance_id ASC
                """,
                (start_date, end_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create_many(self, records: Sequence[NewAttendanceRecord]) -> list[int]:
        ids: list[int] = []
        if not records:
            return ids
        with db_cursor(self._conn_factory) as (_, cur):
            for rec in records:
                cur.execute(
                    """
                    INSERT INTO attendance_records(student_id, work_date, status, note, validation, period_label, semester)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(rec.student_id),
                        rec.work_date,
                        rec.status.value,
                        rec.note or None,
                        rec.validation.value,
                        rec.period_label,
                        rec.semester.value,
                    ),
                )
                ids.append(int(cur.lastrowid))
        return ids

    def update_many(self, changes: Sequence[RecordChange]) -> int:
        if not changes:
            return 0
        affected = 0
        with db_cursor(self._conn_factory) as (_, cur):
            for ch in changes:
                cur.execute(
                    "UPDATE attendance_records SET status=%s, note=%s WHERE attendance_id=%s",
                    (ch.status.value, ch.note or None, int(ch.attendance_id)),
                )
                affected += cur.rowcount
        return affected

    def mark_validated(self, attendance_ids: Sequence[int]) -> int:
        if not attendance_ids:
            return 0
        ids = [int(i) for i in attendance_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance_records SET validation=%s WHERE attendance_id IN ({in_clause(ids)})",
                (ValidationStatus.VALIDATED.value, *ids),
            )
            return int(cur.rowcount)

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
