from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_date
from .model import CaseNote
from .repository import CaseNoteRepository


class MySQLCaseNoteRepository(CaseNoteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[CaseNote]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT case_id, student_id, case_date, description, follow_up, reported_by
                FROM case_notes
                ORDER BY case_date DESC, case_id DESC
                """
            )
            return [
                CaseNote(
                    case_id=int(r["case_id"]),
                    student_id=int(r["student_id"]),
                    case_date=normalize_mysql_date(r["case_date"]),
                    description=r["description"],
                    follow_up=r.get("follow_up") or "",
                    reported_by=int(r["reported_by"]),
                )
                for r in fetchall(cur)
            ]
