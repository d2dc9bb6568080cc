from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import AcademicPeriod
from .repository import PeriodRepository

_COLUMNS = "period_id, label, odd_start, odd_end, even_start, even_end"


def _row_to_period(r: dict) -> AcademicPeriod:
    return AcademicPeriod(
        period_id=int(r["period_id"]),
        label=r["label"],
        odd_start=normalize_mysql_date(r["odd_start"]),
        odd_end=normalize_mysql_date(r["odd_end"]),
        even_start=normalize_mysql_date(r["even_start"]),
        even_end=normalize_mysql_date(r["even_end"]),
    )


class MySQLPeriodRepository(PeriodRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AcademicPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM academic_periods ORDER BY period_id ASC")
            return [_row_to_period(r) for r in fetchall(cur)]

    def get_by_id(self, period_id: int) -> Optional[AcademicPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM academic_periods WHERE period_id=%s", (int(period_id),))
            r = fetchone(cur)
            return _row_to_period(r) if r else None

    def create(
        self,
        *,
        label: str,
        odd_start: date,
        odd_end: date,
        even_start: date,
        even_end: date,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO academic_periods(label, odd_start, odd_end, even_start, even_end)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (label, odd_start, odd_end, even_start, even_end),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        period_id: int,
        label: str,
        odd_start: date,
        odd_end: date,
        even_start: date,
        even_end: date,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE academic_periods
                SET label=%s, odd_start=%s, odd_end=%s, even_start=%s, even_end=%s
                WHERE period_id=%s
                """,
                (label, odd_start, odd_end, even_start, even_end, int(period_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, period_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM academic_periods WHERE period_id=%s", (int(period_id),))
            return cur.rowcount > 0
