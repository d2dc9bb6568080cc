from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import StaffUser
from .repository import UserRepository

_SELECT = "SELECT user_id, username, full_name, password_hash, role, class_label, student_id FROM users"


def _row_to_user(r: dict) -> StaffUser:
    return StaffUser(
        user_id=int(r["user_id"]),
        username=r["username"],
        full_name=r.get("full_name") or r["username"],
        password_hash=r.get("password_hash") or "",
        role=Role(r["role"]),
        class_label=r.get("class_label"),
        student_id=int(r["student_id"]) if r.get("student_id") is not None else None,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[StaffUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY user_id ASC")
            return [_row_to_user(r) for r in fetchall(cur)]

    def get_by_id(self, user_id: int) -> Optional[StaffUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _row_to_user(r) if r else None

    def get_by_username(self, username: str) -> Optional[StaffUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE username=%s", (username,))
            r = fetchone(cur)
            return _row_to_user(r) if r else None

    def get_by_student_id(self, student_id: int) -> Optional[StaffUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return _row_to_user(r) if r else None

    def create_user(
        self,
        *,
        username: str,
        full_name: str,
        password_hash: str,
        role: Role,
        class_label: Optional[str] = None,
        student_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(username, full_name, password_hash, role, class_label, student_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (username, full_name, password_hash, role.value, class_label, student_id),
            )
            return int(cur.lastrowid)

    def update_user(
        self,
        *,
        user_id: int,
        username: str,
        full_name: str,
        role: Role,
        class_label: Optional[str] = None,
        password_hash: Optional[str] = None,
    ) -> bool:
        sets = ["username=%s", "full_name=%s", "role=%s", "class_label=%s"]
        params = [username, full_name, role.value, class_label]
        if password_hash is not None:
            sets.append("password_hash=%s")
            params.append(password_hash)
        params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {', '.join(sets)} WHERE user_id=%s", tuple(params))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
