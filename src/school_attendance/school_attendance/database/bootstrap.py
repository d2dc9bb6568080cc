"""Schema/seed helpers used by `main.create_app` and the scripts in `scripts/`."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

# (username, full name, password, role, homeroom class)
DEMO_STAFF = (
    ("admin", "Administrator", "admin123", "Admin", None),
    ("gurubk", "Bu Susi (BK)", "gurubk123", "Guru BK", None),
    ("walikelas", "Pak Budi (Wali Kelas VII-A)", "walikelas123", "Wali Kelas", "VII-A"),
    ("kepsek", "Kepala Sekolah", "kepsek123", "Kepala Sekolah", None),
    ("guru", "Pak Guru", "guru123", "Guru", None),
)
DEMO_STUDENT_PASSWORD = "password123"


def _connect(db_config: dict, *, with_database: bool = True):
    target = DBConfig.from_dict(db_config)
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes, skips '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql_file(db_config: dict, path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(db_config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _exec_sql_file(db_config, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _exec_sql_file(db_config, seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Hash demo passwords and create the login rows seed.sql cannot compute."""
    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)

        for username, full_name, password, role, class_label in DEMO_STAFF:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE username=%s", (username,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE users SET full_name=%s, password_hash=%s, role=%s, class_label=%s
                    WHERE username=%s
                    """,
                    (full_name, password_hash, role, class_label, username),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users (username, full_name, password_hash, role, class_label)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (username, full_name, password_hash, role, class_label),
                )

        # Every student gets a login (username = NIS) and a hashed demo password.
        cur.execute("SELECT student_id, nis, full_name, is_class_representative FROM students")
        students = cur.fetchall()
        for s in students:
            cur.execute(
                "UPDATE students SET password_hash=%s WHERE student_id=%s AND (password_hash IS NULL OR password_hash='')",
                (generate_password_hash(DEMO_STUDENT_PASSWORD), s["student_id"]),
            )
            role = "Ketua Kelas" if int(s["is_class_representative"] or 0) else "Siswa"
            cur.execute("SELECT user_id FROM users WHERE username=%s", (str(s["nis"]),))
            if not cur.fetchone():
                cur.execute(
                    """
                    INSERT INTO users (username, full_name, password_hash, role, student_id)
                    VALUES (%s, %s, '', %s, %s)
                    """,
                    (str(s["nis"]), s["full_name"], role, s["student_id"]),
                )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
