"""Load demo periods/students/settings and the demo logins."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_attendance.school_attendance.database.bootstrap import (
    DEMO_STAFF,
    DEMO_STUDENT_PASSWORD,
    apply_seed_sql,
    ensure_demo_users,
)
from src.school_attendance.school_attendance.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_users(db_config)

    print(f"OK: seeded -> {DBConfig.from_dict(db_config).describe()}")
    for username, _, password, role, _ in DEMO_STAFF:
        print(f"  {role:<15} {username} / {password}")
    print(f"  Students log in with their NIS / {DEMO_STUDENT_PASSWORD}")


if __name__ == "__main__":
    main()
