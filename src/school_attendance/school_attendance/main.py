from __future__ import annotations

import importlib
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_REST_WEEKDAY, DEFAULT_SESSION_DAYS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .periods.controller import register as register_periods
from .reports.controller import register as register_reports
from .users.controller import register as register_users

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    A prepared `container` (e.g. over in-memory repositories) skips every
    database step; otherwise the MySQL container is built from settings.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_DAYS"] = int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS))
    app.permanent_session_lifetime = timedelta(days=app.config["SESSION_DAYS"])
    rest_weekday = int(getattr(settings, "REST_WEEKDAY", DEFAULT_REST_WEEKDAY))

    if container is None:
        if app.config["DEBUG"]:
            print("[school-attendance] settings=", settings_module, " db=", DBConfig.from_dict(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            if app.config["DEBUG"]:
                print(f"[school-attendance] schema ready (tables={len(list_tables(db_config))})")
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            if app.config["DEBUG"]:
                print("[school-attendance] demo seed ready")

        container = build_container(db_config=db_config, rest_weekday=rest_weekday)

    register_users(app, container)
    register_attendance(app, container)
    register_periods(app, container)
    register_reports(app, container)

    return app
