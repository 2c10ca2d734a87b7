from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .balances.controller import register as register_balances
from .business_trips.controller import register as register_business_trips
from .common.web import register_error_handlers
from .conflicts.controller import register as register_conflicts
from .container import Container, build_container
from .core.constants import DEFAULT_TOLERANCE_MINUTES, FULL_DAY_PERMISSION_HOURS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .holidays.controller import register as register_holidays
from .leave.controller import register as register_leave
from .notifications.controller import register as register_notifications
from .overtime.controller import register as register_overtime
from .reports.controller import register as register_reports
from .users.controller import register as register_users
from .work_schedules.controller import register as register_work_schedules

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Without a container the MySQL-backed one is built from the settings
    module selected by APP_ENV (and the schema/seed applied if enabled).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), format=LOG_FORMAT)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            app.logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            full_day_permission_hours=float(getattr(settings, "FULL_DAY_PERMISSION_HOURS", FULL_DAY_PERMISSION_HOURS)),
            default_tolerance_minutes=int(getattr(settings, "DEFAULT_TOLERANCE_MINUTES", DEFAULT_TOLERANCE_MINUTES)),
        )

    app.extensions["container"] = container
    register_error_handlers(app)

    register_users(app, container)
    register_holidays(app, container)
    register_work_schedules(app, container)
    register_conflicts(app, container)
    register_balances(app, container)
    register_leave(app, container)
    register_business_trips(app, container)
    register_attendance(app, container)
    register_overtime(app, container)
    register_notifications(app, container)
    register_reports(app, container)

    return app
