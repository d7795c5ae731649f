from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import STORE_MYSQL, build_container
from .database.bootstrap import apply_schema, list_tables
from .reports.controller import register as register_reports

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def create_app(**container_overrides) -> Flask:
    """Application factory.

    `container_overrides` are passed to build_container (tests use them to
    seed the in-memory store and pin the clock).
    """

    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), format=LOG_FORMAT)

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    db_config = dict(getattr(settings, "DB_CONFIG"))
    attendance = dict(getattr(settings, "ATTENDANCE", {}))
    store = container_overrides.pop("store", getattr(settings, "ATTENDANCE_STORE", STORE_MYSQL))

    logger.info(
        "Starting with settings=%s store=%s db=%s@%s:%s/%s",
        settings_module,
        store,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if store == STORE_MYSQL and bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(db_config=db_config, attendance=attendance, store=store, **container_overrides)
    app.extensions["workforce_attendance"] = container

    register_attendance(app, container)
    register_reports(app, container)

    return app
