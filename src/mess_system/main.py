from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import build_container
from .core.exceptions import StorageError
from .database.bootstrap import apply_schema, list_tables
from .feedback.controller import register as register_feedback
from .menu.controller import register as register_menu
from .reports.controller import register as register_reports
from .students.controller import register as register_students

logger = logging.getLogger("mess_system")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings_overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    for key in dir(settings):
        if key.isupper():
            app.config[key] = getattr(settings, key)
    if settings_overrides:
        app.config.update(settings_overrides)

    _configure_logging(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    app.secret_key = app.config["SECRET_KEY"]

    backend = str(app.config.get("STORAGE_BACKEND", "mysql")).lower()
    db_config = app.config.get("DB_CONFIG", {})
    logger.info(
        "settings=%s backend=%s db=%s@%s:%s/%s",
        settings_module,
        backend,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    container = build_container(app.config)
    app.extensions["container"] = container

    if app.config.get("AUTO_INIT_DB") and container.conn is not None:
        schema_path = Path(__file__).resolve().parents[2] / "database" / "schema.sql"
        apply_schema(container.conn, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    try:
        if container.aggregator.reconcile():
            logger.info("head counts rebuilt from the scan ledger")
    except StorageError:
        logger.exception("startup reconcile failed; head counts may lag until the next run")

    register_error_handlers(app)
    register_students(app, container)
    register_attendance(app, container)
    register_reports(app, container)
    register_menu(app, container)
    register_feedback(app, container)

    return app
