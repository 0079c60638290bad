from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .transport.controller import register as register_transport

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(*, start_scheduler: bool | None = None, **overrides) -> Flask:
    """Application factory.

    ``overrides`` (repository, notifier, clock, profiles) are passed to build_container.
    A PersistenceError from the initial state load propagates: the app does
    not start on unreadable state.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    backend = str(getattr(settings, "STATE_BACKEND", "json"))
    if app.config["DEBUG"]:
        app.logger.info("[wakeup-streak] settings=%s backend=%s", settings_module, backend)

    if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
        apply_schema(conn, schema_path=SCHEMA_PATH)
        if app.config["DEBUG"]:
            app.logger.info("[wakeup-streak] schema ready (tables=%d)", len(list_tables(conn)))

    container = build_container(settings, **overrides)
    app.extensions["wakeup_streak"] = container

    register_transport(app, container)

    if start_scheduler is None:
        start_scheduler = bool(getattr(settings, "ENABLE_SCHEDULER", False))
    if start_scheduler:
        container.scheduler.start()

    return app
