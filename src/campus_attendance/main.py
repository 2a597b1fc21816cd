from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .config import get_settings_module
from .container import AttendanceSettings, Container, build_container
from .core.exceptions import StorageError
from .database.bootstrap import apply_schema, list_tables

from .admin.controller import register as register_admin
from .attendance.controller import register as register_attendance
from .students.controller import register as register_students

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def register_routes(app: Flask, container: Container) -> None:
    register_students(app, container)
    register_attendance(app, container)
    register_admin(app, container)

    @app.errorhandler(StorageError)
    def _storage_error(e: StorageError):
        logger.error("Storage failure: %s", e)
        return jsonify({"error": "Server error", "kind": "storage_error"}), 500

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        logger.exception("Unhandled error")
        return jsonify({"error": "Server error"}), 500

    @app.route("/health", endpoint="health")
    def health():
        return jsonify({"status": "ok"})


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(db_config=db_config, settings=AttendanceSettings.from_module(settings))

    app.extensions["campus_attendance"] = container
    register_routes(app, container)

    return app
