from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.logging_config import configure_logging, get_logger
from .core.exceptions import (
    DistributionError,
    NotFoundError,
    PeriodAlreadyPaidError,
    SettingsMissingError,
    ValidationError,
)
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_default_settings, list_tables

from .container import Container, build_container
from .payroll.controller import register as register_payroll
from .students.controller import register as register_students

logger = get_logger("main")


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def handle_validation(e):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return jsonify({"success": False, "message": str(e)}), 404

    @app.errorhandler(PeriodAlreadyPaidError)
    def handle_conflict(e):
        return jsonify({"success": False, "conflict": True, "message": str(e)}), 409

    @app.errorhandler(SettingsMissingError)
    def handle_settings_missing(e):
        return jsonify({"success": False, "message": str(e)}), 500

    @app.errorhandler(DistributionError)
    def handle_distribution_failed(e):
        return jsonify({"success": False, "rolled_back": True, "message": str(e)}), 500


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "DEBUG" if app.config["DEBUG"] else "INFO"))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
        auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
        if auto_init_db:
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            ensure_default_settings(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if auto_seed_db:
            seed_path = Path(__file__).resolve().parents[3] / "database" / "seed.sql"
            apply_seed_sql(db_config, seed_path=seed_path)
            logger.info("demo seed ready")

        container = build_container(db_config=db_config)

    _register_error_handlers(app)
    register_payroll(app, container)
    register_students(app, container)

    return app
