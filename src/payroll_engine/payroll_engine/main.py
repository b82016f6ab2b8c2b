from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import (
    AuthorizationError,
    ConcurrencyConflictError,
    DomainError,
    EntityNotFoundError,
    InvalidOperationError,
    LocationVerificationError,
    ValidationError,
)
from .database.bootstrap import apply_schema, list_tables
from .payroll.controller import register as register_payroll

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Most specific first: the first isinstance match wins.
ERROR_STATUS = (
    (ValidationError, 400),
    (LocationVerificationError, 400),
    (AuthorizationError, 403),
    (EntityNotFoundError, 404),
    (ConcurrencyConflictError, 409),
    (InvalidOperationError, 409),
    (DomainError, 400),
)


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if not any(getattr(h, "_payroll_engine", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._payroll_engine = True
        root.addHandler(handler)
    root.setLevel(str(level).upper())


def status_for(exc: DomainError) -> int:
    for exc_type, status in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = status_for(exc)
        body = {"success": False, "error": type(exc).__name__, "message": str(exc)}
        field = getattr(exc, "field", None)
        if field:
            body["field"] = field
        if isinstance(exc, ConcurrencyConflictError):
            body["retryable"] = True
        return jsonify(body), status


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module, db_config.get("user"), db_config.get("host"), db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(db_config=db_config, settings=settings)

    app.extensions["payroll_engine"] = container
    register_error_handlers(app)
    register_attendance(app, container)
    register_payroll(app, container)

    return app
