from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

import mysql.connector
from dotenv import load_dotenv
from flask import Flask
from loguru import logger
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .auth.controller import register as register_auth
from .catalog.controller import register as register_catalog
from .common.responses import error_response, success_response
from .container import Container, build_container
from .core.constants import DEFAULT_PAGE_LIMIT, DEFAULT_TOKEN_HOURS, MAX_PAGE_LIMIT
from .core.exceptions import DomainError, StoreError
from .core.logging import configure_logging
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_admin_user, list_tables
from .sales.controller import register as register_sales
from .stats.controller import register as register_stats
from .users.controller import register as register_users

API_VERSION = "1.0.0"

HTTP_ERROR_CODES = {
    401: "AUTHENTICATION_ERROR",
    403: "AUTHORIZATION_ERROR",
    404: "NOT_FOUND",
    409: "DUPLICATE_ENTRY",
}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.status_code >= 500:
            logger.error("{}: {}", e.code, e.message)
        return error_response(e.message or "Request failed", e.code, e.status_code, e.details)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        status = e.code or 500
        code = HTTP_ERROR_CODES.get(status, "VALIDATION_ERROR" if status < 500 else "SERVER_ERROR")
        return error_response(e.description or e.name, code, status)

    def _server_error(e: Exception, message: str, code: str = "SERVER_ERROR"):
        logger.exception("Unhandled error: {}", e)
        if app.config.get("DEBUG"):
            message = f"{message}: {e}"
        return error_response(message, code, 500)

    @app.errorhandler(mysql.connector.Error)
    def handle_db_error(e: mysql.connector.Error):
        return _server_error(e, "Database error", StoreError.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        return _server_error(e, "Internal server error")


def _bootstrap_database(settings, db_config: dict) -> None:
    root = Path(__file__).resolve().parents[3] / "database"
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=root / "schema.sql")
        logger.info("Schema ready (tables={})", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=root / "seed.sql")
        admin_email = getattr(settings, "ADMIN_EMAIL", "")
        admin_password = getattr(settings, "ADMIN_PASSWORD", "")
        if admin_email and admin_password:
            ensure_admin_user(db_config, email=admin_email, password=admin_password)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Passing ``container`` skips every database step (used by tests).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["API_PREFIX"] = str(getattr(settings, "API_PREFIX", "/api")).rstrip("/")
    app.json.sort_keys = False

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info(
        "settings={} db={}@{}:{}/{}",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        _bootstrap_database(settings, db_config)
        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            jwt_expiration_hours=int(getattr(settings, "JWT_EXPIRATION_HOURS", DEFAULT_TOKEN_HOURS)),
            default_limit=int(getattr(settings, "PAGINATION_DEFAULT_LIMIT", DEFAULT_PAGE_LIMIT)),
            max_limit=int(getattr(settings, "PAGINATION_MAX_LIMIT", MAX_PAGE_LIMIT)),
        )

    register_error_handlers(app)

    prefix = app.config["API_PREFIX"]

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return success_response({"status": "ok", "version": API_VERSION}, "Service is healthy")

    @app.route("/", methods=["GET"], endpoint="api_index")
    def api_index():
        return success_response(
            {
                "name": "Bank Sales API",
                "version": API_VERSION,
                "endpoints": {
                    "auth": f"{prefix}/auth",
                    "users": f"{prefix}/users",
                    "sales": f"{prefix}/sales",
                    "stats": f"{prefix}/stats",
                    "products": f"{prefix}/products",
                    "franchises": f"{prefix}/franchises",
                    "roles": f"{prefix}/roles",
                },
            },
            "Bank Sales API",
        )

    if prefix:
        app.add_url_rule(prefix, endpoint="api_index_prefixed", view_func=api_index, methods=["GET"])

    register_auth(app, container)
    register_users(app, container)
    register_catalog(app, container)
    register_sales(app, container)
    register_stats(app, container)

    return app
