"""Flask application factory"""

import json
import logging
import time
import uuid

from flask import Flask, g, request
from werkzeug.exceptions import RequestEntityTooLarge

from config import get_config, set_config_name
from config.base import DEFAULT_SECRET_KEY
from studyguide.services.api_response import error_response

_REQUEST_LOGGER_NAME = "studyguide.request"
_REQUEST_ID_HEADER = "X-Request-ID"
_ERROR_CODES = ("error_code", "code")


def _get_request_logger() -> logging.Logger:
    logger = logging.getLogger(_REQUEST_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def _resolve_request_id() -> str:
    request_id = (request.headers.get(_REQUEST_ID_HEADER) or "").strip()
    if request_id:
        return request_id[:128]
    return uuid.uuid4().hex


def _resolve_route() -> str:
    rule = getattr(request, "url_rule", None)
    if rule and getattr(rule, "rule", None):
        return str(rule.rule)
    return request.path


def _resolve_error_code_from_response(response) -> str | None:
    status_code = int(getattr(response, "status_code", 0) or 0)
    if status_code < 400:
        return None

    if response.is_json:
        payload = response.get_json(silent=True)
        if isinstance(payload, dict):
            for key in _ERROR_CODES:
                value = payload.get(key)
                if value not in (None, ""):
                    return str(value)

    return f"HTTP_{status_code}"


def _log_request(
    request_logger: logging.Logger,
    *,
    request_id: str,
    route: str,
    status: int,
    latency: float,
    error_code: str | None,
) -> None:
    request_logger.info(
        json.dumps(
            {
                "request_id": request_id,
                "route": route,
                "status": status,
                "latency": latency,
                "error_code": error_code,
            },
            separators=(",", ":"),
        )
    )


def _elapsed_ms() -> float:
    started_at = getattr(g, "request_started_at", None)
    if started_at is None:
        return 0.0
    return round((time.perf_counter() - started_at) * 1000, 2)


def create_app(config_name="default"):
    """
    Flask application factory

    Args:
        config_name: config profile name ('default', 'production', 'testing')

    Returns:
        Flask app instance
    """
    app = Flask(__name__)

    set_config_name(config_name)
    cfg = get_config()

    if config_name == "production":
        if not cfg.secret_key or cfg.secret_key == DEFAULT_SECRET_KEY:
            raise RuntimeError(
                "SECRET_KEY must be set to a non-default value in production."
            )

    app.config["ENV_NAME"] = config_name
    app.config["SECRET_KEY"] = cfg.secret_key
    app.config["MAX_CONTENT_LENGTH"] = cfg.runtime.max_content_length
    app.config["CORS_ALLOWED_ORIGINS"] = cfg.runtime.cors_allowed_origins
    app.config["TESTING"] = config_name == "testing"

    _register_blueprints(app)

    cors_allowed = {
        origin.strip()
        for origin in app.config.get("CORS_ALLOWED_ORIGINS", "").split(",")
        if origin.strip()
    }
    request_logger = _get_request_logger()

    def _apply_cors_headers(response):
        origin = request.headers.get("Origin")
        if not origin:
            return response
        if "*" not in cors_allowed and origin not in cors_allowed:
            return response

        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        request_headers = request.headers.get("Access-Control-Request-Headers")
        response.headers["Access-Control-Allow-Headers"] = (
            request_headers
            if request_headers
            else "Content-Type, X-Request-ID"
        )
        response.headers["Access-Control-Max-Age"] = "600"
        vary = response.headers.get("Vary")
        response.headers["Vary"] = (
            "Origin" if not vary else f"{vary}, Origin"
        )
        return response

    @app.errorhandler(RequestEntityTooLarge)
    def handle_request_too_large(exc):
        limit_mb = app.config["MAX_CONTENT_LENGTH"] / (1024 * 1024)
        message = f"Upload exceeds the {limit_mb:g}MB request limit"
        return error_response(
            message=message,
            code="PDF_TOO_LARGE",
            status=413,
            legacy={"error": message},
        )

    @app.before_request
    def mark_request_started():
        g.request_id = _resolve_request_id()
        g.request_started_at = time.perf_counter()
        g.request_logged = False

    @app.before_request
    def handle_cors_preflight():
        if request.method == "OPTIONS":
            return _apply_cors_headers(app.make_default_options_response())
        return None

    @app.after_request
    def add_response_headers(response):
        # CORS should be applied to both preflight and normal responses.
        response = _apply_cors_headers(response)
        if _REQUEST_ID_HEADER not in response.headers:
            response.headers[_REQUEST_ID_HEADER] = getattr(
                g, "request_id", _resolve_request_id()
            )
        return response

    @app.after_request
    def log_request_response(response):
        request_id = getattr(g, "request_id", _resolve_request_id())
        status = int(getattr(response, "status_code", 0) or 0)

        _log_request(
            request_logger,
            request_id=request_id,
            route=_resolve_route(),
            status=status,
            latency=_elapsed_ms(),
            error_code=_resolve_error_code_from_response(response),
        )
        g.request_logged = True
        response.headers[_REQUEST_ID_HEADER] = request_id
        return response

    @app.teardown_request
    def log_request_exception(exc):
        if exc is None or getattr(g, "request_logged", False):
            return None

        status = int(getattr(exc, "code", 500) or 500)
        error_code = getattr(exc, "name", None) or getattr(exc, "code", None)
        if error_code in (None, ""):
            error_code = "INTERNAL_SERVER_ERROR"
        _log_request(
            request_logger,
            request_id=getattr(g, "request_id", _resolve_request_id()),
            route=_resolve_route(),
            status=status,
            latency=_elapsed_ms(),
            error_code=str(error_code),
        )
        g.request_logged = True
        return None

    return app


def _register_blueprints(app: Flask) -> None:
    from studyguide.routes.main import main_bp
    from studyguide.routes.api_study_guide import api_study_guide_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_study_guide_bp)
