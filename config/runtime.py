"""Runtime configuration - environment-driven settings.

Reads environment variables and applies defaults for the running service.
"""

import os

from .base import (
    DEFAULT_CORS_ALLOWED_ORIGINS,
    DEFAULT_CORS_ALLOWED_ORIGINS_PROD,
    DEFAULT_GEMINI_MAX_OUTPUT_TOKENS,
    DEFAULT_GEMINI_MODEL_NAME,
    DEFAULT_GEMINI_TEMPERATURE,
    DEFAULT_MAX_CONTENT_LENGTH,
    DEFAULT_MAX_INPUT_CHARS,
    DEFAULT_MAX_PDF_BYTES,
    DEFAULT_PORT,
)
from .schema import RuntimeConfig


def _env_int(name, default):
    """Read an integer environment variable."""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name, default):
    """Read a float environment variable."""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _resolve_api_key() -> str | None:
    for name in ("GEMINI_API_KEY", "GOOGLE_API_KEY"):
        value = (os.environ.get(name) or "").strip()
        if value:
            return value
    return None


def get_runtime_config(flask_config_name="default") -> RuntimeConfig:
    """
    Build runtime configuration from environment variables.

    Args:
        flask_config_name: Flask config profile name (default/production/testing)
                          Used to select the CORS default.

    Returns:
        RuntimeConfig instance
    """
    if flask_config_name == "production":
        default_cors_origins = DEFAULT_CORS_ALLOWED_ORIGINS_PROD
    else:
        default_cors_origins = DEFAULT_CORS_ALLOWED_ORIGINS

    return RuntimeConfig(
        gemini_api_key=_resolve_api_key(),
        gemini_model_name=os.environ.get(
            "GEMINI_MODEL_NAME", DEFAULT_GEMINI_MODEL_NAME
        ),
        gemini_max_output_tokens=_env_int(
            "GEMINI_MAX_OUTPUT_TOKENS", default=DEFAULT_GEMINI_MAX_OUTPUT_TOKENS
        ),
        gemini_temperature=_env_float(
            "GEMINI_TEMPERATURE", default=DEFAULT_GEMINI_TEMPERATURE
        ),
        max_input_chars=_env_int("MAX_INPUT_CHARS", default=DEFAULT_MAX_INPUT_CHARS),
        max_pdf_bytes=_env_int("MAX_PDF_BYTES", default=DEFAULT_MAX_PDF_BYTES),
        max_content_length=_env_int(
            "MAX_CONTENT_LENGTH", default=DEFAULT_MAX_CONTENT_LENGTH
        ),
        cors_allowed_origins=os.environ.get(
            "CORS_ALLOWED_ORIGINS", default_cors_origins
        ),
        port=_env_int("PORT", default=DEFAULT_PORT),
    )


__all__ = ["get_runtime_config", "_env_int", "_env_float"]
