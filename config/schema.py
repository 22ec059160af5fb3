"""Configuration schema dataclasses.

Minimal dataclasses for runtime configuration.
"""

from dataclasses import dataclass
from typing import Optional

from .base import (
    DEFAULT_CORS_ALLOWED_ORIGINS,
    DEFAULT_GEMINI_MAX_OUTPUT_TOKENS,
    DEFAULT_GEMINI_MODEL_NAME,
    DEFAULT_GEMINI_TEMPERATURE,
    DEFAULT_MAX_CONTENT_LENGTH,
    DEFAULT_MAX_INPUT_CHARS,
    DEFAULT_MAX_PDF_BYTES,
    DEFAULT_PORT,
    DEFAULT_SECRET_KEY,
)


@dataclass
class RuntimeConfig:
    """Runtime configuration - environment-driven settings."""

    # AI/Gemini
    gemini_api_key: Optional[str] = None
    gemini_model_name: str = DEFAULT_GEMINI_MODEL_NAME
    gemini_max_output_tokens: int = DEFAULT_GEMINI_MAX_OUTPUT_TOKENS
    gemini_temperature: float = DEFAULT_GEMINI_TEMPERATURE

    # Input handling
    max_input_chars: int = DEFAULT_MAX_INPUT_CHARS
    max_pdf_bytes: int = DEFAULT_MAX_PDF_BYTES
    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH

    # CORS
    cors_allowed_origins: str = DEFAULT_CORS_ALLOWED_ORIGINS

    # Server
    port: int = DEFAULT_PORT

    def __post_init__(self):
        """Validate after initialization."""
        if self.gemini_max_output_tokens <= 0:
            raise ValueError("GEMINI_MAX_OUTPUT_TOKENS must be > 0")
        if not 0.0 <= self.gemini_temperature <= 2.0:
            raise ValueError("GEMINI_TEMPERATURE must be between 0.0 and 2.0")
        if self.max_input_chars <= 0:
            raise ValueError("MAX_INPUT_CHARS must be > 0")
        if self.max_pdf_bytes <= 0:
            raise ValueError("MAX_PDF_BYTES must be > 0")
        if self.max_content_length < self.max_pdf_bytes:
            raise ValueError("MAX_CONTENT_LENGTH must be >= MAX_PDF_BYTES")
        if not 0 < self.port < 65536:
            raise ValueError("PORT must be between 1 and 65535")


@dataclass
class AppConfig:
    """Application configuration - runtime settings plus Flask secrets."""

    runtime: RuntimeConfig

    # Flask-specific settings
    secret_key: str = DEFAULT_SECRET_KEY


__all__ = ["RuntimeConfig", "AppConfig"]
