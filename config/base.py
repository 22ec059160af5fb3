"""Default values shared by the configuration readers."""

DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production"

# Gemini
DEFAULT_GEMINI_MODEL_NAME = "gemini-2.5-flash"
DEFAULT_GEMINI_MAX_OUTPUT_TOKENS = 2000
DEFAULT_GEMINI_TEMPERATURE = 0.7

# Input limits
DEFAULT_MAX_INPUT_CHARS = 10000
DEFAULT_MAX_PDF_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_MAX_CONTENT_LENGTH = 11 * 1024 * 1024  # PDF limit + multipart overhead

# CORS
DEFAULT_CORS_ALLOWED_ORIGINS = "*"
DEFAULT_CORS_ALLOWED_ORIGINS_PROD = ""

DEFAULT_PORT = 3001
