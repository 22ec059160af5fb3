"""Configuration package.

``get_config()`` is the single source of truth for settings; it is built once
per profile from the environment and cached until ``reset_config()``.
"""

import os

from .base import DEFAULT_SECRET_KEY
from .runtime import get_runtime_config
from .schema import AppConfig, RuntimeConfig

_config_name = "default"
_config: AppConfig | None = None


def set_config_name(name: str) -> None:
    """Select the active profile and drop any cached configuration."""
    global _config_name, _config
    _config_name = name or "default"
    _config = None


def get_config() -> AppConfig:
    global _config
    if _config is None:
        _config = AppConfig(
            runtime=get_runtime_config(_config_name),
            secret_key=os.environ.get("SECRET_KEY") or DEFAULT_SECRET_KEY,
        )
    return _config


def reset_config() -> None:
    global _config
    _config = None


__all__ = [
    "AppConfig",
    "RuntimeConfig",
    "get_config",
    "reset_config",
    "set_config_name",
]
