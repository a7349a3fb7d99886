"""
redis-helpers — Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config, reset_config
from .schemas import (
    DEFAULT_COOLDOWN_SECONDS,
    DEFAULT_TTL_SECONDS,
    CacheConfig,
    Environment,
    HelperSettings,
    LogLevel,
    StoreBackend,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    "reset_config",
    # Main config
    "HelperSettings",
    # Enums
    "Environment",
    "StoreBackend",
    "LogLevel",
    # Config sections
    "CacheConfig",
    # Defaults
    "DEFAULT_TTL_SECONDS",
    "DEFAULT_COOLDOWN_SECONDS",
]
