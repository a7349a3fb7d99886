"""
redis-helpers — Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the process.
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import DEFAULT_COOLDOWN_SECONDS, DEFAULT_TTL_SECONDS, HelperSettings

logger = logging.getLogger(__name__)

_config_instance: HelperSettings | None = None


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _build_config_dict() -> dict[str, Any]:
    """Collect raw settings from the environment; pydantic does the coercion."""
    redis_port = os.getenv("REDIS_PORT")

    return {
        "environment": os.getenv("ENVIRONMENT", "development"),
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "json_logs": _env_flag("JSON_LOGS"),
        "cache": {
            "backend": os.getenv("CACHE_BACKEND", "redis"),
            "namespace": os.getenv("CACHE_NAMESPACE", ""),
            "ttl_seconds": os.getenv("CACHE_TTL_SECONDS", str(DEFAULT_TTL_SECONDS)),
            "redis_url": os.getenv("REDIS_URL") or None,
            "redis_host": os.getenv("REDIS_HOST") or None,
            "redis_port": redis_port or None,
            "redis_max_connections": os.getenv("REDIS_MAX_CONNECTIONS", "10"),
            "redis_socket_timeout": os.getenv("REDIS_SOCKET_TIMEOUT", "5"),
            "disable_error_listeners": _env_flag("CACHE_DISABLE_ERROR_LISTENERS"),
            "cooldown_seconds": os.getenv("CACHE_COOLDOWN_SECONDS", str(DEFAULT_COOLDOWN_SECONDS)),
        },
    }


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> HelperSettings:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated HelperSettings instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info("Loading environment from %s", env_path)
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                "Failed to load .env file from %s: %s",
                env_path,
                e,
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    config_dict = _build_config_dict()

    try:
        _config_instance = HelperSettings(**config_dict)
    except ValidationError as e:
        logger.error(
            "Configuration validation failed: %s",
            e,
            extra={"validation_errors": e.errors()},
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables.",
            details={"validation_errors": e.errors()},
        ) from e

    logger.info(
        "Configuration loaded (environment: %s, backend: %s)",
        _config_instance.environment,
        _config_instance.cache.backend.value,
        extra={"environment": _config_instance.environment, "backend": _config_instance.cache.backend.value},
    )
    return _config_instance


def get_config() -> HelperSettings:
    """
    Get the current configuration instance, loading it on first access.

    Returns:
        Current HelperSettings instance
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> HelperSettings:
    """
    Force reload configuration.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded HelperSettings instance
    """
    return load_config(env_file=env_file, reload=True)


def reset_config() -> None:
    """Drop the cached configuration instance. Used by tests."""
    global _config_instance
    _config_instance = None
