"""
redis-helpers — Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
All configuration is defined here and validated when loaded.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TTL_SECONDS = 300
DEFAULT_COOLDOWN_SECONDS = 10.0


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class StoreBackend(str, Enum):
    """Supported store backends."""

    REDIS = "redis"
    MEMORY = "memory"  # Process-local, for development and tests


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CacheConfig(BaseModel):
    """Cache container and store connection configuration."""

    backend: StoreBackend = Field(default=StoreBackend.REDIS, description="Store backend to connect to")
    namespace: str = Field(default="", description="Key prefix; keys are '<namespace>:<id>'")
    ttl_seconds: int = Field(
        default=DEFAULT_TTL_SECONDS,
        description="TTL applied to every write (<= 0 disables expiry for keyed list caches)",
    )

    # Connection target (used only when no existing client is supplied)
    redis_url: str | None = Field(default=None, description="Redis connection URL")
    redis_host: str | None = Field(default=None, description="Redis host (with redis_port)")
    redis_port: int | None = Field(default=None, ge=1, le=65535, description="Redis port (with redis_host)")
    redis_max_connections: int = Field(default=10, ge=1, description="Redis connection pool size")
    redis_socket_timeout: float = Field(default=5.0, gt=0, description="Redis socket timeout in seconds")

    # Resilience
    disable_error_listeners: bool = Field(
        default=False,
        description="Do not attach to the client's connectivity error channel",
    )
    cooldown_seconds: float = Field(
        default=DEFAULT_COOLDOWN_SECONDS,
        gt=0,
        description="Seconds before a cache disabled by a timeout is re-enabled",
    )

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Namespace is used verbatim; only surrounding whitespace is stripped."""
        return v.strip()

    @property
    def has_connection_target(self) -> bool:
        """True when enough information is present to open a store connection."""
        if self.backend == StoreBackend.MEMORY:
            return True
        return bool(self.redis_url) or bool(self.redis_host and self.redis_port)

    model_config = ConfigDict(frozen=True)


class HelperSettings(BaseModel):
    """Root configuration for redis-helpers."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    json_logs: bool = Field(default=False, description="Emit log records as JSON")

    cache: CacheConfig = Field(default_factory=CacheConfig)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)
