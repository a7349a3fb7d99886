"""
redis-helpers — Configuration Loader Tests
"""

from pathlib import Path

import pytest

from redis_helpers.config import (
    CacheConfig,
    StoreBackend,
    get_config,
    load_config,
    reload_config,
)
from redis_helpers.errors import ConfigurationError

ENV_KEYS = (
    "CACHE_BACKEND",
    "CACHE_NAMESPACE",
    "CACHE_TTL_SECONDS",
    "REDIS_URL",
    "REDIS_HOST",
    "REDIS_PORT",
    "CACHE_DISABLE_ERROR_LISTENERS",
    "CACHE_COOLDOWN_SECONDS",
    "JSON_LOGS",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    # setenv first so that values written by load_dotenv are undone afterwards
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestLoadConfig:
    def test_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        config = load_config(reload=True)

        assert config.environment == "test"
        assert config.cache.backend is StoreBackend.REDIS
        assert config.cache.namespace == ""
        assert config.cache.ttl_seconds == 300
        assert config.cache.cooldown_seconds == 10.0
        assert config.cache.disable_error_listeners is False
        assert config.cache.has_connection_target is False

    def test_reads_environment(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("CACHE_NAMESPACE", "sessions")
        clean_env.setenv("CACHE_TTL_SECONDS", "60")
        clean_env.setenv("REDIS_HOST", "cache.internal")
        clean_env.setenv("REDIS_PORT", "6380")
        clean_env.setenv("CACHE_DISABLE_ERROR_LISTENERS", "yes")
        clean_env.setenv("CACHE_COOLDOWN_SECONDS", "2.5")

        cache = load_config(reload=True).cache

        assert cache.namespace == "sessions"
        assert cache.ttl_seconds == 60
        assert cache.redis_host == "cache.internal"
        assert cache.redis_port == 6380
        assert cache.disable_error_listeners is True
        assert cache.cooldown_seconds == 2.5
        assert cache.has_connection_target is True

    def test_env_file(self, clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
        env_file = tmp_path / "custom.env"
        env_file.write_text("CACHE_BACKEND=memory\nCACHE_NAMESPACE=from-file\nJSON_LOGS=true\n")

        config = load_config(env_file=str(env_file), reload=True)

        assert config.cache.backend is StoreBackend.MEMORY
        assert config.cache.namespace == "from-file"
        assert config.json_logs is True

    def test_invalid_value(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("CACHE_TTL_SECONDS", "five minutes")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(reload=True)

        assert "validation_errors" in exc_info.value.details

    def test_invalid_cooldown(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("CACHE_COOLDOWN_SECONDS", "0")

        with pytest.raises(ConfigurationError):
            load_config(reload=True)

    def test_singleton_and_reload(self, clean_env: pytest.MonkeyPatch) -> None:
        first = get_config()
        assert get_config() is first

        clean_env.setenv("CACHE_NAMESPACE", "changed")
        assert get_config().cache.namespace == ""

        assert reload_config().cache.namespace == "changed"


class TestCacheConfig:
    def test_connection_target(self) -> None:
        assert CacheConfig(backend=StoreBackend.MEMORY).has_connection_target is True
        assert CacheConfig(redis_url="redis://localhost:6379/0").has_connection_target is True
        assert CacheConfig(redis_host="localhost").has_connection_target is False
        assert CacheConfig(redis_host="localhost", redis_port=6379).has_connection_target is True

    def test_namespace_whitespace_stripped(self) -> None:
        assert CacheConfig(namespace="  users ").namespace == "users"

    def test_non_positive_ttl_is_accepted(self) -> None:
        assert CacheConfig(ttl_seconds=-1).ttl_seconds == -1

    def test_frozen(self) -> None:
        config = CacheConfig()
        with pytest.raises(ValueError):
            config.namespace = "other"  # type: ignore[misc]
