"""Unit tests for configuration module."""

from __future__ import annotations

import pytest

from db_orm.infrastructure.config import (
    Config,
    DatabaseConfig,
    ObservabilityConfig,
    get_config,
)


@pytest.mark.unit
class TestConfig:
    """Tests for Config class."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()

        assert config.database.dialect == "sqlite"
        assert config.database.path == ":memory:"
        assert config.database.foreign_keys is True
        assert config.observability.log_format == "json"
        assert config.observability.metrics_port is None

    def test_custom_database_config(self) -> None:
        """Test custom database configuration."""
        database = DatabaseConfig(path="/tmp/app.db", timeout_seconds=1.5)

        assert database.path == "/tmp/app.db"
        assert database.timeout_seconds == 1.5

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nested settings are read from DB_ORM_ prefixed variables."""
        monkeypatch.setenv("DB_ORM_DATABASE__PATH", "orm.sqlite")
        monkeypatch.setenv("DB_ORM_OBSERVABILITY__LOG_LEVEL", "DEBUG")

        config = Config()

        assert config.database.path == "orm.sqlite"
        assert config.observability.log_level == "DEBUG"

    def test_invalid_timeout(self) -> None:
        """Test that a negative timeout raises validation error."""
        with pytest.raises(ValueError):
            DatabaseConfig(timeout_seconds=-1)

    def test_invalid_metrics_port(self) -> None:
        with pytest.raises(ValueError):
            ObservabilityConfig(metrics_port=70000)

    def test_log_formats(self) -> None:
        """Test valid log formats."""
        for log_format in ["json", "console"]:
            observability = ObservabilityConfig(log_format=log_format)  # type: ignore
            assert observability.log_format == log_format


@pytest.mark.unit
class TestConfigSingleton:
    """Tests for get_config singleton."""

    def test_get_config_returns_same_instance(self) -> None:
        """Test that get_config returns the same instance."""
        config1 = get_config()
        config2 = get_config()
        assert config1 is config2
