"""Tests for config and logging."""

import json
import logging
import os
import sys
from unittest.mock import patch

from loan_tracker.config import (
    DEFAULT_TIMEZONE,
    AppConfig,
    BackendConfig,
    BackendMode,
    PostgresConfig,
)
from loan_tracker.logging import JsonFormatter, get_logger, setup_logging


class TestBackendConfig:
    """Tests for BackendConfig."""

    def test_default_is_mock(self) -> None:
        config = BackendConfig()

        assert config.mode == BackendMode.MOCK
        assert not config.is_configured
        assert not config.has_admin
        assert config.timeout is None

    def test_url_and_anon_key_enable_connected_mode(self) -> None:
        config = BackendConfig(url="https://demo.supabase.co", anon_key="anon")

        assert config.mode == BackendMode.CONNECTED
        assert config.is_configured
        assert not config.has_admin

    def test_url_alone_is_not_enough(self) -> None:
        assert BackendConfig(url="https://demo.supabase.co").mode == BackendMode.MOCK

    def test_admin_is_independent_of_anon_key(self) -> None:
        config = BackendConfig(url="https://demo.supabase.co", service_role_key="service")

        assert config.mode == BackendMode.MOCK
        assert config.has_admin

    def test_api_urls(self) -> None:
        config = BackendConfig(url="https://demo.supabase.co/", anon_key="anon")

        assert config.rest_url == "https://demo.supabase.co/rest/v1"
        assert config.auth_url == "https://demo.supabase.co/auth/v1"


class TestPostgresConfig:
    def test_connection_string(self) -> None:
        config = PostgresConfig(host="db", port=6543, database="app", user="u", password="p")

        assert config.connection_string == "postgresql://u:p@db:6543/app"

    def test_url_takes_precedence(self) -> None:
        config = PostgresConfig(host="db", url="postgresql://other/db")

        assert config.connection_string == "postgresql://other/db"


class TestAppConfig:
    """Tests for AppConfig.from_env."""

    def test_from_env_default(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig.from_env()

        assert config.backend.mode == BackendMode.MOCK
        assert config.postgres.host == "localhost"
        assert config.timezone == DEFAULT_TIMEZONE
        assert config.log_level == "INFO"
        assert config.log_format == "standard"
        assert config.seed is None

    def test_from_env_custom(self) -> None:
        env_vars = {
            "SUPABASE_URL": "https://demo.supabase.co",
            "SUPABASE_ANON_KEY": "anon",
            "SUPABASE_SERVICE_ROLE_KEY": "service",
            "SUPABASE_EMAIL": "ana@logica.com",
            "SUPABASE_PASSWORD": "secret",
            "BACKEND_TIMEOUT": "2.5",
            "DATABASE_URL": "postgresql://u:p@db:5432/postgres",
            "LOG_LEVEL": "DEBUG",
            "LOG_FORMAT": "json",
            "TIMEZONE": "UTC",
            "SEED": "7",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            config = AppConfig.from_env()

        assert config.backend.mode == BackendMode.CONNECTED
        assert config.backend.has_admin
        assert config.backend.has_credentials
        assert config.backend.email == "ana@logica.com"
        assert config.backend.timeout == 2.5
        assert config.postgres.connection_string == "postgresql://u:p@db:5432/postgres"
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.timezone == "UTC"
        assert config.seed == 7

    def test_empty_values_count_as_unset(self) -> None:
        with patch.dict(os.environ, {"SUPABASE_URL": "", "SUPABASE_ANON_KEY": ""}, clear=True):
            config = AppConfig.from_env()

        assert config.backend.url is None
        assert config.backend.mode == BackendMode.MOCK


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        setup_logging()

        assert logging.getLogger("loan_tracker").level == logging.INFO

    def test_setup_logging_debug(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_invalid_level(self) -> None:
        setup_logging(level="INVALID")

        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        setup_logging(format_type="json")

        assert any(isinstance(h.formatter, JsonFormatter) for h in logging.getLogger().handlers)

    def test_setup_logging_replaces_handlers(self) -> None:
        root = logging.getLogger()
        root.addHandler(logging.StreamHandler())
        root.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(root.handlers) == 1

    def test_external_loggers_quieted(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("faker").level == logging.WARNING
        assert logging.getLogger("psycopg").level == logging.WARNING


class TestJsonFormatter:
    def test_format_basic(self) -> None:
        record = logging.LogRecord(
            name="loan_tracker.store",
            level=logging.INFO,
            pathname="/path/to/file.py",
            lineno=42,
            msg="Loaded %d companies",
            args=(3,),
            exc_info=None,
        )

        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "loan_tracker.store"
        assert data["message"] == "Loaded 3 companies"
        assert "timestamp" in data

    def test_keeps_accents(self) -> None:
        record = logging.LogRecord("x", logging.INFO, "f.py", 1, "Lógica", (), None)

        assert "Lógica" in JsonFormatter().format(record)

    def test_format_with_exception(self) -> None:
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, "f.py", 1, "failed", (), sys.exc_info())

        data = json.loads(JsonFormatter().format(record))

        assert "ValueError: bad" in data["exception"]


class TestGetLogger:
    def test_returns_named_logger(self) -> None:
        assert get_logger("loan_tracker.cli").name == "loan_tracker.cli"
