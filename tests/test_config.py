"""配置与日志配置的测试。"""

import logging

from scaffold.core.config import BASE_DIR, Settings
from scaffold.core.logger import RequestIdFilter, build_logging_config, set_request_id


def test_database_url_override_wins():
    settings = Settings(DATABASE_URL="sqlite:///./demo.db")
    assert settings.sql_database_url == "sqlite:///./demo.db"
    assert settings.is_sqlite


def test_postgres_url_is_assembled_from_parts():
    settings = Settings(
        DATABASE_URL=None,
        DATABASE_HOST="db",
        DATABASE_PORT=5433,
        DATABASE_USER="app",
        DATABASE_PASSWORD="secret",
        DATABASE_NAME="crud",
    )
    assert settings.sql_database_url == "postgresql+psycopg2://app:secret@db:5433/crud"
    assert not settings.is_sqlite


def test_csv_settings_are_split():
    settings = Settings(
        CORS_ALLOW_ORIGINS="https://a.example.com, https://b.example.com,",
        RATE_LIMIT_EXEMPT_PREFIXES="/health,/docs",
    )
    assert settings.cors_allow_origins == ["https://a.example.com", "https://b.example.com"]
    assert settings.rate_limit_exempt_prefixes == ["/health", "/docs"]


def test_empty_cors_falls_back_to_wildcard():
    assert Settings(CORS_ALLOW_ORIGINS="").cors_allow_origins == ["*"]


def test_relative_log_dir_resolves_under_project_root():
    settings = Settings(LOG_DIR="log", LOG_FILE_NAME="service.log")
    assert settings.log_file_path == BASE_DIR / "log" / "service.log"


def test_unknown_timezone_falls_back_to_utc():
    assert str(Settings(TIMEZONE="Mars/Olympus").timezone_info) == "UTC"


def test_logging_config_rotates_files():
    settings = Settings(LOG_ROTATE_WHEN="H", LOG_BACKUP_COUNT=3, LOG_LEVEL="WARNING")
    handler = build_logging_config(settings)["handlers"]["file"]
    assert handler["class"] == "logging.handlers.TimedRotatingFileHandler"
    assert handler["when"] == "H"
    assert handler["backupCount"] == 3
    assert handler["level"] == "WARNING"


def test_logging_config_switches_to_json():
    config = build_logging_config(Settings(LOG_JSON=True))
    assert config["handlers"]["default"]["formatter"] == "json"
    assert config["handlers"]["file"]["formatter"] == "json"


def test_request_id_filter_injects_context_value():
    set_request_id("req-123")
    record = logging.LogRecord("scaffold", logging.INFO, __file__, 1, "hello", None, None)
    assert RequestIdFilter().filter(record) is True
    assert record.request_id == "req-123"
    set_request_id(None)


def test_file_formatter_shares_console_format_without_colors():
    formatters = build_logging_config(Settings(LOG_JSON=False))["formatters"]
    assert formatters["file"]["format"] == formatters["console"]["format"]
    assert formatters["file"]["use_colors"] is False
    assert "%(request_id)s" in formatters["console"]["format"]
