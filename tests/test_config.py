"""Settings loading and DSN assembly."""

import pytest

from core import db
from core.config import Settings, load_settings


def test_defaults(monkeypatch):
    for name in ("PORT", "JWT_SECRET", "AUTH_REQUIRED", "RATE_LIMIT_MAX", "DB_POOL_MAX_SIZE"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.port == 5000
    assert settings.db_pool_max_size == 10
    assert settings.rate_limit_max == 100
    assert settings.rate_limit_window_s == 900
    assert settings.access_token_ttl_s == 3600
    assert settings.auth_required is True


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("JWT_SECRET", "from-env")
    monkeypatch.setenv("AUTH_REQUIRED", "false")
    monkeypatch.setenv("VALIDATION_ENABLED", "0")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("DB_COMMAND_TIMEOUT", "not-a-number")

    settings = load_settings()

    assert settings.port == 8080
    assert settings.jwt_secret == "from-env"
    assert settings.auth_required is False
    assert settings.validation_enabled is False
    assert settings.cors_origins == ("http://a.test", "http://b.test")
    assert settings.db_command_timeout is None


def test_database_url_from_parts():
    settings = Settings(db_host="db", db_user="app", db_password="p@ss word", db_name="planning")

    assert db.database_url(settings) == "postgresql://app:p%40ss%20word@db:5432/planning"


def test_database_url_override_drops_sslmode():
    settings = Settings(database_url="postgresql://u:p@h:5432/d?sslmode=require&application_name=x")

    assert db.database_url(settings) == "postgresql://u:p@h:5432/d?application_name=x"


def test_database_url_requires_name():
    with pytest.raises(RuntimeError):
        db.database_url(Settings())
