"""
Process settings read from the environment.

Settings are built once (see `get_settings`) and stored on `app.state` by
`main.create_app`, so request code reads the same instance for the whole
process lifetime.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_JWT_SECRET = "dev-change-this-secret"


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = ""
    db_password: str = ""
    db_name: str = ""
    database_url: str = ""
    db_pool_max_size: int = 10
    db_command_timeout: float | None = None

    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Variant switches: the same routes run with or without the auth gate
    # and the body validator.
    auth_required: bool = True
    validation_enabled: bool = True

    rate_limit_max: int = 100
    rate_limit_window_s: int = 15 * 60

    cors_origins: tuple[str, ...] = ("*",)

    host: str = "localhost"
    port: int = 5000
    log_level: str = "INFO"

    @property
    def access_token_ttl_s(self) -> int:
        return self.access_token_expire_minutes * 60


def load_settings() -> Settings:
    return Settings(
        db_host=_env_str("DB_HOST", "localhost"),
        db_port=_env_int("DB_PORT", 5432),
        db_user=_env_str("DB_USER"),
        db_password=os.environ.get("DB_PASSWORD", ""),
        db_name=_env_str("DB_NAME"),
        database_url=_env_str("DATABASE_URL"),
        db_pool_max_size=_env_int("DB_POOL_MAX_SIZE", 10),
        db_command_timeout=_env_float("DB_COMMAND_TIMEOUT"),
        jwt_secret=_env_str("JWT_SECRET", DEFAULT_JWT_SECRET),
        jwt_algorithm=_env_str("JWT_ALG", "HS256"),
        access_token_expire_minutes=_env_int("ACCESS_TOKEN_EXPIRE_MIN", 60),
        auth_required=_env_bool("AUTH_REQUIRED", True),
        validation_enabled=_env_bool("VALIDATION_ENABLED", True),
        rate_limit_max=_env_int("RATE_LIMIT_MAX", 100),
        rate_limit_window_s=_env_int("RATE_LIMIT_WINDOW_S", 15 * 60),
        cors_origins=tuple(_env_list("CORS_ORIGINS", ["*"])),
        host=_env_str("HOST", "localhost"),
        port=_env_int("PORT", 5000),
        log_level=_env_str("LOG_LEVEL", "INFO"),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
