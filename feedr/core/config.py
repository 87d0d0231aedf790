from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

THEMES = ("light", "dark", "warm")


def _getenv(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


def _getbool(name: str, default: bool) -> bool:
    raw = _getenv(name, "true" if default else "false").lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


def _getfloat(name: str, default: str) -> float:
    raw = _getenv(name, default)
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number (got {raw!r})") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive (got {raw!r})")
    return value


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    app_base_url: str
    data_path: str | None
    redis_url: str | None
    session_signing_key: str | None
    cookie_secure: bool
    embed_timeout_seconds: float
    embed_cache_ttl_seconds: int
    theme: str

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "3001")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    app_base_url = _getenv("APP_BASE_URL", "") or f"http://localhost:{port}"

    # DATA_PATH="" keeps everything in memory (tests, throwaway demos)
    data_path = _getenv("DATA_PATH", "data/db.json") or None
    redis_url = _getenv("REDIS_URL", "") or None

    session_signing_key = _getenv("SESSION_SIGNING_KEY", "") or None
    if app_env_raw == "prod" and session_signing_key is None:
        raise ValueError("SESSION_SIGNING_KEY is required when APP_ENV=prod")

    theme = _getenv("FEEDR_THEME", "light").lower()
    if theme not in THEMES:
        raise ValueError(f"FEEDR_THEME must be one of {'|'.join(THEMES)} (got {theme!r})")

    cache_ttl_raw = _getenv("EMBED_CACHE_TTL_SECONDS", "86400")
    try:
        embed_cache_ttl_seconds = int(cache_ttl_raw)
    except ValueError:
        raise ValueError(
            f"EMBED_CACHE_TTL_SECONDS must be an integer (got {cache_ttl_raw!r})"
        ) from None

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_getbool("LOG_JSON", False),
        port=port,
        app_base_url=app_base_url.rstrip("/"),
        data_path=data_path,
        redis_url=redis_url,
        session_signing_key=session_signing_key,
        cookie_secure=_getbool("COOKIE_SECURE", app_env_raw == "prod"),
        embed_timeout_seconds=_getfloat("EMBED_TIMEOUT_SECONDS", "5"),
        embed_cache_ttl_seconds=embed_cache_ttl_seconds,
        theme=theme,
    )


SETTINGS = load_settings()
