from __future__ import annotations

import pytest

from feedr.core.config import load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "APP_ENV",
        "LOG_LEVEL",
        "LOG_JSON",
        "PORT",
        "APP_BASE_URL",
        "DATA_PATH",
        "REDIS_URL",
        "SESSION_SIGNING_KEY",
        "COOKIE_SECURE",
        "EMBED_TIMEOUT_SECONDS",
        "EMBED_CACHE_TTL_SECONDS",
        "FEEDR_THEME",
    ):
        monkeypatch.delenv(name, raising=False)


# ---- valid values ----


def test_load_settings_defaults() -> None:
    settings = load_settings()
    assert settings.app_env == "dev"
    assert settings.log_level == "info"
    assert settings.port == 3001
    assert settings.app_base_url == "http://localhost:3001"
    assert settings.data_path == "data/db.json"
    assert settings.redis_url is None
    assert settings.cookie_secure is False
    assert settings.embed_timeout_seconds == 5.0
    assert settings.embed_cache_ttl_seconds == 86400
    assert settings.theme == "light"


def test_load_settings_respects_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "error")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("APP_BASE_URL", "https://walls.example.com/")
    monkeypatch.setenv("DATA_PATH", "")
    monkeypatch.setenv("FEEDR_THEME", "dark")
    monkeypatch.setenv("EMBED_TIMEOUT_SECONDS", "2.5")
    settings = load_settings()
    assert settings.app_env == "test"
    assert settings.log_level == "error"
    assert settings.port == 8080
    assert settings.app_base_url == "https://walls.example.com"
    assert settings.data_path is None
    assert settings.theme == "dark"
    assert settings.embed_timeout_seconds == 2.5


def test_load_settings_normalizes_case(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "TEST")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("FEEDR_THEME", " Warm ")
    settings = load_settings()
    assert settings.app_env == "test"
    assert settings.log_level == "debug"
    assert settings.theme == "warm"


def test_prod_requires_signing_key_and_defaults_to_secure_cookies(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    with pytest.raises(ValueError, match="SESSION_SIGNING_KEY"):
        load_settings()

    monkeypatch.setenv("SESSION_SIGNING_KEY", "pem-goes-here")
    settings = load_settings()
    assert settings.is_prod
    assert settings.cookie_secure is True


# ---- invalid values ----


def test_load_settings_rejects_invalid_app_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "staging")
    with pytest.raises(ValueError, match="APP_ENV must be dev|test|prod"):
        load_settings()


def test_load_settings_rejects_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ValueError, match="LOG_LEVEL must be debug|info|warning|error"):
        load_settings()


def test_load_settings_rejects_unknown_theme(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FEEDR_THEME", "neon")
    with pytest.raises(ValueError, match="FEEDR_THEME"):
        load_settings()


@pytest.mark.parametrize("value", ["0", "-1", "soon"])
def test_load_settings_rejects_bad_embed_timeout(
    monkeypatch: pytest.MonkeyPatch, value: str
) -> None:
    monkeypatch.setenv("EMBED_TIMEOUT_SECONDS", value)
    with pytest.raises(ValueError, match="EMBED_TIMEOUT_SECONDS"):
        load_settings()


def test_load_settings_rejects_bad_boolean(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_JSON", "maybe")
    with pytest.raises(ValueError, match="LOG_JSON must be a boolean"):
        load_settings()


def test_load_settings_rejects_non_integer_port(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "http")
    with pytest.raises(ValueError, match="PORT must be an integer"):
        load_settings()
