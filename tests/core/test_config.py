from __future__ import annotations

import socket
from pathlib import Path

import pytest

from app.core.config import AppEnv, Settings, load_settings

_ENV_VARS = (
    "APP_ENV",
    "LOG_LEVEL",
    "LOG_JSON",
    "PORT",
    "WORKER_ID",
    "ISSUANCE_DB_PATH",
    "VERIFICATION_DB_PATH",
    "SHARED_DB_PATH",
    "ISSUANCE_LOOKUP_URL",
    "LOOKUP_TIMEOUT_SECONDS",
    "CREDENTIAL_ID_MODE",
    "CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# ---- valid values ----


def test_load_settings_defaults() -> None:
    settings = load_settings()
    assert settings.app_env == "dev"
    assert settings.log_level == "info"
    assert settings.log_json is False
    assert settings.port is None
    assert settings.worker_id == socket.gethostname()
    assert settings.issuance_db_path == Path("./data/issuance.db")
    assert settings.verification_db_path == Path("./data/verification.db")
    assert settings.shared_db_path == settings.issuance_db_path
    assert settings.issuance_lookup_url is None
    assert settings.credential_id_mode == "canonical"
    assert settings.cors_origins == ("http://localhost:5173",)


def test_load_settings_respects_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("LOG_LEVEL", "error")
    monkeypatch.setenv("LOG_JSON", "true")
    monkeypatch.setenv("PORT", "4001")
    monkeypatch.setenv("WORKER_ID", "pod-7")
    monkeypatch.setenv("ISSUANCE_DB_PATH", "/var/lib/issuance/issuance.db")
    monkeypatch.setenv("ISSUANCE_LOOKUP_URL", "http://issuance:3001")
    monkeypatch.setenv("CREDENTIAL_ID_MODE", "raw")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    settings = load_settings()
    assert settings.app_env == "prod"
    assert settings.log_level == "error"
    assert settings.log_json is True
    assert settings.port == 4001
    assert settings.worker_id == "pod-7"
    assert settings.shared_db_path == Path("/var/lib/issuance/issuance.db")
    assert settings.issuance_lookup_url == "http://issuance:3001"
    assert settings.credential_id_mode == "raw"
    assert settings.cors_origins == ("https://a.example", "https://b.example")


def test_shared_db_path_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHARED_DB_PATH", "/mnt/shared/issuance.db")
    settings = load_settings()
    assert settings.shared_db_path == Path("/mnt/shared/issuance.db")
    assert settings.issuance_db_path == Path("./data/issuance.db")


def test_load_settings_normalizes_case(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "PROD")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("CREDENTIAL_ID_MODE", "RAW")
    settings = load_settings()
    assert settings.app_env == "prod"
    assert settings.log_level == "debug"
    assert settings.credential_id_mode == "raw"


def test_load_settings_strips_whitespace(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "  test  ")
    monkeypatch.setenv("LOG_LEVEL", "  warning  ")
    settings = load_settings()
    assert settings.app_env == "test"
    assert settings.log_level == "warning"


# ---- invalid values ----


def test_load_settings_rejects_invalid_app_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "staging")
    with pytest.raises(ValueError, match="APP_ENV must be dev|test|prod"):
        load_settings()


def test_load_settings_rejects_invalid_log_level(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ValueError, match="LOG_LEVEL must be debug|info|warning|error"):
        load_settings()


def test_load_settings_rejects_bad_port(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "http")
    with pytest.raises(ValueError, match="PORT must be an integer"):
        load_settings()


def test_load_settings_rejects_bad_id_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CREDENTIAL_ID_MODE", "sorted")
    with pytest.raises(ValueError, match="CREDENTIAL_ID_MODE must be canonical|raw"):
        load_settings()


def test_load_settings_rejects_bad_log_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_JSON", "maybe")
    with pytest.raises(ValueError, match="LOG_JSON must be a boolean"):
        load_settings()


@pytest.mark.parametrize("raw", ["soon", "0", "-1"])
def test_load_settings_rejects_bad_timeout(
    monkeypatch: pytest.MonkeyPatch, raw: str
) -> None:
    monkeypatch.setenv("LOOKUP_TIMEOUT_SECONDS", raw)
    with pytest.raises(ValueError, match="LOOKUP_TIMEOUT_SECONDS"):
        load_settings()


# ---- Settings properties ----


def _make_settings(app_env: AppEnv = "dev") -> Settings:
    return Settings(  # type: ignore[arg-type]
        app_env=app_env,
        log_level="info",
        log_json=False,
        port=None,
        worker_id="w",
        issuance_db_path=Path("i.db"),
        verification_db_path=Path("v.db"),
        shared_db_path=Path("i.db"),
        issuance_lookup_url=None,
        lookup_timeout_seconds=2.0,
        credential_id_mode="canonical",
        cors_origins=(),
    )


def test_settings_env_flags() -> None:
    assert _make_settings("dev").is_dev is True
    assert _make_settings("test").is_test is True
    assert _make_settings("prod").is_prod is True
    assert _make_settings("prod").is_dev is False


def test_settings_is_frozen() -> None:
    s = _make_settings()
    with pytest.raises(AttributeError):
        s.app_env = "prod"  # type: ignore[misc]
