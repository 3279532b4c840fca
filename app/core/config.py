from __future__ import annotations

import os
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]
CredentialIdMode = Literal["canonical", "raw"]

DEFAULT_ISSUANCE_DB_PATH = "./data/issuance.db"
DEFAULT_VERIFICATION_DB_PATH = "./data/verification.db"


def _getenv(name: str, default: str) -> str:
    # Centralize env access so it's easy to extend later (type casting, required vars)
    return os.environ.get(name, default).strip()


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("", "0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int | None
    worker_id: str
    issuance_db_path: Path
    verification_db_path: Path
    shared_db_path: Path
    issuance_lookup_url: str | None
    lookup_timeout_seconds: float
    credential_id_mode: CredentialIdMode
    cors_origins: tuple[str, ...]

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
    port_raw = _getenv("PORT", "")
    id_mode_raw = _getenv("CREDENTIAL_ID_MODE", "canonical").lower()
    timeout_raw = _getenv("LOOKUP_TIMEOUT_SECONDS", "2.0")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    if id_mode_raw not in ("canonical", "raw"):
        raise ValueError(
            f"CREDENTIAL_ID_MODE must be canonical|raw (got {id_mode_raw!r})"
        )

    port: int | None = None
    if port_raw:
        try:
            port = int(port_raw)
        except ValueError:
            raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    try:
        lookup_timeout = float(timeout_raw)
    except ValueError:
        raise ValueError(
            f"LOOKUP_TIMEOUT_SECONDS must be a number (got {timeout_raw!r})"
        ) from None
    if lookup_timeout <= 0:
        raise ValueError(
            f"LOOKUP_TIMEOUT_SECONDS must be positive (got {timeout_raw!r})"
        )

    issuance_db_path = Path(_getenv("ISSUANCE_DB_PATH", DEFAULT_ISSUANCE_DB_PATH))
    verification_db_path = Path(
        _getenv("VERIFICATION_DB_PATH", DEFAULT_VERIFICATION_DB_PATH)
    )
    # The verifier reads the issuer's file; on a single host that is the same
    # path, in a cluster it is wherever the shared volume is mounted.
    shared_raw = _getenv("SHARED_DB_PATH", "")
    shared_db_path = Path(shared_raw) if shared_raw else issuance_db_path

    cors_raw = _getenv("CORS_ORIGINS", "http://localhost:5173")
    cors_origins = tuple(o.strip() for o in cors_raw.split(",") if o.strip())

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_parse_bool("LOG_JSON", _getenv("LOG_JSON", "false")),
        port=port,
        worker_id=_getenv("WORKER_ID", "") or socket.gethostname(),
        issuance_db_path=issuance_db_path,
        verification_db_path=verification_db_path,
        shared_db_path=shared_db_path,
        issuance_lookup_url=_getenv("ISSUANCE_LOOKUP_URL", "") or None,
        lookup_timeout_seconds=lookup_timeout,
        credential_id_mode=id_mode_raw,
        cors_origins=cors_origins,
    )


# Optional: module-level singleton so imports are cheap
SETTINGS = load_settings()
