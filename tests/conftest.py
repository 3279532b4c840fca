from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

# Ensure repo root is on sys.path so `import app` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import issuance, verification  # noqa: E402
from app.core.config import Settings  # noqa: E402

JOHN = {"name": "John Doe", "email": "john@example.com", "course": "Kubernetes"}
NOBODY = {
    "name": "Non Existent",
    "email": "nonexistent@example.com",
    "course": "Test",
}


def make_settings(tmp_path: Path, **overrides: Any) -> Settings:
    """Settings pointing both services at databases under *tmp_path*."""
    values: dict[str, Any] = {
        "app_env": "test",
        "log_level": "info",
        "log_json": False,
        "port": None,
        "worker_id": "test-worker",
        "issuance_db_path": tmp_path / "issuance" / "issuance.db",
        "verification_db_path": tmp_path / "verification" / "verification.db",
        "issuance_lookup_url": None,
        "lookup_timeout_seconds": 2.0,
        "credential_id_mode": "canonical",
        "cors_origins": ("http://localhost:5173",),
    }
    values.update(overrides)
    values.setdefault("shared_db_path", values["issuance_db_path"])
    return Settings(**values)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def issuance_client(settings: Settings) -> Iterator[TestClient]:
    # Context manager so the lifespan opens (and closes) the store
    with TestClient(issuance.create_app(settings)) as c:
        yield c


@pytest.fixture
def verification_client(settings: Settings) -> Iterator[TestClient]:
    with TestClient(verification.create_app(settings)) as c:
        yield c
