"""Verification service.

RUN:  uvicorn app.verification:app --port 3002
  or  python -m app.verification

Reads the issuance service's database at SHARED_DB_PATH (defaults to
ISSUANCE_DB_PATH), or calls the issuance service when ISSUANCE_LOOKUP_URL
is set.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.verify import router as verify_router
from app.core.config import SETTINGS, Settings
from app.core.logging import setup_logging
from app.db.engine import lifespan_store
from app.db.tables import VerificationRow
from app.main import build_app, run
from app.services.issuance_lookup import build_issuance_lookup
from app.services.verification_store import VerificationStore

SERVICE_NAME = "verification"
DEFAULT_PORT = 3002

setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)


def create_app(settings: Settings = SETTINGS) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        async with lifespan_store(
            settings.verification_db_path, [VerificationRow.__table__]
        ) as handle:
            app.state.verification_store = VerificationStore(
                handle, worker_id=settings.worker_id
            )
            app.state.issuance_lookup = build_issuance_lookup(settings)
            logger.info(
                "verification service ready  env=%s worker=%s db=%s issuance=%s",
                settings.app_env,
                settings.worker_id,
                settings.verification_db_path,
                settings.issuance_lookup_url or settings.shared_db_path,
            )
            yield

    return build_app(
        SERVICE_NAME,
        settings,
        lifespan=lifespan,
        routers=[verify_router],
    )


app = create_app()


if __name__ == "__main__":
    run("app.verification:app", SETTINGS, default_port=DEFAULT_PORT)
