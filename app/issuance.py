"""Issuance service.

RUN:  uvicorn app.issuance:app --port 3001
  or  python -m app.issuance
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.issue import router as issue_router
from app.core.config import SETTINGS, Settings
from app.core.logging import setup_logging
from app.db.engine import lifespan_store
from app.db.tables import CredentialRow
from app.main import build_app, run
from app.services.issuance_store import IssuanceStore

SERVICE_NAME = "issuance"
DEFAULT_PORT = 3001

setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)


def create_app(settings: Settings = SETTINGS) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        async with lifespan_store(
            settings.issuance_db_path, [CredentialRow.__table__]
        ) as handle:
            app.state.issuance_store = IssuanceStore(
                handle,
                worker_id=settings.worker_id,
                id_mode=settings.credential_id_mode,
            )
            logger.info(
                "issuance service ready  env=%s worker=%s db=%s id_mode=%s",
                settings.app_env,
                settings.worker_id,
                settings.issuance_db_path,
                settings.credential_id_mode,
            )
            yield

    return build_app(
        SERVICE_NAME,
        settings,
        lifespan=lifespan,
        routers=[issue_router],
    )


app = create_app()


if __name__ == "__main__":
    run("app.issuance:app", SETTINGS, default_port=DEFAULT_PORT)
