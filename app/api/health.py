"""Liveness endpoint.

GET /api/health answers "is this process alive?".  It does not touch the
database: a slow or locked SQLite file should not get a live container
restarted.  Store faults surface as 500s on the data endpoints instead.
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel


class HealthOut(BaseModel):
    status: str
    service: str


def build_health_router(service: str) -> APIRouter:
    """Health router reporting *service* ("issuance" or "verification")."""
    router = APIRouter(prefix="/api", tags=["health"])

    @router.get("/health", response_model=HealthOut)
    async def health() -> HealthOut:
        return HealthOut(status="healthy", service=service)

    return router
