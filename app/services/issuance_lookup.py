"""How the verification service learns whether a credential was issued.

The verifier never writes to the issuance database and never keeps a
handle on it.  Two backends:

  SnapshotIssuanceLookup: opens the issuance service's SQLite file
    read-only for one query per verification, then closes it.  Every
    verification sees whatever the issuer last committed.  The file is
    reached through a shared path (same host) or a shared volume (cluster).

  HttpIssuanceLookup: asks the issuance service over HTTP
    (POST /api/lookup).  Used when ISSUANCE_LOOKUP_URL is configured, so
    the two services need not share a filesystem.

Both backends treat a lookup failure as "not issued": verification keeps
answering (with valid=false) while the issuance side is unreachable.
Failures are logged and counted so operators can tell the difference.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import CredentialIdMode, Settings
from app.core.metrics import SHARED_STORE_FAULTS
from app.db.engine import open_snapshot
from app.models.credential import IssuedCredential
from app.repos.credential_repo import SqlCredentialRepo
from app.services.identity import credential_id

logger = logging.getLogger(__name__)


class IssuanceLookup(Protocol):
    async def find(self, data: Mapping[str, Any]) -> IssuedCredential | None: ...


class SnapshotIssuanceLookup:
    """Read the issuance database file directly, one snapshot per call."""

    def __init__(self, path: Path, *, id_mode: CredentialIdMode = "canonical") -> None:
        self._path = path
        self._id_mode = id_mode

    @property
    def path(self) -> Path:
        return self._path

    async def find(self, data: Mapping[str, Any]) -> IssuedCredential | None:
        if not self._path.exists():
            # Nothing issued yet (or the volume is not mounted)
            logger.debug("Issuance store %s does not exist", self._path)
            return None

        key = credential_id(data, self._id_mode)
        try:
            async with open_snapshot(self._path) as conn:
                session = AsyncSession(bind=conn)
                try:
                    return await SqlCredentialRepo(session).get_by_id(key)
                finally:
                    await session.close()
        except (SQLAlchemyError, OSError):
            SHARED_STORE_FAULTS.labels(backend="snapshot").inc()
            logger.warning(
                "Could not read issuance store %s; treating as not issued",
                self._path,
                exc_info=True,
            )
            return None


class HttpIssuanceLookup:
    """Ask the issuance service's lookup endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    async def find(self, data: Mapping[str, Any]) -> IssuedCredential | None:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post("/api/lookup", json=dict(data))
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            body = resp.json()["credential"]
            return IssuedCredential(
                id=body["id"],
                data=body["data"],
                issued_by=body["issuedBy"],
                issued_at=body["issuedAt"],
            )
        except (httpx.HTTPError, ValueError, KeyError, TypeError):
            SHARED_STORE_FAULTS.labels(backend="http").inc()
            logger.warning(
                "Issuance lookup via %s failed; treating as not issued",
                self._base_url,
                exc_info=True,
            )
            return None


def build_issuance_lookup(settings: Settings) -> IssuanceLookup:
    """Pick the lookup backend from configuration.  The URL wins if set."""
    if settings.issuance_lookup_url:
        return HttpIssuanceLookup(
            settings.issuance_lookup_url,
            timeout=settings.lookup_timeout_seconds,
        )
    return SnapshotIssuanceLookup(
        settings.shared_db_path,
        id_mode=settings.credential_id_mode,
    )
