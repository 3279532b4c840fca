"""Verification store: an append-only log of verification attempts.

Unlike issuance there is no "already exists" path: verifying the same
credential twice writes two rows.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.core.metrics import VERIFICATIONS
from app.db.engine import StoreHandle
from app.models.credential import VerificationRecord, VerificationResult, utc_now_iso
from app.repos.verification_repo import SqlVerificationRepo
from app.services.identity import serialize_credential

DEFAULT_HISTORY_LIMIT = 10
MAX_HISTORY_LIMIT = 1000

VALID_MESSAGE = "Credential is valid"
INVALID_MESSAGE = "Credential not found or invalid"


class VerificationStore:
    def __init__(self, handle: StoreHandle, *, worker_id: str) -> None:
        self._handle = handle
        self._worker_id = worker_id

    @property
    def worker_id(self) -> str:
        return self._worker_id

    async def record_verification(
        self,
        data: Mapping[str, Any],
        is_valid: bool,
        issued_by: str | None = None,
        issued_at: str | None = None,
    ) -> VerificationResult:
        verified_at = utc_now_iso()
        async with self._handle.session_factory() as session:
            await SqlVerificationRepo(session).append(
                credential_data=serialize_credential(data),
                verified_by=self._worker_id,
                verified_at=verified_at,
                is_valid=is_valid,
                issued_by=issued_by,
                issued_at=issued_at,
            )
            await session.commit()

        VERIFICATIONS.labels(result="valid" if is_valid else "not_found").inc()
        return VerificationResult(
            valid=is_valid,
            message=VALID_MESSAGE if is_valid else INVALID_MESSAGE,
            issued_by=issued_by,
            issued_at=issued_at,
            verified_by=self._worker_id,
            verified_at=verified_at,
        )

    async def history(self, limit: int = DEFAULT_HISTORY_LIMIT) -> list[VerificationRecord]:
        """Most recent verifications first, at most *limit* of them."""
        if limit <= 0:
            raise ValueError(f"limit must be positive (got {limit})")
        async with self._handle.session_factory() as session:
            return await SqlVerificationRepo(session).list_recent(limit)
