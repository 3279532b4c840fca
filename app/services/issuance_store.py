"""Issuance store: at most one issued record per credential identifier.

State per identifier:  absent → issued.  There is no transition out of
"issued": records are never updated or deleted.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from app.core.config import CredentialIdMode
from app.core.metrics import CREDENTIALS_ISSUED
from app.db.engine import StoreHandle
from app.models.credential import IssuedCredential, IssueResult, utc_now_iso
from app.repos.credential_repo import SqlCredentialRepo
from app.services.identity import credential_id, serialize_credential

logger = logging.getLogger(__name__)

ALREADY_ISSUED_MESSAGE = "Credential already issued"


class IssuanceStore:
    def __init__(
        self,
        handle: StoreHandle,
        *,
        worker_id: str,
        id_mode: CredentialIdMode = "canonical",
    ) -> None:
        self._handle = handle
        self._worker_id = worker_id
        self._id_mode = id_mode

    @property
    def worker_id(self) -> str:
        return self._worker_id

    async def issue(self, data: Mapping[str, Any]) -> IssueResult:
        """Issue *data* unless an identical credential was issued before.

        A duplicate is a normal outcome, not an error: the existing issuer
        is reported and nothing is written.  Persistence errors propagate.
        """
        cred = IssuedCredential(
            id=credential_id(data, self._id_mode),
            data=serialize_credential(data),
            issued_by=self._worker_id,
            issued_at=utc_now_iso(),
        )

        async with self._handle.session_factory() as session:
            repo = SqlCredentialRepo(session)
            inserted = await repo.add_if_absent(cred)
            if inserted:
                await session.commit()
                existing = None
            else:
                existing = await repo.get_by_id(cred.id)

        if inserted:
            CREDENTIALS_ISSUED.labels(result="issued").inc()
            logger.info("Issued credential by worker=%s", self._worker_id)
            return IssueResult(
                accepted=True,
                already_issued=False,
                issued_by=cred.issued_by,
                issued_at=cred.issued_at,
                message=f"credential issued by {cred.issued_by}",
            )

        if existing is None:
            # The conflicting row vanished between the insert and the read,
            # which cannot happen in an append-only table.
            raise RuntimeError(f"credential {cred.id!r} conflicted but is not stored")

        CREDENTIALS_ISSUED.labels(result="duplicate").inc()
        logger.info("Rejected duplicate issuance (first issued by %s)", existing.issued_by)
        return IssueResult(
            accepted=False,
            already_issued=True,
            issued_by=existing.issued_by,
            issued_at=existing.issued_at,
            message=ALREADY_ISSUED_MESSAGE,
        )

    async def lookup(self, data: Mapping[str, Any]) -> IssuedCredential | None:
        async with self._handle.session_factory() as session:
            return await SqlCredentialRepo(session).get_by_id(
                credential_id(data, self._id_mode)
            )
