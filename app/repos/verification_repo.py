"""Verification log persistence.  Rows are only ever appended."""

from __future__ import annotations

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import VerificationRow
from app.models.credential import VerificationRecord


class VerificationRepo(Protocol):
    async def append(
        self,
        *,
        credential_data: str,
        verified_by: str,
        verified_at: str,
        is_valid: bool,
        issued_by: str | None,
        issued_at: str | None,
    ) -> VerificationRecord: ...

    async def list_recent(self, limit: int) -> list[VerificationRecord]: ...


class SqlVerificationRepo:
    """Satisfies the VerificationRepo Protocol using SQLite via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(
        self,
        *,
        credential_data: str,
        verified_by: str,
        verified_at: str,
        is_valid: bool,
        issued_by: str | None,
        issued_at: str | None,
    ) -> VerificationRecord:
        row = VerificationRow(
            credential_data=credential_data,
            verified_by=verified_by,
            verified_at=verified_at,
            is_valid=1 if is_valid else 0,
            issued_by=issued_by,
            issued_at=issued_at,
        )
        self._session.add(row)
        await self._session.flush()
        return _row_to_record(row)

    async def list_recent(self, limit: int) -> list[VerificationRecord]:
        # id breaks ties between rows written in the same millisecond
        stmt = (
            select(VerificationRow)
            .order_by(VerificationRow.verified_at.desc(), VerificationRow.id.desc())
            .limit(limit)
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_record(r) for r in rows]


def _row_to_record(row: VerificationRow) -> VerificationRecord:
    return VerificationRecord(
        id=row.id,
        credential_data=row.credential_data,
        verified_by=row.verified_by,
        verified_at=row.verified_at,
        is_valid=row.is_valid,
        issued_by=row.issued_by,
        issued_at=row.issued_at,
    )
