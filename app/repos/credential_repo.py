"""Issued-credential persistence."""

from __future__ import annotations

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import CredentialRow
from app.models.credential import IssuedCredential


class CredentialRepo(Protocol):
    async def get_by_id(self, credential_id: str) -> IssuedCredential | None: ...
    async def add_if_absent(self, credential: IssuedCredential) -> bool: ...


class SqlCredentialRepo:
    """Satisfies the CredentialRepo Protocol using SQLite via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, credential_id: str) -> IssuedCredential | None:
        stmt = select(CredentialRow).where(CredentialRow.id == credential_id)
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return _row_to_credential(row)

    async def add_if_absent(self, credential: IssuedCredential) -> bool:
        """Insert unless the id exists.  Returns True when a row was written.

        One statement, so two concurrent issuers of the same credential
        cannot both pass an existence check and both insert.
        """
        stmt = (
            sqlite_insert(CredentialRow)
            .values(
                id=credential.id,
                data=credential.data,
                issued_by=credential.issued_by,
                issued_at=credential.issued_at,
            )
            .on_conflict_do_nothing(index_elements=[CredentialRow.id])
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1  # type: ignore[attr-defined]


def _row_to_credential(row: CredentialRow) -> IssuedCredential:
    return IssuedCredential(
        id=row.id,
        data=row.data,
        issued_by=row.issued_by,
        issued_at=row.issued_at,
    )
