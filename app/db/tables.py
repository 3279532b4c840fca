"""SQLAlchemy table definitions.

These map to the frozen dataclass domain models in app/models/credential.py.
Repos convert between rows and dataclasses.

Each table lives in its own database file: `credentials` in the issuance
service's, `verifications` in the verification service's.  Timestamps are
stored as ISO-8601 text so the files stay readable by any SQLite client.
"""

from __future__ import annotations

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.engine import Base


class CredentialRow(Base):
    __tablename__ = "credentials"

    # Credential identifier (see app/services/identity.py)
    id: Mapped[str] = mapped_column(Text, primary_key=True)
    data: Mapped[str] = mapped_column(Text, nullable=False)
    issued_by: Mapped[str] = mapped_column(Text, nullable=False)
    issued_at: Mapped[str] = mapped_column(Text, nullable=False)


class VerificationRow(Base):
    __tablename__ = "verifications"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    credential_data: Mapped[str] = mapped_column(Text, nullable=False)
    verified_by: Mapped[str] = mapped_column(Text, nullable=False)
    verified_at: Mapped[str] = mapped_column(Text, nullable=False)
    is_valid: Mapped[int] = mapped_column(Integer, nullable=False)  # 0|1
    issued_by: Mapped[str | None] = mapped_column(Text, nullable=True)
    issued_at: Mapped[str | None] = mapped_column(Text, nullable=True)
