from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix.

    Fixed width, so lexical order of stored timestamps is chronological order.
    """
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class IssuedCredential:
    """A row of the issuance store: one per credential identifier."""

    id: str
    data: str
    issued_by: str
    issued_at: str


@dataclass(frozen=True, slots=True)
class IssueResult:
    accepted: bool
    already_issued: bool
    issued_by: str
    message: str
    issued_at: str | None = None


@dataclass(frozen=True, slots=True)
class VerificationRecord:
    """A row of the verification log.  Append-only."""

    id: int
    credential_data: str
    verified_by: str
    verified_at: str
    is_valid: int
    issued_by: str | None = None
    issued_at: str | None = None


@dataclass(frozen=True, slots=True)
class VerificationResult:
    valid: bool
    message: str
    verified_by: str
    verified_at: str
    issued_by: str | None = None
    issued_at: str | None = None
