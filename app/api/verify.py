"""Verification endpoints.

- POST /api/verify  : check a credential against the issuance store and
                       log the attempt (valid or not)
- GET  /api/history : most recent verification attempts
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.api.dependencies import (
    CamelModel,
    CredentialBody,
    ErrorOut,
    credential_required,
    get_issuance_lookup,
    get_verification_store,
    internal_error,
    json_response,
)
from app.services.issuance_lookup import IssuanceLookup
from app.services.verification_store import (
    DEFAULT_HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    VerificationStore,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["verification"])


class VerifyOut(CamelModel):
    success: bool
    valid: bool
    message: str
    issued_by: str | None = None
    issued_at: str | None = None
    verified_by: str
    verified_at: str


class VerificationRecordOut(BaseModel):
    # Column names, as stored
    id: int
    credential_data: str
    verified_by: str
    verified_at: str
    is_valid: int
    issued_by: str | None
    issued_at: str | None


class HistoryOut(BaseModel):
    success: bool = True
    history: list[VerificationRecordOut]


def _parse_limit(raw: str | None) -> int:
    if raw is None:
        return DEFAULT_HISTORY_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        return DEFAULT_HISTORY_LIMIT
    if limit <= 0:
        return DEFAULT_HISTORY_LIMIT
    return min(limit, MAX_HISTORY_LIMIT)


@router.post(
    "/verify",
    response_model=VerifyOut,
    responses={
        400: {"model": ErrorOut},
        404: {"model": VerifyOut},
        500: {"model": ErrorOut},
    },
)
async def verify_credential(
    store: Annotated[VerificationStore, Depends(get_verification_store)],
    lookup: Annotated[IssuanceLookup, Depends(get_issuance_lookup)],
    body: CredentialBody = None,
) -> JSONResponse:
    if not body:
        return credential_required()

    try:
        # Lookup faults are handled inside find() and come back as None
        issued = await lookup.find(body)
        if issued is not None:
            result = await store.record_verification(
                body, True, issued.issued_by, issued.issued_at
            )
        else:
            result = await store.record_verification(body, False)
    except Exception:
        logger.exception("Error verifying credential")
        return internal_error()

    out = VerifyOut(
        success=result.valid,
        valid=result.valid,
        message=result.message,
        issued_by=result.issued_by,
        issued_at=result.issued_at,
        verified_by=result.verified_by,
        verified_at=result.verified_at,
    )
    return json_response(200 if result.valid else 404, out, exclude_none=True)


@router.get(
    "/history",
    response_model=HistoryOut,
    responses={500: {"model": ErrorOut}},
)
async def verification_history(
    store: Annotated[VerificationStore, Depends(get_verification_store)],
    limit: str | None = None,
) -> JSONResponse:
    try:
        records = await store.history(_parse_limit(limit))
    except Exception:
        logger.exception("Error fetching history")
        return internal_error()

    out = HistoryOut(
        history=[
            VerificationRecordOut(
                id=r.id,
                credential_data=r.credential_data,
                verified_by=r.verified_by,
                verified_at=r.verified_at,
                is_valid=r.is_valid,
                issued_by=r.issued_by,
                issued_at=r.issued_at,
            )
            for r in records
        ]
    )
    return json_response(200, out)
