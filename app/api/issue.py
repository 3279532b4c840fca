"""Issuance endpoints.

- POST /api/issue  : issue a credential once; duplicates get 409
- POST /api/lookup : read an issued credential (used by the verification
                      service when it is configured with ISSUANCE_LOOKUP_URL)
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.dependencies import (
    CamelModel,
    CredentialBody,
    ErrorOut,
    credential_required,
    get_issuance_store,
    internal_error,
    json_response,
)
from app.services.issuance_store import IssuanceStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["issuance"])


class IssueCreatedOut(CamelModel):
    success: bool = True
    message: str
    credential: dict[str, Any]
    issued_by: str
    timestamp: str


class IssueConflictOut(CamelModel):
    success: bool = False
    message: str
    issued_by: str


class IssuedCredentialOut(CamelModel):
    id: str
    data: str
    issued_by: str
    issued_at: str


class LookupOut(CamelModel):
    success: bool = True
    credential: IssuedCredentialOut


@router.post(
    "/issue",
    status_code=201,
    response_model=IssueCreatedOut,
    responses={
        400: {"model": ErrorOut},
        409: {"model": IssueConflictOut},
        500: {"model": ErrorOut},
    },
)
async def issue_credential(
    store: Annotated[IssuanceStore, Depends(get_issuance_store)],
    body: CredentialBody = None,
) -> JSONResponse:
    if not body:
        return credential_required()

    try:
        result = await store.issue(body)
    except Exception:
        logger.exception("Error issuing credential")
        return internal_error()

    if result.already_issued:
        return json_response(
            409,
            IssueConflictOut(message=result.message, issued_by=result.issued_by),
        )

    return json_response(
        201,
        IssueCreatedOut(
            message=result.message,
            credential=body,
            issued_by=result.issued_by,
            timestamp=result.issued_at or "",
        ),
    )


@router.post(
    "/lookup",
    response_model=LookupOut,
    responses={
        400: {"model": ErrorOut},
        404: {"model": ErrorOut},
        500: {"model": ErrorOut},
    },
)
async def lookup_credential(
    store: Annotated[IssuanceStore, Depends(get_issuance_store)],
    body: CredentialBody = None,
) -> JSONResponse:
    if not body:
        return credential_required()

    try:
        found = await store.lookup(body)
    except Exception:
        logger.exception("Error looking up credential")
        return internal_error()

    if found is None:
        return json_response(404, ErrorOut(error="Credential not found"))

    return json_response(
        200,
        LookupOut(
            credential=IssuedCredentialOut(
                id=found.id,
                data=found.data,
                issued_by=found.issued_by,
                issued_at=found.issued_at,
            )
        ),
    )
