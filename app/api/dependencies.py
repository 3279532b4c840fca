"""FastAPI dependencies and response helpers shared by both services.

Stores are opened once in each service's lifespan and kept on app.state;
these dependencies hand them to route handlers.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Body, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.services.issuance_lookup import IssuanceLookup
from app.services.issuance_store import IssuanceStore
from app.services.verification_store import VerificationStore

CREDENTIAL_REQUIRED = "Credential data is required"
INTERNAL_ERROR = "Internal server error"

# The whole JSON body is the credential: {"name": ..., "email": ..., "course": ...}
CredentialBody = Annotated[dict[str, Any] | None, Body()]


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys (issuedBy, verifiedAt)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorOut(CamelModel):
    success: bool = False
    error: str


def json_response(
    status_code: int, model: BaseModel, *, exclude_none: bool = False
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=model.model_dump(by_alias=True, exclude_none=exclude_none),
    )


def credential_required() -> JSONResponse:
    return json_response(400, ErrorOut(error=CREDENTIAL_REQUIRED))


def internal_error() -> JSONResponse:
    return json_response(500, ErrorOut(error=INTERNAL_ERROR))


def get_issuance_store(request: Request) -> IssuanceStore:
    return request.app.state.issuance_store


def get_verification_store(request: Request) -> VerificationStore:
    return request.app.state.verification_store


def get_issuance_lookup(request: Request) -> IssuanceLookup:
    return request.app.state.issuance_lookup
