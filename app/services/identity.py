"""Credential identifiers.

The identifier is the primary key in the issuance store and the lookup key
on the verification side, so both services must derive it the same way.

Two modes:

  canonical: compact JSON with keys sorted.  {"name", "email"} and
              {"email", "name"} with the same values are the same credential.
  raw      : compact JSON in insertion order.  Field order is part of the
              identity.  Kept for databases written before canonical mode;
              older identifiers are reproduced for string, integer and
              boolean values only.  Floats differ: 1.0 encodes as "1.0"
              here, where those databases have "1".

Values are never normalized: "Alice" and "alice " are different credentials.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from app.core.config import CredentialIdMode


def _encode(data: Mapping[str, Any], *, sort_keys: bool) -> str:
    return json.dumps(
        dict(data),
        sort_keys=sort_keys,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def _require_credential(data: Any) -> None:
    if not isinstance(data, Mapping) or len(data) == 0:
        raise ValueError("credential data must be a non-empty mapping")


def serialize_credential(data: Mapping[str, Any]) -> str:
    """Storage form of the credential, in the order the client sent it."""
    _require_credential(data)
    return _encode(data, sort_keys=False)


def credential_id(data: Mapping[str, Any], mode: CredentialIdMode = "canonical") -> str:
    _require_credential(data)
    if mode == "canonical":
        return _encode(data, sort_keys=True)
    if mode == "raw":
        return _encode(data, sort_keys=False)
    raise ValueError(f"unknown credential id mode {mode!r}")
