"""Prometheus scrape endpoint.

Returns the text exposition format, e.g.:

  credentials_issued_total{result="issued"} 12.0
  verifications_total{result="not_found"} 3.0
  shared_store_faults_total{backend="snapshot"} 0.0

Restrict /metrics to the scraper's network in production; counts of
issued and failed verifications are not meant for the public.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
