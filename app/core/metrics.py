"""Prometheus metrics for both services.

All metrics live in one module so there is a single inventory of what the
services measure.  Other modules import a metric and increment it at the
point of action.  Both services import this module, but each runs in its
own process, so each process exports only the series it touches.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # Each request is one or two SQLite round-trips, plus one snapshot
    # open on the verification side.
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Credential metrics
# ---------------------------------------------------------------------------

CREDENTIALS_ISSUED = Counter(
    "credentials_issued_total",
    "Issuance attempts by outcome",
    ["result"],  # "issued" or "duplicate"
)

VERIFICATIONS = Counter(
    "verifications_total",
    "Verification attempts by outcome",
    ["result"],  # "valid" or "not_found"
)

SHARED_STORE_FAULTS = Counter(
    "shared_store_faults_total",
    "Issuance lookups that failed and were treated as not issued",
    ["backend"],  # "snapshot" or "http"
)
