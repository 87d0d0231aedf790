"""Prometheus metric inventory for feedr.

Every metric the service exposes is declared here; the modules that own
the behavior import and increment them.  HTTP metrics are labelled with
the route template (``/w/{slug}``), not the raw path, so public wall
traffic does not create one time series per slug.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by MetricsMiddleware)
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
    # add-url requests include one oEmbed round-trip, hence the long tail
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Domain metrics
# ---------------------------------------------------------------------------

SIGNUPS = Counter(
    "feedr_signups_total",
    "Organizations created through signup",
)

LOGINS = Counter(
    "feedr_logins_total",
    "Login attempts by result",
    ["result"],  # "ok" or "invalid"
)

WALLS_CREATED = Counter(
    "feedr_walls_created_total",
    "Walls created, including the default wall made at signup",
)

ITEMS_ADDED = Counter(
    "feedr_items_added_total",
    "Items added to walls by platform and source status",
    ["type", "status"],  # status: "ok" or "fout"
)

EMBED_RESOLUTIONS = Counter(
    "feedr_embed_resolutions_total",
    "Embed lookups by provider and outcome",
    ["provider", "result"],  # result: "hit", "resolved", "fallback"
)
