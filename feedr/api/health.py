"""Liveness endpoint with per-dependency status.

Returns 200 even when degraded; ``status`` carries the actual health.
The store check loads the document, so a corrupt or unreadable data
file shows up here as ``"store": "degraded"``.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from feedr.db.redis import redis_pool
from feedr.db.store import DocumentStore, get_document_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> dict:
    checks: dict[str, str] = {}
    overall = "ok"

    try:
        await store.load()
        checks["store"] = "ok"
    except Exception:
        logger.exception("Health check: document store unreadable")
        checks["store"] = "degraded"
        overall = "degraded"

    if redis_pool is not None:
        try:
            await redis_pool.ping()  # type: ignore[misc]
            checks["redis"] = "ok"
        except Exception:
            checks["redis"] = "degraded"
            overall = "degraded"
    else:
        checks["redis"] = "not_configured"

    return {"status": overall, "checks": checks}
