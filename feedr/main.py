from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from feedr.api.dashboard import router as dashboard_router
from feedr.api.dependencies import get_theme
from feedr.api.health import router as health_router
from feedr.api.login import router as login_router
from feedr.api.metrics_endpoint import router as metrics_router
from feedr.api.public import router as public_router
from feedr.api.signup import router as signup_router
from feedr.api.widget import router as widget_router
from feedr.core.config import SETTINGS
from feedr.core.errors import FeedrError, LoginRequired, NotFoundError
from feedr.core.logging import setup_logging
from feedr.db.redis import lifespan_redis
from feedr.db.store import lifespan_store
from feedr.middleware.metrics import MetricsMiddleware
from feedr.middleware.request_context import RequestContextMiddleware
from feedr.services import token_service
from feedr.web import pages

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Nested so teardown runs in reverse order.
    async with lifespan_store():
        async with lifespan_redis():
            yield


app = FastAPI(
    title="feedr",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

# Public reads are embeddable from any site.  No credentials: the session
# cookie never travels cross-origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Last-added runs first: RequestContext (outermost) → Metrics → CORS → route.
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)


# ---------------------------------------------------------------------------
# Domain errors → responses
# ---------------------------------------------------------------------------


@app.exception_handler(LoginRequired)
async def _login_required(_request: Request, _exc: LoginRequired) -> Response:
    return RedirectResponse("/login", status_code=302)


@app.exception_handler(FeedrError)
async def _feedr_error(request: Request, exc: FeedrError) -> Response:
    if not isinstance(exc, NotFoundError):
        logger.warning(
            "%s on %s: %s", type(exc).__name__, request.url.path, exc.message
        )
    if request.url.path.startswith("/api/"):
        message = "niet gevonden" if isinstance(exc, NotFoundError) else exc.message
        return JSONResponse({"error": message}, status_code=exc.status_code)
    signed_in = (
        token_service.verify(request.cookies.get(token_service.SESSION_COOKIE))
        is not None
    )
    return HTMLResponse(
        pages.error_page(get_theme(), exc.message, signed_in=signed_in),
        status_code=exc.status_code,
    )


app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(login_router)
app.include_router(signup_router)
app.include_router(dashboard_router)
app.include_router(public_router)
app.include_router(widget_router)

logger.info(
    "feedr started  env=%s log_level=%s base_url=%s docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.app_base_url,
    "on" if SETTINGS.is_dev else "off",
)
