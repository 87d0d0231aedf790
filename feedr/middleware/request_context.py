"""Request context middleware: request ids and one summary log line per request.

The request id lives in a ContextVar rather than a thread-local because
concurrent async requests share a thread.  The filter installed by
setup_logging copies it onto every LogRecord, so log lines from the store, the
embed resolver and the wall service can all be correlated.
"""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from feedr.core.logging import request_id_var

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request id, time the request, log a summary on completion.

    An incoming X-Request-ID header is reused; otherwise a UUID is
    generated.  The id is echoed back on the response.  When the session
    dependency resolved an identity, its org id is included in the log
    line (never the token or the email).
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_var.set(req_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        org_id = getattr(request.state, "org_id", None)
        logger.info(
            "%s %s → %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "org_id": org_id,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response
