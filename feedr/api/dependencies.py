from __future__ import annotations

import logging

from fastapi import Request

from feedr.core.config import SETTINGS
from feedr.core.errors import LoginRequired
from feedr.models.session import SessionClaims
from feedr.services import token_service
from feedr.web.pages import THEMES, Theme

logger = logging.getLogger(__name__)


def optional_session(request: Request) -> SessionClaims | None:
    """Claims from the session cookie, or None if missing/invalid/expired.

    Used by public pages, which render for everyone but show a different
    nav bar to signed-in users.
    """
    claims = token_service.verify(request.cookies.get(token_service.SESSION_COOKIE))
    if claims is not None:
        # picked up by RequestContextMiddleware for the access log line
        request.state.org_id = claims.org_id
    return claims


def require_session(request: Request) -> SessionClaims:
    """Dependency for dashboard routes: the acting identity, or a redirect to /login.

    Raises LoginRequired, which the app-level handler turns into a 302.
    """
    claims = optional_session(request)
    if claims is None:
        logger.info("No valid session for %s, redirecting to login", request.url.path)
        raise LoginRequired()
    return claims


def get_theme() -> Theme:
    return THEMES[SETTINGS.theme]
