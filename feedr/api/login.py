"""Login form and the session cookie it sets.

POST /login checks the credentials against the document store and, on
success, sets an HttpOnly SameSite=Lax ``session`` cookie carrying a
30-day signed token, then redirects to /dashboard.  Failure re-renders
the form with one generic message whether the email exists or not.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from feedr.api.dependencies import get_theme, optional_session
from feedr.core.config import SETTINGS
from feedr.core.errors import AuthError
from feedr.db.store import DocumentStore, get_document_store
from feedr.models.session import SessionClaims
from feedr.services import token_service, walls_service
from feedr.web import pages
from feedr.web.pages import Theme

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=token_service.SESSION_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        secure=SETTINGS.cookie_secure,
        path="/",
        max_age=token_service.SESSION_TTL_DAYS * 24 * 60 * 60,
    )


@router.get("/")
def home(
    claims: Annotated[SessionClaims | None, Depends(optional_session)],
) -> RedirectResponse:
    return RedirectResponse("/dashboard" if claims else "/login", status_code=302)


@router.get("/login")
def login_page(theme: Annotated[Theme, Depends(get_theme)]) -> HTMLResponse:
    return HTMLResponse(pages.login_page(theme))


@router.post("/login", response_model=None)
async def login_submit(
    store: Annotated[DocumentStore, Depends(get_document_store)],
    theme: Annotated[Theme, Depends(get_theme)],
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> RedirectResponse | HTMLResponse:
    try:
        user = await walls_service.authenticate(store, email, password)
    except AuthError as e:
        logger.warning("Login failed  email=%s", email.strip().lower())
        return HTMLResponse(pages.login_page(theme, error=e.message), status_code=400)

    token = token_service.issue(user.id, user.org_id, user.email)
    response = RedirectResponse("/dashboard", status_code=302)
    set_session_cookie(response, token)
    logger.info("Login succeeded  user_id=%s org_id=%s", user.id, user.org_id)
    return response


@router.get("/logout")
def logout() -> RedirectResponse:
    """Clear the cookie.  The token itself stays valid until it expires."""
    response = RedirectResponse("/", status_code=302)
    response.delete_cookie(token_service.SESSION_COOKIE, path="/")
    return response
