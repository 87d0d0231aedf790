"""Signup: one form creates an organization, its first user and a default wall."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse

from feedr.api.dependencies import get_theme
from feedr.api.login import set_session_cookie
from feedr.core.errors import ConflictError, ValidationError
from feedr.db.store import DocumentStore, get_document_store
from feedr.services import token_service, walls_service
from feedr.web import pages
from feedr.web.pages import Theme

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/signup")
def signup_page(theme: Annotated[Theme, Depends(get_theme)]) -> HTMLResponse:
    return HTMLResponse(pages.signup_page(theme))


@router.post("/signup", response_model=None)
async def signup_submit(
    store: Annotated[DocumentStore, Depends(get_document_store)],
    theme: Annotated[Theme, Depends(get_theme)],
    orgName: Annotated[str, Form()] = "",  # noqa: N803 (form field name)
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> RedirectResponse | HTMLResponse:
    try:
        result = await walls_service.create_organization_with_first_user_and_wall(
            store, orgName, email, password
        )
    except (ValidationError, ConflictError) as e:
        return HTMLResponse(pages.signup_page(theme, error=e.message), status_code=400)

    token = token_service.issue(result.user.id, result.org.id, result.user.email)
    response = RedirectResponse("/dashboard", status_code=302)
    set_session_cookie(response, token)
    return response
