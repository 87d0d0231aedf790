"""Dashboard routes: the signed-in organization's walls and content.

Every route depends on require_session and passes ``claims.org_id`` down
to the wall service, which is where tenant ownership is checked.  Domain
errors (ValidationError, ConflictError, NotFoundError) propagate to the
app-level handlers.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse

from feedr.api.dependencies import get_theme, require_session
from feedr.core.config import SETTINGS
from feedr.db.store import DocumentStore, get_document_store
from feedr.models.session import SessionClaims
from feedr.services import walls_service
from feedr.services.embed_resolver import EmbedResolver, get_embed_resolver
from feedr.web import pages
from feedr.web.pages import Theme

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

Claims = Annotated[SessionClaims, Depends(require_session)]
Store = Annotated[DocumentStore, Depends(get_document_store)]


@router.get("")
async def dashboard(
    claims: Claims,
    store: Store,
    theme: Annotated[Theme, Depends(get_theme)],
) -> HTMLResponse:
    view = await walls_service.get_dashboard(store, claims.org_id)
    return HTMLResponse(pages.dashboard_page(theme, view.org, view.walls))


@router.get("/new-wall")
def new_wall_form(
    _claims: Claims,
    theme: Annotated[Theme, Depends(get_theme)],
) -> HTMLResponse:
    return HTMLResponse(pages.new_wall_page(theme))


@router.post("/new-wall")
async def new_wall_submit(
    claims: Claims,
    store: Store,
    name: Annotated[str, Form()] = "",
    slug: Annotated[str, Form()] = "",
) -> RedirectResponse:
    wall = await walls_service.create_wall(store, claims.org_id, name, slug)
    return RedirectResponse(f"/dashboard/walls/{wall.id}", status_code=302)


@router.get("/walls/{wall_id}")
async def wall_detail(
    wall_id: str,
    claims: Claims,
    store: Store,
    theme: Annotated[Theme, Depends(get_theme)],
) -> HTMLResponse:
    detail = await walls_service.get_wall_detail(store, claims.org_id, wall_id)
    return HTMLResponse(pages.wall_detail_page(theme, detail, SETTINGS.app_base_url))


@router.post("/walls/{wall_id}/add-url")
async def add_url(
    wall_id: str,
    claims: Claims,
    store: Store,
    resolver: Annotated[EmbedResolver, Depends(get_embed_resolver)],
    type: Annotated[str, Form()] = "",
    url: Annotated[str, Form()] = "",
) -> RedirectResponse:
    await walls_service.add_source(store, claims.org_id, wall_id, type, url, resolver)
    return RedirectResponse(f"/dashboard/walls/{wall_id}", status_code=302)
