"""Unauthenticated delivery: the public wall page and the items JSON API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from feedr.api.dependencies import get_theme, optional_session
from feedr.db.store import DocumentStore, get_document_store
from feedr.models.session import SessionClaims
from feedr.models.wall import Item
from feedr.services import walls_service
from feedr.web import pages
from feedr.web.pages import Theme

router = APIRouter(tags=["public"])

Store = Annotated[DocumentStore, Depends(get_document_store)]


class WallRefOut(BaseModel):
    name: str
    slug: str


class ItemOut(BaseModel):
    id: str
    type: str
    url: str
    provider: str
    title: str
    html: str
    created_at: str = Field(serialization_alias="createdAt")

    @staticmethod
    def from_item(item: Item) -> ItemOut:
        return ItemOut(
            id=item.id,
            type=item.type,
            url=item.url,
            provider=item.provider,
            title=item.title,
            html=item.html,
            created_at=item.created_at,
        )


class WallItemsOut(BaseModel):
    wall: WallRefOut
    items: list[ItemOut]


@router.get("/w/{slug}")
async def public_wall(
    slug: str,
    store: Store,
    theme: Annotated[Theme, Depends(get_theme)],
    claims: Annotated[SessionClaims | None, Depends(optional_session)],
) -> HTMLResponse:
    public = await walls_service.get_public_wall(store, slug)
    return HTMLResponse(
        pages.public_wall_page(theme, public.wall, public.items, signed_in=claims is not None)
    )


@router.get("/api/walls/{slug}/items", response_model=WallItemsOut)
async def wall_items(slug: str, store: Store) -> WallItemsOut:
    """Newest first, max 30 items.

    Readable cross-origin (CORSMiddleware in feedr.main): the widget
    script fetches this from whatever site the wall is embedded on.
    """
    public = await walls_service.list_public_items(store, slug)
    return WallItemsOut(
        wall=WallRefOut(name=public.wall.name, slug=public.wall.slug),
        items=[ItemOut.from_item(it) for it in public.items],
    )
