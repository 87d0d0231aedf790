from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from feedr.models.common import new_id, utc_now_iso

# Platform type -> display name used as Item.provider on a successful lookup.
PLATFORMS: dict[str, str] = {
    "youtube": "YouTube",
    "tiktok": "TikTok",
    "instagram": "Instagram",
}

SOURCE_OK = "ok"
SOURCE_ERROR = "fout"


@dataclass(frozen=True, slots=True)
class Wall:
    id: str
    org_id: str
    name: str
    slug: str
    created_at: str

    @staticmethod
    def new(*, org_id: str, name: str, slug: str) -> Wall:
        return Wall(
            id=new_id(), org_id=org_id, name=name, slug=slug, created_at=utc_now_iso()
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "orgId": self.org_id,
            "name": self.name,
            "slug": self.slug,
            "createdAt": self.created_at,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Wall:
        return Wall(
            id=data["id"],
            org_id=data["orgId"],
            name=data["name"],
            slug=data["slug"],
            created_at=data["createdAt"],
        )


@dataclass(frozen=True, slots=True)
class Source:
    id: str
    wall_id: str
    type: str  # youtube|tiktok|instagram
    url: str
    created_at: str
    status: str = SOURCE_OK  # ok|fout

    @staticmethod
    def new(*, wall_id: str, type: str, url: str, status: str = SOURCE_OK) -> Source:
        return Source(
            id=new_id(),
            wall_id=wall_id,
            type=type,
            url=url,
            status=status,
            created_at=utc_now_iso(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "wallId": self.wall_id,
            "type": self.type,
            "url": self.url,
            "status": self.status,
            "createdAt": self.created_at,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Source:
        return Source(
            id=data["id"],
            wall_id=data["wallId"],
            type=data["type"],
            url=data["url"],
            status=data.get("status") or SOURCE_OK,
            created_at=data["createdAt"],
        )


@dataclass(frozen=True, slots=True)
class Item:
    id: str
    wall_id: str
    type: str
    url: str
    provider: str
    title: str
    html: str  # provider embed markup; "" means render a plain link
    created_at: str

    @staticmethod
    def new(
        *, wall_id: str, type: str, url: str, provider: str, title: str, html: str
    ) -> Item:
        return Item(
            id=new_id(),
            wall_id=wall_id,
            type=type,
            url=url,
            provider=provider,
            title=title,
            html=html,
            created_at=utc_now_iso(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"wallId": self.wall_id, **self.to_public_dict()}

    def to_public_dict(self) -> dict[str, Any]:
        """Fields exposed by the public items API (no wall or org ids)."""
        return {
            "id": self.id,
            "type": self.type,
            "url": self.url,
            "provider": self.provider,
            "title": self.title,
            "html": self.html,
            "createdAt": self.created_at,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Item:
        return Item(
            id=data["id"],
            wall_id=data["wallId"],
            type=data["type"],
            url=data["url"],
            provider=data.get("provider") or data["type"],
            title=data.get("title") or "",
            html=data.get("html") or "",
            created_at=data["createdAt"],
        )
