"""The single JSON document that holds every feedr entity.

Layout (fixed)::

    {
      "users":   [...],
      "orgs":    [...],
      "walls":   [...],
      "sources": [...],
      "items":   [...],
      "meta":    {"createdAt": "...", "version": 1}
    }

``Document`` wraps the raw dict with typed lookups so services never poke
at camelCase keys directly.  It is a plain in-memory copy: changes only
become durable when the store persists it.
"""

from __future__ import annotations

from typing import Any

from feedr.models.common import utc_now_iso
from feedr.models.organization import Organization
from feedr.models.user import User
from feedr.models.wall import Item, Source, Wall

SCHEMA_VERSION = 1
COLLECTIONS = ("users", "orgs", "walls", "sources", "items")


def _newest_first(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    # Ties on createdAt are broken by insertion order: later append = newer.
    indexed = sorted(
        enumerate(rows), key=lambda pair: (pair[1]["createdAt"], pair[0]), reverse=True
    )
    return [row for _, row in indexed]


class Document:
    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data

    @classmethod
    def empty(cls) -> Document:
        data: dict[str, Any] = {name: [] for name in COLLECTIONS}
        data["meta"] = {"createdAt": utc_now_iso(), "version": SCHEMA_VERSION}
        return cls(data)

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> Document:
        """Validate the version stamp and fill in any missing collection."""
        meta = data.get("meta") or {}
        version = meta.get("version", SCHEMA_VERSION)
        if not isinstance(version, int) or version > SCHEMA_VERSION:
            raise RuntimeError(
                f"document schema version {version!r} is newer than supported "
                f"version {SCHEMA_VERSION}"
            )
        for name in COLLECTIONS:
            if not isinstance(data.get(name), list):
                data[name] = []
        data["meta"] = {
            "createdAt": meta.get("createdAt") or utc_now_iso(),
            "version": version,
        }
        return cls(data)

    def to_raw(self) -> dict[str, Any]:
        return self._data

    # --- users -------------------------------------------------------------

    def user_by_email(self, email: str) -> User | None:
        needle = email.strip().lower()
        for row in self._data["users"]:
            if row["email"] == needle:
                return User.from_dict(row)
        return None

    def add_user(self, user: User) -> None:
        self._data["users"].append(user.to_dict())

    def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        for row in self._data["users"]:
            if row["id"] == user_id:
                row["passwordHash"] = password_hash
                return True
        return False

    def count_users(self) -> int:
        return len(self._data["users"])

    # --- orgs --------------------------------------------------------------

    def org_by_id(self, org_id: str) -> Organization | None:
        for row in self._data["orgs"]:
            if row["id"] == org_id:
                return Organization.from_dict(row)
        return None

    def add_org(self, org: Organization) -> None:
        self._data["orgs"].append(org.to_dict())

    def count_orgs(self) -> int:
        return len(self._data["orgs"])

    # --- walls -------------------------------------------------------------

    def wall_by_id(self, wall_id: str) -> Wall | None:
        for row in self._data["walls"]:
            if row["id"] == wall_id:
                return Wall.from_dict(row)
        return None

    def wall_by_slug(self, slug: str) -> Wall | None:
        for row in self._data["walls"]:
            if row["slug"] == slug:
                return Wall.from_dict(row)
        return None

    def slug_taken(self, slug: str) -> bool:
        return any(row["slug"] == slug for row in self._data["walls"])

    def walls_for_org(self, org_id: str) -> list[Wall]:
        return [Wall.from_dict(r) for r in self._data["walls"] if r["orgId"] == org_id]

    def add_wall(self, wall: Wall) -> None:
        self._data["walls"].append(wall.to_dict())

    def count_walls(self) -> int:
        return len(self._data["walls"])

    # --- sources & items ---------------------------------------------------

    def sources_for_wall(self, wall_id: str) -> list[Source]:
        return [
            Source.from_dict(r) for r in self._data["sources"] if r["wallId"] == wall_id
        ]

    def add_source(self, source: Source) -> None:
        self._data["sources"].append(source.to_dict())

    def items_for_wall(self, wall_id: str) -> list[Item]:
        """All items of a wall, newest first."""
        rows = [r for r in self._data["items"] if r["wallId"] == wall_id]
        return [Item.from_dict(r) for r in _newest_first(rows)]

    def add_item(self, item: Item) -> None:
        self._data["items"].append(item.to_dict())

    def count_sources(self) -> int:
        return len(self._data["sources"])

    def count_items(self) -> int:
        return len(self._data["items"])
