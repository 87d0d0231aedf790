"""Tenant-scoped wall management.

Every operation takes the DocumentStore explicitly.  Writes go through
``store.mutate()``, so uniqueness checks (email, slug) and the insert they
guard happen under the same lock.  Reads use ``store.load()``.

Tenant isolation is a single rule: a wall is visible to a session only
when ``wall.org_id == claims.org_id``.  A foreign wall raises the same
NotFoundError as a missing one, so wall ids of other tenants cannot be
probed.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import random
import re
from dataclasses import dataclass
from typing import Protocol

from feedr.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from feedr.core.metrics import ITEMS_ADDED, LOGINS, SIGNUPS, WALLS_CREATED
from feedr.db.document import Document
from feedr.db.store import DocumentStore
from feedr.models.organization import Organization
from feedr.models.user import User
from feedr.models.wall import PLATFORMS, SOURCE_ERROR, SOURCE_OK, Item, Source, Wall
from feedr.services import auth_service
from feedr.services.embed_resolver import EmbedResult

logger = logging.getLogger(__name__)

DEFAULT_WALL_NAME = "Mijn eerste wall"
DEFAULT_SLUG_PREFIX = "mijn-wall-"
PUBLIC_ITEMS_LIMIT = 30

_SLUG_INVALID = re.compile(r"[^a-z0-9-]")
_SLUG_DASHES = re.compile(r"-+")


class Resolver(Protocol):
    async def resolve(self, platform: str, url: str) -> EmbedResult: ...


@dataclass(frozen=True, slots=True)
class SignupResult:
    org: Organization
    user: User
    wall: Wall


@dataclass(frozen=True, slots=True)
class AddSourceResult:
    source: Source
    item: Item


@dataclass(frozen=True, slots=True)
class Dashboard:
    org: Organization | None
    walls: list[Wall]  # creation order


@dataclass(frozen=True, slots=True)
class WallDetail:
    org: Organization | None
    wall: Wall
    sources: list[Source]
    items: list[Item]  # newest first


@dataclass(frozen=True, slots=True)
class PublicWall:
    wall: Wall
    items: list[Item]  # newest first


def normalize_slug(raw: str) -> str:
    """Lowercase; anything outside [a-z0-9-] becomes '-'; collapse and trim dashes.

    Idempotent: normalize_slug(normalize_slug(s)) == normalize_slug(s).
    """
    slug = str(raw or "").strip().lower()
    slug = _SLUG_INVALID.sub("-", slug)
    slug = _SLUG_DASHES.sub("-", slug)
    return slug.strip("-")


def _default_wall_slug(document: Document, rng: random.Random | None = None) -> str:
    rng = rng or random.Random()
    upper = 10_000
    while True:
        for _ in range(50):
            slug = f"{DEFAULT_SLUG_PREFIX}{rng.randrange(upper)}"
            if not document.slug_taken(slug):
                return slug
        # 50 collisions in a row: the small range is crowded, widen it
        upper *= 10


def _owned_wall(document: Document, org_id: str, wall_id: str) -> Wall:
    wall = document.wall_by_id(wall_id)
    if wall is None or wall.org_id != org_id:
        logger.warning("Wall not found or not owned  wall_id=%s org_id=%s", wall_id, org_id)
        raise NotFoundError()
    return wall


@functools.cache
def _dummy_password_hash() -> str:
    return auth_service.hash_password("feedr-timing-equalizer")


def _verify_against_dummy(password: str) -> bool:
    # runs in a worker thread, including the first (cached) dummy hash
    return auth_service.verify_password(password, _dummy_password_hash())


# ---------------------------------------------------------------------------
# Signup & login
# ---------------------------------------------------------------------------


async def create_organization_with_first_user_and_wall(
    store: DocumentStore, org_name: str, email: str, password: str
) -> SignupResult:
    """Create Organization(plan=free), its first User and a default Wall together.

    Raises ValidationError for an empty org name or email or a password
    under 8 characters, ConflictError when the email is registered.  On
    either error nothing is persisted.
    """
    org_name = str(org_name or "").strip()
    email = str(email or "").strip().lower()
    password = str(password or "")

    if not org_name or not email or len(password) < auth_service.MIN_PASSWORD_LENGTH:
        logger.warning("Signup rejected: invalid input")
        raise ValidationError()

    # argon2 is deliberately slow; keep it off the event loop and out of the lock
    password_hash = await asyncio.to_thread(auth_service.hash_password, password)

    async with store.mutate() as document:
        if document.user_by_email(email) is not None:
            logger.warning("Signup rejected: duplicate email=%s", email)
            raise ConflictError("E-mail bestaat al.")

        org = Organization.new(name=org_name)
        user = User.new(org_id=org.id, email=email, password_hash=password_hash)
        wall = Wall.new(
            org_id=org.id, name=DEFAULT_WALL_NAME, slug=_default_wall_slug(document)
        )
        document.add_org(org)
        document.add_user(user)
        document.add_wall(wall)

    SIGNUPS.inc()
    WALLS_CREATED.inc()
    logger.info(
        "Organization created  org_id=%s user_id=%s wall_slug=%s",
        org.id,
        user.id,
        wall.slug,
    )
    return SignupResult(org=org, user=user, wall=wall)


async def authenticate(store: DocumentStore, email: str, password: str) -> User:
    """Return the matching user or raise AuthError.

    Unknown email and wrong password raise the same error, and an unknown
    email still costs one argon2 verification.
    """
    email = str(email or "").strip().lower()
    password = str(password or "")

    document = await store.load()
    user = document.user_by_email(email) if email else None
    if user is None:
        await asyncio.to_thread(_verify_against_dummy, password)
        LOGINS.labels(result="invalid").inc()
        raise AuthError()

    ok = await asyncio.to_thread(auth_service.verify_password, password, user.password_hash)
    if not ok:
        LOGINS.labels(result="invalid").inc()
        raise AuthError()

    if auth_service.needs_rehash(user.password_hash):
        new_hash = await asyncio.to_thread(auth_service.hash_password, password)
        async with store.mutate() as document:
            document.update_password_hash(user.id, new_hash)
        logger.info("Rehashed password for user=%s", user.id)

    LOGINS.labels(result="ok").inc()
    return user


# ---------------------------------------------------------------------------
# Walls
# ---------------------------------------------------------------------------


async def create_wall(store: DocumentStore, org_id: str, name: str, slug: str) -> Wall:
    name = str(name or "").strip()
    normalized = normalize_slug(slug)
    if not name or not normalized:
        logger.warning("Wall rejected: empty name or slug  org_id=%s", org_id)
        raise ValidationError()

    async with store.mutate() as document:
        if document.slug_taken(normalized):
            logger.warning("Wall rejected: slug taken slug=%s", normalized)
            raise ConflictError("Slug bestaat al.")
        wall = Wall.new(org_id=org_id, name=name, slug=normalized)
        document.add_wall(wall)

    WALLS_CREATED.inc()
    logger.info("Wall created  wall_id=%s slug=%s org_id=%s", wall.id, wall.slug, org_id)
    return wall


async def list_walls_for_org(store: DocumentStore, org_id: str) -> list[Wall]:
    document = await store.load()
    return document.walls_for_org(org_id)


async def get_dashboard(store: DocumentStore, org_id: str) -> Dashboard:
    document = await store.load()
    return Dashboard(org=document.org_by_id(org_id), walls=document.walls_for_org(org_id))


async def get_wall_detail(store: DocumentStore, org_id: str, wall_id: str) -> WallDetail:
    document = await store.load()
    wall = _owned_wall(document, org_id, wall_id)
    return WallDetail(
        org=document.org_by_id(org_id),
        wall=wall,
        sources=document.sources_for_wall(wall.id),
        items=document.items_for_wall(wall.id),
    )


async def add_source(
    store: DocumentStore,
    org_id: str,
    wall_id: str,
    platform: str,
    url: str,
    resolver: Resolver,
) -> AddSourceResult:
    """Add one (platform, url) to a wall: a Source plus its resolved Item.

    The embed lookup runs between two store accesses, never under the
    store lock, so a slow provider only delays this request.  The wall
    is re-checked in the write step.
    """
    platform = str(platform or "").strip().lower()
    url = str(url or "").strip()

    document = await store.load()
    _owned_wall(document, org_id, wall_id)

    if not url:
        raise ValidationError("URL ontbreekt.")
    if platform not in PLATFORMS:
        logger.warning("Source rejected: unsupported type=%r", platform)
        raise ValidationError("Onbekend type.")

    status = SOURCE_OK
    try:
        embed = await resolver.resolve(platform, url)
    except Exception:
        # Downstream HTTP failures never get here; the resolver turns them
        # into an empty embed.  Only its own up-front checks do.
        logger.warning("Embed resolver raised  type=%s", platform, exc_info=True)
        status = SOURCE_ERROR
        embed = EmbedResult.fallback(platform)

    async with store.mutate() as document:
        wall = _owned_wall(document, org_id, wall_id)
        source = Source.new(wall_id=wall.id, type=platform, url=url, status=status)
        item = Item.new(
            wall_id=wall.id,
            type=platform,
            url=url,
            provider=embed.provider,
            title=embed.title,
            html=embed.html,
        )
        document.add_source(source)
        document.add_item(item)

    ITEMS_ADDED.labels(type=platform, status=status).inc()
    logger.info(
        "Item added  wall_id=%s type=%s status=%s embedded=%s",
        wall.id,
        platform,
        status,
        bool(item.html),
    )
    return AddSourceResult(source=source, item=item)


# ---------------------------------------------------------------------------
# Public delivery (no session)
# ---------------------------------------------------------------------------


async def get_public_wall(store: DocumentStore, slug: str) -> PublicWall:
    document = await store.load()
    wall = document.wall_by_slug(slug)
    if wall is None:
        raise NotFoundError()
    return PublicWall(wall=wall, items=document.items_for_wall(wall.id))


async def list_public_items(store: DocumentStore, slug: str) -> PublicWall:
    """The public wall with its newest 30 items, newest first."""
    public = await get_public_wall(store, slug)
    return PublicWall(wall=public.wall, items=public.items[:PUBLIC_ITEMS_LIMIT])
