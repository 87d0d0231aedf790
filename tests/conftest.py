from __future__ import annotations

import os
import sys
from pathlib import Path

# Settings are read once at import time: pin the in-memory backends and
# the test environment before anything from feedr is imported.
os.environ["APP_ENV"] = "test"
os.environ["DATA_PATH"] = ""
os.environ["REDIS_URL"] = ""
os.environ["COOKIE_SECURE"] = "false"
os.environ.pop("SESSION_SIGNING_KEY", None)

# Ensure repo root is on sys.path so `import feedr` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from feedr.db.store import InMemoryDocumentStore, document_store  # noqa: E402
from feedr.main import app  # noqa: E402
from feedr.services.embed_cache import embed_cache  # noqa: E402
from feedr.services.embed_resolver import (  # noqa: E402
    EmbedResolver,
    EmbedResult,
    get_embed_resolver,
)

TEST_PASSWORD = "s3cure-pass"


class StubResolver:
    """Resolver double: returns a fixed embed without network access."""

    def __init__(self, html: str = "<blockquote>embed</blockquote>") -> None:
        self.html = html
        self.calls: list[tuple[str, str]] = []

    async def resolve(self, platform: str, url: str) -> EmbedResult:
        self.calls.append((platform, url))
        return EmbedResult(provider=platform.title(), title="Stub", html=self.html)


@pytest.fixture(autouse=True)
def reset_document_store() -> None:
    """Start every test from an empty document."""
    assert isinstance(document_store, InMemoryDocumentStore)
    document_store.reset()


@pytest.fixture(autouse=True)
def reset_embed_cache() -> None:
    """Clear cached embeds between tests."""
    if hasattr(embed_cache, "clear"):
        embed_cache.clear()  # type: ignore[union-attr]


@pytest.fixture
def stub_resolver() -> StubResolver:
    resolver = StubResolver()
    app.dependency_overrides[get_embed_resolver] = lambda: resolver
    yield resolver  # type: ignore[misc]
    app.dependency_overrides.pop(get_embed_resolver, None)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """A private store for service-level tests."""
    return InMemoryDocumentStore()


# ---------------------------------------------------------------------------
# Signup helpers
# ---------------------------------------------------------------------------


def signup(
    client: TestClient,
    org_name: str = "Acme",
    email: str = "owner@acme.test",
    password: str = TEST_PASSWORD,
):
    """POST /signup; the client keeps the session cookie on success."""
    return client.post(
        "/signup",
        data={"orgName": org_name, "email": email, "password": password},
    )


def first_wall_id(client: TestClient) -> str:
    """Id of the first wall listed on the signed-in dashboard."""
    resp = client.get("/dashboard")
    assert resp.status_code == 200
    marker = 'href="/dashboard/walls/'
    start = resp.text.index(marker) + len(marker)
    return resp.text[start : resp.text.index('"', start)]


def offline_resolver(handler) -> EmbedResolver:
    """EmbedResolver wired to an httpx.MockTransport handler, no cache."""
    return EmbedResolver(transport=httpx.MockTransport(handler), timeout_seconds=1)
