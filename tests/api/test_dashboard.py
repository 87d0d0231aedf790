"""Dashboard routes: session guard, wall creation and adding content."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tests.conftest import StubResolver, first_wall_id, signup


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("GET", "/dashboard"),
        ("GET", "/dashboard/new-wall"),
        ("POST", "/dashboard/new-wall"),
        ("GET", "/dashboard/walls/any"),
        ("POST", "/dashboard/walls/any/add-url"),
    ],
)
def test_dashboard_requires_session(client: TestClient, method: str, path: str) -> None:
    resp = client.request(method, path)
    assert resp.status_code == 302
    assert resp.headers["location"] == "/login"


def test_tampered_cookie_redirects_to_login(client: TestClient) -> None:
    resp = client.get("/dashboard", headers={"Cookie": "session=eyJhbGciOiJFUzI1NiJ9.e30.bogus"})
    assert resp.status_code == 302
    assert resp.headers["location"] == "/login"


def test_new_wall_form_renders(client: TestClient) -> None:
    signup(client)
    resp = client.get("/dashboard/new-wall")
    assert resp.status_code == 200
    assert 'name="slug"' in resp.text


def test_create_wall_redirects_to_detail(client: TestClient) -> None:
    signup(client)
    resp = client.post("/dashboard/new-wall", data={"name": "Showroom", "slug": "Show Room"})
    assert resp.status_code == 302
    location = resp.headers["location"]
    assert location.startswith("/dashboard/walls/")

    detail = client.get(location)
    assert detail.status_code == 200
    assert "Showroom" in detail.text
    assert "/w/show-room" in detail.text
    assert "/widget/feedr.js?wall=show-room" in detail.text


def test_create_wall_duplicate_slug_is_400(client: TestClient) -> None:
    signup(client)
    client.post("/dashboard/new-wall", data={"name": "One", "slug": "taken"})
    resp = client.post("/dashboard/new-wall", data={"name": "Two", "slug": "TAKEN"})
    assert resp.status_code == 400
    assert "Slug bestaat al." in resp.text


def test_create_wall_empty_slug_is_400(client: TestClient) -> None:
    signup(client)
    resp = client.post("/dashboard/new-wall", data={"name": "Name", "slug": "***"})
    assert resp.status_code == 400


def test_add_url_creates_item(client: TestClient, stub_resolver: StubResolver) -> None:
    signup(client)
    wall_id = first_wall_id(client)

    resp = client.post(
        f"/dashboard/walls/{wall_id}/add-url",
        data={"type": "youtube", "url": "https://youtu.be/abc"},
    )
    assert resp.status_code == 302
    assert resp.headers["location"] == f"/dashboard/walls/{wall_id}"
    assert stub_resolver.calls == [("youtube", "https://youtu.be/abc")]

    detail = client.get(f"/dashboard/walls/{wall_id}")
    assert "https://youtu.be/abc" in detail.text
    assert stub_resolver.html in detail.text
    assert "Preview (1 items)" in detail.text


def test_add_url_empty_url_is_400(client: TestClient, stub_resolver: StubResolver) -> None:
    signup(client)
    wall_id = first_wall_id(client)
    resp = client.post(
        f"/dashboard/walls/{wall_id}/add-url", data={"type": "youtube", "url": ""}
    )
    assert resp.status_code == 400
    assert "URL ontbreekt." in resp.text
    assert stub_resolver.calls == []


def test_add_url_unknown_type_is_400(client: TestClient, stub_resolver: StubResolver) -> None:
    signup(client)
    wall_id = first_wall_id(client)
    resp = client.post(
        f"/dashboard/walls/{wall_id}/add-url",
        data={"type": "myspace", "url": "https://myspace.com/x"},
    )
    assert resp.status_code == 400
    assert "Onbekend type." in resp.text


def test_unknown_wall_is_404(client: TestClient) -> None:
    signup(client)
    resp = client.get("/dashboard/walls/does-not-exist")
    assert resp.status_code == 404
    assert "text/html" in resp.headers["content-type"]
