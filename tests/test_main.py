from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from feedr.main import app

client = TestClient(app, follow_redirects=False)


def test_health_returns_ok() -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


ROUTES = [
    ("GET", "/"),
    ("GET", "/signup"),
    ("POST", "/signup"),
    ("GET", "/login"),
    ("POST", "/login"),
    ("GET", "/logout"),
    ("GET", "/dashboard"),
    ("GET", "/dashboard/new-wall"),
    ("POST", "/dashboard/new-wall"),
    ("GET", "/widget/feedr.js"),
    ("GET", "/health"),
    ("GET", "/metrics"),
]


@pytest.mark.parametrize(("method", "path"), ROUTES)
def test_route_is_served(method: str, path: str) -> None:
    resp = client.request(method, path)
    assert resp.status_code not in (404, 405), (method, path, resp.status_code)


def test_slug_routes_404_with_domain_body_not_route_miss() -> None:
    api = client.get("/api/walls/x/items")
    assert api.status_code == 404
    assert api.json() == {"error": "niet gevonden"}

    page = client.get("/w/x")
    assert page.status_code == 404
    assert "Niet gevonden." in page.text


def test_undefined_route_returns_404() -> None:
    resp = client.get("/nonexistent")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Not Found"}


def test_put_health_returns_405() -> None:
    resp = client.put("/health", json={"status": "bad"})
    assert resp.status_code == 405


def test_api_errors_are_json_and_page_errors_are_html() -> None:
    api = client.get("/api/walls/missing/items")
    page = client.get("/w/missing")

    assert api.status_code == page.status_code == 404
    assert api.headers["content-type"].startswith("application/json")
    assert page.headers["content-type"].startswith("text/html")
    assert "Niet gevonden." in page.text
