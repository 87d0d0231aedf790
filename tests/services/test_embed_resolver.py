"""Embed resolver against a mocked oEmbed provider (httpx.MockTransport)."""

from __future__ import annotations

import asyncio
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from feedr.services.embed_cache import InMemoryEmbedCache, cache_key
from feedr.services.embed_resolver import EmbedResolver, EmbedResult
from tests.conftest import offline_resolver

VIDEO_URL = "https://www.youtube.com/watch?v=abc&t=10"


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"title": "A video", "html": "<iframe src=x></iframe>"})


def test_resolves_youtube_embed() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _ok(request)

    result = asyncio.run(offline_resolver(handler).resolve("youtube", VIDEO_URL))

    assert result == EmbedResult(
        provider="YouTube", title="A video", html="<iframe src=x></iframe>"
    )
    assert len(seen) == 1
    assert seen[0].url.host == "www.youtube.com"
    query = parse_qs(urlparse(str(seen[0].url)).query)
    assert query["url"] == [VIDEO_URL]
    assert query["format"] == ["json"]


@pytest.mark.parametrize(
    ("platform", "host", "provider"),
    [("tiktok", "www.tiktok.com", "TikTok"), ("instagram", "api.instagram.com", "Instagram")],
)
def test_uses_platform_endpoint(platform: str, host: str, provider: str) -> None:
    hosts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        hosts.append(request.url.host)
        return _ok(request)

    result = asyncio.run(offline_resolver(handler).resolve(platform, "https://p/1"))
    assert hosts == [host]
    assert result.provider == provider


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(404, json={"error": "not found"}),
        httpx.Response(500, text="oops"),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json=["not", "an", "object"]),
        httpx.Response(200, json={"title": "no html"}),
        httpx.Response(200, json={"html": "   "}),
    ],
)
def test_unusable_responses_fall_back(response: httpx.Response) -> None:
    result = asyncio.run(
        offline_resolver(lambda _req: response).resolve("youtube", VIDEO_URL)
    )
    assert result == EmbedResult(provider="youtube", title="", html="")


def test_transport_error_falls_back() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    result = asyncio.run(offline_resolver(handler).resolve("tiktok", "https://t/1"))
    assert result == EmbedResult.fallback("tiktok")


def test_timeout_falls_back() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    result = asyncio.run(offline_resolver(handler).resolve("youtube", VIDEO_URL))
    assert result.html == ""


def test_unknown_platform_falls_back_without_request() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return _ok(request)

    result = asyncio.run(offline_resolver(handler).resolve("vimeo", "https://v/1"))
    assert result == EmbedResult.fallback("vimeo")
    assert calls == []


def test_empty_url_raises_before_any_request() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return _ok(request)

    with pytest.raises(ValueError):
        asyncio.run(offline_resolver(handler).resolve("youtube", "  "))
    assert calls == []


def test_successful_result_is_cached() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return _ok(request)

    cache = InMemoryEmbedCache()
    resolver = EmbedResolver(cache=cache, transport=httpx.MockTransport(handler))

    first = asyncio.run(resolver.resolve("youtube", VIDEO_URL))
    second = asyncio.run(resolver.resolve("youtube", VIDEO_URL))

    assert first == second
    assert len(calls) == 1
    assert asyncio.run(cache.get(cache_key("youtube", VIDEO_URL))) is not None


def test_fallback_is_not_cached() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    resolver = EmbedResolver(cache=InMemoryEmbedCache(), transport=httpx.MockTransport(handler))
    asyncio.run(resolver.resolve("youtube", VIDEO_URL))
    asyncio.run(resolver.resolve("youtube", VIDEO_URL))

    assert len(calls) == 2


def test_cache_entries_expire() -> None:
    cache = InMemoryEmbedCache()
    asyncio.run(cache.set("k", {"html": "<b></b>"}, ttl_seconds=0))
    assert asyncio.run(cache.get("k")) is None
