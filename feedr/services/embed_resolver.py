"""Best-effort embed resolution against provider oEmbed endpoints.

resolve(type, url) makes at most one outbound GET to the platform's
oEmbed endpoint and returns ready-to-render markup.  Whatever goes wrong
downstream (timeout, connection error, non-2xx, non-JSON body, a body
without ``html``) collapses into the fallback result

    {provider: <type>, title: "", html: ""}

which the wall page renders as a plain link.  The only error a caller
can see is the ValueError for an empty URL, raised before any I/O; the
wall service marks that Source as "fout".

No retries.  Every lookup is bounded by EMBED_TIMEOUT_SECONDS.
Successful results are memoized in the embed cache.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from urllib.parse import quote

import httpx

from feedr.core.config import SETTINGS
from feedr.core.metrics import EMBED_RESOLUTIONS
from feedr.models.wall import PLATFORMS
from feedr.services.embed_cache import EmbedCache, cache_key, embed_cache

logger = logging.getLogger(__name__)

# Instagram's public endpoint usually wants an app token; it is tried anyway.
OEMBED_ENDPOINTS: dict[str, str] = {
    "youtube": "https://www.youtube.com/oembed?format=json&url={url}",
    "tiktok": "https://www.tiktok.com/oembed?url={url}",
    "instagram": "https://api.instagram.com/oembed?url={url}",
}


class ResolverFailure(Exception):
    """A lookup produced nothing renderable.  Never leaves this module."""


@dataclass(frozen=True, slots=True)
class EmbedResult:
    provider: str
    title: str
    html: str

    @staticmethod
    def fallback(platform: str) -> EmbedResult:
        return EmbedResult(provider=platform, title="", html="")

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class EmbedResolver:
    def __init__(
        self,
        *,
        cache: EmbedCache | None = None,
        timeout_seconds: float = 5.0,
        cache_ttl_seconds: int = 86400,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._cache = cache
        self._timeout = httpx.Timeout(timeout_seconds)
        self._cache_ttl = cache_ttl_seconds
        # Tests inject httpx.MockTransport here.
        self._transport = transport

    async def resolve(self, platform: str, url: str) -> EmbedResult:
        url = str(url or "").strip()
        if not url:
            raise ValueError("URL ontbreekt")

        endpoint = OEMBED_ENDPOINTS.get(platform)
        if endpoint is None:
            EMBED_RESOLUTIONS.labels(provider=platform, result="fallback").inc()
            return EmbedResult.fallback(platform)

        key = cache_key(platform, url)
        if self._cache is not None:
            cached = await self._cache.get(key)
            if cached is not None and cached.get("html"):
                EMBED_RESOLUTIONS.labels(provider=platform, result="hit").inc()
                return EmbedResult(
                    provider=cached.get("provider") or PLATFORMS[platform],
                    title=cached.get("title") or "",
                    html=cached["html"],
                )

        try:
            result = await self._lookup(platform, endpoint.format(url=quote(url, safe="")))
        except (httpx.HTTPError, ResolverFailure) as e:
            logger.info(
                "Embed fallback platform=%s reason=%s",
                platform,
                str(e) or type(e).__name__,
            )
            EMBED_RESOLUTIONS.labels(provider=platform, result="fallback").inc()
            return EmbedResult.fallback(platform)

        EMBED_RESOLUTIONS.labels(provider=platform, result="resolved").inc()
        if self._cache is not None:
            await self._cache.set(key, result.to_dict(), self._cache_ttl)
        return result

    async def _lookup(self, platform: str, endpoint_url: str) -> EmbedResult:
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport, follow_redirects=True
        ) as client:
            response = await client.get(endpoint_url, headers={"Accept": "application/json"})

        if not response.is_success:
            raise ResolverFailure(f"HTTP {response.status_code}")
        try:
            body = response.json()
        except ValueError:
            raise ResolverFailure("response is not JSON") from None
        if not isinstance(body, dict):
            raise ResolverFailure("response is not a JSON object")

        html = body.get("html")
        if not isinstance(html, str) or not html.strip():
            raise ResolverFailure("response has no html")
        title = body.get("title")
        return EmbedResult(
            provider=PLATFORMS[platform],
            title=title if isinstance(title, str) else "",
            html=html,
        )


embed_resolver = EmbedResolver(
    cache=embed_cache,
    timeout_seconds=SETTINGS.embed_timeout_seconds,
    cache_ttl_seconds=SETTINGS.embed_cache_ttl_seconds,
)


def get_embed_resolver() -> EmbedResolver:
    """FastAPI dependency returning the process-wide resolver."""
    return embed_resolver
