"""Web search tool abstraction."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from duckduckgo_search import DDGS

from nicherank.config import Settings
from nicherank.logging import get_logger
from nicherank.models.search import SearchHit

logger = get_logger(__name__)


class WebSearchProvider(Protocol):
    """Search provider interface."""

    source_name: str

    async def search(self, query: str, *, page: int, page_size: int) -> list[SearchHit]:
        """Search web, returning one page of results."""


class WebSearchError(RuntimeError):
    pass


def _hits_from_items(
    items: Any, *, url_key: str, title_key: str, snippet_key: str
) -> list[SearchHit]:
    if not isinstance(items, list):
        return []

    hits: list[SearchHit] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        url = item.get(url_key)
        if not url or not isinstance(url, str):
            continue
        hits.append(
            SearchHit(
                title=item.get(title_key) or "",
                url=url,
                snippet=item.get(snippet_key) or "",
            )
        )
    return hits


@dataclass(frozen=True)
class GoogleSearchProvider:
    """Google Custom Search JSON API provider.

    Notes:
        - Requires an API key and a search engine id (`cx`).
        - Pages are addressed with the 1-based ``start`` index, so page 2 starts at 11.
    """

    client: httpx.AsyncClient
    api_key: str
    engine_id: str
    base_url: str = "https://www.googleapis.com/customsearch/v1"
    timeout_s: float = 10.0
    source_name: str = "google"

    async def search(self, query: str, *, page: int, page_size: int) -> list[SearchHit]:
        """Search using Google Custom Search.

        Args:
            query: Search query.
            page: 1-based page number.
            page_size: Results per page (the API caps this at 10).

        Returns:
            List of hits, possibly empty.
        """

        params = {
            "key": self.api_key,
            "cx": self.engine_id,
            "q": query,
            "num": str(page_size),
            "start": str((page - 1) * page_size + 1),
            "safe": "active",
        }

        started = time.monotonic()
        resp = await self.client.get(
            self.base_url,
            params=params,
            headers={"Accept": "application/json"},
            timeout=self.timeout_s,
        )
        if resp.status_code >= 400:
            raise WebSearchError(f"Google Search API error: {resp.status_code} {resp.reason_phrase}")

        data = resp.json()
        if not isinstance(data, dict):
            raise WebSearchError("google response not a JSON object")
        if data.get("error"):
            err = data["error"]
            message = err.get("message") if isinstance(err, dict) else str(err)
            raise WebSearchError(f"Google Search API error: {message}")

        hits = _hits_from_items(data.get("items"), url_key="link", title_key="title", snippet_key="snippet")
        logger.info(
            "Google search ok",
            extra={
                "provider": self.source_name,
                "query_len": len(query),
                "page": page,
                "result_count": len(hits),
                "latency_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return hits


@dataclass(frozen=True)
class BraveSearchProvider:
    """Brave Search API provider."""

    client: httpx.AsyncClient
    api_key: str
    base_url: str = "https://api.search.brave.com/res/v1/web/search"
    timeout_s: float = 10.0
    source_name: str = "brave"

    async def search(self, query: str, *, page: int, page_size: int) -> list[SearchHit]:
        """Search using Brave; ``offset`` is the 0-based page index."""

        resp = await self.client.get(
            self.base_url,
            params={"q": query, "count": str(page_size), "offset": str(page - 1)},
            headers={
                "Accept": "application/json",
                "X-Subscription-Token": self.api_key,
            },
            timeout=self.timeout_s,
        )
        if resp.status_code >= 400:
            raise WebSearchError(f"Brave Search API error: {resp.status_code} {resp.reason_phrase}")

        data = resp.json()
        if not isinstance(data, dict):
            raise WebSearchError("brave response not a JSON object")

        web = data.get("web")
        items = web.get("results") if isinstance(web, dict) else data.get("results")
        hits = _hits_from_items(items, url_key="url", title_key="title", snippet_key="description")
        logger.info(
            "Brave search ok",
            extra={"provider": self.source_name, "query_len": len(query), "page": page, "result_count": len(hits)},
        )
        return hits


@dataclass(frozen=True)
class DuckDuckGoSearchProvider:
    """DuckDuckGo search provider.

    The library has no page cursor, so page ``n`` is taken from the first ``n * page_size``
    results.
    """

    source_name: str = "duckduckgo"

    async def search(self, query: str, *, page: int, page_size: int) -> list[SearchHit]:
        """Search using DuckDuckGo in a worker thread."""

        return await asyncio.to_thread(self._search_sync, query, page, page_size)

    def _search_sync(self, query: str, page: int, page_size: int) -> list[SearchHit]:
        try:
            with DDGS() as ddgs:
                raw = list(ddgs.text(query, safesearch="moderate", max_results=page * page_size))
        except Exception as e:
            raise WebSearchError(f"DuckDuckGo search failed: {e}") from e

        items = [
            {"url": r.get("href") or r.get("url"), "title": r.get("title"), "snippet": r.get("body")}
            for r in raw
            if isinstance(r, dict)
        ]
        start = (page - 1) * page_size
        return _hits_from_items(items[start : start + page_size], url_key="url", title_key="title", snippet_key="snippet")


def get_search_provider(settings: Settings, client: httpx.AsyncClient) -> WebSearchProvider:
    """Factory to create a search provider based on settings."""

    if settings.search_provider == "google":
        if not settings.google_search_api_key or not settings.google_search_engine_id:
            raise ValueError(
                "Missing NICHERANK_GOOGLE_SEARCH_API_KEY or NICHERANK_GOOGLE_SEARCH_ENGINE_ID "
                "while search_provider=google. Set them in environment variables or .env."
            )
        return GoogleSearchProvider(
            client=client,
            api_key=settings.google_search_api_key,
            engine_id=settings.google_search_engine_id,
            base_url=settings.google_search_base_url,
            timeout_s=settings.search_timeout_s,
        )

    if settings.search_provider == "brave":
        if not settings.brave_search_api_key:
            raise ValueError(
                "Missing NICHERANK_BRAVE_SEARCH_API_KEY while search_provider=brave. "
                "Set it in environment variables or .env."
            )
        return BraveSearchProvider(
            client=client,
            api_key=settings.brave_search_api_key,
            base_url=settings.brave_search_base_url,
            timeout_s=settings.search_timeout_s,
        )

    return DuckDuckGoSearchProvider()
