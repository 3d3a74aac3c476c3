"""Tests for search providers."""

from __future__ import annotations

import httpx
import pytest

from nicherank.config import Settings
from nicherank.tools.web_search import (
    BraveSearchProvider,
    DuckDuckGoSearchProvider,
    GoogleSearchProvider,
    WebSearchError,
    get_search_provider,
)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_google_search_page_two_starts_at_11() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(
            200,
            json={
                "items": [
                    {"title": "Cook", "link": "https://cook.example/recipes", "snippet": "Recipes"},
                    {"title": "No link"},
                ]
            },
        )

    async with _client(handler) as client:
        provider = GoogleSearchProvider(client=client, api_key="k", engine_id="cx", base_url="https://g.example/search")
        hits = await provider.search("best cooking websites", page=2, page_size=10)

    assert [h.url for h in hits] == ["https://cook.example/recipes"]
    assert hits[0].title == "Cook"
    assert hits[0].snippet == "Recipes"

    params = calls[0].url.params
    assert params["start"] == "11"
    assert params["num"] == "10"
    assert params["q"] == "best cooking websites"
    assert params["cx"] == "cx"
    assert params["key"] == "k"


@pytest.mark.asyncio
async def test_google_search_without_items_returns_empty() -> None:
    async with _client(lambda request: httpx.Response(200, json={"searchInformation": {}})) as client:
        provider = GoogleSearchProvider(client=client, api_key="k", engine_id="cx")
        assert await provider.search("q", page=1, page_size=10) == []


@pytest.mark.asyncio
async def test_google_search_http_error_raises() -> None:
    async with _client(lambda request: httpx.Response(403, json={})) as client:
        provider = GoogleSearchProvider(client=client, api_key="k", engine_id="cx")
        with pytest.raises(WebSearchError):
            await provider.search("q", page=1, page_size=10)


@pytest.mark.asyncio
async def test_google_search_api_error_body_raises() -> None:
    payload = {"error": {"code": 429, "message": "Quota exceeded"}}
    async with _client(lambda request: httpx.Response(200, json=payload)) as client:
        provider = GoogleSearchProvider(client=client, api_key="k", engine_id="cx")
        with pytest.raises(WebSearchError, match="Quota exceeded"):
            await provider.search("q", page=1, page_size=10)


@pytest.mark.asyncio
async def test_brave_search_maps_results_and_offset() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(
            200,
            json={"web": {"results": [{"title": "B", "url": "https://b.example/", "description": "desc"}]}},
        )

    async with _client(handler) as client:
        provider = BraveSearchProvider(client=client, api_key="brave-key")
        hits = await provider.search("q", page=2, page_size=10)

    assert hits[0].url == "https://b.example/"
    assert hits[0].snippet == "desc"
    assert calls[0].url.params["offset"] == "1"
    assert calls[0].headers["X-Subscription-Token"] == "brave-key"


@pytest.mark.asyncio
async def test_duckduckgo_pages_are_slices(monkeypatch) -> None:
    class StubDDGS:
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

        def text(self, query, safesearch=None, max_results=None):
            return [
                {"title": f"t{i}", "href": f"https://site{i}.example/", "body": ""}
                for i in range(max_results)
            ]

    monkeypatch.setattr("nicherank.tools.web_search.DDGS", StubDDGS)

    hits = await DuckDuckGoSearchProvider().search("q", page=2, page_size=3)

    assert [h.title for h in hits] == ["t3", "t4", "t5"]


def test_factory_requires_google_credentials() -> None:
    settings = Settings(search_provider="google")
    with pytest.raises(ValueError, match="GOOGLE_SEARCH_API_KEY"):
        get_search_provider(settings, httpx.AsyncClient())


def test_factory_builds_configured_provider() -> None:
    client = httpx.AsyncClient()
    google = get_search_provider(
        Settings(search_provider="google", google_search_api_key="k", google_search_engine_id="cx"), client
    )
    brave = get_search_provider(Settings(search_provider="brave", brave_search_api_key="b"), client)
    ddg = get_search_provider(Settings(search_provider="duckduckgo"), client)

    assert isinstance(google, GoogleSearchProvider)
    assert isinstance(brave, BraveSearchProvider)
    assert isinstance(ddg, DuckDuckGoSearchProvider)
