"""Discovery and signal tools used by the scorer."""

from __future__ import annotations

from nicherank.tools.discovery import DiscoveryClient, select_candidates
from nicherank.tools.page_fetcher import SiteFetcher
from nicherank.tools.pagerank import AuthorityFetcher
from nicherank.tools.pagespeed import PerformanceFetcher
from nicherank.tools.queries import build_queries
from nicherank.tools.signals import SignalFetcher, collect_signal
from nicherank.tools.web_search import (
    BraveSearchProvider,
    DuckDuckGoSearchProvider,
    GoogleSearchProvider,
    WebSearchError,
    WebSearchProvider,
    get_search_provider,
)

__all__ = [
    "AuthorityFetcher",
    "BraveSearchProvider",
    "DiscoveryClient",
    "DuckDuckGoSearchProvider",
    "GoogleSearchProvider",
    "PerformanceFetcher",
    "SignalFetcher",
    "SiteFetcher",
    "WebSearchError",
    "WebSearchProvider",
    "build_queries",
    "collect_signal",
    "get_search_provider",
    "select_candidates",
]
