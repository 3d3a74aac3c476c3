"""Site discovery.

Runs the niche's query variants against a search provider, then turns the merged hits into a
short list of candidate sites, one per origin.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from nicherank.logging import get_logger
from nicherank.models.search import CandidateSite, DiscoveryResult, SearchHit
from nicherank.tools.queries import build_queries
from nicherank.tools.web_search import WebSearchProvider
from nicherank.utils.urls import bare_host, parse_origin

logger = get_logger(__name__)

# Platforms that are never ranked as niche websites
SKIP_DOMAINS: frozenset[str] = frozenset(
    {
        "google.com",
        "youtube.com",
        "facebook.com",
        "twitter.com",
        "x.com",
        "instagram.com",
        "linkedin.com",
        "reddit.com",
        "wikipedia.org",
        "pinterest.com",
        "tiktok.com",
    }
)


def no_results_message(niche: str) -> str:
    return f'No websites found for "{niche}". Try a different search term.'


def should_skip_host(hostname: str) -> bool:
    return bare_host(hostname) in SKIP_DOMAINS


def select_candidates(
    hits: list[SearchHit],
    *,
    niche: str,
    max_origins: int,
) -> list[CandidateSite]:
    """Filter hits down to unique, well-formed, non-platform origins in first-seen order.

    Args:
        hits: Raw hits in query-variant order, page 1 before page 2.
        niche: Niche used for the fallback description.
        max_origins: Stop after this many unique origins.
    """

    seen: set[str] = set()
    candidates: list[CandidateSite] = []

    for hit in hits:
        parsed = parse_origin(hit.url)
        if parsed is None:
            logger.debug("Dropped malformed link", extra={"url": hit.url})
            continue

        origin, host = parsed
        if should_skip_host(host) or origin in seen:
            continue

        seen.add(origin)
        candidates.append(
            CandidateSite(
                url=hit.url.strip(),
                origin=origin,
                title=hit.title.strip() or host,
                snippet=hit.snippet.strip() or f"Top website for {niche}",
            )
        )
        if len(candidates) >= max_origins:
            break

    return candidates


@dataclass
class DiscoveryClient:
    """Discover candidate websites for a niche."""

    provider: WebSearchProvider
    page_size: int = 10
    query_delay_s: float = 0.2
    max_candidates: int = 10
    max_origins: int = 15

    async def discover(self, niche: str) -> DiscoveryResult:
        """Discover up to ``max_candidates`` sites for ``niche``.

        A failing query variant is logged and skipped. If nothing usable survives, the result
        carries an error and no candidates.
        """

        queries = build_queries(niche)
        hits: list[SearchHit] = []
        calls = 0
        failures = 0
        last_error: Exception | None = None
        candidates: list[CandidateSite] = []

        logger.info("Discovery started", extra={"niche": niche, "queries": queries})

        for query in queries:
            for page in (1, 2):
                if calls:
                    await asyncio.sleep(self.query_delay_s)
                calls += 1
                try:
                    page_hits = await self.provider.search(query, page=page, page_size=self.page_size)
                except Exception as e:
                    failures += 1
                    last_error = e
                    logger.warning(
                        "Search query failed; skipping",
                        extra={"query": query, "page": page, "error_type": type(e).__name__, "error": str(e)},
                    )
                    break

                hits.extend(page_hits)
                if not page_hits:
                    break

            candidates = select_candidates(hits, niche=niche, max_origins=self.max_origins)
            if len(candidates) >= self.max_origins:
                break

        candidates = candidates[: self.max_candidates]
        logger.info(
            "Discovery finished",
            extra={
                "niche": niche,
                "calls": calls,
                "failures": failures,
                "hits": len(hits),
                "candidates": len(candidates),
            },
        )

        if candidates:
            return DiscoveryResult(candidates=candidates)

        if calls and failures == calls and last_error is not None:
            return DiscoveryResult(error=f'Search failed for "{niche}": {last_error}')
        return DiscoveryResult(error=no_results_message(niche))
