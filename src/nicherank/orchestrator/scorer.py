"""Composite site scoring and re-ranking."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from nicherank.core.concurrency import BatchPolicy, run_in_batches
from nicherank.logging import get_logger
from nicherank.models.run import RankedResult, RankedSite, ScoreComponents, ScoreWeights
from nicherank.models.search import CandidateSite
from nicherank.models.signals import SignalResult, SiteSignal
from nicherank.tools.signals import SignalFetcher, collect_signal
from nicherank.utils.urls import bare_host, favicon_url, hostname_of

logger = get_logger(__name__)

DEFAULT_WEIGHTS = ScoreWeights()
DEFAULT_FRESHNESS = 75

# (max content age in days, score), first match wins
_FRESHNESS_STEPS: tuple[tuple[float, int], ...] = (
    (1, 100),
    (7, 90),
    (30, 75),
    (90, 50),
    (180, 25),
    (365, 10),
)


def round_half_up(value: float | Decimal) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_percent(value: float) -> int:
    return max(0, min(100, round_half_up(Decimal(str(value)) * 100)))


def search_score(index: int) -> int:
    """Rank-based search presence: 100 for the first candidate, minus 10 per position."""

    return max(0, 100 - index * 10)


def compute_total(components: ScoreComponents, weights: ScoreWeights = DEFAULT_WEIGHTS) -> int:
    """Weighted total of the components, rounded half-up.

    Computed in decimal so that e.g. 100/80/60/75/90 gives exactly 85.5 -> 86.
    """

    total = (
        Decimal(components.search) * Decimal(str(weights.search))
        + Decimal(components.performance) * Decimal(str(weights.performance))
        + Decimal(components.authority) * Decimal(str(weights.authority))
        + Decimal(components.freshness) * Decimal(str(weights.freshness))
        + Decimal(components.usability) * Decimal(str(weights.usability))
    )
    return max(0, min(100, round_half_up(total)))


def freshness_from_last_modified(last_modified: datetime | None, *, now: datetime | None = None) -> int:
    """Freshness from content age; without a date the constant default is kept."""

    if last_modified is None:
        return DEFAULT_FRESHNESS
    now = now or datetime.now(timezone.utc)
    age_days = (now - last_modified).total_seconds() / 86400
    for max_age, score in _FRESHNESS_STEPS:
        if age_days <= max_age:
            return score
    return 0


def rerank(results: list[RankedResult]) -> list[RankedResult]:
    """Stable sort by score descending and reassign ranks 1..N."""

    ordered = sorted(results, key=lambda r: r.score, reverse=True)
    return [r.model_copy(update={"rank": i}) for i, r in enumerate(ordered, start=1)]


class Scorer:
    """Score discovered candidates using the three signal fetchers."""

    def __init__(
        self,
        *,
        performance: SignalFetcher,
        authority: SignalFetcher,
        site: SignalFetcher,
        batch_policy: BatchPolicy | None = None,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
        freshness_from_headers: bool = False,
    ) -> None:
        self._performance = performance
        self._authority = authority
        self._site = site
        self._batch_policy = batch_policy or BatchPolicy()
        self._weights = weights
        self._freshness_from_headers = freshness_from_headers

    async def score(self, candidates: list[CandidateSite]) -> list[RankedResult]:
        """Score all candidates in batches and return them ranked."""

        scored = await run_in_batches(candidates, self.score_candidate, self._batch_policy)
        return rerank(scored)

    async def score_candidate(self, index: int, candidate: CandidateSite) -> RankedResult:
        """Score one candidate at zero-based discovery position ``index``.

        The three signals are fetched concurrently; failed signals fall back to zero (or the
        site fetcher's partial result) and the candidate is always returned.
        """

        performance, authority, site = await asyncio.gather(
            collect_signal(self._performance, candidate.origin),
            collect_signal(self._authority, candidate.origin),
            collect_signal(self._site, candidate.origin),
        )

        freshness = DEFAULT_FRESHNESS
        if self._freshness_from_headers and isinstance(site, SiteSignal):
            freshness = freshness_from_last_modified(site.last_modified)

        components = ScoreComponents(
            search=search_score(index),
            performance=to_percent(performance.value),
            authority=to_percent(authority.value),
            freshness=freshness,
            usability=to_percent(site.value),
        )
        total = compute_total(components, self._weights)

        logger.info(
            "Scored site",
            extra={
                "origin": candidate.origin,
                "performance_ok": performance.ok,
                "authority_ok": authority.ok,
                "site_ok": site.ok,
                "score": total,
                "components": components.model_dump(),
            },
        )

        return RankedResult(
            rank=index + 1,
            site=self._site_record(candidate, site),
            score=total,
            components=components,
        )

    @staticmethod
    def _site_record(candidate: CandidateSite, site: SignalResult) -> RankedSite:
        host = hostname_of(candidate.origin)
        title = getattr(site, "title", None) or candidate.title or host
        description = getattr(site, "description", None) or candidate.snippet or f"Website for {host}"
        return RankedSite(
            url=candidate.url,
            title=title,
            description=description,
            domain=bare_host(host),
            favicon=favicon_url(host),
        )
