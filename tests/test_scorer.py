"""Tests for the composite scorer."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timedelta, timezone

import pytest

from fakes import FixedFetcher, FixedSiteFetcher, make_candidates
from nicherank.core.concurrency import BatchPolicy
from nicherank.models.run import RankedResult, RankedSite, ScoreComponents
from nicherank.orchestrator.scorer import (
    DEFAULT_FRESHNESS,
    Scorer,
    compute_total,
    freshness_from_last_modified,
    rerank,
    search_score,
)


def _scorer(performance=0.8, authority=0.6, site=0.9, **kwargs) -> Scorer:
    return Scorer(
        performance=performance if not isinstance(performance, float) else FixedFetcher("performance", performance),
        authority=authority if not isinstance(authority, float) else FixedFetcher("authority", authority),
        site=site if not isinstance(site, float) else FixedSiteFetcher("site", site),
        batch_policy=BatchPolicy(size=3, pause_s=0),
        **kwargs,
    )


def test_weighted_total_seed() -> None:
    components = ScoreComponents(search=100, performance=80, authority=60, freshness=75, usability=90)

    assert compute_total(components) == 86


def test_total_rounds_half_up() -> None:
    # 90*0.4 + 50*0.25 + 0 + 75*0.1 + 40*0.1 = 36 + 12.5 + 7.5 + 4 = 60.0
    assert compute_total(ScoreComponents(search=90, performance=50, authority=0, freshness=75, usability=40)) == 60
    # 80*0.4 + 10*0.25 + 10*0.15 + 75*0.1 + 0 = 32 + 2.5 + 1.5 + 7.5 = 43.5
    assert compute_total(ScoreComponents(search=80, performance=10, authority=10, freshness=75, usability=0)) == 44


@pytest.mark.parametrize(("index", "expected"), [(0, 100), (1, 90), (9, 10), (10, 0), (14, 0)])
def test_search_score_by_position(index: int, expected: int) -> None:
    assert search_score(index) == expected


@pytest.mark.asyncio
async def test_score_candidate_components(candidates) -> None:
    result = await _scorer().score_candidate(0, candidates[0])

    assert result.components == ScoreComponents(search=100, performance=80, authority=60, freshness=75, usability=90)
    assert result.score == 86
    assert result.site.url == "https://one.example/page"
    assert result.site.domain == "one.example"
    assert result.site.title == "Title of https://one.example"


class SleepyFetcher(FixedFetcher):
    async def fetch(self, url: str):
        await asyncio.sleep(0.2)
        return await super().fetch(url)


class SleepySiteFetcher(FixedSiteFetcher):
    async def fetch(self, url: str):
        await asyncio.sleep(0.2)
        return await super().fetch(url)


@pytest.mark.asyncio
async def test_signals_for_one_candidate_are_fetched_concurrently(candidates) -> None:
    scorer = _scorer(
        performance=SleepyFetcher("performance", 0.8),
        authority=SleepyFetcher("authority", 0.6),
        site=SleepySiteFetcher("site", 0.9),
    )

    started = time.monotonic()
    result = await scorer.score_candidate(0, candidates[0])
    elapsed = time.monotonic() - started

    assert result.score == 86
    # one after another would take about 0.6s
    assert elapsed < 0.45


@pytest.mark.asyncio
async def test_signals_use_origin_and_run_for_every_candidate(candidates) -> None:
    performance = FixedFetcher("performance", 0.5)
    authority = FixedFetcher("authority", 0.5)
    site = FixedSiteFetcher("site", 0.5)

    await _scorer(performance=performance, authority=authority, site=site).score(candidates)

    origins = [c.origin for c in candidates]
    assert sorted(performance.calls) == sorted(origins)
    assert sorted(authority.calls) == sorted(origins)
    assert sorted(site.calls) == sorted(origins)


@pytest.mark.asyncio
async def test_failed_signals_zero_components_but_keep_candidate(candidates) -> None:
    failing = {"https://two.example"}
    scorer = _scorer(
        performance=FixedFetcher("performance", 0.9, failing=failing),
        authority=FixedFetcher("authority", 0.9, failing=failing),
        site=FixedSiteFetcher("site", 0.9, failing=failing),
    )

    results = await scorer.score(candidates)

    assert len(results) == 3
    two = next(r for r in results if r.site.domain == "two.example")
    assert two.components.performance == 0
    assert two.components.authority == 0
    assert two.components.usability == 40
    assert two.site.title == "TWO.EXAMPLE"
    assert two.site.description == "About two.example"


@pytest.mark.asyncio
async def test_results_sorted_and_ranked(candidates) -> None:
    # the third candidate has much better signals and overtakes the others
    scorer = _scorer(
        performance=FixedFetcher("performance", {"https://three.example": 1.0}),
        authority=FixedFetcher("authority", {"https://three.example": 1.0}),
        site=FixedSiteFetcher("site", {"https://three.example": 1.0}),
    )

    results = await scorer.score(candidates)

    assert [r.rank for r in results] == [1, 2, 3]
    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)
    assert results[0].site.domain == "three.example"
    for r in results:
        assert 0 <= r.score <= 100
        for value in r.components.model_dump().values():
            assert 0 <= value <= 100


def _result(rank: int, score: int, name: str) -> RankedResult:
    return RankedResult(
        rank=rank,
        site=RankedSite(url=f"https://{name}", title=name, description=name, domain=name),
        score=score,
        components=ScoreComponents(search=0, performance=0, authority=0, freshness=0, usability=0),
    )


def test_rerank_is_stable_for_ties() -> None:
    ranked = rerank([_result(1, 50, "a"), _result(2, 70, "b"), _result(3, 50, "c"), _result(4, 70, "d")])

    assert [r.site.title for r in ranked] == ["b", "d", "a", "c"]
    assert [r.rank for r in ranked] == [1, 2, 3, 4]


@pytest.mark.asyncio
async def test_eleventh_candidate_has_zero_search_score() -> None:
    hosts = [f"s{i}.example" for i in range(11)]
    results = await _scorer().score(make_candidates(*hosts))

    last = next(r for r in results if r.site.domain == "s10.example")
    assert last.components.search == 0


def test_freshness_from_last_modified() -> None:
    now = datetime(2026, 10, 18, tzinfo=timezone.utc)

    assert freshness_from_last_modified(None, now=now) == DEFAULT_FRESHNESS
    assert freshness_from_last_modified(now - timedelta(hours=3), now=now) == 100
    assert freshness_from_last_modified(now - timedelta(days=5), now=now) == 90
    assert freshness_from_last_modified(now - timedelta(days=20), now=now) == 75
    assert freshness_from_last_modified(now - timedelta(days=60), now=now) == 50
    assert freshness_from_last_modified(now - timedelta(days=120), now=now) == 25
    assert freshness_from_last_modified(now - timedelta(days=300), now=now) == 10
    assert freshness_from_last_modified(now - timedelta(days=800), now=now) == 0


@pytest.mark.asyncio
async def test_freshness_is_constant_by_default(candidates) -> None:
    results = await _scorer().score(candidates)

    assert {r.components.freshness for r in results} == {75}
