"""Submit / retrieve orchestration.

`NicheRanker` is the boundary the API and CLI talk to. A submission runs discovery, scores the
discovered sites and stores the run. Failures never escape `submit`; they come back as a
`SubmitResult` with ``success=False`` and an empty result list.
"""

from __future__ import annotations

import asyncio

import httpx

from nicherank.config import Settings
from nicherank.core.concurrency import BatchPolicy
from nicherank.logging import get_logger, log_exception, run_context, set_step
from nicherank.models.niche import parse_niche
from nicherank.models.run import Run, RunStatus, SubmitResult
from nicherank.orchestrator.scorer import Scorer
from nicherank.storage import RunStore, build_run_store
from nicherank.tools.discovery import DiscoveryClient, no_results_message
from nicherank.tools.page_fetcher import SiteFetcher
from nicherank.tools.pagerank import AuthorityFetcher
from nicherank.tools.pagespeed import PerformanceFetcher
from nicherank.tools.web_search import get_search_provider
from nicherank.utils.ids import new_run_id

logger = get_logger(__name__)


class NicheRanker:
    """Rank websites for a niche and keep the finished runs."""

    def __init__(
        self,
        *,
        discovery: DiscoveryClient,
        scorer: Scorer,
        store: RunStore,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._discovery = discovery
        self._scorer = scorer
        self._store = store
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        store: RunStore | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "NicheRanker":
        """Wire the default providers and fetchers from settings.

        The ranker owns ``client`` and closes it in :meth:`aclose`.
        """

        client = client if client is not None else httpx.AsyncClient(follow_redirects=False)
        discovery = DiscoveryClient(
            provider=get_search_provider(settings, client),
            page_size=settings.search_page_size,
            query_delay_s=settings.search_query_delay_s,
            max_candidates=settings.discovery_max_candidates,
            max_origins=settings.discovery_max_origins,
        )
        scorer = Scorer(
            performance=PerformanceFetcher(
                client=client,
                api_key=settings.pagespeed_api_key,
                base_url=settings.pagespeed_base_url,
                strategy=settings.pagespeed_strategy,
                timeout_s=settings.pagespeed_timeout_s,
            ),
            authority=AuthorityFetcher(
                client=client,
                api_key=settings.openpagerank_api_key,
                base_url=settings.openpagerank_base_url,
                timeout_s=settings.openpagerank_timeout_s,
            ),
            site=SiteFetcher(
                client=client,
                user_agent=settings.site_user_agent,
                timeout_s=settings.site_timeout_s,
            ),
            batch_policy=BatchPolicy(size=settings.score_batch_size, pause_s=settings.score_batch_pause_s),
            freshness_from_headers=settings.freshness_from_headers,
        )
        return cls(
            discovery=discovery,
            scorer=scorer,
            store=store if store is not None else build_run_store(settings),
            client=client,
        )

    async def __aenter__(self) -> "NicheRanker":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def submit(self, raw_niche: object) -> SubmitResult:
        """Run a full analysis for a niche.

        Raises:
            InvalidNicheError: If the niche is rejected at the boundary. This is the only
                exception that escapes; it is raised before any work starts.
        """

        query = parse_niche(raw_niche)
        niche, niche_slug = query.text, query.slug
        provisional_id = new_run_id()

        with run_context(run_id=provisional_id, step="discovery"):
            logger.info("Processing niche", extra={"niche": niche, "niche_slug": niche_slug})
            try:
                return await self._submit(niche, niche_slug)
            except Exception as e:
                log_exception(logger, "Run failed", niche=niche)
                return SubmitResult(
                    success=False,
                    run_id=provisional_id,
                    niche=niche,
                    niche_slug=niche_slug,
                    error=f'Failed to analyze "{niche}". {e}',
                )

    async def _submit(self, niche: str, niche_slug: str) -> SubmitResult:
        discovery = await self._discovery.discover(niche)

        if not discovery.candidates:
            error = discovery.error or no_results_message(niche)
            logger.warning("No websites discovered", extra={"niche": niche, "error": error})
            run_id = await asyncio.to_thread(
                self._store.create, niche, niche_slug, [], status=RunStatus.FAILED, error=error
            )
            return SubmitResult(success=False, run_id=run_id, niche=niche, niche_slug=niche_slug, error=error)

        set_step("scoring")
        results = await self._scorer.score(discovery.candidates)

        set_step("store")
        run_id = await asyncio.to_thread(self._store.create, niche, niche_slug, results)
        logger.info("Run completed", extra={"stored_run_id": run_id, "results": len(results)})
        return SubmitResult(success=True, run_id=run_id, niche=niche, niche_slug=niche_slug, results=results)

    async def retrieve(self, run_id: str) -> Run | None:
        """Look up a stored run by id."""

        return await asyncio.to_thread(self._store.fetch, run_id)
