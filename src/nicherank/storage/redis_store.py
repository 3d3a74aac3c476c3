"""Redis-based run store.

This is optional and complements the file store. It enables multi-instance deployments where
runs are accessible without reading local disk. Runs expire after a TTL.
"""

from __future__ import annotations

from dataclasses import dataclass

import redis

from nicherank.models.run import RankedResult, Run, RunStatus
from nicherank.utils.ids import new_run_id


@dataclass
class RedisRunStore:
    """One JSON string per run under ``<prefix>:run:<id>``."""

    redis_url: str
    key_prefix: str
    ttl_seconds: int = 60 * 60 * 24

    def __post_init__(self) -> None:
        self._client = redis.Redis.from_url(self.redis_url, decode_responses=True)

    def _key(self, run_id: str) -> str:
        return f"{self.key_prefix}:run:{run_id}"

    def create(
        self,
        niche: str,
        niche_slug: str,
        results: list[RankedResult],
        *,
        status: RunStatus = RunStatus.COMPLETED,
        error: str | None = None,
    ) -> str:
        while True:
            run_id = new_run_id()
            run = Run(id=run_id, niche=niche, niche_slug=niche_slug, status=status, results=results, error=error)
            # NX keeps an existing run from being overwritten
            if self._client.set(self._key(run_id), run.model_dump_json(by_alias=True), ex=self.ttl_seconds, nx=True):
                return run_id

    def fetch(self, run_id: str) -> Run | None:
        raw = self._client.get(self._key(run_id))
        if raw is None:
            return None
        return Run.model_validate_json(raw)
