"""Run store interface."""

from __future__ import annotations

from typing import Protocol

from nicherank.models.run import RankedResult, Run, RunStatus


class RunStore(Protocol):
    """Persists completed analyses and looks them up by run id.

    Each run id is produced exactly once and its record is never mutated.
    """

    def create(
        self,
        niche: str,
        niche_slug: str,
        results: list[RankedResult],
        *,
        status: RunStatus = RunStatus.COMPLETED,
        error: str | None = None,
    ) -> str:
        """Store a run and return its id."""

    def fetch(self, run_id: str) -> Run | None:
        """Return the stored run, or ``None`` if unknown."""
