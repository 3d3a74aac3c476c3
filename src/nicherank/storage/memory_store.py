"""In-process run store."""

from __future__ import annotations

from nicherank.models.run import RankedResult, Run, RunStatus
from nicherank.utils.ids import new_run_id


class InMemoryRunStore:
    """Dict-backed store; contents live as long as the process."""

    def __init__(self) -> None:
        self._runs: dict[str, Run] = {}

    def create(
        self,
        niche: str,
        niche_slug: str,
        results: list[RankedResult],
        *,
        status: RunStatus = RunStatus.COMPLETED,
        error: str | None = None,
    ) -> str:
        run_id = new_run_id()
        while run_id in self._runs:
            run_id = new_run_id()
        self._runs[run_id] = Run(
            id=run_id,
            niche=niche,
            niche_slug=niche_slug,
            status=status,
            results=[r.model_copy(deep=True) for r in results],
            error=error,
        )
        return run_id

    def fetch(self, run_id: str) -> Run | None:
        return self._runs.get(run_id)

    def __len__(self) -> int:
        return len(self._runs)
