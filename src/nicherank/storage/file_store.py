"""File-based run store.

Writes one JSON document per run under a directory, so runs survive restarts and can be read
by `nicherank show`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from nicherank.logging import get_logger
from nicherank.models.run import RankedResult, Run, RunStatus
from nicherank.utils.ids import new_run_id

logger = get_logger(__name__)

_RUN_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass
class FileRunStore:
    """Directory of ``<run_id>.json`` files."""

    root: Path

    def __post_init__(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, run_id: str) -> Path:
        return self.root / f"{run_id}.json"

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
        while self._path(run_id).exists():
            run_id = new_run_id()

        run = Run(id=run_id, niche=niche, niche_slug=niche_slug, status=status, results=results, error=error)
        path = self._path(run_id)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(run.model_dump_json(by_alias=True), encoding="utf-8")
        tmp.replace(path)
        logger.info("Run stored", extra={"stored_run_id": run_id, "path": str(path), "status": status.value})
        return run_id

    def fetch(self, run_id: str) -> Run | None:
        if not _RUN_ID_RE.match(run_id):
            return None
        path = self._path(run_id)
        if not path.exists():
            return None
        return Run.model_validate_json(path.read_text(encoding="utf-8"))
