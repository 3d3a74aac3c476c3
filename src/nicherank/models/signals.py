"""Per-site signal models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SignalResult(BaseModel):
    """Normalized output of one signal fetcher for one site.

    ``value`` is always in ``[0, 1]``. A failed or timed-out fetch has ``ok=False``.
    """

    ok: bool
    value: float = Field(default=0.0, ge=0.0, le=1.0)
    error_message: str | None = None


class SiteSignal(SignalResult):
    """Lightweight page fetch result; ``value`` is the usability fraction."""

    title: str | None = None
    description: str | None = None
    https: bool = False
    last_modified: datetime | None = None

    @property
    def usability(self) -> float:
        return self.value
