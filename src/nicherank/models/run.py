"""Ranking and run models.

These models cross the HTTP boundary, so they serialize with camelCase aliases
(``runId``, ``nicheSlug``) while still accepting snake_case field names.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScoreComponents(_CamelModel):
    """Five 0-100 component scores."""

    search: int = Field(ge=0, le=100)
    performance: int = Field(ge=0, le=100)
    authority: int = Field(ge=0, le=100)
    freshness: int = Field(ge=0, le=100)
    usability: int = Field(ge=0, le=100)


class ScoreWeights(_CamelModel):
    """Weights of the composite score. They must sum to 1."""

    model_config = ConfigDict(frozen=True)

    search: float = 0.40
    performance: float = 0.25
    authority: float = 0.15
    freshness: float = 0.10
    usability: float = 0.10


class RankedSite(_CamelModel):
    url: str
    title: str
    description: str
    domain: str
    favicon: str | None = None


class RankedResult(_CamelModel):
    """One entry of the ranked list."""

    rank: int = Field(ge=1)
    site: RankedSite
    score: int = Field(ge=0, le=100)
    components: ScoreComponents


class RunStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"


class Run(_CamelModel):
    """A stored analysis. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    niche: str
    niche_slug: str
    status: RunStatus
    results: list[RankedResult] = Field(default_factory=list)
    error: str | None = None
    started_at: datetime = Field(default_factory=_utcnow)
    completed_at: datetime = Field(default_factory=_utcnow)


class SubmitResult(_CamelModel):
    """Response of a niche submission."""

    success: bool
    run_id: str
    niche: str
    niche_slug: str | None = None
    results: list[RankedResult] = Field(default_factory=list)
    error: str | None = None
