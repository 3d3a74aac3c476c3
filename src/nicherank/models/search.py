"""Search and discovery models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SearchHit(BaseModel):
    """A single raw web search result, as returned by a provider.

    ``url`` is kept unvalidated here; discovery decides which links are usable.
    """

    title: str = ""
    url: str
    snippet: str = ""


class CandidateSite(BaseModel):
    """A discovered website, unique by origin within one discovery run."""

    url: str
    origin: str
    title: str
    snippet: str


class DiscoveryResult(BaseModel):
    """Outcome of discovery for one niche."""

    candidates: list[CandidateSite] = Field(default_factory=list)
    error: str | None = None
