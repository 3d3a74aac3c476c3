"""Pydantic models used across the project."""

from __future__ import annotations

from nicherank.models.niche import InvalidNicheError, NicheQuery, parse_niche, slugify
from nicherank.models.run import (
    RankedResult,
    RankedSite,
    Run,
    RunStatus,
    ScoreComponents,
    ScoreWeights,
    SubmitResult,
)
from nicherank.models.search import CandidateSite, DiscoveryResult, SearchHit
from nicherank.models.signals import SignalResult, SiteSignal

__all__ = [
    "CandidateSite",
    "DiscoveryResult",
    "InvalidNicheError",
    "NicheQuery",
    "RankedResult",
    "RankedSite",
    "Run",
    "RunStatus",
    "ScoreComponents",
    "ScoreWeights",
    "SearchHit",
    "SignalResult",
    "SiteSignal",
    "SubmitResult",
    "parse_niche",
    "slugify",
]
