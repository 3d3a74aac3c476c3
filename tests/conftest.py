"""Shared fixtures."""

from __future__ import annotations

import pytest

from fakes import make_candidates
from nicherank.models.search import CandidateSite


@pytest.fixture
def candidates() -> list[CandidateSite]:
    return make_candidates("one.example", "two.example", "three.example")
