"""Tests for niche validation and query building."""

from __future__ import annotations

import pytest

from nicherank.models.niche import InvalidNicheError, parse_niche, slugify
from nicherank.tools.queries import build_queries


def test_build_queries_embeds_lowercased_niche_in_fixed_order() -> None:
    """Every variant carries the trimmed, lowercased niche, in template order."""

    queries = build_queries("  Fitness Apps ")

    assert queries == [
        "best fitness apps websites",
        "top fitness apps blogs",
        "fitness apps resources",
    ]
    assert all("fitness apps" in q for q in queries)


def test_build_queries_is_deterministic() -> None:
    assert build_queries("cooking") == build_queries("cooking")


def test_empty_niche_defaults_to_study() -> None:
    assert parse_niche("").text == "study"
    assert parse_niche("   ").text == "study"


def test_niche_is_trimmed() -> None:
    assert parse_niche("  cooking  ").text == "cooking"


def test_niche_of_60_chars_is_accepted() -> None:
    assert parse_niche("a" * 60).text == "a" * 60


def test_niche_over_60_chars_is_rejected() -> None:
    with pytest.raises(InvalidNicheError):
        parse_niche("a" * 61)


@pytest.mark.parametrize("raw", [None, 42, ["cooking"], {"niche": "x"}])
def test_non_string_niche_is_rejected(raw: object) -> None:
    with pytest.raises(InvalidNicheError):
        parse_niche(raw)


def test_slug() -> None:
    assert slugify("Fitness  Apps") == "fitness-apps"
    assert slugify("C++ & Rust!") == "c--rust"
    assert parse_niche("Home Brewing 101").slug == "home-brewing-101"
