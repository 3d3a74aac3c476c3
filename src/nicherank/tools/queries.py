"""Search query variants for a niche."""

from __future__ import annotations

QUERY_TEMPLATES: tuple[str, ...] = (
    "best {niche} websites",
    "top {niche} blogs",
    "{niche} resources",
)


def build_queries(niche: str) -> list[str]:
    """Expand a niche into search queries.

    Earlier queries contribute results first, so their hits rank higher in discovery.
    """

    clean = niche.lower().strip()
    return [template.format(niche=clean) for template in QUERY_TEMPLATES]
