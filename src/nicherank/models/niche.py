"""Niche input model."""

from __future__ import annotations

import re

from pydantic import BaseModel

NICHE_MAX_LENGTH = 60
DEFAULT_NICHE = "study"

_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_STRIP_RE = re.compile(r"[^a-z0-9-]")


class InvalidNicheError(ValueError):
    """Raised when a submitted niche cannot be accepted."""


def slugify(text: str) -> str:
    """Lowercase, hyphenate whitespace and strip anything outside ``[a-z0-9-]``."""

    return _SLUG_STRIP_RE.sub("", _WHITESPACE_RE.sub("-", text.lower().strip()))


class NicheQuery(BaseModel):
    """A validated niche as accepted at the submit boundary."""

    text: str

    @property
    def slug(self) -> str:
        return slugify(self.text)


def parse_niche(raw: object) -> NicheQuery:
    """Validate and normalize a raw niche value.

    Empty (or whitespace-only) input falls back to ``"study"``.

    Raises:
        InvalidNicheError: If the value is missing, not a string, or longer than 60 characters.
    """

    if raw is None or not isinstance(raw, str):
        raise InvalidNicheError("Niche parameter is required")

    text = raw.strip()
    if not text:
        text = DEFAULT_NICHE
    if len(text) > NICHE_MAX_LENGTH:
        raise InvalidNicheError(f"Niche must be {NICHE_MAX_LENGTH} characters or less")

    return NicheQuery(text=text)
