"""Page fetching utilities: the lightweight site signal."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httpx
from bs4 import BeautifulSoup

from nicherank.core.concurrency import SignalError
from nicherank.logging import get_logger
from nicherank.models.signals import SiteSignal

logger = get_logger(__name__)

TITLE_MAX_CHARS = 100
DESCRIPTION_MAX_CHARS = 200
MAX_HTML_BYTES = 512 * 1024

HTTPS_WEIGHT = 0.4
VIEWPORT_WEIGHT = 0.3
OPEN_GRAPH_WEIGHT = 0.3

_DESCRIPTION_NAME = re.compile(r"^\s*description\s*$", re.IGNORECASE)
_VIEWPORT_NAME = re.compile(r"^\s*viewport\s*$", re.IGNORECASE)
_OPEN_GRAPH_PROPERTY = re.compile(r"^\s*og:", re.IGNORECASE)


def _soup(page: BeautifulSoup | str) -> BeautifulSoup:
    return page if isinstance(page, BeautifulSoup) else BeautifulSoup(page, "lxml")


def extract_title(page: BeautifulSoup | str) -> str | None:
    soup = _soup(page)
    if soup.title is None:
        return None
    title = " ".join(soup.title.get_text().split())
    return title[:TITLE_MAX_CHARS] or None


def extract_description(page: BeautifulSoup | str) -> str | None:
    for tag in _soup(page).find_all("meta", attrs={"name": _DESCRIPTION_NAME}):
        content = tag.get("content")
        if content is not None:
            return content.strip()[:DESCRIPTION_MAX_CHARS] or None
    return None


def has_viewport(page: BeautifulSoup | str) -> bool:
    return _soup(page).find("meta", attrs={"name": _VIEWPORT_NAME}) is not None


def has_open_graph(page: BeautifulSoup | str) -> bool:
    return _soup(page).find("meta", property=_OPEN_GRAPH_PROPERTY) is not None


def usability_fraction(*, https: bool, viewport: bool, open_graph: bool) -> float:
    """Sum the weights of the usability checks that pass."""

    return round(
        (HTTPS_WEIGHT if https else 0.0)
        + (VIEWPORT_WEIGHT if viewport else 0.0)
        + (OPEN_GRAPH_WEIGHT if open_graph else 0.0),
        4,
    )


def parse_last_modified(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


async def _read_capped(resp: httpx.Response, max_bytes: int) -> bytes:
    """Read at most ``max_bytes`` of a streamed body; the rest is never downloaded."""

    body = bytearray()
    async for chunk in resp.aiter_bytes():
        body.extend(chunk)
        if len(body) >= max_bytes:
            break
    return bytes(body[:max_bytes])


def _decode(body: bytes, charset: str | None) -> str:
    try:
        return body.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class SiteFetcher:
    """Fetch a site's front page once and derive title, description and usability."""

    client: httpx.AsyncClient
    user_agent: str = "NicheRank Bot 1.0 (Website Analyzer)"
    timeout_s: float = 10.0
    name: str = "site"

    async def fetch(self, url: str) -> SiteSignal:
        async with self.client.stream(
            "GET",
            url,
            headers={"User-Agent": self.user_agent, "Accept": "text/html,application/xhtml+xml"},
            timeout=self.timeout_s,
            follow_redirects=True,
        ) as resp:
            if resp.status_code >= 400:
                raise SignalError(f"site returned HTTP {resp.status_code}")
            body = await _read_capped(resp, MAX_HTML_BYTES)

        soup = BeautifulSoup(_decode(body, resp.charset_encoding), "lxml")
        https = resp.url.scheme == "https"
        signal = SiteSignal(
            ok=True,
            value=usability_fraction(https=https, viewport=has_viewport(soup), open_graph=has_open_graph(soup)),
            title=extract_title(soup),
            description=extract_description(soup),
            https=https,
            last_modified=parse_last_modified(resp.headers.get("last-modified")),
        )
        logger.debug(
            "Site fetch ok",
            extra={"url": url, "final_url": str(resp.url), "bytes": len(body), "usability": signal.value},
        )
        return signal

    def failure(self, url: str, reason: str) -> SiteSignal:
        https = url.strip().lower().startswith("https://")
        return SiteSignal(
            ok=False,
            value=HTTPS_WEIGHT if https else 0.0,
            https=https,
            error_message=reason,
        )
