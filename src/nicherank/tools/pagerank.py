"""Open PageRank authority signal."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from nicherank.core.concurrency import SignalError
from nicherank.logging import get_logger
from nicherank.models.signals import SignalResult
from nicherank.tools.signals import clamp_unit
from nicherank.utils.urls import bare_host, hostname_of

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthorityFetcher:
    """Domain authority from Open PageRank, normalized from 0-10 to 0-1.

    An unknown domain is a known zero (``ok=True``), not a failure.
    """

    client: httpx.AsyncClient
    api_key: str | None = None
    base_url: str = "https://openpagerank.com/api/v1.0/getPageRank"
    timeout_s: float = 10.0
    name: str = "authority"

    async def fetch(self, url: str) -> SignalResult:
        if not self.api_key:
            raise SignalError("Open PageRank API key not configured (NICHERANK_OPENPAGERANK_API_KEY)")

        domain = bare_host(hostname_of(url))
        if not domain:
            raise SignalError(f"cannot derive a domain from {url!r}")

        resp = await self.client.get(
            self.base_url,
            params={"domains[]": domain},
            headers={"API-OPR": self.api_key, "Accept": "application/json"},
            timeout=self.timeout_s,
        )
        if resp.status_code >= 400:
            raise SignalError(f"Open PageRank API error: {resp.status_code} {resp.reason_phrase}")

        data = resp.json()
        if not isinstance(data, dict):
            raise SignalError("Open PageRank response not a JSON object")
        if data.get("status_code") != 200:
            raise SignalError(f"Open PageRank API error: {data.get('error') or 'Unknown error'}")

        entries = data.get("response")
        if not entries:
            return SignalResult(ok=True, value=0.0)

        entry = entries[0] if isinstance(entries, list) else None
        if not isinstance(entry, dict):
            raise SignalError("Open PageRank response entry malformed")
        if entry.get("status_code") == 404:
            logger.debug("Domain unknown to Open PageRank", extra={"domain": domain})
            return SignalResult(ok=True, value=0.0)

        rank = entry.get("page_rank_decimal") or 0
        if isinstance(rank, str):
            try:
                rank = float(rank)
            except ValueError as e:
                raise SignalError(f"Open PageRank rank not numeric: {rank!r}") from e
        return SignalResult(ok=True, value=clamp_unit(rank / 10))

    def failure(self, url: str, reason: str) -> SignalResult:
        return SignalResult(ok=False, value=0.0, error_message=reason)
