"""PageSpeed Insights performance signal."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from nicherank.core.concurrency import SignalError
from nicherank.logging import get_logger
from nicherank.models.signals import SignalResult
from nicherank.tools.signals import clamp_unit

logger = get_logger(__name__)


@dataclass(frozen=True)
class PerformanceFetcher:
    """Lighthouse performance score (0-1) for a URL."""

    client: httpx.AsyncClient
    api_key: str | None = None
    base_url: str = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
    strategy: str = "mobile"
    timeout_s: float = 15.0
    name: str = "performance"

    async def fetch(self, url: str) -> SignalResult:
        params = {"url": url, "strategy": self.strategy, "category": "performance"}
        if self.api_key:
            params["key"] = self.api_key

        resp = await self.client.get(
            self.base_url,
            params=params,
            headers={"Accept": "application/json"},
            timeout=self.timeout_s,
        )
        if resp.status_code >= 400:
            raise SignalError(f"PageSpeed API error: {resp.status_code} {resp.reason_phrase}")

        score = _performance_score(resp.json())
        logger.debug("PageSpeed ok", extra={"url": url, "score": score})
        return SignalResult(ok=True, value=clamp_unit(score))

    def failure(self, url: str, reason: str) -> SignalResult:
        return SignalResult(ok=False, value=0.0, error_message=reason)


def _performance_score(payload: object) -> float:
    try:
        score = payload["lighthouseResult"]["categories"]["performance"]["score"]  # type: ignore[index]
    except (KeyError, TypeError) as e:
        raise SignalError("PageSpeed response missing performance score") from e

    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise SignalError("PageSpeed performance score is not a number")
    return float(score)
