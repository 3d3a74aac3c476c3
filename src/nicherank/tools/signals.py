"""Signal fetcher interface and the fail-soft collection wrapper."""

from __future__ import annotations

from typing import Protocol

from nicherank.core.concurrency import with_deadline
from nicherank.logging import get_logger
from nicherank.models.signals import SignalResult

logger = get_logger(__name__)


class SignalFetcher(Protocol):
    """A per-site signal source with its own deadline."""

    name: str
    timeout_s: float

    async def fetch(self, url: str) -> SignalResult:
        """Fetch the signal; may raise on any failure."""

    def failure(self, url: str, reason: str) -> SignalResult:
        """Result to use when :meth:`fetch` failed or timed out."""


def clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


async def collect_signal(fetcher: SignalFetcher, url: str) -> SignalResult:
    """Run ``fetcher`` for ``url`` under its deadline, never raising.

    Errors and timeouts are logged and replaced by ``fetcher.failure(...)``.
    """

    try:
        return await with_deadline(fetcher.fetch(url), timeout_s=fetcher.timeout_s, label=fetcher.name)
    except Exception as e:
        logger.warning(
            "Signal fetch failed; using fallback",
            extra={"signal": fetcher.name, "url": url, "error_type": type(e).__name__, "error": str(e)},
        )
        return fetcher.failure(url, str(e) or type(e).__name__)
