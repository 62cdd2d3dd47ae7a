"""Implied multiplier for the tracked Polymarket market."""

import asyncio
from collections.abc import Awaitable, Callable

from hedgeyourfun.logging_config import get_logger
from hedgeyourfun.market.snapshots import OddsSnapshot, utc_now
from hedgeyourfun.quotes.polymarket import fetch_outcome_prices, no_multiplier

logger = get_logger(__name__)

OutcomePricesFetcher = Callable[[str], Awaitable[list[float]]]


class OddsCache:
    """Current OddsSnapshot; same publish-by-replacement discipline as PriceCache."""

    def __init__(
        self,
        slug: str,
        fee: float,
        fetch_prices: OutcomePricesFetcher = fetch_outcome_prices,
    ) -> None:
        self.slug = slug
        self.fee = fee
        self._fetch_prices = fetch_prices
        self._snapshot = OddsSnapshot()
        self._refresh_lock = asyncio.Lock()

    def read(self) -> OddsSnapshot:
        return self._snapshot

    def publish(self, snapshot: OddsSnapshot) -> None:
        self._snapshot = snapshot

    async def refresh(self) -> OddsSnapshot:
        """Fetch outcome prices, take "NO" plus the fee, publish it as the multiplier."""
        async with self._refresh_lock:
            prices = await self._fetch_prices(self.slug)
            snapshot = OddsSnapshot(
                multiplier=no_multiplier(prices, self.fee),
                last_updated=utc_now(),
            )
            self.publish(snapshot)
        logger.info("odds_refreshed", slug=self.slug, multiplier=snapshot.multiplier)
        return snapshot
