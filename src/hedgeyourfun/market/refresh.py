"""Background refresh loops and the object that owns both caches."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from hedgeyourfun.config import Settings
from hedgeyourfun.errors import FetchError
from hedgeyourfun.logging_config import get_logger
from hedgeyourfun.market.odds_cache import OddsCache
from hedgeyourfun.market.price_cache import PriceCache

logger = get_logger(__name__)


class RefreshLoop:
    """
    Call refresh_fn every interval_seconds until stopped. The first tick runs
    immediately. A tick that overruns the interval delays the next one; ticks
    never overlap. Failures are logged and retried on the next tick, with no
    backoff.
    """

    def __init__(
        self,
        name: str,
        refresh_fn: Callable[[], Awaitable[Any]],
        interval_seconds: float,
    ) -> None:
        self.name = name
        self._refresh_fn = refresh_fn
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None
        self.ticks = 0
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> bool:
        """Run one refresh; return True on success. Errors never escape."""
        self.ticks += 1
        try:
            await self._refresh_fn()
        except FetchError as e:
            self.failures += 1
            logger.warning(f"{self.name}_refresh_failed", error=str(e), source=e.source)
            return False
        except Exception:
            self.failures += 1
            logger.exception(f"{self.name}_refresh_error")
            return False
        return True

    async def run_forever(self) -> None:
        while True:
            started = time.monotonic()
            await self.tick()
            elapsed = time.monotonic() - started
            await asyncio.sleep(max(0.0, self.interval_seconds - elapsed))

    def start(self) -> None:
        """Start the background task (idempotent). Must be called inside a running loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self.run_forever(), name=f"refresh:{self.name}"
        )
        logger.info("refresh_loop_started", loop=self.name, interval=self.interval_seconds)

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info(
            "refresh_loop_stopped", loop=self.name, ticks=self.ticks, failures=self.failures
        )


@dataclass
class MarketData:
    """Owns the price and odds caches and the loops that keep them warm."""

    prices: PriceCache
    odds: OddsCache
    loops: list[RefreshLoop] = field(default_factory=list)

    @classmethod
    def from_settings(cls, settings: Settings) -> "MarketData":
        prices = PriceCache()
        odds = OddsCache(slug=settings.polymarket_market_slug, fee=settings.polymarket_fee)
        loops = [
            RefreshLoop("price", prices.refresh, settings.price_refresh_seconds),
            RefreshLoop("odds", odds.refresh, settings.odds_refresh_seconds),
        ]
        return cls(prices=prices, odds=odds, loops=loops)

    def start(self) -> None:
        for loop in self.loops:
            loop.start()

    async def stop(self) -> None:
        await asyncio.gather(*(loop.stop() for loop in self.loops))
