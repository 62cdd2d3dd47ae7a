"""Latest SOL/BTC/ETH prices, refreshed as one unit and read without locking."""

import asyncio
from collections.abc import Awaitable, Callable

from hedgeyourfun.logging_config import get_logger
from hedgeyourfun.market.snapshots import PriceSnapshot, utc_now
from hedgeyourfun.quotes.coingecko import BTC_ID, ETH_ID, SOL_ID, fetch_usd_price

logger = get_logger(__name__)

QuoteFetcher = Callable[[str], Awaitable[float]]

# symbol (lowercase) -> PriceSnapshot attribute
_SYMBOLS = {
    "sol": "sol_usd",
    "solana": "sol_usd",
    "btc": "btc_usd",
    "bitcoin": "btc_usd",
    "eth": "eth_usd",
    "ethereum": "eth_usd",
}


class PriceCache:
    """
    Holds the current PriceSnapshot. Snapshots are frozen and published by
    reference swap after all network I/O is done, so readers never see a mix of
    two refresh cycles. The lock only serializes concurrent refresh() callers.
    """

    def __init__(self, fetch_quote: QuoteFetcher = fetch_usd_price) -> None:
        self._fetch_quote = fetch_quote
        self._snapshot = PriceSnapshot()
        self._refresh_lock = asyncio.Lock()

    def read(self) -> PriceSnapshot:
        """Most recently published snapshot (zero prices before the first refresh)."""
        return self._snapshot

    def publish(self, snapshot: PriceSnapshot) -> None:
        """Replace the current snapshot wholesale."""
        self._snapshot = snapshot

    async def refresh(self) -> PriceSnapshot:
        """
        Fetch SOL, BTC and ETH concurrently and publish them together.
        If any quote fails, nothing is published and the error propagates.
        """
        async with self._refresh_lock:
            sol, btc, eth = await asyncio.gather(
                self._fetch_quote(SOL_ID),
                self._fetch_quote(BTC_ID),
                self._fetch_quote(ETH_ID),
            )
            snapshot = PriceSnapshot(
                sol_usd=sol,
                btc_usd=btc,
                eth_usd=eth,
                last_updated=utc_now(),
            )
            self.publish(snapshot)
        logger.info("prices_refreshed", sol_usd=sol, btc_usd=btc, eth_usd=eth)
        return snapshot

    def lookup_by_symbol(self, symbol: str) -> float | None:
        """Case-insensitive price lookup in the current snapshot; None if unknown."""
        return lookup_price(self.read(), symbol)


def lookup_price(snapshot: PriceSnapshot, symbol: str) -> float | None:
    """Price for sol/solana, btc/bitcoin, eth/ethereum (any case); None otherwise."""
    attr = _SYMBOLS.get(symbol.lower())
    if attr is None:
        return None
    return getattr(snapshot, attr)
