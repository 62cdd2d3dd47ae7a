"""CoinGecko simple/price: one USD quote per coin id. No retries; callers decide."""

from typing import Any

import httpx

from hedgeyourfun.config import get_settings
from hedgeyourfun.errors import QuoteApiError
from hedgeyourfun.logging_config import get_logger

logger = get_logger(__name__)

SOL_ID = "solana"
BTC_ID = "bitcoin"
ETH_ID = "ethereum"


def parse_usd_price(data: Any, coin_id: str) -> float:
    """Extract data[coin_id]["usd"]; raise QuoteApiError when absent or not numeric."""
    entry = data.get(coin_id) if isinstance(data, dict) else None
    price = entry.get("usd") if isinstance(entry, dict) else None
    # bool is an int subclass; a JSON true is not a price
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise QuoteApiError(f"no usd price for {coin_id}")
    return float(price)


async def fetch_usd_price(coin_id: str) -> float:
    """GET /simple/price?ids=<coin_id>&vs_currencies=usd and return the USD price."""
    settings = get_settings()
    url = f"{settings.coingecko_base_url}/simple/price"
    try:
        async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
            resp = await client.get(url, params={"ids": coin_id, "vs_currencies": "usd"})
            resp.raise_for_status()
            data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("quote_fetch_failed", coin_id=coin_id, error=str(e))
        raise QuoteApiError(f"{coin_id}: {e}") from e
    return parse_usd_price(data, coin_id)


async def fetch_sol_price() -> float:
    return await fetch_usd_price(SOL_ID)


async def fetch_btc_price() -> float:
    return await fetch_usd_price(BTC_ID)


async def fetch_eth_price() -> float:
    return await fetch_usd_price(ETH_ID)
