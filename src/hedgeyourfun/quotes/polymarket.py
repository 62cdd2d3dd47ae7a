"""Polymarket Gamma: outcome prices for a single market looked up by slug."""

import json
from typing import Any

import httpx

from hedgeyourfun.config import get_settings
from hedgeyourfun.errors import PredictionMarketApiError
from hedgeyourfun.logging_config import get_logger

logger = get_logger(__name__)

NO_OUTCOME_INDEX = 1


def _to_price(value: Any) -> float:
    """Gamma sends prices as decimal strings; anything unparsable counts as 0."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def parse_outcome_prices(raw: Any) -> list[float]:
    """
    Decode Gamma's outcomePrices. The API returns a JSON-encoded string such as
    '["0.40", "0.58"]'; a plain list is accepted too.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            raise PredictionMarketApiError(f"outcomePrices is not JSON: {e}") from e
    if not isinstance(raw, list):
        raise PredictionMarketApiError("outcomePrices is not a list")
    return [_to_price(v) for v in raw]


def no_multiplier(prices: list[float], fee: float) -> float:
    """Fee-adjusted price of the second ("NO") outcome."""
    if len(prices) <= NO_OUTCOME_INDEX:
        raise PredictionMarketApiError(f"expected two outcomes, got {len(prices)}")
    return prices[NO_OUTCOME_INDEX] + fee


async def fetch_market(slug: str) -> dict[str, Any]:
    """GET /markets/slug/<slug> from Gamma."""
    settings = get_settings()
    url = f"{settings.polymarket_gamma_url}/markets/slug/{slug}"
    try:
        async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("polymarket_fetch_failed", slug=slug, error=str(e))
        raise PredictionMarketApiError(f"{slug}: {e}") from e
    if not isinstance(data, dict):
        raise PredictionMarketApiError(f"{slug}: unexpected payload")
    return data


async def fetch_outcome_prices(slug: str) -> list[float]:
    """Raw (fee-free) outcome prices for the market, in outcome order."""
    market = await fetch_market(slug)
    raw = market.get("outcomePrices")
    if raw is None:
        raise PredictionMarketApiError(f"{slug}: missing outcomePrices")
    return parse_outcome_prices(raw)
