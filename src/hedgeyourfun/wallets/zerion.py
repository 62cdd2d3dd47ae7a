"""Async client for the Zerion wallet portfolio endpoint (multi-chain, USD-valued)."""

import base64
from urllib.parse import quote

import httpx
from pydantic import BaseModel, Field, ValidationError

from hedgeyourfun.config import get_settings
from hedgeyourfun.errors import PortfolioApiError
from hedgeyourfun.logging_config import get_logger

logger = get_logger(__name__)


class PortfolioTotal(BaseModel):
    """Aggregate USD value of all positions."""

    positions: float


class PortfolioChanges(BaseModel):
    """Day-over-day change of the portfolio value."""

    absolute_1d: float | None = None
    percent_1d: float | None = None


class PortfolioAttributes(BaseModel):
    """USD breakdowns by position type and by chain."""

    positions_distribution_by_type: dict[str, float] = Field(default_factory=dict)
    positions_distribution_by_chain: dict[str, float] = Field(default_factory=dict)
    total: PortfolioTotal
    changes: PortfolioChanges | None = None


class PortfolioData(BaseModel):
    type: str | None = None
    id: str | None = None
    attributes: PortfolioAttributes


class ZerionPortfolio(BaseModel):
    """Top-level /wallets/<address>/portfolio response."""

    data: PortfolioData

    model_config = {"extra": "ignore"}

    @property
    def total_positions(self) -> float:
        return self.data.attributes.total.positions

    @property
    def by_chain(self) -> dict[str, float]:
        """Chain name -> USD value, in the provider's order."""
        return self.data.attributes.positions_distribution_by_chain


def _zerion_headers() -> dict[str, str]:
    """Zerion uses Basic auth with the API key as username and an empty password."""
    headers = {"accept": "application/json"}
    key = get_settings().zerion_api_key
    if key and key.strip():
        token = base64.b64encode(f"{key.strip()}:".encode()).decode()
        headers["authorization"] = f"Basic {token}"
    return headers


async def fetch_portfolio(address: str) -> ZerionPortfolio:
    """GET /wallets/<address>/portfolio?currency=usd. Any failure is PortfolioApiError."""
    settings = get_settings()
    url = f"{settings.zerion_base_url}/wallets/{quote(address, safe='')}/portfolio"
    try:
        async with httpx.AsyncClient(
            timeout=settings.http_timeout, headers=_zerion_headers()
        ) as client:
            resp = await client.get(url, params={"currency": "usd"})
            resp.raise_for_status()
            return ZerionPortfolio.model_validate(resp.json())
    except (httpx.HTTPError, httpx.InvalidURL, ValueError, ValidationError) as e:
        logger.warning("zerion_portfolio_failed", error=str(e))
        raise PortfolioApiError(str(e)) from e
