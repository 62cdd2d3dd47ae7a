"""Wallet address -> valued asset list via a fallback chain of live sources.

Order of attempts:
  1. multi-chain portfolio (Zerion), USD-denominated rows per chain;
  2. detailed positions, when the portfolio reports zero positions;
  3. single-chain native balance (Solana RPC), terminal.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import Literal

from hedgeyourfun.config import get_settings
from hedgeyourfun.errors import (
    BalanceFetchFailed,
    InvalidWalletAddress,
    PortfolioApiError,
    ResolutionError,
)
from hedgeyourfun.logging_config import get_logger
from hedgeyourfun.market.price_cache import PriceCache, lookup_price
from hedgeyourfun.market.snapshots import PriceSnapshot
from hedgeyourfun.wallets.solana_rpc import NATIVE_SYMBOL, LamportBalance, fetch_lamport_balance
from hedgeyourfun.wallets.zerion import ZerionPortfolio, fetch_portfolio

logger = get_logger(__name__)

UNAVAILABLE = "N/A"

Denomination = Literal["native", "usd"]
PortfolioFetcher = Callable[[str], Awaitable[ZerionPortfolio]]
BalanceFetcher = Callable[[str], Awaitable[LamportBalance]]


@dataclass(frozen=True)
class AssetPosition:
    """One display row. native_balance is in native units unless denomination is "usd"."""

    asset_label: str
    native_balance: str
    usd_value: str
    denomination: Denomination = "native"


class WalletAssetResolver:
    def __init__(
        self,
        prices: PriceCache,
        fetch_portfolio: PortfolioFetcher = fetch_portfolio,
        fetch_balance: BalanceFetcher = fetch_lamport_balance,
        fallback_sol_usd_rate: float | None = None,
    ) -> None:
        self.prices = prices
        self._fetch_portfolio = fetch_portfolio
        self._fetch_balance = fetch_balance
        if fallback_sol_usd_rate is None:
            fallback_sol_usd_rate = get_settings().fallback_sol_usd_rate
        self.fallback_sol_usd_rate = fallback_sol_usd_rate

    async def resolve(self, address: str) -> list[AssetPosition]:
        """Return at least one row, or raise ResolutionError."""
        try:
            portfolio = await self._fetch_portfolio(address)
        except PortfolioApiError as e:
            logger.info(
                "wallet_fallback", step="single_chain", reason="portfolio_error", error=str(e)
            )
            return await self._single_chain_assets(address)

        if portfolio.total_positions == 0:
            # Zero is ambiguous: empty wallet or an address the provider does not know.
            logger.info("wallet_fallback", step="detailed_positions", reason="zero_positions")
            return await self._detailed_positions(address)

        rows = portfolio_to_positions(portfolio)
        if rows:
            return rows
        logger.info("wallet_fallback", step="single_chain", reason="no_positive_chains")
        return await self._single_chain_assets(address)

    async def _detailed_positions(self, address: str) -> list[AssetPosition]:
        """Per-token resolution. Currently an alias for the single-chain fallback."""
        return await self._single_chain_assets(address)

    async def _single_chain_assets(self, address: str) -> list[AssetPosition]:
        try:
            balance = await self._fetch_balance(address)
        except (InvalidWalletAddress, BalanceFetchFailed) as e:
            logger.warning("wallet_resolution_failed", error=str(e))
            raise ResolutionError(address, e) from e

        sol = balance.to_sol()
        return [
            AssetPosition(
                asset_label=NATIVE_SYMBOL,
                native_balance=f"{sol:.6f}",
                usd_value=f"{balance.to_usd(self._sol_rate()):.2f}",
                denomination="native",
            )
        ]

    def _sol_rate(self) -> float:
        """Cached SOL price; the fixed fallback rate only while the cache is cold."""
        snapshot = self.prices.read()
        if snapshot.sol_usd > 0:
            return snapshot.sol_usd
        return self.fallback_sol_usd_rate


def portfolio_to_positions(portfolio: ZerionPortfolio) -> list[AssetPosition]:
    """One USD-denominated row per chain with a positive value."""
    return [
        AssetPosition(
            asset_label=chain,
            native_balance=f"{value:.2f}",
            usd_value=f"{value:.2f}",
            denomination="usd",
        )
        for chain, value in portfolio.by_chain.items()
        if value > 0
    ]


def _parse_amount(raw: str) -> float | None:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def reprice_positions(
    positions: list[AssetPosition], snapshot: PriceSnapshot
) -> list[AssetPosition]:
    """
    Display values from the cached prices. Native rows are re-priced by symbol
    ("N/A" for unknown symbols, unparsable balances count as zero). USD rows are
    already valued and are only formatted.
    """
    out: list[AssetPosition] = []
    for position in positions:
        if position.denomination == "usd":
            amount = _parse_amount(position.usd_value)
            value = f"${amount:.2f}" if amount is not None else UNAVAILABLE
        else:
            price = lookup_price(snapshot, position.asset_label)
            if price is None:
                value = UNAVAILABLE
            else:
                balance = _parse_amount(position.native_balance) or 0.0
                value = f"${balance * price:.2f}"
        out.append(replace(position, usd_value=value))
    return out
