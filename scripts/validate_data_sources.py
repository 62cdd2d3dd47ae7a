#!/usr/bin/env python3
"""
Validate data sources: refresh prices and odds once, optionally resolve a wallet,
print per-source status. Exits non-zero if any checked source failed.
Usage: python scripts/validate_data_sources.py [--address <wallet>]
"""

import argparse
import asyncio
import sys

from hedgeyourfun.config import get_settings
from hedgeyourfun.errors import AppError
from hedgeyourfun.market.refresh import MarketData
from hedgeyourfun.wallets.resolver import WalletAssetResolver, reprice_positions


async def run_validation(address: str | None = None) -> int:
    """Check each upstream once; return 0 if all ok, 1 otherwise."""
    market = MarketData.from_settings(get_settings())
    failed = 0

    try:
        prices = await market.prices.refresh()
        print(f"prices: ok sol={prices.sol_usd} btc={prices.btc_usd} eth={prices.eth_usd}")
    except AppError as e:
        failed += 1
        print(f"prices: fail error={e}")

    try:
        odds = await market.odds.refresh()
        print(f"odds: ok multiplier={odds.multiplier:.4f}")
    except AppError as e:
        failed += 1
        print(f"odds: fail error={e}")

    if address:
        resolver = WalletAssetResolver(market.prices)
        try:
            rows = reprice_positions(await resolver.resolve(address), market.prices.read())
            for row in rows:
                print(
                    f"wallet: {row.asset_label} balance={row.native_balance} value={row.usd_value}"
                )
        except AppError as e:
            failed += 1
            print(f"wallet: fail error={e}")

    if failed:
        print(f"Validation failed: {failed} source(s) failed", file=sys.stderr)
        return 1
    print("Validation passed: all checked sources ok.", file=sys.stderr)
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate upstream data sources")
    parser.add_argument(
        "--address",
        type=str,
        default=None,
        help="Wallet address to run through the resolver fallback chain",
    )
    args = parser.parse_args()
    return asyncio.run(run_validation(args.address))


if __name__ == "__main__":
    sys.exit(main())
