"""Solana native balance via JSON-RPC getBalance."""

from dataclasses import dataclass
from typing import Any

import httpx
from solders.pubkey import Pubkey

from hedgeyourfun.config import get_settings
from hedgeyourfun.errors import BalanceFetchFailed, InvalidWalletAddress
from hedgeyourfun.logging_config import get_logger

logger = get_logger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000
NATIVE_SYMBOL = "SOL"


@dataclass(frozen=True)
class LamportBalance:
    """Native SOL balance in lamports."""

    lamports: int

    def to_sol(self) -> float:
        return self.lamports / LAMPORTS_PER_SOL

    def to_usd(self, sol_to_usd: float) -> float:
        return self.to_sol() * sol_to_usd


def parse_address(address: str) -> Pubkey:
    """Base58 32-byte public key; anything else is InvalidWalletAddress."""
    try:
        return Pubkey.from_string(address.strip())
    except ValueError as e:
        raise InvalidWalletAddress(address) from e


def _balance_from_response(out: Any) -> int:
    """Extract result.value (lamports) from a getBalance JSON-RPC response."""
    if not isinstance(out, dict):
        raise BalanceFetchFailed("unexpected getBalance payload")
    err = out.get("error")
    if err:
        message = err.get("message") if isinstance(err, dict) else str(err)
        raise BalanceFetchFailed(f"getBalance error: {message}")
    result = out.get("result")
    value = result.get("value") if isinstance(result, dict) else None
    if isinstance(value, bool) or not isinstance(value, int):
        raise BalanceFetchFailed("getBalance returned no lamport value")
    return value


async def fetch_lamport_balance(address: str) -> LamportBalance:
    """
    Validate the address, then query getBalance on the configured RPC endpoint.
    Raises InvalidWalletAddress before any network I/O when the address is malformed.
    """
    pubkey = parse_address(address)
    settings = get_settings()
    payload = {
        "jsonrpc": "2.0",
        "id": 1,
        "method": "getBalance",
        "params": [str(pubkey)],
    }
    try:
        async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
            resp = await client.post(settings.solana_rpc_url, json=payload)
            resp.raise_for_status()
            out = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("solana_get_balance_failed", url=settings.solana_rpc_url, error=str(e))
        raise BalanceFetchFailed(str(e)) from e
    return LamportBalance(_balance_from_response(out))
