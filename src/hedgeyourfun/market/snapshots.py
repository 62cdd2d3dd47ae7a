"""Immutable bundles published by the refresh loops."""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PriceSnapshot:
    """SOL/BTC/ETH in USD, all taken from the same refresh cycle."""

    sol_usd: float = 0.0
    btc_usd: float = 0.0
    eth_usd: float = 0.0
    last_updated: datetime = field(default=EPOCH)

    @property
    def is_cold(self) -> bool:
        """True until the first successful refresh."""
        return self.last_updated == EPOCH

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["last_updated"] = self.last_updated.isoformat()
        return out


@dataclass(frozen=True)
class OddsSnapshot:
    """Fee-adjusted "NO" price of the tracked prediction market."""

    multiplier: float = 0.0
    last_updated: datetime = field(default=EPOCH)

    @property
    def is_cold(self) -> bool:
        return self.last_updated == EPOCH

    def to_dict(self) -> dict[str, Any]:
        return {"multiplier": self.multiplier, "last_updated": self.last_updated.isoformat()}
