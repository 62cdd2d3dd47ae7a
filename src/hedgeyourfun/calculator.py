"""Bet-return calculator on top of the cached implied multiplier."""

from hedgeyourfun.errors import OddsUnavailableError
from hedgeyourfun.market.snapshots import OddsSnapshot


def bet_return(stake: float, multiplier: float) -> float:
    """Payout for a stake at the given multiplier (stake / multiplier)."""
    if multiplier <= 0:
        raise OddsUnavailableError("implied multiplier not available yet")
    return stake / multiplier


def format_bet_return(stake: float, odds: OddsSnapshot) -> str:
    """'166.67$' for stake 100 at multiplier 0.60."""
    return f"{bet_return(stake, odds.multiplier):.2f}$"
