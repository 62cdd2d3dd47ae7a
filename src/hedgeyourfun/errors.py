"""Error taxonomy for upstream fetches, wallet resolution and the calculator.

Refresh loops catch ``FetchError`` at their boundary; request handlers let the
rest propagate to the HTTP layer, which picks a status code per class.
"""


class AppError(Exception):
    """Base class for every error raised by the service."""


class FetchError(AppError):
    """An upstream request failed or returned an unusable payload."""

    source: str = "upstream"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or f"{self.source} request failed")


class QuoteApiError(FetchError):
    """Exchange price API failed (network, status or missing price field)."""

    source = "coingecko"


class PredictionMarketApiError(FetchError):
    """Prediction-market API failed or its outcome prices could not be decoded."""

    source = "polymarket"


class PortfolioApiError(FetchError):
    """Multi-chain portfolio API failed (network, status or parse)."""

    source = "zerion"


class BalanceFetchFailed(FetchError):
    """On-chain RPC balance query failed."""

    source = "solana_rpc"


class InvalidWalletAddress(AppError):
    """Address failed a source's syntactic check."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Invalid wallet address: {address}")
        self.address = address


class ResolutionError(AppError):
    """Every step of the wallet fallback chain was exhausted."""

    def __init__(self, address: str, cause: Exception) -> None:
        super().__init__(f"Could not resolve assets for {address}: {cause}")
        self.address = address
        self.cause = cause

    @property
    def invalid_address(self) -> bool:
        """True when the terminal failure was the address itself, not an upstream."""
        return isinstance(self.cause, InvalidWalletAddress)


class OddsUnavailableError(AppError):
    """No usable implied multiplier yet (cold cache or zero price)."""
