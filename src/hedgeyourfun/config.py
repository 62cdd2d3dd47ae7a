"""Configuration from environment. Defaults mirror the production constants."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings. Load from env; validate on access."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    env: str = Field(default="development", description="ENV name for startup checks")
    debug: bool = Field(default=False, description="Human-readable console logs when True")

    # HTTP server
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8081, ge=1, le=65535, description="Bind port (PORT)")

    # Background refresh loops
    refresh_loops_enabled: bool = Field(
        default=True, description="Start price/odds refresh loops on startup"
    )
    price_refresh_seconds: float = Field(
        default=30.0, description="Interval between SOL/BTC/ETH price refreshes (seconds)"
    )
    odds_refresh_seconds: float = Field(
        default=300.0, description="Interval between prediction-market refreshes (seconds)"
    )

    # Upstream HTTP
    http_timeout: float = Field(
        default=15.0, le=120, description="HTTP timeout for upstream requests (seconds)"
    )
    coingecko_base_url: str = Field(
        default="https://api.coingecko.com/api/v3",
        description="CoinGecko API base URL",
    )
    polymarket_gamma_url: str = Field(
        default="https://gamma-api.polymarket.com",
        description="Polymarket Gamma API base URL",
    )
    polymarket_market_slug: str = Field(
        default="will-solana-reach-260-before-2026-327-264-879-598",
        description="Gamma market slug backing the calculator multiplier",
    )
    polymarket_fee: float = Field(
        default=0.02, description="Fee offset added to every raw outcome price"
    )
    zerion_base_url: str = Field(
        default="https://api.zerion.io/v1",
        description="Zerion API base URL",
    )
    zerion_api_key: str | None = Field(
        default=None,
        description="Zerion API key (sent as Basic auth username)",
    )
    solana_rpc_url: str = Field(
        default="https://api.devnet.solana.com",
        description="Solana JSON-RPC endpoint for native balances",
    )
    fallback_sol_usd_rate: float = Field(
        default=100.0,
        gt=0,
        description="SOL/USD rate for the on-chain fallback while the price cache is cold",
    )

    @field_validator("price_refresh_seconds", "odds_refresh_seconds", "http_timeout")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Intervals and timeouts must be strictly positive."""
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("polymarket_fee")
    @classmethod
    def validate_fee(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("POLYMARKET_FEE must be between 0 and 1")
        return v


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
