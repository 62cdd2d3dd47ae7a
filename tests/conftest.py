"""Pytest fixtures. Use asyncio for async tests."""

import os
from typing import Generator

import pytest

# Set before test modules import hedgeyourfun.main (it reads settings at import time).
os.environ["REFRESH_LOOPS_ENABLED"] = "false"
os.environ.pop("ZERION_API_KEY", None)

from hedgeyourfun.config import get_settings  # noqa: E402

VALID_ADDRESS = "So11111111111111111111111111111111111111112"


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Each test sees settings built from the current environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def portfolio_payload(total: float, by_chain: dict[str, float]) -> dict:
    """Minimal Zerion /portfolio response body."""
    return {
        "links": {"self": "https://api.zerion.io/v1/wallets/x/portfolio"},
        "data": {
            "type": "portfolio",
            "id": "x",
            "attributes": {
                "positions_distribution_by_type": {"wallet": total},
                "positions_distribution_by_chain": by_chain,
                "total": {"positions": total},
                "changes": {"absolute_1d": 0.0, "percent_1d": None},
            },
        },
    }
