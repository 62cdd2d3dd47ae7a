"""HTTP boundary: fragments, error classification, JSON health/prices."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
import respx
from conftest import VALID_ADDRESS, portfolio_payload
from fastapi.testclient import TestClient
from httpx import Response

from hedgeyourfun.errors import (
    BalanceFetchFailed,
    InvalidWalletAddress,
    OddsUnavailableError,
    PortfolioApiError,
    QuoteApiError,
    ResolutionError,
)
from hedgeyourfun.main import app, status_for_error
from hedgeyourfun.market.snapshots import OddsSnapshot, PriceSnapshot
from hedgeyourfun.wallets.resolver import WalletAssetResolver
from hedgeyourfun.wallets.solana_rpc import LamportBalance
from hedgeyourfun.wallets.zerion import ZerionPortfolio

WARM_AT = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _warm(client: TestClient) -> None:
    market = client.app.state.market
    market.prices.publish(PriceSnapshot(150.0, 60000.0, 3000.0, WARM_AT))
    market.odds.publish(OddsSnapshot(0.60, WARM_AT))


def _use_resolver(client: TestClient, portfolio: object, balance: object) -> AsyncMock:
    fetch_balance = AsyncMock(
        side_effect=balance if isinstance(balance, Exception) else None, return_value=balance
    )
    client.app.state.resolver = WalletAssetResolver(
        client.app.state.market.prices,
        fetch_portfolio=AsyncMock(
            side_effect=portfolio if isinstance(portfolio, Exception) else None,
            return_value=portfolio,
        ),
        fetch_balance=fetch_balance,
        fallback_sol_usd_rate=100.0,
    )
    return fetch_balance


@pytest.mark.parametrize(
    "exc, status",
    [
        (InvalidWalletAddress("x"), 400),
        (ResolutionError("x", InvalidWalletAddress("x")), 400),
        (ResolutionError("x", BalanceFetchFailed("rpc")), 502),
        (QuoteApiError("down"), 502),
        (PortfolioApiError("down"), 502),
        (OddsUnavailableError("cold"), 503),
    ],
)
def test_status_for_error(exc: Exception, status: int) -> None:
    assert status_for_error(exc) == status


def test_health_reports_cold_caches_and_stopped_loops() -> None:
    with TestClient(app) as client:
        resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["prices"]["warm"] is False
    assert data["odds"]["warm"] is False
    assert data["loops"] == {"price": False, "odds": False}


def test_api_prices_returns_current_snapshots() -> None:
    with TestClient(app) as client:
        _warm(client)
        resp = client.get("/api/prices")
    assert resp.status_code == 200
    data = resp.json()
    assert data["prices"]["sol_usd"] == 150.0
    assert data["prices"]["btc_usd"] == 60000.0
    assert data["prices"]["eth_usd"] == 3000.0
    assert data["prices"]["last_updated"] == WARM_AT.isoformat()
    assert data["odds"]["multiplier"] == 0.60


def test_calculator_returns_bet_fragment() -> None:
    with TestClient(app) as client:
        _warm(client)
        resp = client.post("/calculator", data={"money": "100"})
    assert resp.status_code == 200
    assert resp.text == "166.67$"


def test_calculator_cold_odds_is_503() -> None:
    with TestClient(app) as client:
        resp = client.post("/calculator", data={"money": "100"})
    assert resp.status_code == 503


def test_calculator_rejects_negative_stake() -> None:
    with TestClient(app) as client:
        _warm(client)
        resp = client.post("/calculator", data={"money": "-5"})
    assert resp.status_code == 422


def test_calculator_form() -> None:
    with TestClient(app) as client:
        resp = client.get("/calculator")
    assert resp.status_code == 200
    assert 'hx-post="/calculator"' in resp.text


def test_positions_multi_chain_rows_are_not_double_converted() -> None:
    portfolio = ZerionPortfolio.model_validate(
        portfolio_payload(12.5, {"solana": 12.5, "ethereum": 0.0})
    )
    with TestClient(app) as client:
        _warm(client)
        fetch_balance = _use_resolver(client, portfolio, LamportBalance(0))
        resp = client.post("/positions", data={"account_id": VALID_ADDRESS})
    assert resp.status_code == 200
    assert "<td>solana</td><td>12.50</td><td>$12.50</td>" in resp.text
    assert "ethereum" not in resp.text
    fetch_balance.assert_not_awaited()


def test_positions_fallback_row_repriced_from_cache() -> None:
    with TestClient(app) as client:
        _warm(client)
        _use_resolver(client, PortfolioApiError("down"), LamportBalance(2_000_000_000))
        resp = client.post("/positions", data={"account_id": VALID_ADDRESS})
    assert resp.status_code == 200
    assert "<td>SOL</td><td>2.000000</td><td>$300.00</td>" in resp.text


def test_positions_invalid_address_is_400() -> None:
    with TestClient(app) as client:
        _use_resolver(client, PortfolioApiError("down"), InvalidWalletAddress("bad"))
        resp = client.post("/positions", data={"account_id": "bad"})
    assert resp.status_code == 400
    assert 'class="error"' in resp.text


def test_positions_upstream_failure_is_502() -> None:
    with TestClient(app) as client:
        _use_resolver(client, PortfolioApiError("down"), BalanceFetchFailed("rpc down"))
        resp = client.post("/positions", data={"account_id": VALID_ADDRESS})
    assert resp.status_code == 502


def test_positions_control_character_address_is_400() -> None:
    with TestClient(app) as client:
        with respx.mock:
            respx.get(url__startswith="https://api.zerion.io/v1/wallets/").mock(
                return_value=Response(404)
            )
            resp = client.post("/positions", data={"account_id": "abc\x01def"})
    assert resp.status_code == 400
    assert 'class="error"' in resp.text


def test_positions_escapes_chain_labels() -> None:
    portfolio = ZerionPortfolio.model_validate(portfolio_payload(1.0, {"<b>x</b>": 1.0}))
    with TestClient(app) as client:
        _use_resolver(client, portfolio, LamportBalance(0))
        resp = client.post("/positions", data={"account_id": VALID_ADDRESS})
    assert "&lt;b&gt;x&lt;/b&gt;" in resp.text


def test_account_values_balance_at_cached_rate() -> None:
    with patch(
        "hedgeyourfun.main.fetch_lamport_balance",
        new_callable=AsyncMock,
        return_value=LamportBalance(2_000_000_000),
    ):
        with TestClient(app) as client:
            _warm(client)
            resp = client.post("/account", data={"account_id": VALID_ADDRESS})
    assert resp.status_code == 200
    assert "2.00 SOL" in resp.text
    assert "$300.00" in resp.text
    assert "$150.00" in resp.text


def test_account_invalid_address_is_400() -> None:
    with TestClient(app) as client:
        resp = client.post("/account", data={"account_id": "0xnot-solana"})
    assert resp.status_code == 400


def test_account_rpc_failure_is_502() -> None:
    with patch(
        "hedgeyourfun.main.fetch_lamport_balance",
        new_callable=AsyncMock,
        side_effect=BalanceFetchFailed("rpc down"),
    ):
        with TestClient(app) as client:
            _warm(client)
            resp = client.post("/account", data={"account_id": VALID_ADDRESS})
    assert resp.status_code == 502
    assert 'class="error"' in resp.text


def test_favicon_redirects() -> None:
    with TestClient(app) as client:
        resp = client.get("/favicon.ico", follow_redirects=False)
    assert resp.status_code == 308
    assert resp.headers["location"] == "/static/svg/icon.svg"
