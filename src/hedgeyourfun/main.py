"""FastAPI app: htmx fragments for account, positions and calculator; JSON health/prices."""

from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from hedgeyourfun import fragments
from hedgeyourfun.calculator import format_bet_return
from hedgeyourfun.config import get_settings
from hedgeyourfun.errors import (
    AppError,
    FetchError,
    InvalidWalletAddress,
    OddsUnavailableError,
    ResolutionError,
)
from hedgeyourfun.logging_config import bind_request_context, configure_logging, get_logger
from hedgeyourfun.market.refresh import MarketData
from hedgeyourfun.wallets.resolver import WalletAssetResolver, reprice_positions
from hedgeyourfun.wallets.solana_rpc import fetch_lamport_balance

configure_logging(debug=get_settings().debug)
logger = get_logger(__name__)


def status_for_error(exc: AppError) -> int:
    """400 for bad input, 503 while odds are cold, 502 for upstream failures."""
    if isinstance(exc, InvalidWalletAddress):
        return 400
    if isinstance(exc, ResolutionError):
        return 400 if exc.invalid_address else 502
    if isinstance(exc, OddsUnavailableError):
        return 503
    if isinstance(exc, FetchError):
        return 502
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: build the caches and resolver, start the refresh loops.
    Shutdown: cancel the loops. Cached data lives in process memory only.
    """
    settings = get_settings()
    market = MarketData.from_settings(settings)
    app.state.market = market
    app.state.resolver = WalletAssetResolver(
        market.prices, fallback_sol_usd_rate=settings.fallback_sol_usd_rate
    )
    if settings.refresh_loops_enabled:
        market.start()
    else:
        logger.warning("refresh_loops_disabled", msg="caches stay cold until refreshed manually")
    logger.info("startup_complete", env=settings.env, port=settings.port)
    try:
        yield
    finally:
        logger.info("shutdown_starting")
        await market.stop()


app = FastAPI(title="HedgeYourFun", lifespan=lifespan)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> HTMLResponse:
    status = status_for_error(exc)
    logger.warning(
        "request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
        status=status,
    )
    return HTMLResponse(fragments.error_message(str(exc)), status_code=status)


def _market(request: Request) -> MarketData:
    return request.app.state.market


@app.get("/health")
async def health(request: Request) -> JSONResponse:
    """Uptime check: cache freshness and whether the refresh loops are running."""
    market = _market(request)
    prices = market.prices.read()
    odds = market.odds.read()
    content: dict[str, Any] = {
        "status": "ok",
        "prices": {"warm": not prices.is_cold, "last_updated": prices.last_updated.isoformat()},
        "odds": {"warm": not odds.is_cold, "last_updated": odds.last_updated.isoformat()},
        "loops": {loop.name: loop.running for loop in market.loops},
    }
    return JSONResponse(status_code=200, content=content)


@app.get("/api/prices")
async def api_prices(request: Request) -> JSONResponse:
    """Current price and odds snapshots as JSON."""
    market = _market(request)
    return JSONResponse(
        status_code=200,
        content={"prices": market.prices.read().to_dict(), "odds": market.odds.read().to_dict()},
    )


@app.post("/account", response_class=HTMLResponse)
async def account(request: Request, account_id: str = Form(...)) -> HTMLResponse:
    """Native SOL balance of one wallet valued at the cached SOL rate."""
    bind_request_context(route="account", address=account_id)
    rate = _market(request).prices.read().sol_usd
    balance = await fetch_lamport_balance(account_id)
    html = fragments.exchange_rate(
        sol=f"{balance.to_sol():.2f}",
        usd=f"{balance.to_usd(rate):.2f}",
        rate=f"{rate:.2f}",
    )
    return HTMLResponse(html)


@app.post("/positions", response_class=HTMLResponse)
async def positions(request: Request, account_id: str = Form(...)) -> HTMLResponse:
    """Resolve the wallet through the fallback chain and re-price with cached prices."""
    bind_request_context(route="positions", address=account_id)
    resolver: WalletAssetResolver = request.app.state.resolver
    rows = await resolver.resolve(account_id)
    rows = reprice_positions(rows, _market(request).prices.read())
    logger.info("positions_resolved", rows=len(rows))
    return HTMLResponse(fragments.account_assets(rows))


@app.get("/calculator", response_class=HTMLResponse)
async def calculator_body() -> HTMLResponse:
    return HTMLResponse(fragments.CALCULATOR_FORM)


@app.post("/calculator", response_class=HTMLResponse)
async def calc(request: Request, money: float = Form(..., ge=0)) -> HTMLResponse:
    """Bet return for the stake at the cached "NO" multiplier."""
    return HTMLResponse(format_bet_return(money, _market(request).odds.read()))


@app.get("/favicon.ico")
async def favicon() -> RedirectResponse:
    return RedirectResponse("/static/svg/icon.svg", status_code=308)


def run() -> None:
    """Console entry point: serve on HOST:PORT from the environment."""
    settings = get_settings()
    logger.info("server_starting", url=f"http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
