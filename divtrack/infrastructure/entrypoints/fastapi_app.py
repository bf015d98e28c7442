"""
FastAPI entry point.

This module is the HTTP adapter over the Composition Root: it reads the
environment, builds the Container and exposes the engine's operations.
Authentication is performed by the AccessGuard reading the Bearer JWT from
each request; the verified subject is the only owner id the routes use.

Run locally:
    uvicorn divtrack.infrastructure.entrypoints.fastapi_app:app --reload --port 8080
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

load_dotenv()

from divtrack.domain.errors import (
    ConfigurationError,
    DivTrackError,
    DuplicateHolding,
    InvalidCredential,
    InvalidInput,
    MissingCredential,
    NotFound,
    StorageUnavailable,
    SymbolNotFound,
    UpstreamUnavailable,
)
from divtrack.infrastructure.config.settings import Settings
from divtrack.infrastructure.entrypoints import presenters
from divtrack.infrastructure.entrypoints.container import Container, build_container
from divtrack.infrastructure.logging_config import configure_logging
from divtrack.infrastructure.secrets.secrets_manager_adapter import bootstrap_secrets

log = logging.getLogger(__name__)

ENDPOINTS = [
    "GET /api/",
    "GET /api/stockTicker?symbol=<TICKER>",
    "GET /api/dividends?symbol=<TICKER>",
    "GET /api/dividendSummary?symbol=<TICKER>&shares=<SHARES>",
    "GET /api/portfolio (requires auth)",
    "POST /api/portfolio (requires auth)",
    "PUT /api/portfolio/{id} (requires auth)",
    "DELETE /api/portfolio/{id} (requires auth)",
    "POST /api/portfolio/{id}/refresh (requires auth)",
    "POST /api/portfolio/refresh (requires auth)",
]

_STATUS_BY_ERROR = [
    (MissingCredential, 401),
    (InvalidCredential, 401),
    (InvalidInput, 400),
    (NotFound, 404),
    (SymbolNotFound, 404),
    (DuplicateHolding, 409),
    (UpstreamUnavailable, 502),
    (StorageUnavailable, 503),
    (ConfigurationError, 500),
]


class CreateHoldingRequest(BaseModel):
    ticker: str
    shares: int


class UpdateHoldingRequest(BaseModel):
    shares: int


def get_container(request: Request) -> Container:
    return request.app.state.container


async def get_owner_id(request: Request, container: Container = Depends(get_container)) -> str:
    """FastAPI dependency: verify the Bearer JWT and return its subject."""
    return container.guard.authorize(request.headers.get("Authorization"))


def status_for(exc: DivTrackError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


async def handle_divtrack_error(request: Request, exc: DivTrackError) -> JSONResponse:
    status = status_for(exc)
    if isinstance(exc, ConfigurationError):
        log.error("configuration error on %s: %s", request.url.path, exc)
        return JSONResponse({"error": "Server configuration error"}, status_code=status)
    if status >= 500:
        log.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse({"error": str(exc)}, status_code=status)


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Build the FastAPI app. Without *container*, wire one from the environment."""
    if container is None:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        container = build_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await container.aclose()

    app = FastAPI(title="divtrack", description="Dividend portfolio tracker", lifespan=lifespan)
    app.state.container = container
    app.add_exception_handler(DivTrackError, handle_divtrack_error)

    @app.get("/")
    @app.get("/api/")
    async def index():
        return {"endpoints": ENDPOINTS}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # ------------------------------------------------------------------
    # Public market lookups
    # ------------------------------------------------------------------

    @app.get("/api/stockTicker")
    async def stock_ticker(symbol: str = Query(...), c: Container = Depends(get_container)):
        return presenters.quote_json(await c.market.quote_for(symbol))

    @app.get("/api/dividends")
    async def dividends(symbol: str = Query(...), c: Container = Depends(get_container)):
        quote, profile = await c.market.dividend_profile_for(symbol)
        return presenters.dividends_json(quote, profile)

    @app.get("/api/dividendSummary")
    async def dividend_summary(
        symbol: str = Query(...),
        shares: int = Query(...),
        c: Container = Depends(get_container),
    ):
        return presenters.summary_json(await c.market.dividend_summary(symbol, shares))

    # ------------------------------------------------------------------
    # Portfolio (owner-scoped). Routes that only touch the store are plain
    # def so FastAPI runs them in its threadpool.
    # ------------------------------------------------------------------

    @app.get("/api/portfolio")
    def list_portfolio(
        owner_id: str = Depends(get_owner_id), c: Container = Depends(get_container)
    ):
        return [presenters.holding_json(h) for h in c.holdings.list_holdings(owner_id)]

    @app.post("/api/portfolio", status_code=201)
    async def create_holding(
        body: CreateHoldingRequest,
        owner_id: str = Depends(get_owner_id),
        c: Container = Depends(get_container),
    ):
        holding = await c.holdings.create(owner_id, body.ticker, body.shares)
        return presenters.holding_json(holding)

    @app.post("/api/portfolio/refresh")
    async def refresh_portfolio(
        owner_id: str = Depends(get_owner_id), c: Container = Depends(get_container)
    ):
        return presenters.refresh_json(await c.refresh.refresh_all(owner_id))

    @app.put("/api/portfolio/{holding_id}")
    async def update_holding(
        holding_id: str,
        body: UpdateHoldingRequest,
        owner_id: str = Depends(get_owner_id),
        c: Container = Depends(get_container),
    ):
        holding = await c.holdings.update_shares(owner_id, holding_id, body.shares)
        return presenters.holding_json(holding)

    @app.post("/api/portfolio/{holding_id}/refresh")
    async def refresh_holding(
        holding_id: str,
        owner_id: str = Depends(get_owner_id),
        c: Container = Depends(get_container),
    ):
        return presenters.holding_json(await c.refresh.refresh_one(owner_id, holding_id))

    @app.delete("/api/portfolio/{holding_id}")
    def delete_holding(
        holding_id: str,
        owner_id: str = Depends(get_owner_id),
        c: Container = Depends(get_container),
    ):
        c.holdings.delete(owner_id, holding_id)
        return {"message": "Holding deleted successfully"}

    return app


bootstrap_secrets()
app = create_app()
