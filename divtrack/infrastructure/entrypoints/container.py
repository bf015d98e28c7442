"""
Composition Root: wire infrastructure adapters into the application layer.
Shared by the FastAPI app and the batch refresh job so both run the same
engine with the same caches and stores.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, Optional

import httpx

from divtrack.application.services.access_guard import AccessGuard
from divtrack.application.services.dividend_analyzer import DividendHistoryAnalyzer, utc_now
from divtrack.application.services.profile_resolver import ProfileResolver
from divtrack.application.services.quote_service import QuoteService
from divtrack.application.services.snapshot_fetcher import SnapshotFetcher
from divtrack.application.use_cases.manage_holdings import CreateOrUpdateHoldingUseCase
from divtrack.application.use_cases.market_lookup import MarketLookupUseCase
from divtrack.application.use_cases.refresh_holdings import RefreshHoldingsUseCase
from divtrack.domain.ports.holding_repository_port import IHoldingRepository
from divtrack.domain.ports.market_data_port import (
    IDividendHistorySource,
    IProfileSource,
    IQuoteSource,
)
from divtrack.domain.ports.token_validator_port import ITokenValidator
from divtrack.infrastructure.auth.jwt_validator import SharedSecretTokenValidator
from divtrack.infrastructure.cache.ttl_cache import CachetoolsTTLCache
from divtrack.infrastructure.config.settings import Settings
from divtrack.infrastructure.market_data.fmp_adapter import FMPMarketDataProvider
from divtrack.infrastructure.market_data.yfinance_adapter import YFinanceMarketDataProvider
from divtrack.infrastructure.persistence.memory_repository import InMemoryHoldingRepository
from divtrack.infrastructure.persistence.sqlalchemy_repository import (
    SqlAlchemyHoldingRepository,
    create_session_factory,
)

log = logging.getLogger(__name__)


@dataclass
class Container:
    guard: AccessGuard
    holdings: CreateOrUpdateHoldingUseCase
    refresh: RefreshHoldingsUseCase
    market: MarketLookupUseCase
    repository: IHoldingRepository
    closers: list[Callable[[], Awaitable[None]]] = field(default_factory=list)

    async def aclose(self) -> None:
        for close in self.closers:
            await close()


def wire(
    *,
    quote_source: IQuoteSource,
    dividend_source: IDividendHistorySource,
    profile_source: IProfileSource,
    repository: IHoldingRepository,
    validator: ITokenValidator,
    settings: Settings,
    cache_timer: Callable[[], float] = time.monotonic,
    clock: Callable[[], datetime] = utc_now,
) -> Container:
    """Assemble services and use cases from already-built adapters.

    *cache_timer* drives cache expiry and *clock* the trailing dividend window;
    tests replace both.
    """

    def cache(ttl: float) -> CachetoolsTTLCache:
        return CachetoolsTTLCache(ttl, settings.cache_maxsize, timer=cache_timer)

    quotes = QuoteService(quote_source, cache(settings.quote_cache_ttl))
    dividends = DividendHistoryAnalyzer(
        dividend_source, quotes, cache(settings.dividend_cache_ttl), clock=clock
    )
    profiles = ProfileResolver(profile_source, cache(settings.profile_cache_ttl))
    snapshots = SnapshotFetcher(quotes, dividends, profiles)
    return Container(
        guard=AccessGuard(validator),
        holdings=CreateOrUpdateHoldingUseCase(repository, snapshots),
        refresh=RefreshHoldingsUseCase(repository, snapshots),
        market=MarketLookupUseCase(quotes, dividends, snapshots),
        repository=repository,
    )


def build_container(settings: Settings, repository: Optional[IHoldingRepository] = None) -> Container:
    """Build the production object graph described by *settings*."""
    closers: list[Callable[[], Awaitable[None]]] = []
    if settings.market_data_provider == "yfinance":
        provider = YFinanceMarketDataProvider(settings.upstream_timeout_seconds)
    else:
        if not settings.fmp_api_key:
            log.warning("FMP_API_KEY not set; quote and dividend lookups will fail")
        client = httpx.AsyncClient(timeout=settings.upstream_timeout_seconds)
        closers.append(client.aclose)
        provider = FMPMarketDataProvider(settings.fmp_api_key, client, settings.fmp_base_url)

    if repository is None:
        repository = _build_repository(settings)
    if not settings.jwt_secret:
        log.warning("SUPABASE_JWT_SECRET not set; authenticated endpoints will fail")

    container = wire(
        quote_source=provider,
        dividend_source=provider,
        profile_source=provider,
        repository=repository,
        validator=SharedSecretTokenValidator(settings.jwt_secret, settings.jwt_audience),
        settings=settings,
    )
    container.closers.extend(closers)
    return container


def _build_repository(settings: Settings) -> IHoldingRepository:
    if not settings.database_url:
        log.warning("DATABASE_URL not set; holdings are kept in memory only")
        return InMemoryHoldingRepository()
    return SqlAlchemyHoldingRepository(create_session_factory(settings.database_url))
