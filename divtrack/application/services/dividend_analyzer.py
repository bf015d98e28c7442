"""
Application service: Dividend History Analyzer.

Derives the trailing-12-month annual dividend and the dividend yield for a
ticker from its full dividend-event history:

    annual_dividend = sum(adjusted_amount for events dated after now - 365 days)
    yield_percent   = round2(annual_dividend / price * 100)   (0 if price <= 0)

A ticker with no dividend history is a valid state and yields {0, 0} without
consulting the quote. Otherwise the price comes from the QuoteService, so the
quote cache is shared with direct quote lookups.
"""

import logging
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Callable, Iterable

from divtrack.application.services.quote_service import QuoteService
from divtrack.domain.entities.holding import DividendEvent, DividendProfile
from divtrack.domain.metrics import dividend_yield_percent
from divtrack.domain.ports.cache_port import ITTLCache
from divtrack.domain.ports.market_data_port import IDividendHistorySource
from divtrack.domain.tickers import normalize_ticker

log = logging.getLogger(__name__)

TRAILING_WINDOW = timedelta(days=365)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def trailing_annual_dividend(events: Iterable[DividendEvent], now: datetime) -> Decimal:
    """Sum adjusted payouts of events strictly after ``now - 365 days``.

    Event dates are taken as midnight UTC.
    """
    cutoff = now - TRAILING_WINDOW
    total = Decimal("0")
    for event in events:
        event_at = datetime.combine(event.date, time.min, tzinfo=timezone.utc)
        if event_at > cutoff:
            total += event.adjusted_amount
    return total


class DividendHistoryAnalyzer:
    def __init__(
        self,
        source: IDividendHistorySource,
        quotes: QuoteService,
        cache: ITTLCache,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Args:
            source: IDividendHistorySource implementation (e.g. FMP adapter).
            quotes: QuoteService used for the yield denominator.
            cache:  ITTLCache holding DividendProfile values (TTL ~1 hour).
            clock:  Returns the current aware UTC datetime; injectable for tests.
        """
        self._source = source
        self._quotes = quotes
        self._cache = cache
        self._clock = clock

    async def get_dividend_profile(self, ticker: str) -> DividendProfile:
        """Return the trailing annual dividend and yield for *ticker*.

        Raises:
            InvalidInput: if *ticker* is blank or malformed.
            UpstreamUnavailable: if the dividend-history feed fails.
            UpstreamUnavailable, SymbolNotFound: propagated from the quote lookup.
        """
        symbol = normalize_ticker(ticker)
        cached = self._cache.get(symbol)
        if cached is not None:
            log.debug("dividend cache hit for %s", symbol)
            return cached

        events = await self._source.fetch_dividend_history(symbol)
        if not events:
            profile = DividendProfile(symbol, Decimal("0"), Decimal("0"))
        else:
            annual = trailing_annual_dividend(events, self._clock())
            quote = await self._quotes.get_quote(symbol)
            profile = DividendProfile(
                ticker=symbol,
                annual_dividend=annual,
                dividend_yield_percent=dividend_yield_percent(annual, quote.price),
            )

        self._cache.set(symbol, profile)
        return profile
