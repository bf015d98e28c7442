"""
Application service: Quote Source Adapter.
Read-through cache in front of an IQuoteSource, keyed by normalized ticker.
Depends only on Domain ports and entities. No infrastructure imports.
"""

import logging

from divtrack.domain.entities.holding import QuoteResult
from divtrack.domain.ports.cache_port import ITTLCache
from divtrack.domain.ports.market_data_port import IQuoteSource
from divtrack.domain.tickers import normalize_ticker

log = logging.getLogger(__name__)


class QuoteService:
    def __init__(self, source: IQuoteSource, cache: ITTLCache) -> None:
        self._source = source
        self._cache = cache

    async def get_quote(self, ticker: str) -> QuoteResult:
        """Return the current quote for *ticker* (uppercased).

        A cached quote is returned without a round trip while its TTL lasts.

        Raises:
            InvalidInput: if *ticker* is blank or malformed.
            UpstreamUnavailable, SymbolNotFound: propagated from the IQuoteSource.
        """
        symbol = normalize_ticker(ticker)
        cached = self._cache.get(symbol)
        if cached is not None:
            log.debug("quote cache hit for %s", symbol)
            return cached

        quote = await self._source.fetch_quote(symbol)
        self._cache.set(symbol, quote)
        return quote
