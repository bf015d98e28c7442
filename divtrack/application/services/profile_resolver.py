"""
Application service: Profile Resolver.
Resolves a ticker to a display company name. A missing name is cosmetic, so
every failure degrades to the ticker itself and is never raised to the caller.
Only successful lookups are cached.
"""

import logging

from divtrack.domain.errors import InvalidInput
from divtrack.domain.ports.cache_port import ITTLCache
from divtrack.domain.ports.market_data_port import IProfileSource
from divtrack.domain.tickers import normalize_ticker

log = logging.getLogger(__name__)


class ProfileResolver:
    def __init__(self, source: IProfileSource, cache: ITTLCache) -> None:
        self._source = source
        self._cache = cache

    async def resolve_company_name(self, ticker: str) -> str:
        try:
            symbol = normalize_ticker(ticker)
        except InvalidInput as exc:
            log.warning("not looking up a profile for %r: %s", ticker, exc)
            return ticker.strip().upper() if isinstance(ticker, str) else str(ticker)

        cached = self._cache.get(symbol)
        if cached is not None:
            return cached

        try:
            name = await self._source.fetch_company_name(symbol)
        except Exception as exc:
            log.warning("profile lookup failed for %s, using ticker as name: %s", symbol, exc)
            return symbol

        if not isinstance(name, str) or not name.strip():
            log.warning("profile lookup for %s returned no company name", symbol)
            return symbol

        name = name.strip()
        self._cache.set(symbol, name)
        return name
