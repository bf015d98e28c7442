"""
Use-case: unauthenticated market lookups for a single ticker.
quote_for() and dividend_profile_for() expose the cached services directly;
dividend_summary() previews what a holding of N shares would look like
without persisting anything.
"""

from divtrack.application.services.dividend_analyzer import DividendHistoryAnalyzer
from divtrack.application.services.quote_service import QuoteService
from divtrack.application.services.snapshot_fetcher import SnapshotFetcher
from divtrack.domain.entities.holding import DividendProfile, HoldingSnapshot, QuoteResult
from divtrack.domain.tickers import validate_share_count


class MarketLookupUseCase:
    def __init__(
        self,
        quotes: QuoteService,
        dividends: DividendHistoryAnalyzer,
        snapshots: SnapshotFetcher,
    ) -> None:
        self._quotes = quotes
        self._dividends = dividends
        self._snapshots = snapshots

    async def quote_for(self, ticker: str) -> QuoteResult:
        return await self._quotes.get_quote(ticker)

    async def dividend_profile_for(self, ticker: str) -> tuple[QuoteResult, DividendProfile]:
        """Return the quote alongside the dividend profile, as callers show both."""
        profile = await self._dividends.get_dividend_profile(ticker)
        quote = await self._quotes.get_quote(ticker)
        return quote, profile

    async def dividend_summary(self, ticker: str, share_count: int) -> HoldingSnapshot:
        return await self._snapshots.fetch(ticker, validate_share_count(share_count))
