"""
Application service: fetch quote, dividend profile and company name for one
ticker concurrently and aggregate them into a HoldingSnapshot.

All three lookups settle before the result is decided. Quote and dividend
failures fail the snapshot (quote error first); the company name never does.
"""

import asyncio

from divtrack.application.services.dividend_analyzer import DividendHistoryAnalyzer
from divtrack.application.services.profile_resolver import ProfileResolver
from divtrack.application.services.quote_service import QuoteService
from divtrack.domain.entities.holding import HoldingSnapshot
from divtrack.domain.metrics import aggregate
from divtrack.domain.tickers import normalize_ticker


class SnapshotFetcher:
    def __init__(
        self,
        quotes: QuoteService,
        dividends: DividendHistoryAnalyzer,
        profiles: ProfileResolver,
    ) -> None:
        self._quotes = quotes
        self._dividends = dividends
        self._profiles = profiles

    async def fetch(
        self,
        ticker: str,
        share_count: int,
        company_name: str | None = None,
    ) -> HoldingSnapshot:
        """Build a snapshot for *ticker* and *share_count*.

        When *company_name* is given the profile lookup is skipped and the
        name is carried through unchanged.
        """
        symbol = normalize_ticker(ticker)
        name_lookup = (
            self._known_name(company_name)
            if company_name is not None
            else self._profiles.resolve_company_name(symbol)
        )
        quote, dividends, name = await asyncio.gather(
            self._quotes.get_quote(symbol),
            self._dividends.get_dividend_profile(symbol),
            name_lookup,
            return_exceptions=True,
        )
        for outcome in (quote, dividends):
            if isinstance(outcome, BaseException):
                raise outcome
        if isinstance(name, BaseException):
            # resolve_company_name absorbs Exception; anything else is a cancellation
            raise name

        metrics = aggregate(
            quote.price,
            dividends.annual_dividend,
            dividends.dividend_yield_percent,
            share_count,
        )
        return HoldingSnapshot(
            ticker=symbol,
            company_name=name,
            share_count=share_count,
            quote=quote,
            dividends=dividends,
            metrics=metrics,
        )

    @staticmethod
    async def _known_name(name: str) -> str:
        return name
