"""
Infrastructure adapter: yfinance → IQuoteSource, IDividendHistorySource, IProfileSource.
All yfinance-specific details (ticker.info, fast_info, dividends) are confined here;
the rest of the codebase depends only on the market data ports.

yfinance is synchronous, so every call runs in a worker thread under
asyncio.wait_for to keep the upstream timeout bounded.
"""

import asyncio
from decimal import Decimal
from typing import Callable, TypeVar

import yfinance as yf

from divtrack.domain.entities.holding import DividendEvent, QuoteResult
from divtrack.domain.errors import DivTrackError, SymbolNotFound, UpstreamUnavailable
from divtrack.domain.ports.market_data_port import (
    IDividendHistorySource,
    IProfileSource,
    IQuoteSource,
)

T = TypeVar("T")


class YFinanceMarketDataProvider(IQuoteSource, IDividendHistorySource, IProfileSource):
    """Fetches stock market data from Yahoo Finance via the yfinance library."""

    def __init__(self, timeout_seconds: float = 10.0) -> None:
        self._timeout = timeout_seconds

    async def fetch_quote(self, symbol: str) -> QuoteResult:
        return await self._run(symbol, "quote", self._quote)

    async def fetch_dividend_history(self, symbol: str) -> list[DividendEvent]:
        return await self._run(symbol, "dividend", self._dividends)

    async def fetch_company_name(self, symbol: str) -> str:
        return await self._run(symbol, "profile", self._company_name)

    # ------------------------------------------------------------------
    # Blocking yfinance calls
    # ------------------------------------------------------------------

    @staticmethod
    def _quote(symbol: str) -> QuoteResult:
        ticker = yf.Ticker(symbol)
        fast_info = ticker.fast_info
        current_price = getattr(fast_info, "last_price", None)
        info: dict = {}
        if current_price is None:
            info = ticker.info or {}
            current_price = info.get("currentPrice")
        if current_price is None:
            raise SymbolNotFound(f"No price data available for symbol: {symbol!r}")

        name = (info.get("shortName") or info.get("longName")) if info else None
        return QuoteResult(
            ticker=symbol,
            price=Decimal(str(round(float(current_price), 4))),
            name=name,
        )

    @staticmethod
    def _dividends(symbol: str) -> list[DividendEvent]:
        series = yf.Ticker(symbol).dividends
        if series is None or len(series) == 0:
            return []
        return [
            DividendEvent(date=timestamp.date(), adjusted_amount=Decimal(str(float(amount))))
            for timestamp, amount in series.items()
        ]

    @staticmethod
    def _company_name(symbol: str) -> str:
        info = yf.Ticker(symbol).info or {}
        name = info.get("longName") or info.get("shortName")
        if not name:
            raise SymbolNotFound(f"No profile found for symbol {symbol}")
        return name

    async def _run(self, symbol: str, feed: str, call: Callable[[str], T]) -> T:
        try:
            return await asyncio.wait_for(asyncio.to_thread(call, symbol), self._timeout)
        except DivTrackError:
            raise
        except asyncio.TimeoutError as exc:
            raise UpstreamUnavailable(f"yfinance {feed} lookup for {symbol} timed out") from exc
        except Exception as exc:
            raise UpstreamUnavailable(f"yfinance {feed} lookup for {symbol} failed: {exc}") from exc
