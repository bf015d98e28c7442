"""
Ports (interfaces) for upstream market data providers.
Infrastructure adapters (e.g. FMPMarketDataProvider, YFinanceMarketDataProvider)
must implement these interfaces and raise only divtrack.domain.errors types.
"""

from abc import ABC, abstractmethod

from divtrack.domain.entities.holding import DividendEvent, QuoteResult


class IQuoteSource(ABC):
    @abstractmethod
    async def fetch_quote(self, symbol: str) -> QuoteResult:
        """Fetch the current price and best-effort name for *symbol*.

        Raises:
            UpstreamUnavailable: on transport failure, non-success status or timeout.
            SymbolNotFound: if the source answered with an empty result set.
        """
        ...


class IDividendHistorySource(ABC):
    @abstractmethod
    async def fetch_dividend_history(self, symbol: str) -> list[DividendEvent]:
        """Fetch every historical dividend event for *symbol* (possibly empty).

        Raises:
            UpstreamUnavailable: on transport failure, non-success status or timeout.
        """
        ...


class IProfileSource(ABC):
    @abstractmethod
    async def fetch_company_name(self, symbol: str) -> str:
        """Fetch the display company name for *symbol*. May raise anything."""
        ...
