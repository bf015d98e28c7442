"""
Infrastructure adapter: Financial Modeling Prep (FMP) REST API →
IQuoteSource, IDividendHistorySource, IProfileSource.

All FMP-specific details (endpoints, the ``apikey`` query parameter, the
``{"Error Message": ...}`` body FMP returns with HTTP 200) are confined here;
the rest of the codebase depends only on the market data ports.
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from divtrack.domain.entities.holding import DividendEvent, QuoteResult
from divtrack.domain.errors import ConfigurationError, SymbolNotFound, UpstreamUnavailable
from divtrack.domain.ports.market_data_port import (
    IDividendHistorySource,
    IProfileSource,
    IQuoteSource,
)

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://financialmodelingprep.com/api/v3"


class FMPMarketDataProvider(IQuoteSource, IDividendHistorySource, IProfileSource):
    """Fetches quotes, dividend history and company profiles from FMP."""

    def __init__(
        self,
        api_key: Optional[str],
        client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        """
        Args:
            api_key:  FMP API key. May be None; calls then raise ConfigurationError.
            client:   Shared httpx.AsyncClient; its timeout bounds every call.
            base_url: FMP v3 API root.
        """
        self._api_key = api_key
        self._client = client
        self._base_url = base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Port implementations
    # ------------------------------------------------------------------

    async def fetch_quote(self, symbol: str) -> QuoteResult:
        data = await self._get_json(f"quote/{symbol}", "quote")
        if not isinstance(data, list) or not data:
            raise SymbolNotFound(f"No quote data found for symbol {symbol}")
        row = data[0]
        if not isinstance(row, dict):
            raise UpstreamUnavailable(f"FMP quote for {symbol} is malformed")
        price = _to_decimal(row.get("price"))
        if price is None or price < 0:
            raise UpstreamUnavailable(f"FMP quote for {symbol} has no usable price")
        return QuoteResult(ticker=symbol, price=price, name=row.get("name"))

    async def fetch_dividend_history(self, symbol: str) -> list[DividendEvent]:
        data = await self._get_json(
            f"historical-price-full/stock_dividend/{symbol}", "dividend"
        )
        historical = data.get("historical") if isinstance(data, dict) else None
        if not historical:
            return []

        events = []
        for row in historical:
            event = _parse_dividend_event(row)
            if event is None:
                log.debug("skipping malformed FMP dividend row for %s: %r", symbol, row)
                continue
            events.append(event)
        return events

    async def fetch_company_name(self, symbol: str) -> str:
        data = await self._get_json(f"profile/{symbol}", "profile")
        rows = data if isinstance(data, list) else []
        if not rows or not isinstance(rows[0], dict) or not rows[0].get("companyName"):
            raise SymbolNotFound(f"No profile found for symbol {symbol}")
        return rows[0]["companyName"]

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get_json(self, path: str, feed: str) -> Any:
        if not self._api_key:
            raise ConfigurationError("FMP_API_KEY not configured")

        url = f"{self._base_url}/{path}"
        try:
            response = await self._client.get(url, params={"apikey": self._api_key})
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailable(f"FMP {feed} API timed out") from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(f"FMP {feed} API request failed: {exc}") from exc

        if not response.is_success:
            raise UpstreamUnavailable(f"FMP {feed} API returned status {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamUnavailable(f"FMP {feed} API returned invalid JSON") from exc

        if isinstance(data, dict) and "Error Message" in data:
            raise UpstreamUnavailable(f"Failed to fetch {feed}: {data['Error Message']}")
        return data


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def _parse_dividend_event(row: Any) -> Optional[DividendEvent]:
    if not isinstance(row, dict):
        return None
    amount = _to_decimal(row.get("adjDividend"))
    try:
        event_date = date.fromisoformat(str(row.get("date")))
    except ValueError:
        return None
    if amount is None:
        return None
    return DividendEvent(date=event_date, adjusted_amount=amount)
