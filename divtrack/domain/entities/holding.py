"""
Domain entities for holdings and their market data.
Zero external dependencies. Pure Python dataclasses only.
Monetary amounts are Decimal; share counts are int.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class QuoteResult:
    ticker: str
    price: Decimal
    name: Optional[str]


@dataclass(frozen=True)
class DividendEvent:
    date: date
    adjusted_amount: Decimal


@dataclass(frozen=True)
class DividendProfile:
    ticker: str
    annual_dividend: Decimal
    dividend_yield_percent: Decimal


@dataclass(frozen=True)
class HoldingMetrics:
    total_value: Decimal
    monthly_dividend: Decimal


@dataclass(frozen=True)
class MarketFigures:
    """Market inputs of a holding snapshot. The store derives value and
    monthly dividend from these and the share count it holds."""

    current_price: Decimal
    annual_dividend: Decimal
    dividend_yield_percent: Decimal


@dataclass(frozen=True)
class NewHolding:
    """A holding that has not been persisted yet."""

    ticker: str
    company_name: str
    share_count: int
    figures: MarketFigures
    owner_id: str


@dataclass(frozen=True)
class Holding:
    id: str
    ticker: str
    company_name: str
    share_count: int
    current_price: Decimal
    dividend_yield_percent: Decimal
    total_value: Decimal
    monthly_dividend: Decimal
    owner_id: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class HoldingSnapshot:
    """Freshly fetched figures for one ticker and share count."""

    ticker: str
    company_name: str
    share_count: int
    quote: QuoteResult
    dividends: DividendProfile
    metrics: HoldingMetrics

    @property
    def figures(self) -> MarketFigures:
        return MarketFigures(
            current_price=self.quote.price,
            annual_dividend=self.dividends.annual_dividend,
            dividend_yield_percent=self.dividends.dividend_yield_percent,
        )
