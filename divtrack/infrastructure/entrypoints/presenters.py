"""
JSON presenters for the HTTP boundary.
This is the only place figures are rounded: money and yields to 2 decimal
places (half-up), share counts as integers.
"""

from decimal import ROUND_HALF_UP, Decimal

from divtrack.domain.entities.holding import DividendProfile, Holding, HoldingSnapshot, QuoteResult
from divtrack.domain.entities.refresh_outcome import PortfolioRefresh, Retained

_CENTS = Decimal("0.01")
_TEN_THOUSANDTHS = Decimal("0.0001")


def to_2dp(value: Decimal) -> float:
    return float(value.quantize(_CENTS, rounding=ROUND_HALF_UP))


def fixed(value: Decimal, places: Decimal = _CENTS) -> str:
    return str(value.quantize(places, rounding=ROUND_HALF_UP))


def holding_json(holding: Holding) -> dict:
    return {
        "id": holding.id,
        "ticker": holding.ticker,
        "company": holding.company_name,
        "shares": holding.share_count,
        "current_price": to_2dp(holding.current_price),
        "dividend_yield": to_2dp(holding.dividend_yield_percent),
        "total_value": to_2dp(holding.total_value),
        "monthly_dividend": to_2dp(holding.monthly_dividend),
        "user_id": holding.owner_id,
        "created_at": holding.created_at.isoformat(),
        "updated_at": holding.updated_at.isoformat(),
    }


def quote_json(quote: QuoteResult) -> dict:
    return {"symbol": quote.ticker, "price": fixed(quote.price)}


def dividends_json(quote: QuoteResult, profile: DividendProfile) -> dict:
    return {
        "symbol": profile.ticker,
        "annual_dividend": fixed(profile.annual_dividend, _TEN_THOUSANDTHS),
        "stock_price": fixed(quote.price),
        "dividend_yield": f"{fixed(profile.dividend_yield_percent)}%",
        "evaluated_period": "trailing 12 months",
    }


def summary_json(snapshot: HoldingSnapshot) -> dict:
    return {
        "ticker": snapshot.ticker,
        "company": snapshot.company_name,
        "shares": snapshot.share_count,
        "currentPrice": to_2dp(snapshot.quote.price),
        "dividendYield": to_2dp(snapshot.dividends.dividend_yield_percent),
        "totalValue": to_2dp(snapshot.metrics.total_value),
        "monthlyDividend": to_2dp(snapshot.metrics.monthly_dividend),
    }


def refresh_json(result: PortfolioRefresh) -> dict:
    return {
        "message": "Portfolio refreshed successfully",
        "holdings": [holding_json(h) for h in result.holdings],
        "results": [
            {
                "id": outcome.holding.id,
                "ticker": outcome.holding.ticker,
                "status": outcome.status,
                "error": str(outcome.error) if isinstance(outcome, Retained) else None,
            }
            for outcome in result.outcomes
        ],
    }
