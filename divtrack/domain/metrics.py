"""
Metric Aggregator: derive holding value and income from market figures.
Pure functions, no I/O. Rounding is left to the presentation boundary.
"""

from decimal import ROUND_HALF_UP, Decimal

from divtrack.domain.entities.holding import HoldingMetrics

MONTHS_PER_YEAR = 12
_CENTS = Decimal("0.01")


def aggregate(
    price: Decimal,
    annual_dividend: Decimal,
    dividend_yield_percent: Decimal,
    share_count: int,
) -> HoldingMetrics:
    """Combine price and dividend figures with a share count.

    *share_count* is assumed to be validated positive by the caller.
    *dividend_yield_percent* is part of the input profile but enters neither figure.
    """
    return HoldingMetrics(
        total_value=price * share_count,
        monthly_dividend=annual_dividend * share_count / MONTHS_PER_YEAR,
    )


def dividend_yield_percent(annual_dividend: Decimal, price: Decimal) -> Decimal:
    """Annual dividend as a percentage of *price*, rounded half-up to 2 places."""
    if price <= 0 or annual_dividend == 0:
        return Decimal("0")
    return round2(annual_dividend / price * 100)


def round2(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)
