from decimal import Decimal

from divtrack.domain.metrics import aggregate, dividend_yield_percent, round2
from divtrack.infrastructure.entrypoints.presenters import to_2dp


def test_aggregate_example_portfolio():
    metrics = aggregate(Decimal("150.00"), Decimal("4.00"), Decimal("2.67"), 100)
    assert metrics.total_value == Decimal("15000.00")
    assert metrics.monthly_dividend == Decimal("4.00") * 100 / 12
    # rounding happens only at the boundary
    assert to_2dp(metrics.total_value) == 15000.00
    assert to_2dp(metrics.monthly_dividend) == 33.33


def test_aggregate_does_not_round():
    metrics = aggregate(Decimal("10.005"), Decimal("1"), Decimal("0"), 1)
    assert metrics.total_value == Decimal("10.005")
    assert metrics.monthly_dividend != round2(metrics.monthly_dividend)


def test_dividend_yield_rounds_half_up_to_two_places():
    assert dividend_yield_percent(Decimal("4.00"), Decimal("150.00")) == Decimal("2.67")
    assert dividend_yield_percent(Decimal("1"), Decimal("8")) == Decimal("12.50")
    assert dividend_yield_percent(Decimal("0.00125"), Decimal("1")) == Decimal("0.13")


def test_dividend_yield_is_zero_without_price_or_dividend():
    assert dividend_yield_percent(Decimal("4.00"), Decimal("0")) == 0
    assert dividend_yield_percent(Decimal("4.00"), Decimal("-1")) == 0
    assert dividend_yield_percent(Decimal("0"), Decimal("150")) == 0
