import asyncio
from decimal import Decimal

import pytest

from divtrack.domain.errors import InvalidInput


def test_quote_for(container):
    quote = asyncio.run(container.market.quote_for("ko"))
    assert quote.ticker == "KO"
    assert quote.price == Decimal("60.00")


def test_dividend_profile_for_reuses_quote_cache(container, market):
    quote, profile = asyncio.run(container.market.dividend_profile_for("aapl"))
    assert quote.price == Decimal("150.00")
    assert profile.annual_dividend == Decimal("4.00")
    assert market.calls[("quote", "AAPL")] == 1


def test_dividend_summary_does_not_persist(container, repository):
    snapshot = asyncio.run(container.market.dividend_summary("AAPL", 100))
    assert snapshot.company_name == "Apple Inc."
    assert snapshot.metrics.total_value == Decimal("15000.00")
    assert repository.list_owner_ids() == []


def test_dividend_summary_requires_positive_shares(container):
    with pytest.raises(InvalidInput):
        asyncio.run(container.market.dividend_summary("AAPL", 0))
