from collections import Counter
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from divtrack.domain.entities.holding import DividendEvent, QuoteResult
from divtrack.domain.errors import SymbolNotFound
from divtrack.domain.ports.market_data_port import (
    IDividendHistorySource,
    IProfileSource,
    IQuoteSource,
)
from divtrack.infrastructure.auth.jwt_validator import SharedSecretTokenValidator
from divtrack.infrastructure.config.settings import Settings
from divtrack.infrastructure.entrypoints.container import wire
from divtrack.infrastructure.persistence.memory_repository import InMemoryHoldingRepository

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
JWT_SECRET = "test-secret"


class FakeTimer:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeMarketData(IQuoteSource, IDividendHistorySource, IProfileSource):
    """Upstream stand-in: each table maps a symbol to a value or an exception to raise."""

    def __init__(self) -> None:
        self.quotes: dict = {}
        self.dividends: dict = {}
        self.names: dict = {}
        self.calls: Counter = Counter()

    async def fetch_quote(self, symbol: str) -> QuoteResult:
        self.calls[("quote", symbol)] += 1
        return self._answer(self.quotes, symbol)

    async def fetch_dividend_history(self, symbol: str) -> list[DividendEvent]:
        self.calls[("dividend", symbol)] += 1
        return self._answer(self.dividends, symbol)

    async def fetch_company_name(self, symbol: str) -> str:
        self.calls[("profile", symbol)] += 1
        return self._answer(self.names, symbol)

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    @staticmethod
    def _answer(table: dict, symbol: str):
        if symbol not in table:
            raise SymbolNotFound(f"unknown symbol {symbol}")
        value = table[symbol]
        if isinstance(value, Exception):
            raise value
        return value


def quarterly(amount: str, *dates: date) -> list[DividendEvent]:
    return [DividendEvent(date=d, adjusted_amount=Decimal(amount)) for d in dates]


@pytest.fixture
def market() -> FakeMarketData:
    fake = FakeMarketData()
    fake.quotes["AAPL"] = QuoteResult("AAPL", Decimal("150.00"), "Apple Inc.")
    fake.dividends["AAPL"] = quarterly(
        "1.00", date(2025, 11, 10), date(2026, 2, 9), date(2026, 5, 11), date(2026, 8, 10)
    )
    fake.names["AAPL"] = "Apple Inc."

    fake.quotes["KO"] = QuoteResult("KO", Decimal("60.00"), "Coca-Cola")
    fake.dividends["KO"] = quarterly(
        "0.51", date(2025, 11, 28), date(2026, 3, 13), date(2026, 6, 13), date(2026, 9, 15)
    )
    fake.names["KO"] = "The Coca-Cola Company"

    fake.quotes["TSLA"] = QuoteResult("TSLA", Decimal("250.00"), "Tesla")
    fake.dividends["TSLA"] = []
    fake.names["TSLA"] = "Tesla, Inc."
    return fake


@pytest.fixture
def timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def repository() -> InMemoryHoldingRepository:
    return InMemoryHoldingRepository(clock=lambda: NOW)


@pytest.fixture
def container(market, repository, timer):
    return wire(
        quote_source=market,
        dividend_source=market,
        profile_source=market,
        repository=repository,
        validator=SharedSecretTokenValidator(JWT_SECRET),
        settings=Settings(jwt_secret=JWT_SECRET),
        cache_timer=timer,
        clock=lambda: NOW,
    )
