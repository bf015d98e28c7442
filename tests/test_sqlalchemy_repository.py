from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.pool import StaticPool

from divtrack.domain.entities.holding import MarketFigures, NewHolding
from divtrack.domain.errors import DuplicateHolding, NotFound, StorageUnavailable
from divtrack.infrastructure.persistence.sqlalchemy_repository import (
    SqlAlchemyHoldingRepository,
    create_session_factory,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repo():
    factory = create_session_factory(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    repository = SqlAlchemyHoldingRepository(factory, clock=lambda: NOW)
    repository.create_schema()
    return repository


def figures(price="150.00", annual="4.00", yield_percent="2.67"):
    return MarketFigures(
        current_price=Decimal(price),
        annual_dividend=Decimal(annual),
        dividend_yield_percent=Decimal(yield_percent),
    )


def new_holding(ticker="AAPL", owner="owner-1", shares=100, **figure_kwargs):
    return NewHolding(
        ticker=ticker,
        company_name=f"{ticker} Corp",
        share_count=shares,
        figures=figures(**figure_kwargs),
        owner_id=owner,
    )


def test_add_and_read_back(repo):
    stored = repo.add(new_holding())

    assert stored.id
    assert stored.share_count == 100
    assert isinstance(stored.current_price, Decimal)
    assert stored.total_value == Decimal("15000.00")
    assert stored.monthly_dividend == Decimal("4.00") * 100 / 12
    assert repo.get("owner-1", stored.id) == stored
    assert repo.get_by_ticker("owner-1", "AAPL") == stored


def test_read_back_keeps_value_and_income_consistent(repo):
    stored = repo.add(new_holding(shares=10, price="12.34567", annual="0.1234567"))
    read = repo.get("owner-1", stored.id)

    assert read.current_price == Decimal("12.34567")
    assert read.total_value == read.current_price * read.share_count
    assert read.monthly_dividend == Decimal("0.123457") * 10 / 12

    refreshed = repo.update_snapshot("owner-1", stored.id, figures(price="98.7654321"))
    read = repo.get("owner-1", stored.id)
    assert read == refreshed
    assert read.current_price == Decimal("98.765432")
    assert read.total_value == read.current_price * read.share_count


def test_unique_ticker_per_owner(repo):
    repo.add(new_holding())
    repo.add(new_holding(owner="owner-2"))
    with pytest.raises(DuplicateHolding):
        repo.add(new_holding())


def test_list_is_owner_scoped_and_ordered(repo):
    repo.add(new_holding("KO"))
    repo.add(new_holding("AAPL"))
    repo.add(new_holding("MSFT", owner="owner-2"))

    assert [h.ticker for h in repo.list_for_owner("owner-1")] == ["AAPL", "KO"]
    assert repo.list_owner_ids() == ["owner-1", "owner-2"]


def test_update_snapshot_is_owner_scoped(repo):
    stored = repo.add(new_holding())
    with pytest.raises(NotFound):
        repo.update_snapshot("owner-2", stored.id, figures(price="1"), share_count=1)

    updated = repo.update_snapshot(
        "owner-1", stored.id, figures(price="160.00", yield_percent="2.50"), share_count=10
    )
    assert updated.share_count == 10
    assert updated.current_price == Decimal("160.00")
    assert updated.total_value == Decimal("1600.00")
    assert updated.ticker == "AAPL"


def test_update_snapshot_without_share_count_keeps_stored_count(repo):
    stored = repo.add(new_holding(shares=20))

    updated = repo.update_snapshot("owner-1", stored.id, figures(price="151.00"))

    assert updated.share_count == 20
    assert updated.total_value == Decimal("3020.00")
    assert updated.monthly_dividend == Decimal("4.00") * 20 / 12


def test_delete(repo):
    stored = repo.add(new_holding())
    with pytest.raises(NotFound):
        repo.delete("owner-2", stored.id)
    repo.delete("owner-1", stored.id)
    assert repo.get("owner-1", stored.id) is None


def test_unreachable_store_is_storage_unavailable():
    factory = create_session_factory("sqlite:////nonexistent-dir/holdings.db")
    with pytest.raises(StorageUnavailable):
        SqlAlchemyHoldingRepository(factory).list_for_owner("owner-1")
