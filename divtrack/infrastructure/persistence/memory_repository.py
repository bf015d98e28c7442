"""
Infrastructure adapter: process-local dict → IHoldingRepository.
Used when no DATABASE_URL is configured, and by the test suite.
Calls may arrive from worker threads; writes hold a lock across read and replace.
"""

import dataclasses
import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from divtrack.domain.entities.holding import Holding, MarketFigures, NewHolding
from divtrack.domain.errors import DuplicateHolding, NotFound
from divtrack.domain.metrics import aggregate
from divtrack.domain.ports.holding_repository_port import IHoldingRepository


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryHoldingRepository(IHoldingRepository):
    def __init__(
        self,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._rows: dict[str, Holding] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._id_factory = id_factory

    def list_for_owner(self, owner_id: str) -> list[Holding]:
        owned = [h for h in list(self._rows.values()) if h.owner_id == owner_id]
        return sorted(owned, key=lambda h: h.ticker)

    def get(self, owner_id: str, holding_id: str) -> Optional[Holding]:
        holding = self._rows.get(holding_id)
        if holding is None or holding.owner_id != owner_id:
            return None
        return holding

    def get_by_ticker(self, owner_id: str, ticker: str) -> Optional[Holding]:
        for holding in list(self._rows.values()):
            if holding.owner_id == owner_id and holding.ticker == ticker:
                return holding
        return None

    def add(self, holding: NewHolding) -> Holding:
        with self._lock:
            if self.get_by_ticker(holding.owner_id, holding.ticker) is not None:
                raise DuplicateHolding("Stock already exists in portfolio")
            now = self._clock()
            stored = Holding(
                id=self._id_factory(),
                ticker=holding.ticker,
                company_name=holding.company_name,
                share_count=holding.share_count,
                owner_id=holding.owner_id,
                created_at=now,
                updated_at=now,
                **_figure_fields(holding.figures, holding.share_count),
            )
            self._rows[stored.id] = stored
            return stored

    def update_snapshot(
        self,
        owner_id: str,
        holding_id: str,
        figures: MarketFigures,
        *,
        share_count: Optional[int] = None,
    ) -> Holding:
        with self._lock:
            existing = self.get(owner_id, holding_id)
            if existing is None:
                raise NotFound("Holding not found")
            shares = existing.share_count if share_count is None else share_count
            updated = dataclasses.replace(
                existing,
                share_count=shares,
                updated_at=self._clock(),
                **_figure_fields(figures, shares),
            )
            self._rows[holding_id] = updated
            return updated

    def delete(self, owner_id: str, holding_id: str) -> None:
        with self._lock:
            if self.get(owner_id, holding_id) is None:
                raise NotFound("Holding not found")
            del self._rows[holding_id]

    def list_owner_ids(self) -> list[str]:
        return sorted({h.owner_id for h in list(self._rows.values())})


def _figure_fields(figures: MarketFigures, share_count: int) -> dict:
    metrics = aggregate(
        figures.current_price,
        figures.annual_dividend,
        figures.dividend_yield_percent,
        share_count,
    )
    return {
        "current_price": figures.current_price,
        "dividend_yield_percent": figures.dividend_yield_percent,
        "total_value": metrics.total_value,
        "monthly_dividend": metrics.monthly_dividend,
    }
