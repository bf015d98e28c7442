"""
Infrastructure adapter: SQLAlchemy → IHoldingRepository.
Each call runs in its own short-lived session. Driver errors are translated
into StorageUnavailable; unique-constraint violations into DuplicateHolding.

Market figures are quantized to the column scale before value and monthly
dividend are derived, so what is read back satisfies
total_value == current_price * share_count.
"""

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from divtrack.domain.entities.holding import Holding, MarketFigures, NewHolding
from divtrack.domain.errors import DuplicateHolding, NotFound, StorageUnavailable
from divtrack.domain.metrics import aggregate
from divtrack.domain.ports.holding_repository_port import IHoldingRepository
from divtrack.infrastructure.persistence.models import MONEY_SCALE, Base, HoldingRow

log = logging.getLogger(__name__)


def create_session_factory(database_url: str, **engine_kwargs) -> sessionmaker:
    engine = create_engine(database_url, future=True, pool_pre_ping=True, **engine_kwargs)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def _to_scale(value: Decimal) -> Decimal:
    return Decimal(value).quantize(MONEY_SCALE, rounding=ROUND_HALF_UP)


def _apply_figures(row: HoldingRow, figures: MarketFigures, share_count: int) -> None:
    price = _to_scale(figures.current_price)
    annual = _to_scale(figures.annual_dividend)
    metrics = aggregate(price, annual, figures.dividend_yield_percent, share_count)
    row.shares = share_count
    row.current_price = price
    row.annual_dividend = annual
    row.dividend_yield = figures.dividend_yield_percent
    row.total_value = metrics.total_value
    row.monthly_dividend = metrics.monthly_dividend


def _to_entity(row: HoldingRow) -> Holding:
    shares = int(row.shares)
    price = Decimal(row.current_price)
    annual = Decimal(row.annual_dividend)
    yield_percent = Decimal(row.dividend_yield)
    return Holding(
        id=row.id,
        ticker=row.ticker,
        company_name=row.company,
        share_count=shares,
        current_price=price,
        dividend_yield_percent=yield_percent,
        total_value=Decimal(row.total_value),
        monthly_dividend=aggregate(price, annual, yield_percent, shares).monthly_dividend,
        owner_id=row.user_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlAlchemyHoldingRepository(IHoldingRepository):
    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def create_schema(self) -> None:
        """Create the holdings table if it does not exist (dev and tests)."""
        with self._session_factory() as session:
            Base.metadata.create_all(session.get_bind())

    def list_for_owner(self, owner_id: str) -> list[Holding]:
        def query(session: Session) -> list[Holding]:
            rows = session.scalars(
                select(HoldingRow).where(HoldingRow.user_id == owner_id).order_by(HoldingRow.ticker)
            )
            return [_to_entity(row) for row in rows]

        return self._run(query)

    def get(self, owner_id: str, holding_id: str) -> Optional[Holding]:
        def query(session: Session) -> Optional[Holding]:
            row = self._owned_row(session, owner_id, holding_id)
            return _to_entity(row) if row is not None else None

        return self._run(query)

    def get_by_ticker(self, owner_id: str, ticker: str) -> Optional[Holding]:
        def query(session: Session) -> Optional[Holding]:
            row = session.scalars(
                select(HoldingRow).where(HoldingRow.user_id == owner_id, HoldingRow.ticker == ticker)
            ).first()
            return _to_entity(row) if row is not None else None

        return self._run(query)

    def add(self, holding: NewHolding) -> Holding:
        def command(session: Session) -> Holding:
            now = self._clock()
            row = HoldingRow(
                ticker=holding.ticker,
                company=holding.company_name,
                user_id=holding.owner_id,
                created_at=now,
                updated_at=now,
            )
            _apply_figures(row, holding.figures, holding.share_count)
            session.add(row)
            session.commit()
            session.refresh(row)
            return _to_entity(row)

        try:
            return self._run(command)
        except IntegrityError as exc:
            raise DuplicateHolding("Stock already exists in portfolio") from exc

    def update_snapshot(
        self,
        owner_id: str,
        holding_id: str,
        figures: MarketFigures,
        *,
        share_count: Optional[int] = None,
    ) -> Holding:
        def command(session: Session) -> Holding:
            row = self._owned_row(session, owner_id, holding_id, for_update=True)
            if row is None:
                raise NotFound("Holding not found")
            shares = int(row.shares) if share_count is None else share_count
            _apply_figures(row, figures, shares)
            row.updated_at = self._clock()
            session.commit()
            session.refresh(row)
            return _to_entity(row)

        return self._run(command)

    def delete(self, owner_id: str, holding_id: str) -> None:
        def command(session: Session) -> None:
            row = self._owned_row(session, owner_id, holding_id)
            if row is None:
                raise NotFound("Holding not found")
            session.delete(row)
            session.commit()

        self._run(command)

    def list_owner_ids(self) -> list[str]:
        def query(session: Session) -> list[str]:
            return list(
                session.scalars(select(HoldingRow.user_id).distinct().order_by(HoldingRow.user_id))
            )

        return self._run(query)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _owned_row(
        session: Session, owner_id: str, holding_id: str, for_update: bool = False
    ) -> Optional[HoldingRow]:
        stmt = select(HoldingRow).where(HoldingRow.id == holding_id, HoldingRow.user_id == owner_id)
        if for_update:
            stmt = stmt.with_for_update()
        return session.scalars(stmt).first()

    def _run(self, work):
        with self._session_factory() as session:
            try:
                return work(session)
            except IntegrityError:
                session.rollback()
                raise
            except SQLAlchemyError as exc:
                session.rollback()
                log.error("holding store error: %s", exc)
                raise StorageUnavailable("Holding store is unavailable") from exc
