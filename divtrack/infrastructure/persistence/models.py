"""
SQLAlchemy table mapping for holdings.
Monetary columns are NUMERIC so values round-trip as Decimal; the unique
constraint on (user_id, ticker) backs owner-scoped ticker uniqueness.

Prices and annual dividends are stored at MONEY_SCALE places. total_value is
price times an integer share count, so it fits the same scale exactly.
monthly_dividend is kept for reporting queries only; a twelfth of the annual
amount has no finite scale, so entities derive it from annual_dividend.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, DateTime, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()

MONEY_SCALE = Decimal("0.000001")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HoldingRow(Base):
    __tablename__ = "portfolio_holdings"
    __table_args__ = (UniqueConstraint("user_id", "ticker", name="uq_portfolio_holdings_user_ticker"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    ticker = Column(String(16), nullable=False)
    company = Column(String(255), nullable=False)
    shares = Column(Integer, nullable=False)
    current_price = Column(Numeric(18, 6), nullable=False)
    annual_dividend = Column(Numeric(18, 6), nullable=False, default=0)
    dividend_yield = Column(Numeric(9, 2), nullable=False)
    total_value = Column(Numeric(28, 6), nullable=False)
    monthly_dividend = Column(Numeric(28, 10), nullable=False)
    user_id = Column(String(64), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)
