"""
Database Models (SQLAlchemy ORM)
Positions and account profiles, keyed by user identity
"""

from decimal import Decimal

from sqlalchemy import (
    Boolean, Column, Date, DateTime, Enum as SQLEnum, Index, Integer, Numeric, String
)
from sqlalchemy.types import TypeDecorator

from app.domain.models import AssetClass
from app.infrastructure.db.database import Base
from app.utils.time import now_local_naive


class ExactDecimal(TypeDecorator):
    """
    NUMERIC(38, 18) where the backend has a real decimal type.

    SQLite stores NUMERIC as floating point, so there the value is kept as
    decimal text and read back unchanged.
    """
    impl = Numeric(38, 18)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(64))
        return dialect.type_descriptor(Numeric(38, 18, asdecimal=True))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return str(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        return Decimal(str(value))


class UserAccountModel(Base):
    """Profile data of a user identity"""
    __tablename__ = "user_account"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True, index=True)
    full_name = Column(String(200), nullable=True)
    email = Column(String(320), nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_local_naive)
    updated_at = Column(DateTime, nullable=False, default=now_local_naive, onupdate=now_local_naive)


class InvestmentPositionModel(Base):
    """
    A recorded purchase.
    The surrogate key preserves insertion order (newest = highest id).
    """
    __tablename__ = "investment_position"

    id = Column(Integer, primary_key=True, autoincrement=True)
    position_id = Column(String(64), nullable=False, unique=True)
    user_id = Column(String(64), nullable=False, index=True)
    asset_class = Column(
        SQLEnum(AssetClass, values_callable=lambda e: [m.value for m in e], name="asset_class"),
        nullable=False,
    )
    asset_name = Column(String(100), nullable=False)
    asset_code = Column(String(20), nullable=False)
    purchase_date = Column(Date, nullable=False)

    purchase_quantity = Column(ExactDecimal(), nullable=False)
    purchase_unit_price = Column(ExactDecimal(), nullable=False)
    current_unit_price = Column(ExactDecimal(), nullable=False)
    price_simulated = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=now_local_naive)
    updated_at = Column(DateTime, nullable=False, default=now_local_naive, onupdate=now_local_naive)

    __table_args__ = (
        Index("ix_investment_position_lookup", "user_id", "asset_class", "asset_code"),
    )
