"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, Union

NumericInput = Union[str, int, float, Decimal, None]


class AssetClass(str, Enum):
    """Asset class of a recorded purchase"""
    CURRENCY = "currency"
    METAL = "metal"
    CRYPTO = "crypto"


class RateSourceName(str, Enum):
    """Where a board of exchange rates came from"""
    TCMB = "tcmb"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Position:
    """
    A single recorded purchase plus its current valuation - Immutable

    Purchase terms never change after creation. Re-pricing produces a new
    instance through with_current_price(); derived figures are properties
    and are never stored.
    """
    id: str
    asset_class: AssetClass
    asset_name: str
    asset_code: str
    purchase_date: date
    purchase_quantity: Decimal
    purchase_unit_price: Decimal
    current_unit_price: Decimal
    price_simulated: bool = False

    def __post_init__(self):
        if not self.id:
            raise ValueError("Position id cannot be empty")
        if self.purchase_quantity <= Decimal("0"):
            raise ValueError("Purchase quantity must be positive")
        if self.purchase_unit_price <= Decimal("0"):
            raise ValueError("Purchase unit price must be positive")
        if self.current_unit_price <= Decimal("0"):
            raise ValueError("Current unit price must be positive")

    @property
    def invested_amount(self) -> Decimal:
        return self.purchase_quantity * self.purchase_unit_price

    @property
    def total_value(self) -> Decimal:
        return self.purchase_quantity * self.current_unit_price

    @property
    def profit(self) -> Decimal:
        return (self.current_unit_price - self.purchase_unit_price) * self.purchase_quantity

    @property
    def profit_percent(self) -> Decimal:
        return (
            (self.current_unit_price - self.purchase_unit_price)
            / self.purchase_unit_price
            * Decimal("100")
        )

    def with_current_price(self, price: Decimal, simulated: bool = False) -> "Position":
        """Return a copy valued at a new current unit price"""
        return replace(self, current_unit_price=price, price_simulated=simulated)


@dataclass(frozen=True)
class PositionRequest:
    """
    Raw "add investment" input, exactly as the form layer supplied it.

    Quantity and unit price may arrive as text or numbers; the position
    factory is responsible for parsing and validation.
    """
    asset_class: AssetClass
    asset_name: Optional[str]
    asset_code: Optional[str]
    purchase_date: Union[date, str, None]
    quantity: NumericInput
    unit_price: NumericInput


@dataclass(frozen=True)
class ExchangeRate:
    """Buy/sell quote for one currency against the home currency"""
    code: str
    name: str
    buy_rate: Decimal
    sell_rate: Decimal
    flag: str = "🏳️"
    last_update: Optional[datetime] = None


@dataclass(frozen=True)
class RateBoard:
    """The currency list shown to the user, with its provenance"""
    rates: Tuple[ExchangeRate, ...]
    source: RateSourceName
    last_update: datetime
    message: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.source == RateSourceName.FALLBACK

    def get(self, code: str) -> Optional[ExchangeRate]:
        """Find the quote for a currency code"""
        code = (code or "").upper()
        for rate in self.rates:
            if rate.code == code:
                return rate
        return None
