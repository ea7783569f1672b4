"""
PRICE SOURCES
Where a new position's current unit price comes from

Each asset class is valued through a PriceSource. The ledger never branches
on asset class itself; swapping a simulated source for a real feed is a
configuration change.

FixedMarkupPriceSource is a placeholder for a market-data feed. The prices
it produces are not market prices and are flagged as simulated.
"""

import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional, Protocol

from app.domain.models import ExchangeRate

logger = logging.getLogger(__name__)


class PriceSource(Protocol):
    """Capability: look up the current unit price of an asset"""

    simulated: bool

    def current_price(self, asset_code: str, purchase_unit_price: Decimal) -> Optional[Decimal]:
        """Return the current unit price, or None when no price is known"""
        ...


class LiveQuotePriceSource:
    """
    Prices currencies from the sell side of the current rate board.
    """

    simulated = False

    def __init__(self, rates: Iterable[ExchangeRate]):
        self._sell_rates: Dict[str, Decimal] = {
            rate.code.upper(): rate.sell_rate for rate in rates
        }

    def current_price(self, asset_code: str, purchase_unit_price: Decimal) -> Optional[Decimal]:
        price = self._sell_rates.get((asset_code or "").upper())
        if price is None or price <= Decimal("0"):
            return None
        return price


class FixedMarkupPriceSource:
    """
    Simulated price: purchase price times a fixed factor.
    """

    simulated = True

    def __init__(self, factor: Decimal):
        if factor <= Decimal("0"):
            raise ValueError(f"Markup factor must be positive, got {factor}")
        self.factor = factor

    def current_price(self, asset_code: str, purchase_unit_price: Decimal) -> Optional[Decimal]:
        logger.debug(
            "Simulated price for %s: %s x %s", asset_code, purchase_unit_price, self.factor
        )
        return purchase_unit_price * self.factor


class PurchasePricePriceSource:
    """
    Quick invest: an immediate buy is worth exactly what was paid.
    """

    simulated = False

    def current_price(self, asset_code: str, purchase_unit_price: Decimal) -> Optional[Decimal]:
        return purchase_unit_price
