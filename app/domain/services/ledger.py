"""
PORTFOLIO LEDGER
In-memory holdings across currency, metal and crypto

RESPONSIBILITIES:
- Add positions (validated by the position factory), newest first
- Re-price every position of an asset code
- Delete positions by id
- Fold holdings into totals

RULES:
- No I/O, no persistence; callers own durability
- Purchase terms are never edited
- Every operation validates before it mutates
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Union

from app.domain.models import (
    AssetClass,
    ExchangeRate,
    NumericInput,
    PortfolioSummary,
    Position,
    PositionRequest,
)
from app.domain.services.position_factory import (
    PositionFactory,
    PositionValidationError,
    parse_positive_decimal,
)
from app.domain.services.price_sources import (
    FixedMarkupPriceSource,
    LiveQuotePriceSource,
    PriceSource,
    PurchasePricePriceSource,
)

logger = logging.getLogger(__name__)

METAL_SIMULATED_MARKUP = Decimal("1.08")
CRYPTO_SIMULATED_MARKUP = Decimal("1.12")


def default_price_sources(
    metal_markup: Decimal = METAL_SIMULATED_MARKUP,
    crypto_markup: Decimal = CRYPTO_SIMULATED_MARKUP,
) -> Dict[AssetClass, PriceSource]:
    """Live quotes for currencies, simulated markups for metal and crypto"""
    return {
        AssetClass.CURRENCY: LiveQuotePriceSource([]),
        AssetClass.METAL: FixedMarkupPriceSource(metal_markup),
        AssetClass.CRYPTO: FixedMarkupPriceSource(crypto_markup),
    }


class PortfolioLedger:
    """
    Ordered collection of positions, one list per asset class.
    """

    def __init__(
        self,
        price_sources: Optional[Mapping[AssetClass, PriceSource]] = None,
        positions: Iterable[Position] = (),
        factory: Optional[PositionFactory] = None,
    ):
        self._price_sources: Dict[AssetClass, PriceSource] = dict(
            price_sources or default_price_sources()
        )
        self._factory = factory or PositionFactory()
        self._positions: Dict[AssetClass, List[Position]] = {
            asset_class: [] for asset_class in AssetClass
        }
        # positions arrive newest first, keep that order
        for position in positions:
            self._positions[position.asset_class].append(position)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def positions(self, asset_class: Optional[AssetClass] = None) -> List[Position]:
        """Positions newest first, for one class or for all"""
        if asset_class is not None:
            return list(self._positions[asset_class])
        result: List[Position] = []
        for asset_class in AssetClass:
            result.extend(self._positions[asset_class])
        return result

    def get(self, asset_class: AssetClass, position_id: str) -> Optional[Position]:
        for position in self._positions[asset_class]:
            if position.id == position_id:
                return position
        return None

    def summary(self) -> PortfolioSummary:
        return PortfolioSummary.from_positions(self.positions())

    def price_source_for(self, asset_class: AssetClass) -> PriceSource:
        return self._price_sources[asset_class]

    def __len__(self) -> int:
        return sum(len(items) for items in self._positions.values())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add(
        self,
        request: PositionRequest,
        price_source: Optional[PriceSource] = None,
    ) -> Position:
        """
        Validate and record a purchase.

        Args:
            request: Raw input from the form layer
            price_source: Overrides the ledger's source for this asset class
                (e.g. a LiveQuotePriceSource over the current rate board)

        Raises:
            PositionValidationError: Nothing is recorded
        """
        source = price_source or self._price_sources[request.asset_class]
        position = self._factory.build(request, source)
        self._positions[position.asset_class].insert(0, position)

        logger.info(
            "Added %s position %s: %s x %s (current %s%s)",
            position.asset_class.value,
            position.asset_code,
            position.purchase_quantity,
            position.purchase_unit_price,
            position.current_unit_price,
            ", simulated" if position.price_simulated else "",
        )
        return position

    def quick_invest(
        self,
        rate: ExchangeRate,
        purchase_date: Union[date, str, None],
        quantity: NumericInput,
    ) -> Position:
        """
        Buy a currency at its current sell rate.

        The position is valued at its own purchase price, so profit and
        profit percent start at exactly zero.
        """
        request = PositionRequest(
            asset_class=AssetClass.CURRENCY,
            asset_name=rate.name,
            asset_code=rate.code,
            purchase_date=purchase_date,
            quantity=quantity,
            unit_price=rate.sell_rate,
        )
        return self.add(request, price_source=PurchasePricePriceSource())

    def reprice(
        self,
        asset_class: AssetClass,
        asset_code: str,
        current_unit_price: NumericInput,
    ) -> List[Position]:
        """
        Set a new current unit price on every position of an asset code.

        Idempotent. Returns the re-priced positions (empty if none matched).

        Raises:
            PositionValidationError: If the price is not positive
        """
        price = parse_positive_decimal(current_unit_price, "current_unit_price")
        code = (asset_code or "").strip().upper()

        updated: List[Position] = []
        items = self._positions[asset_class]
        for index, position in enumerate(items):
            if position.asset_code != code:
                continue
            items[index] = position.with_current_price(price)
            updated.append(items[index])

        if updated:
            logger.info(
                "Re-priced %d %s position(s) of %s at %s",
                len(updated), asset_class.value, code, price,
            )
        return updated

    def apply_rates(self, rates: Iterable[ExchangeRate]) -> List[Position]:
        """Re-price currency positions from the sell side of a rate board"""
        updated: List[Position] = []
        for rate in rates:
            if rate.sell_rate <= Decimal("0"):
                continue
            updated.extend(self.reprice(AssetClass.CURRENCY, rate.code, rate.sell_rate))
        return updated

    def delete(self, asset_class: AssetClass, position_id: str) -> bool:
        """
        Remove a position by id. Unknown ids are a no-op.

        Returns:
            True if a position was removed
        """
        items = self._positions[asset_class]
        for index, position in enumerate(items):
            if position.id == position_id:
                del items[index]
                logger.info("Deleted %s position %s", asset_class.value, position_id)
                return True
        return False


__all__ = [
    "CRYPTO_SIMULATED_MARKUP",
    "METAL_SIMULATED_MARKUP",
    "PortfolioLedger",
    "PositionValidationError",
    "default_price_sources",
]
