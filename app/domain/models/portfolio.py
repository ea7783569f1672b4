"""
DOMAIN MODELS - PORTFOLIO TOTALS

Immutable aggregate views over a set of positions.
No database access. No market data fetching.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Optional

from app.domain.models.entities import AssetClass, Position

ZERO = Decimal("0")


@dataclass(frozen=True)
class HoldingTotals:
    """
    Folded totals for a group of positions.
    """
    total_invested: Decimal
    total_value: Decimal
    total_profit: Decimal
    position_count: int

    @property
    def profit_percent(self) -> Decimal:
        if self.total_invested <= ZERO:
            return ZERO
        return self.total_profit / self.total_invested * Decimal("100")

    @classmethod
    def from_positions(cls, positions: Iterable[Position]) -> "HoldingTotals":
        positions = list(positions)
        return cls(
            total_invested=sum((p.invested_amount for p in positions), ZERO),
            total_value=sum((p.total_value for p in positions), ZERO),
            total_profit=sum((p.profit for p in positions), ZERO),
            position_count=len(positions),
        )


@dataclass(frozen=True)
class PortfolioSummary:
    """
    Totals per asset class and across the whole ledger.
    """
    by_class: Dict[AssetClass, HoldingTotals]
    overall: HoldingTotals

    def for_class(self, asset_class: AssetClass) -> HoldingTotals:
        return self.by_class[asset_class]

    @classmethod
    def from_positions(
        cls,
        positions: Iterable[Position],
        asset_classes: Optional[Iterable[AssetClass]] = None,
    ) -> "PortfolioSummary":
        positions = list(positions)
        classes = list(asset_classes) if asset_classes is not None else list(AssetClass)
        by_class = {
            asset_class: HoldingTotals.from_positions(
                p for p in positions if p.asset_class == asset_class
            )
            for asset_class in classes
        }
        return cls(by_class=by_class, overall=HoldingTotals.from_positions(positions))
