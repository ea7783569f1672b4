"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    AssetClass,
    RateSourceName,

    # Entities
    ExchangeRate,
    NumericInput,
    Position,
    PositionRequest,
    RateBoard,
)
from .portfolio import HoldingTotals, PortfolioSummary

__all__ = [
    # Enums
    "AssetClass",
    "RateSourceName",

    # Entities
    "ExchangeRate",
    "NumericInput",
    "Position",
    "PositionRequest",
    "RateBoard",

    # Aggregates
    "HoldingTotals",
    "PortfolioSummary",
]
