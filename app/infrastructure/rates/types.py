"""
Exchange rate source protocol for type hints.
"""

from __future__ import annotations

from typing import List, Protocol

from app.domain.models import ExchangeRate


class RateSourceError(RuntimeError):
    """A rate source could not produce a usable currency list"""


class RateSource(Protocol):
    async def fetch_rates(self) -> List[ExchangeRate]:
        ...
