"""
Static fallback rate source.
Never fails, never returns an empty list.
"""

from dataclasses import replace
from typing import List, Sequence

from app.domain.models import ExchangeRate
from app.utils.time import now_local


class StaticFallbackRateSource:
    def __init__(self, rates: Sequence[ExchangeRate]):
        if not rates:
            raise ValueError("Fallback rate table cannot be empty")
        self._rates = list(rates)

    async def fetch_rates(self) -> List[ExchangeRate]:
        stamped_at = now_local()
        return [replace(rate, last_update=stamped_at) for rate in self._rates]
