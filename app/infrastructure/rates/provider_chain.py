"""
Rate source chain - try the live feed, then fallbacks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from app.domain.models import RateBoard, RateSourceName
from app.infrastructure.rates.types import RateSource, RateSourceError
from app.utils.time import now_local

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamedRateSource:
    name: RateSourceName
    source: RateSource
    message: Optional[str] = None


class ChainedRateSource:
    def __init__(self, sources: List[NamedRateSource]):
        if not sources:
            raise ValueError("At least one rate source is required")
        self.sources = sources
        self.last_source: Optional[RateSourceName] = None

    async def fetch_board(self) -> RateBoard:
        """
        First source with a non-empty list wins.

        Raises:
            RateSourceError: Only if every source failed or came back empty
        """
        errors: List[str] = []
        for named in self.sources:
            try:
                rates = await named.source.fetch_rates()
            except Exception as exc:
                logger.warning("Rate source %s failed: %s", named.name.value, exc)
                errors.append(str(exc))
                continue

            if not rates:
                logger.warning("Rate source %s returned no rates", named.name.value)
                continue

            if named is not self.sources[0]:
                logger.info("Serving %d rates from %s", len(rates), named.name.value)

            self.last_source = named.name
            return RateBoard(
                rates=tuple(rates),
                source=named.name,
                last_update=now_local(),
                message=named.message,
                error=errors[-1] if errors else None,
            )

        raise RateSourceError("All rate sources failed: " + "; ".join(errors))
