"""
Exchange Rate Service
Serves the currency board with hourly caching and guaranteed fallback
"""

import logging
import time
from typing import Callable, Optional

from app.config import settings
from app.domain.models import RateBoard, RateSourceName
from app.domain.services.config_engine import ConfigEngine
from app.infrastructure.rates.fallback_provider import StaticFallbackRateSource
from app.infrastructure.rates.provider_chain import ChainedRateSource, NamedRateSource
from app.infrastructure.rates.tcmb_provider import TCMBRateSource

logger = logging.getLogger(__name__)


class ExchangeRateService:
    """
    Live boards are cached for `cache_ttl_seconds`. Fallback boards are
    never cached, so the next request tries the live feed again.
    """

    def __init__(
        self,
        chain: ChainedRateSource,
        cache_ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.chain = chain
        self.cache_ttl_seconds = cache_ttl_seconds
        self._clock = clock
        self._cached: Optional[RateBoard] = None
        self._cached_at: float = 0.0

    @classmethod
    def from_config(cls, config_engine: ConfigEngine) -> "ExchangeRateService":
        chain = ChainedRateSource([
            NamedRateSource(
                name=RateSourceName.TCMB,
                source=TCMBRateSource(config_engine.currency_names()),
            ),
            NamedRateSource(
                name=RateSourceName.FALLBACK,
                source=StaticFallbackRateSource(config_engine.fallback_rates),
                message=config_engine.fallback_message,
            ),
        ])
        return cls(chain, cache_ttl_seconds=settings.RATE_CACHE_TTL_SECONDS)

    def _cache_valid(self) -> bool:
        if self._cached is None:
            return False
        return (self._clock() - self._cached_at) < self.cache_ttl_seconds

    async def get_board(self, force_refresh: bool = False) -> RateBoard:
        if not force_refresh and self._cache_valid():
            return self._cached

        board = await self.chain.fetch_board()
        if board.is_fallback:
            logger.info("Using fallback rate table (%d currencies)", len(board.rates))
        else:
            self._cached = board
            self._cached_at = self._clock()
        return board

    def invalidate(self) -> None:
        self._cached = None
