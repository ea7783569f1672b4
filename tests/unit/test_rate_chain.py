"""
Unit Tests for the rate source chain and ExchangeRateService
"""

import pytest

from app.domain.models import RateSourceName
from app.infrastructure.rates.fallback_provider import StaticFallbackRateSource
from app.infrastructure.rates.provider_chain import ChainedRateSource, NamedRateSource
from app.infrastructure.rates.types import RateSourceError
from app.services.exchange_rate_service import ExchangeRateService
from conftest import StubRateSource, make_rate


def _chain(live, config_engine):
    return ChainedRateSource([
        NamedRateSource(name=RateSourceName.TCMB, source=live),
        NamedRateSource(
            name=RateSourceName.FALLBACK,
            source=StaticFallbackRateSource(config_engine.fallback_rates),
            message=config_engine.fallback_message,
        ),
    ])


class TestChainedRateSource:

    @pytest.mark.asyncio
    async def test_live_source_wins(self, config_engine):
        live = StubRateSource([make_rate("USD", "32.50", "32.80")])

        board = await _chain(live, config_engine).fetch_board()

        assert board.source == RateSourceName.TCMB
        assert [r.code for r in board.rates] == ["USD"]
        assert board.message is None
        assert board.error is None

    @pytest.mark.asyncio
    async def test_failure_substitutes_fallback(self, config_engine):
        live = StubRateSource(error=RateSourceError("TCMB responded with HTTP 503"))

        board = await _chain(live, config_engine).fetch_board()

        assert board.is_fallback
        assert board.get("USD") is not None
        assert board.get("EUR") is not None
        assert board.message == config_engine.fallback_message
        assert "503" in board.error

    @pytest.mark.asyncio
    async def test_unexpected_exception_substitutes_fallback(self, config_engine):
        live = StubRateSource(error=KeyError("boom"))

        board = await _chain(live, config_engine).fetch_board()

        assert board.is_fallback

    @pytest.mark.asyncio
    async def test_empty_live_result_substitutes_fallback(self, config_engine):
        board = await _chain(StubRateSource([]), config_engine).fetch_board()

        assert board.is_fallback
        assert len(board.rates) == len(config_engine.fallback_rates)
        assert board.error is None
        assert all(rate.last_update is not None for rate in board.rates)

    @pytest.mark.asyncio
    async def test_all_sources_failing_raises(self):
        chain = ChainedRateSource([
            NamedRateSource(name=RateSourceName.TCMB, source=StubRateSource(error=RuntimeError("a"))),
            NamedRateSource(name=RateSourceName.FALLBACK, source=StubRateSource([])),
        ])

        with pytest.raises(RateSourceError):
            await chain.fetch_board()


class TestExchangeRateService:

    @pytest.mark.asyncio
    async def test_live_board_is_cached(self, config_engine):
        live = StubRateSource([make_rate("USD", "32.50", "32.80")])
        now = [1000.0]
        service = ExchangeRateService(_chain(live, config_engine), cache_ttl_seconds=3600, clock=lambda: now[0])

        await service.get_board()
        await service.get_board()
        assert live.calls == 1

        now[0] += 3601
        await service.get_board()
        assert live.calls == 2

    @pytest.mark.asyncio
    async def test_force_refresh_bypasses_cache(self, config_engine):
        live = StubRateSource([make_rate("USD", "32.50", "32.80")])
        service = ExchangeRateService(_chain(live, config_engine))

        await service.get_board()
        await service.get_board(force_refresh=True)

        assert live.calls == 2

    @pytest.mark.asyncio
    async def test_fallback_board_is_not_cached(self, config_engine):
        live = StubRateSource(error=RateSourceError("down"))
        service = ExchangeRateService(_chain(live, config_engine))

        first = await service.get_board()
        assert first.is_fallback

        live.error = None
        live.rates = [make_rate("USD", "32.50", "32.80")]
        second = await service.get_board()

        assert second.source == RateSourceName.TCMB
        assert live.calls == 2

    def test_from_config_builds_tcmb_then_fallback(self, config_engine):
        service = ExchangeRateService.from_config(config_engine)

        names = [named.name for named in service.chain.sources]
        assert names == [RateSourceName.TCMB, RateSourceName.FALLBACK]
