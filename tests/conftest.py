from decimal import Decimal
from pathlib import Path
from typing import AsyncGenerator, List, Optional

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.api import deps
from app.api.routes import account, exchange_rates, investments
from app.domain.models import ExchangeRate, RateSourceName
from app.domain.services.config_engine import ConfigEngine
from app.infrastructure.db.database import Base, get_db
from app.infrastructure.rates.fallback_provider import StaticFallbackRateSource
from app.infrastructure.rates.provider_chain import ChainedRateSource, NamedRateSource
from app.services.exchange_rate_service import ExchangeRateService

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


class StubRateSource:
    """Stands in for the TCMB feed"""

    def __init__(self, rates: Optional[List[ExchangeRate]] = None, error: Optional[Exception] = None):
        self.rates = list(rates or [])
        self.error = error
        self.calls = 0

    async def fetch_rates(self) -> List[ExchangeRate]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.rates)


def make_rate(code: str, buy: str, sell: str, name: Optional[str] = None) -> ExchangeRate:
    return ExchangeRate(
        code=code,
        name=name or code,
        buy_rate=Decimal(buy),
        sell_rate=Decimal(sell),
        flag="🏳️",
    )


@pytest.fixture()
def config_engine() -> ConfigEngine:
    engine = ConfigEngine(CONFIG_DIR)
    engine.load_all()
    return engine


@pytest.fixture()
def live_rates() -> List[ExchangeRate]:
    return [
        make_rate("USD", "32.50", "32.80", name="Amerikan Doları"),
        make_rate("EUR", "35.00", "35.40", name="Euro"),
    ]


@pytest.fixture()
def live_source(live_rates) -> StubRateSource:
    return StubRateSource(live_rates)


@pytest.fixture()
def rate_service(live_source, config_engine) -> ExchangeRateService:
    chain = ChainedRateSource([
        NamedRateSource(name=RateSourceName.TCMB, source=live_source),
        NamedRateSource(
            name=RateSourceName.FALLBACK,
            source=StaticFallbackRateSource(config_engine.fallback_rates),
            message=config_engine.fallback_message,
        ),
    ])
    return ExchangeRateService(chain, cache_ttl_seconds=3600)


@pytest.fixture()
async def db_engine(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        echo=False
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest.fixture()
async def app(db_session, rate_service, config_engine) -> FastAPI:
    app = FastAPI()
    app.include_router(exchange_rates.router, prefix="/api/exchange-rates", tags=["Exchange Rates"])
    app.include_router(investments.router, prefix="/api/v1/investments", tags=["Investments"])
    app.include_router(account.router, prefix="/api/v1/account", tags=["Account"])

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_rate_service] = lambda: rate_service
    app.dependency_overrides[deps.get_config_engine] = lambda: config_engine

    return app


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-User-Id": "user-1"},
    ) as ac:
        yield ac
