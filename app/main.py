"""
FastAPI Main Application
Investment ledger and exchange rate board
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging

from app.api import deps
from app.config import settings
from app.core.logging import setup_logging
from app.domain.models import AssetClass
from app.domain.services.config_engine import ConfigEngine
from app.infrastructure.db.database import init_db, close_db
from app.services.exchange_rate_service import ExchangeRateService

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles startup and shutdown of all services
    """
    # ===================
    # STARTUP
    # ===================
    logger.info("🚀 Starting Asset Ledger")

    # 1. Initialize database
    await init_db()
    logger.info("✅ Database initialized")

    # 2. Load configuration
    config_engine = ConfigEngine(deps.CONFIG_DIR)
    config_engine.load_all()
    deps.config_engine = config_engine
    logger.info(
        "✅ Catalog loaded: %d currencies, %d metals, %d cryptos",
        len(config_engine.catalog.currencies),
        len(config_engine.catalog.metals),
        len(config_engine.catalog.cryptos),
    )
    logger.warning(
        "Metal and crypto prices are simulated (x%s / x%s), not market data",
        config_engine.markup(AssetClass.METAL),
        config_engine.markup(AssetClass.CRYPTO),
    )

    # 3. Exchange rates
    deps.rate_service = ExchangeRateService.from_config(config_engine)
    logger.info(f"✅ Rate source: {settings.RATE_SOURCE_URL}")

    yield

    # ===================
    # SHUTDOWN
    # ===================
    logger.info("🛑 Shutting down Asset Ledger...")
    await close_db()
    logger.info("✅ Database connections closed")


# Create FastAPI app
app = FastAPI(
    title="Asset Ledger",
    description="Currency, metal and crypto investment tracking with live exchange rates",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Asset Ledger",
        "version": "1.0.0",
        "docs": "/docs"
    }


# Import and include routers
from app.api.routes import account, exchange_rates, health, investments  # noqa: E402

app.include_router(health.router, tags=["Health"])
app.include_router(exchange_rates.router, prefix="/api/exchange-rates", tags=["Exchange Rates"])
app.include_router(investments.router, prefix="/api/v1/investments", tags=["Investments"])
app.include_router(account.router, prefix="/api/v1/account", tags=["Account"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
