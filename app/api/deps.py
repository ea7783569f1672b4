"""
Shared route dependencies
"""

from pathlib import Path
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.services.config_engine import ConfigEngine
from app.infrastructure.db.database import get_db
from app.services.exchange_rate_service import ExchangeRateService
from app.services.portfolio_service import PortfolioService

CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"

# Set during application startup; built lazily otherwise
config_engine: Optional[ConfigEngine] = None
rate_service: Optional[ExchangeRateService] = None


def get_config_engine() -> ConfigEngine:
    global config_engine
    if config_engine is None:
        engine = ConfigEngine(CONFIG_DIR)
        engine.load_all()
        config_engine = engine
    return config_engine


def get_rate_service() -> ExchangeRateService:
    global rate_service
    if rate_service is None:
        rate_service = ExchangeRateService.from_config(get_config_engine())
    return rate_service


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> str:
    """
    Identity is established upstream (auth gateway); this service only
    reads the forwarded user id.
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="X-User-Id header is required")
    return user_id


def get_portfolio_service(
    db: AsyncSession = Depends(get_db),
    rates: ExchangeRateService = Depends(get_rate_service),
    config: ConfigEngine = Depends(get_config_engine),
) -> PortfolioService:
    return PortfolioService(db, rates, config)
