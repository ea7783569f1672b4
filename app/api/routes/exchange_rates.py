"""
Exchange Rate Routes
Currency board from TCMB, or the static fallback table
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional

from app.api.deps import get_rate_service
from app.domain.models import ExchangeRate
from app.services.exchange_rate_service import ExchangeRateService

router = APIRouter()


class ExchangeRateItem(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    code: str
    name: str
    buy_rate: float
    sell_rate: float
    flag: str
    last_update: Optional[str] = None


class ExchangeRateBoardResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    data: List[ExchangeRateItem]
    source: str
    last_update: str
    message: Optional[str] = None
    error: Optional[str] = None


def _item(rate: ExchangeRate) -> ExchangeRateItem:
    return ExchangeRateItem(
        code=rate.code,
        name=rate.name,
        buy_rate=float(rate.buy_rate),
        sell_rate=float(rate.sell_rate),
        flag=rate.flag,
        last_update=rate.last_update.isoformat() if rate.last_update else None,
    )


@router.get("", response_model=ExchangeRateBoardResponse)
async def get_exchange_rates(
    refresh: bool = False,
    service: ExchangeRateService = Depends(get_rate_service),
):
    """
    Current exchange rates. Never empty: falls back to a static table
    when the central bank feed is unavailable.
    """
    board = await service.get_board(force_refresh=refresh)
    return ExchangeRateBoardResponse(
        data=[_item(rate) for rate in board.rates],
        source=board.source.value,
        last_update=board.last_update.isoformat(),
        message=board.message,
        error=board.error,
    )
