"""
Investment API Routes
Currency, metal and crypto holdings with derived profit figures
"""

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Union
import logging

from app.api.deps import get_config_engine, get_current_user_id, get_portfolio_service
from app.domain.models import AssetClass, HoldingTotals, Position, PositionRequest
from app.domain.services.config_engine import ConfigEngine
from app.domain.services.position_factory import PositionValidationError
from app.services.portfolio_service import PortfolioService, UnknownCurrencyError

logger = logging.getLogger(__name__)
router = APIRouter()

NumberOrText = Optional[Union[str, float]]


# ------------------------------------------------------------------
# Request Models
# ------------------------------------------------------------------

class AddInvestmentRequest(BaseModel):
    asset_name: Optional[str] = Field(None, description="Display name (e.g., Amerikan Doları)")
    asset_code: Optional[str] = Field(None, description="Symbol (e.g., USD, XAU, BTC)")
    purchase_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    quantity: NumberOrText = None
    unit_price: NumberOrText = None


class QuickInvestRequest(BaseModel):
    asset_code: str = Field(..., description="Currency code on the rate board")
    purchase_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    quantity: NumberOrText = None


class RepriceRequest(BaseModel):
    asset_code: str
    current_unit_price: NumberOrText = None


# ------------------------------------------------------------------
# Response Models
# ------------------------------------------------------------------

class PositionResponse(BaseModel):
    id: str
    asset_class: str
    asset_name: str
    asset_code: str
    purchase_date: str
    purchase_quantity: float
    purchase_unit_price: float
    current_unit_price: float
    invested_amount: float
    total_value: float
    profit: float
    profit_percent: float
    price_simulated: bool


class TotalsResponse(BaseModel):
    total_invested: float
    total_value: float
    total_profit: float
    profit_percent: float
    position_count: int


class PortfolioResponse(BaseModel):
    positions: Dict[str, List[PositionResponse]]
    totals: Dict[str, TotalsResponse]
    overall: TotalsResponse


class RepriceResponse(BaseModel):
    asset_class: str
    asset_code: str
    updated: List[PositionResponse]


class RefreshResponse(BaseModel):
    source: str
    message: Optional[str] = None
    updated: List[PositionResponse]


class CatalogItem(BaseModel):
    code: str
    name: str
    flag: Optional[str] = None


class CatalogResponse(BaseModel):
    currency: List[CatalogItem]
    metal: List[CatalogItem]
    crypto: List[CatalogItem]
    simulated_markup: Dict[str, float]


def _position_response(position: Position) -> PositionResponse:
    return PositionResponse(
        id=position.id,
        asset_class=position.asset_class.value,
        asset_name=position.asset_name,
        asset_code=position.asset_code,
        purchase_date=position.purchase_date.isoformat(),
        purchase_quantity=float(position.purchase_quantity),
        purchase_unit_price=float(position.purchase_unit_price),
        current_unit_price=float(position.current_unit_price),
        invested_amount=float(position.invested_amount),
        total_value=float(position.total_value),
        profit=float(position.profit),
        profit_percent=float(position.profit_percent),
        price_simulated=position.price_simulated,
    )


def _totals_response(totals: HoldingTotals) -> TotalsResponse:
    return TotalsResponse(
        total_invested=float(totals.total_invested),
        total_value=float(totals.total_value),
        total_profit=float(totals.total_profit),
        profit_percent=float(totals.profit_percent),
        position_count=totals.position_count,
    )


def _validation_failed(exc: PositionValidationError) -> HTTPException:
    logger.info("Rejected investment input: %s", exc)
    return HTTPException(
        status_code=400,
        detail={"field": exc.field, "message": exc.message},
    )


# ------------------------------------------------------------------
# Queries
# ------------------------------------------------------------------

@router.get("", response_model=PortfolioResponse)
async def get_portfolio(
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """
    Holdings per asset class (newest first) with totals
    """
    ledger = await service.load_ledger(user_id)
    summary = ledger.summary()

    return PortfolioResponse(
        positions={
            asset_class.value: [_position_response(p) for p in ledger.positions(asset_class)]
            for asset_class in AssetClass
        },
        totals={
            asset_class.value: _totals_response(summary.for_class(asset_class))
            for asset_class in AssetClass
        },
        overall=_totals_response(summary.overall),
    )


@router.get("/catalog", response_model=CatalogResponse)
async def get_catalog(config: ConfigEngine = Depends(get_config_engine)):
    """
    Selectable assets per class
    """
    def _items(asset_class: AssetClass) -> List[CatalogItem]:
        return [
            CatalogItem(code=info.code, name=info.name, flag=info.flag)
            for info in config.catalog.for_class(asset_class)
        ]

    return CatalogResponse(
        currency=_items(AssetClass.CURRENCY),
        metal=_items(AssetClass.METAL),
        crypto=_items(AssetClass.CRYPTO),
        simulated_markup={
            AssetClass.METAL.value: float(config.markup(AssetClass.METAL)),
            AssetClass.CRYPTO.value: float(config.markup(AssetClass.CRYPTO)),
        },
    )


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------

@router.post("/refresh", response_model=RefreshResponse)
async def refresh_currency_positions(
    force: bool = False,
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """
    Re-price currency positions from the current exchange rate board
    """
    board, updated = await service.refresh_currency_rates(user_id, force=force)
    return RefreshResponse(
        source=board.source.value,
        message=board.message,
        updated=[_position_response(p) for p in updated],
    )


@router.post("/currency/quick", response_model=PositionResponse)
async def quick_invest(
    request: QuickInvestRequest,
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """
    Buy a currency at its current sell rate (zero initial profit)
    """
    try:
        position = await service.quick_invest(
            user_id, request.asset_code, request.purchase_date, request.quantity
        )
    except UnknownCurrencyError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except PositionValidationError as exc:
        raise _validation_failed(exc)

    return _position_response(position)


@router.post("/{asset_class}", response_model=PositionResponse)
async def add_investment(
    asset_class: AssetClass,
    request: AddInvestmentRequest,
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """
    Record a purchase

    Currency positions are valued at the live sell rate; metal and crypto
    positions carry a simulated current price.
    """
    try:
        position = await service.add_position(
            user_id,
            PositionRequest(
                asset_class=asset_class,
                asset_name=request.asset_name,
                asset_code=request.asset_code,
                purchase_date=request.purchase_date,
                quantity=request.quantity,
                unit_price=request.unit_price,
            ),
        )
    except PositionValidationError as exc:
        raise _validation_failed(exc)

    return _position_response(position)


@router.post("/{asset_class}/reprice", response_model=RepriceResponse)
async def reprice_investments(
    asset_class: AssetClass,
    request: RepriceRequest,
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """
    Set a new current unit price on every position of an asset code
    """
    try:
        updated = await service.reprice(
            user_id, asset_class, request.asset_code, request.current_unit_price
        )
    except PositionValidationError as exc:
        raise _validation_failed(exc)

    return RepriceResponse(
        asset_class=asset_class.value,
        asset_code=request.asset_code.strip().upper(),
        updated=[_position_response(p) for p in updated],
    )


@router.delete("/{asset_class}/{position_id}", status_code=204)
async def delete_investment(
    asset_class: AssetClass,
    position_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """
    Delete a position; unknown ids are ignored
    """
    await service.delete_position(user_id, asset_class, position_id)
    return Response(status_code=204)
