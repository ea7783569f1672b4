# app/services/portfolio_service.py

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple, Union

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import (
    AssetClass,
    NumericInput,
    Position,
    PositionRequest,
    RateBoard,
)
from app.domain.services.config_engine import ConfigEngine
from app.domain.services.ledger import PortfolioLedger
from app.domain.services.position_factory import PositionFactory, PositionValidationError
from app.domain.services.price_sources import LiveQuotePriceSource
from app.infrastructure.db.repositories.account_repository import UserAccountRepository
from app.infrastructure.db.repositories.position_repository import PositionRepository
from app.services.exchange_rate_service import ExchangeRateService

logger = logging.getLogger(__name__)


class UnknownCurrencyError(LookupError):
    """The requested currency is not on the current rate board"""


class PortfolioService:
    """
    Runs ledger operations for one user and persists the outcome.

    The ledger is rebuilt from storage per call; every write happens in the
    caller's session, so a failed operation leaves storage untouched.
    """

    def __init__(
        self,
        session: AsyncSession,
        rate_service: ExchangeRateService,
        config_engine: ConfigEngine,
        factory: Optional[PositionFactory] = None,
    ):
        self.repo = PositionRepository(session)
        self.accounts = UserAccountRepository(session)
        self.rate_service = rate_service
        self.config_engine = config_engine
        self.factory = factory or PositionFactory()

    async def load_ledger(self, user_id: str) -> PortfolioLedger:
        positions = await self.repo.list_for_user(user_id)
        return PortfolioLedger(
            price_sources=self.config_engine.price_sources(),
            positions=positions,
            factory=self.factory,
        )

    async def add_position(self, user_id: str, request: PositionRequest) -> Position:
        self._check_listed(request)
        ledger = await self.load_ledger(user_id)

        price_source = None
        if request.asset_class == AssetClass.CURRENCY:
            board = await self.rate_service.get_board()
            price_source = LiveQuotePriceSource(board.rates)

        position = ledger.add(request, price_source=price_source)
        await self.repo.add(user_id, position)
        return position

    async def quick_invest(
        self,
        user_id: str,
        asset_code: str,
        purchase_date: Union[date, str, None],
        quantity: NumericInput,
    ) -> Position:
        board = await self.rate_service.get_board()
        rate = board.get(asset_code)
        if rate is None or rate.sell_rate <= Decimal("0"):
            raise UnknownCurrencyError(f"{asset_code} is not on the {board.source.value} rate board")

        ledger = await self.load_ledger(user_id)
        position = ledger.quick_invest(rate, purchase_date, quantity)
        await self.repo.add(user_id, position)
        return position

    async def reprice(
        self,
        user_id: str,
        asset_class: AssetClass,
        asset_code: str,
        current_unit_price: NumericInput,
    ) -> List[Position]:
        ledger = await self.load_ledger(user_id)
        updated = ledger.reprice(asset_class, asset_code, current_unit_price)
        if updated:
            await self.repo.update_current_price(
                user_id, asset_class, updated[0].asset_code, updated[0].current_unit_price
            )
        return updated

    async def refresh_currency_rates(
        self, user_id: str, force: bool = False
    ) -> Tuple[RateBoard, List[Position]]:
        """
        Re-price every currency position from the current rate board.

        A fallback board holds sample rates; stored prices are left as they
        are until the live feed is back.
        """
        board = await self.rate_service.get_board(force_refresh=force)
        if board.is_fallback:
            logger.info(
                "Skipped refresh for %s: %s rates are sample data", user_id, board.source.value
            )
            return board, []

        ledger = await self.load_ledger(user_id)
        updated = ledger.apply_rates(board.rates)

        seen = set()
        for position in updated:
            if position.asset_code in seen:
                continue
            seen.add(position.asset_code)
            await self.repo.update_current_price(
                user_id, AssetClass.CURRENCY, position.asset_code, position.current_unit_price
            )

        logger.info(
            "Refreshed %d currency position(s) for %s from %s",
            len(updated), user_id, board.source.value,
        )
        return board, updated

    async def delete_position(
        self, user_id: str, asset_class: AssetClass, position_id: str
    ) -> bool:
        removed = await self.repo.delete(user_id, asset_class, position_id)
        if not removed:
            logger.debug("Delete of unknown %s position %s ignored", asset_class.value, position_id)
        return removed

    async def reset(self, user_id: str) -> int:
        """Delete every position of a user, keep the account"""
        removed = await self.repo.delete_all_for_user(user_id)
        logger.info("Reset %s: removed %d position(s)", user_id, removed)
        return removed

    async def delete_account(self, user_id: str) -> Tuple[bool, int]:
        """Delete every position and the account itself"""
        removed = await self.repo.delete_all_for_user(user_id)
        deleted = await self.accounts.delete(user_id)
        logger.info("🗑️ Deleted account %s (existed=%s, positions=%d)", user_id, deleted, removed)
        return deleted, removed

    def _check_listed(self, request: PositionRequest) -> None:
        """Metal and crypto purchases must name an asset from the catalog"""
        if request.asset_class == AssetClass.CURRENCY:
            return
        code = (request.asset_code or "").strip()
        if not code:
            return
        if self.config_engine.catalog.find(request.asset_class, code) is None:
            raise PositionValidationError(
                "asset_code", f"'{code.upper()}' is not a listed {request.asset_class.value}"
            )
