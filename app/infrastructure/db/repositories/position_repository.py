"""
Investment Position Repository
CRUD operations for a user's positions
"""

from decimal import Decimal
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import AssetClass, Position
from app.infrastructure.db.models import InvestmentPositionModel
from app.utils.time import now_local_naive


class PositionRepository:
    """Repository for investment positions"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, user_id: str, position: Position) -> int:
        model = InvestmentPositionModel(
            position_id=position.id,
            user_id=user_id,
            asset_class=position.asset_class,
            asset_name=position.asset_name,
            asset_code=position.asset_code,
            purchase_date=position.purchase_date,
            purchase_quantity=position.purchase_quantity,
            purchase_unit_price=position.purchase_unit_price,
            current_unit_price=position.current_unit_price,
            price_simulated=position.price_simulated,
        )
        self.session.add(model)
        await self.session.flush()
        return model.id

    async def list_for_user(self, user_id: str) -> List[Position]:
        """All positions of a user, newest first"""
        result = await self.session.execute(
            select(InvestmentPositionModel)
            .where(InvestmentPositionModel.user_id == user_id)
            .order_by(InvestmentPositionModel.id.desc())
        )
        return [self._to_domain(model) for model in result.scalars().all()]

    async def update_current_price(
        self,
        user_id: str,
        asset_class: AssetClass,
        asset_code: str,
        current_unit_price: Decimal,
    ) -> int:
        result = await self.session.execute(
            update(InvestmentPositionModel)
            .where(
                InvestmentPositionModel.user_id == user_id,
                InvestmentPositionModel.asset_class == asset_class,
                InvestmentPositionModel.asset_code == asset_code,
            )
            .values(
                current_unit_price=current_unit_price,
                price_simulated=False,
                updated_at=now_local_naive(),
            )
        )
        return result.rowcount or 0

    async def delete(self, user_id: str, asset_class: AssetClass, position_id: str) -> bool:
        result = await self.session.execute(
            delete(InvestmentPositionModel).where(
                InvestmentPositionModel.user_id == user_id,
                InvestmentPositionModel.asset_class == asset_class,
                InvestmentPositionModel.position_id == position_id,
            )
        )
        return (result.rowcount or 0) > 0

    async def delete_all_for_user(self, user_id: str) -> int:
        result = await self.session.execute(
            delete(InvestmentPositionModel).where(InvestmentPositionModel.user_id == user_id)
        )
        return result.rowcount or 0

    @staticmethod
    def _to_domain(model: InvestmentPositionModel) -> Position:
        return Position(
            id=model.position_id,
            asset_class=AssetClass(model.asset_class),
            asset_name=model.asset_name,
            asset_code=model.asset_code,
            purchase_date=model.purchase_date,
            purchase_quantity=Decimal(str(model.purchase_quantity)),
            purchase_unit_price=Decimal(str(model.purchase_unit_price)),
            current_unit_price=Decimal(str(model.current_unit_price)),
            price_simulated=bool(model.price_simulated),
        )
