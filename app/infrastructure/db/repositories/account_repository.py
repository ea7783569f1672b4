"""
User Account Repository
Profile data and account removal
"""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.db.models import UserAccountModel


class UserAccountRepository:
    """Repository for user accounts"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str) -> Optional[UserAccountModel]:
        result = await self.session.execute(
            select(UserAccountModel).where(UserAccountModel.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        user_id: str,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UserAccountModel:
        """Create the account if needed and apply the given profile fields"""
        account = await self.get(user_id)
        if account is None:
            account = UserAccountModel(user_id=user_id)
            self.session.add(account)
        if full_name is not None:
            account.full_name = full_name
        if email is not None:
            account.email = email
        await self.session.flush()
        return account

    async def delete(self, user_id: str) -> bool:
        result = await self.session.execute(
            delete(UserAccountModel).where(UserAccountModel.user_id == user_id)
        )
        return (result.rowcount or 0) > 0
