"""
Account Routes
Profile, data reset and account deletion
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.api.deps import get_current_user_id, get_portfolio_service
from app.infrastructure.db.database import get_db
from app.infrastructure.db.repositories.account_repository import UserAccountRepository
from app.services.portfolio_service import PortfolioService
from app.utils.time import to_local_iso_db

router = APIRouter()


class ProfileUpdateRequest(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("full_name cannot be blank")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v or "@" not in v:
            raise ValueError("email must be a valid address")
        return v


class ProfileResponse(BaseModel):
    user_id: str
    full_name: Optional[str]
    email: Optional[str]
    created_at: str
    updated_at: str


class ResetResponse(BaseModel):
    removed_positions: int


class DeleteAccountResponse(BaseModel):
    account_deleted: bool
    removed_positions: int


def _profile_response(account) -> ProfileResponse:
    return ProfileResponse(
        user_id=account.user_id,
        full_name=account.full_name,
        email=account.email,
        created_at=to_local_iso_db(account.created_at),
        updated_at=to_local_iso_db(account.updated_at),
    )


@router.get("", response_model=ProfileResponse)
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    account = await UserAccountRepository(db).get(user_id)
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return _profile_response(account)


@router.put("", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Create or update the profile (name, e-mail)
    """
    account = await UserAccountRepository(db).upsert(
        user_id, full_name=request.full_name, email=request.email
    )
    return _profile_response(account)


@router.post("/reset", response_model=ResetResponse)
async def reset_data(
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """
    Delete every recorded investment; the account itself stays
    """
    removed = await service.reset(user_id)
    return ResetResponse(removed_positions=removed)


@router.delete("", response_model=DeleteAccountResponse)
async def delete_account(
    user_id: str = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """
    Delete all investments and the account
    """
    deleted, removed = await service.delete_account(user_id)
    return DeleteAccountResponse(account_deleted=deleted, removed_positions=removed)
