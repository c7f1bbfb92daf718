"""Ambassador portal router: dashboard, referrals, payments, profile, password."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.payouts.schemas import PayoutResponse
from app.api.v1.referrals.schemas import ReferralResponse
from app.auth.rbac import require_ambassador
from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.core.schemas import ApiResponse, PageParams, PaginatedData
from app.core.settings_store import SettingsStore, get_settings_store
from app.db.session import get_db

from .schemas import AmbassadorDashboard, PasswordChange, ProfileResponse, ProfileUpdate
from . import service

router = APIRouter(prefix="/api/v1/ambassador", tags=["ambassador-portal"])


@router.get("/dashboard", response_model=ApiResponse[AmbassadorDashboard])
async def get_dashboard(
    current_user: CurrentUser = Depends(require_ambassador),
    db: AsyncSession = Depends(get_db),
    store: SettingsStore = Depends(get_settings_store),
) -> ApiResponse[AmbassadorDashboard]:
    try:
        return ApiResponse(data=await service.get_dashboard(db, store, current_user.ambassador_id))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/referrals", response_model=ApiResponse[PaginatedData[ReferralResponse]])
async def list_referrals(
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: CurrentUser = Depends(require_ambassador),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PaginatedData[ReferralResponse]]:
    data = await service.list_own_referrals(
        db,
        current_user.ambassador_id,
        PageParams(page=page, limit=limit),
        status=status_filter,
        search=search,
    )
    return ApiResponse(data=data)


@router.get("/payments", response_model=ApiResponse[PaginatedData[PayoutResponse]])
async def list_payments(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: CurrentUser = Depends(require_ambassador),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PaginatedData[PayoutResponse]]:
    data = await service.list_own_payments(db, current_user.ambassador_id, PageParams(page=page, limit=limit))
    return ApiResponse(data=data)


@router.get("/profile", response_model=ApiResponse[ProfileResponse])
async def get_profile(
    current_user: CurrentUser = Depends(require_ambassador),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProfileResponse]:
    try:
        return ApiResponse(data=await service.get_profile(db, current_user.ambassador_id))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/profile", response_model=ApiResponse[ProfileResponse])
async def update_profile(
    payload: ProfileUpdate,
    current_user: CurrentUser = Depends(require_ambassador),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProfileResponse]:
    try:
        return ApiResponse(data=await service.update_profile(db, current_user.ambassador_id, payload))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/password", response_model=ApiResponse[None])
async def change_password(
    payload: PasswordChange,
    current_user: CurrentUser = Depends(require_ambassador),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    try:
        await service.change_password(db, current_user.ambassador_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message="Password changed successfully")
