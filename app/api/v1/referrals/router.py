"""Referrals router (admin): list, list by ambassador, status update."""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.core.exceptions import ServiceError
from app.core.schemas import ApiResponse, PageParams, PaginatedData
from app.db.session import get_db

from .schemas import ReferralResponse, ReferralStatusUpdate
from . import service

router = APIRouter(
    prefix="/api/v1/admin/referrals",
    tags=["referrals"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=ApiResponse[PaginatedData[ReferralResponse]])
async def list_referrals(
    search: Optional[str] = Query(None),
    ambassador_id: Optional[UUID] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PaginatedData[ReferralResponse]]:
    conditions = service.referral_filters(
        search=search,
        ambassador_id=ambassador_id,
        status=status_filter,
        start_date=start_date,
        end_date=end_date,
    )
    return ApiResponse(data=await service.list_referrals(db, PageParams(page=page, limit=limit), conditions))


@router.get("/ambassador/{ambassador_id}", response_model=ApiResponse[PaginatedData[ReferralResponse]])
async def list_referrals_by_ambassador(
    ambassador_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PaginatedData[ReferralResponse]]:
    conditions = service.referral_filters(ambassador_id=ambassador_id)
    return ApiResponse(data=await service.list_referrals(db, PageParams(page=page, limit=limit), conditions))


@router.put("/{referral_id}", response_model=ApiResponse[ReferralResponse])
async def update_referral(
    referral_id: UUID,
    payload: ReferralStatusUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ReferralResponse]:
    try:
        return ApiResponse(data=await service.update_referral_status(db, referral_id, payload))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
