"""Payouts router (admin): list, awaiting payout, create, transition."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.core.exceptions import ServiceError
from app.core.schemas import ApiResponse, PageParams, PaginatedData
from app.db.session import get_db

from .schemas import PayoutCreate, PayoutResponse, PayoutUpdate, PendingPayoutAmbassador
from . import service

router = APIRouter(
    prefix="/api/v1/admin/payouts",
    tags=["payouts"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=ApiResponse[PaginatedData[PayoutResponse]])
async def list_payouts(
    ambassador_id: Optional[UUID] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PaginatedData[PayoutResponse]]:
    data = await service.list_payouts(
        db,
        PageParams(page=page, limit=limit),
        ambassador_id=ambassador_id,
        status=status_filter,
        start_date=start_date,
        end_date=end_date,
    )
    return ApiResponse(data=data)


@router.get("/pending", response_model=ApiResponse[List[PendingPayoutAmbassador]])
async def list_pending(
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[List[PendingPayoutAmbassador]]:
    return ApiResponse(data=await service.list_ambassadors_awaiting_payout(db))


@router.get("/{payout_id}", response_model=ApiResponse[PayoutResponse])
async def get_payout(
    payout_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PayoutResponse]:
    try:
        return ApiResponse(data=await service.get_payout(db, payout_id))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "",
    response_model=ApiResponse[PayoutResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_payout(
    payload: PayoutCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PayoutResponse]:
    try:
        payout = await service.create_payout(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(
        data=payout,
        message="Payout recorded successfully. Please mark as completed after manual transfer.",
    )


@router.put("/{payout_id}", response_model=ApiResponse[PayoutResponse])
async def update_payout(
    payout_id: UUID,
    payload: PayoutUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PayoutResponse]:
    try:
        return ApiResponse(data=await service.update_payout(db, payout_id, payload))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
