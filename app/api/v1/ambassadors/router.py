"""Ambassadors router (admin): list, create, get, update, deactivate, reset password."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.core.exceptions import ServiceError
from app.core.schemas import ApiResponse, PageParams, PaginatedData
from app.core.settings_store import SettingsStore, get_settings_store
from app.db.session import get_db

from .schemas import AmbassadorCreate, AmbassadorCreated, AmbassadorResponse, AmbassadorUpdate, PasswordReset
from . import service

router = APIRouter(
    prefix="/api/v1/admin/ambassadors",
    tags=["ambassadors"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=ApiResponse[PaginatedData[AmbassadorResponse]])
async def list_ambassadors(
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PaginatedData[AmbassadorResponse]]:
    data = await service.list_ambassadors(db, PageParams(page=page, limit=limit), search=search, status=status_filter)
    return ApiResponse(data=data)


@router.post("", response_model=ApiResponse[AmbassadorCreated], status_code=status.HTTP_201_CREATED)
async def create_ambassador(
    payload: AmbassadorCreate,
    db: AsyncSession = Depends(get_db),
    store: SettingsStore = Depends(get_settings_store),
) -> ApiResponse[AmbassadorCreated]:
    try:
        created = await service.create_ambassador(db, store, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(data=created, message="Ambassador created. Share the password securely; it is shown only once.")


@router.get("/{ambassador_id}", response_model=ApiResponse[AmbassadorResponse])
async def get_ambassador(
    ambassador_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AmbassadorResponse]:
    try:
        return ApiResponse(data=await service.get_ambassador(db, ambassador_id))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{ambassador_id}", response_model=ApiResponse[AmbassadorResponse])
async def update_ambassador(
    ambassador_id: UUID,
    payload: AmbassadorUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AmbassadorResponse]:
    try:
        return ApiResponse(data=await service.update_ambassador(db, ambassador_id, payload))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{ambassador_id}", response_model=ApiResponse[None])
async def deactivate_ambassador(
    ambassador_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    try:
        await service.deactivate_ambassador(db, ambassador_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message="Ambassador deactivated")


@router.post("/{ambassador_id}/reset-password", response_model=ApiResponse[PasswordReset])
async def reset_password(
    ambassador_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PasswordReset]:
    try:
        return ApiResponse(data=await service.reset_password(db, ambassador_id), message="Password reset")
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
