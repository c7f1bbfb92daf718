from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from app.auth.rbac import require_admin
from app.core.exceptions import ServiceError
from app.core.schemas import ApiResponse
from app.core.settings_store import SettingsStore, get_settings_store

from .schemas import SettingsUpdate
from . import service

router = APIRouter(prefix="/api/v1/admin/settings", tags=["settings"], dependencies=[Depends(require_admin)])


@router.get("", response_model=ApiResponse[Dict[str, Any]])
async def get_settings(store: SettingsStore = Depends(get_settings_store)) -> ApiResponse[Dict[str, Any]]:
    return ApiResponse(data=await service.read_settings(store))


@router.put("", response_model=ApiResponse[Dict[str, Any]])
async def update_settings(
    payload: SettingsUpdate,
    store: SettingsStore = Depends(get_settings_store),
) -> ApiResponse[Dict[str, Any]]:
    try:
        data = await service.update_settings(store, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(data=data, message="Settings updated successfully")
