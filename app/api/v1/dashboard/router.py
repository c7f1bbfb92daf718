from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.core.schemas import ApiResponse
from app.core.settings_store import SettingsStore, get_settings_store
from app.db.session import get_db

from .schemas import DashboardStats
from . import service

router = APIRouter(prefix="/api/v1/admin", tags=["dashboard"], dependencies=[Depends(require_admin)])


@router.get("/dashboard-stats", response_model=ApiResponse[DashboardStats])
async def dashboard_stats(
    db: AsyncSession = Depends(get_db),
    store: SettingsStore = Depends(get_settings_store),
) -> ApiResponse[DashboardStats]:
    return ApiResponse(data=await service.get_dashboard_stats(db, store))
