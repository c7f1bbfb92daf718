from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.core.exceptions import ServiceError
from app.core.schemas import ApiResponse, PageParams
from app.db.session import get_db

from .schemas import Leaderboard
from . import service

router = APIRouter(prefix="/api/v1/admin", tags=["leaderboard"], dependencies=[Depends(require_admin)])


@router.get("/leaderboard", response_model=ApiResponse[Leaderboard])
async def leaderboard(
    period: str = Query("all", description="all or month"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[Leaderboard]:
    try:
        return ApiResponse(data=await service.get_leaderboard(db, PageParams(page=page, limit=limit), period))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
