"""Exports router (admin): ?format=csv (default) or ?format=xlsx."""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service

router = APIRouter(prefix="/api/v1/admin/export", tags=["exports"], dependencies=[Depends(require_admin)])


def _attachment(name: str, fmt: str, columns, rows) -> Response:
    try:
        content, media_type, filename = service.render(name, fmt, columns, rows)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/ambassadors")
async def export_ambassadors(
    fmt: str = Query("csv", alias="format"),
    db: AsyncSession = Depends(get_db),
) -> Response:
    return _attachment("ambassadors", fmt, service.AMBASSADOR_COLUMNS, await service.ambassador_rows(db))


@router.get("/referrals")
async def export_referrals(
    fmt: str = Query("csv", alias="format"),
    db: AsyncSession = Depends(get_db),
) -> Response:
    return _attachment("referrals", fmt, service.REFERRAL_COLUMNS, await service.referral_rows(db))


@router.get("/payouts")
async def export_payouts(
    fmt: str = Query("csv", alias="format"),
    db: AsyncSession = Depends(get_db),
) -> Response:
    return _attachment("payouts", fmt, service.PAYOUT_COLUMNS, await service.payout_rows(db))
