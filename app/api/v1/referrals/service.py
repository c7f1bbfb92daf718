"""
Admin referral queries. A referral's status may be flipped between active and
cancelled; counters and balances are not touched by that change.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dates import day_end_exclusive, day_start
from app.core.enums import ReferralStatus
from app.core.exceptions import NotFoundError, ValidationError
from app.core.logging_config import get_logger
from app.core.models import Ambassador, Referral
from app.core.schemas import PageParams, PaginatedData, PaginationMeta

from .schemas import ReferralResponse, ReferralStatusUpdate

logger = get_logger(__name__)

REFERRAL_STATUSES = {s.value for s in ReferralStatus}


def _to_response(referral: Referral, ambassador_name: Optional[str] = None) -> ReferralResponse:
    response = ReferralResponse.model_validate(referral)
    response.ambassador_name = ambassador_name
    return response


def referral_filters(
    search: Optional[str] = None,
    ambassador_id: Optional[UUID] = None,
    status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list:
    conditions = []
    if search:
        pattern = f"%{search.strip()}%"
        conditions.append(or_(Referral.student_name.ilike(pattern), Referral.student_email.ilike(pattern)))
    if ambassador_id is not None:
        conditions.append(Referral.ambassador_id == ambassador_id)
    if status:
        conditions.append(Referral.status == status)
    if start_date:
        conditions.append(Referral.registered_at >= day_start(start_date))
    if end_date:
        conditions.append(Referral.registered_at < day_end_exclusive(end_date))
    return conditions


async def list_referrals(db: AsyncSession, page: PageParams, conditions: list) -> PaginatedData[ReferralResponse]:
    total = await db.scalar(select(func.count(Referral.id)).where(*conditions))
    stmt = (
        select(Referral, Ambassador.name)
        .outerjoin(Ambassador, Referral.ambassador_id == Ambassador.id)
        .where(*conditions)
        .order_by(Referral.registered_at.desc())
        .limit(page.limit)
        .offset(page.offset)
    )
    rows = (await db.execute(stmt)).all()
    return PaginatedData[ReferralResponse](
        data=[_to_response(referral, name) for referral, name in rows],
        pagination=PaginationMeta.build(page.page, page.limit, int(total or 0)),
    )


async def update_referral_status(
    db: AsyncSession,
    referral_id: UUID,
    payload: ReferralStatusUpdate,
) -> ReferralResponse:
    if payload.status not in REFERRAL_STATUSES:
        raise ValidationError("Valid status is required")

    referral = await db.get(Referral, referral_id)
    if referral is None:
        raise NotFoundError("Referral not found")

    referral.status = payload.status
    await db.commit()
    await db.refresh(referral)
    logger.info("referral_status_changed", referral_id=str(referral_id), status=payload.status)

    name = None
    if referral.ambassador_id is not None:
        name = await db.scalar(select(Ambassador.name).where(Ambassador.id == referral.ambassador_id))
    return _to_response(referral, name)
