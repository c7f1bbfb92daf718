"""Ambassador portal: every query is scoped to the caller's own ambassador id."""

from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.payouts.schemas import PayoutResponse
from app.api.v1.referrals.schemas import ReferralResponse
from app.auth.security import hash_password, verify_password
from app.core.dates import month_start
from app.core.enums import SettingKey
from app.core.exceptions import AuthError, NotFoundError, ValidationError
from app.core.logging_config import get_logger
from app.core.models import Ambassador, Payout, Referral
from app.core.schemas import PageParams, PaginatedData, PaginationMeta
from app.core.settings_store import SettingsStore

from .schemas import AmbassadorDashboard, PasswordChange, ProfileResponse, ProfileUpdate

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 8


async def _get_ambassador(db: AsyncSession, ambassador_id: UUID) -> Ambassador:
    stmt = select(Ambassador).where(Ambassador.id == ambassador_id).execution_options(populate_existing=True)
    ambassador = (await db.execute(stmt)).scalar_one_or_none()
    if ambassador is None:
        raise NotFoundError("Ambassador not found")
    return ambassador


async def get_dashboard(db: AsyncSession, store: SettingsStore, ambassador_id: UUID) -> AmbassadorDashboard:
    ambassador = await _get_ambassador(db, ambassador_id)

    month_stmt = select(
        func.count(Referral.id),
        func.coalesce(func.sum(Referral.points_awarded), 0),
    ).where(Referral.ambassador_id == ambassador_id, Referral.registered_at >= month_start())
    referrals_this_month, points_this_month = (await db.execute(month_stmt)).one()

    return AmbassadorDashboard(
        referral_code=ambassador.referral_code,
        total_referrals=ambassador.total_referrals,
        total_points_earned=ambassador.total_points_earned,
        points_balance=ambassador.points_balance,
        referrals_this_month=int(referrals_this_month or 0),
        points_this_month=int(points_this_month or 0),
        target_referrals=ambassador.target_referrals,
        target_points=ambassador.target_points,
        kpi_notes=ambassador.kpi_notes,
        general_target_referrals=await store.get_int(SettingKey.GENERAL_TARGET_REFERRALS.value, 0),
        general_target_points=await store.get_int(SettingKey.GENERAL_TARGET_POINTS.value, 0),
    )


async def list_own_referrals(
    db: AsyncSession,
    ambassador_id: UUID,
    page: PageParams,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> PaginatedData[ReferralResponse]:
    conditions = [Referral.ambassador_id == ambassador_id]
    if status:
        conditions.append(Referral.status == status)
    if search:
        pattern = f"%{search.strip()}%"
        conditions.append(or_(Referral.student_name.ilike(pattern), Referral.student_email.ilike(pattern)))

    total = await db.scalar(select(func.count(Referral.id)).where(*conditions))
    stmt = (
        select(Referral)
        .where(*conditions)
        .order_by(Referral.registered_at.desc())
        .limit(page.limit)
        .offset(page.offset)
    )
    result = await db.execute(stmt)
    return PaginatedData[ReferralResponse](
        data=[ReferralResponse.model_validate(r) for r in result.scalars().all()],
        pagination=PaginationMeta.build(page.page, page.limit, int(total or 0)),
    )


async def list_own_payments(db: AsyncSession, ambassador_id: UUID, page: PageParams) -> PaginatedData[PayoutResponse]:
    condition = Payout.ambassador_id == ambassador_id
    total = await db.scalar(select(func.count(Payout.id)).where(condition))
    stmt = select(Payout).where(condition).order_by(Payout.created_at.desc()).limit(page.limit).offset(page.offset)
    result = await db.execute(stmt)
    return PaginatedData[PayoutResponse](
        data=[PayoutResponse.model_validate(p) for p in result.scalars().all()],
        pagination=PaginationMeta.build(page.page, page.limit, int(total or 0)),
    )


async def get_profile(db: AsyncSession, ambassador_id: UUID) -> ProfileResponse:
    return ProfileResponse.model_validate(await _get_ambassador(db, ambassador_id))


async def update_profile(db: AsyncSession, ambassador_id: UUID, payload: ProfileUpdate) -> ProfileResponse:
    # Empty strings and nulls mean "leave as is"
    updates = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v}
    if not updates:
        raise ValidationError("No fields to update")

    ambassador = await _get_ambassador(db, ambassador_id)
    for key, value in updates.items():
        setattr(ambassador, key, value)
    await db.commit()
    await db.refresh(ambassador)
    logger.info("ambassador_profile_updated", ambassador_id=str(ambassador_id), fields=sorted(updates))
    return ProfileResponse.model_validate(ambassador)


async def change_password(db: AsyncSession, ambassador_id: UUID, payload: PasswordChange) -> None:
    if not payload.current_password or not payload.new_password:
        raise ValidationError("Current password and new password are required")
    if len(payload.new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")

    ambassador = await _get_ambassador(db, ambassador_id)
    if not verify_password(payload.current_password, ambassador.password_hash):
        raise AuthError("Current password is incorrect")

    ambassador.password_hash = hash_password(payload.new_password)
    await db.commit()
    logger.info("ambassador_password_changed", ambassador_id=str(ambassador_id))
