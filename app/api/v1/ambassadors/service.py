from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.referral_code import generate_ambassador_referral_code
from app.auth.security import generate_password, hash_password
from app.core.enums import AmbassadorStatus
from app.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from app.core.logging_config import get_logger
from app.core.models import Ambassador
from app.core.schemas import PageParams, PaginatedData, PaginationMeta
from app.core.settings_store import SettingsStore

from .schemas import AmbassadorCreate, AmbassadorCreated, AmbassadorResponse, AmbassadorUpdate, PasswordReset

logger = get_logger(__name__)

MAX_CODE_ATTEMPTS = 20


async def _get_or_404(db: AsyncSession, ambassador_id: UUID) -> Ambassador:
    stmt = select(Ambassador).where(Ambassador.id == ambassador_id).execution_options(populate_existing=True)
    ambassador = (await db.execute(stmt)).scalar_one_or_none()
    if not ambassador:
        raise NotFoundError("Ambassador not found")
    return ambassador


async def _email_taken(db: AsyncSession, email: str, exclude_id: Optional[UUID] = None) -> bool:
    stmt = select(Ambassador.id).where(func.lower(Ambassador.email) == email.lower())
    if exclude_id is not None:
        stmt = stmt.where(Ambassador.id != exclude_id)
    return (await db.execute(stmt.limit(1))).first() is not None


async def _unique_referral_code(db: AsyncSession, name: str) -> str:
    for _ in range(MAX_CODE_ATTEMPTS):
        code = generate_ambassador_referral_code(name)
        exists = (await db.execute(select(Ambassador.id).where(Ambassador.referral_code == code))).first()
        if not exists:
            return code
    raise InternalError("Could not generate a unique referral code")


async def list_ambassadors(
    db: AsyncSession,
    page: PageParams,
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> PaginatedData[AmbassadorResponse]:
    conditions = []
    if search:
        pattern = f"%{search.strip()}%"
        conditions.append(
            or_(
                Ambassador.name.ilike(pattern),
                Ambassador.email.ilike(pattern),
                Ambassador.referral_code.ilike(pattern),
            )
        )
    if status:
        conditions.append(Ambassador.status == status)

    total = await db.scalar(select(func.count(Ambassador.id)).where(*conditions))
    stmt = (
        select(Ambassador)
        .where(*conditions)
        .order_by(Ambassador.created_at.desc())
        .limit(page.limit)
        .offset(page.offset)
    )
    result = await db.execute(stmt)
    return PaginatedData[AmbassadorResponse](
        data=[AmbassadorResponse.model_validate(a) for a in result.scalars().all()],
        pagination=PaginationMeta.build(page.page, page.limit, int(total or 0)),
    )


async def create_ambassador(
    db: AsyncSession,
    store: SettingsStore,
    payload: AmbassadorCreate,
) -> AmbassadorCreated:
    if await _email_taken(db, payload.email):
        raise ConflictError("Email already exists")

    max_ambassadors = await store.max_ambassadors()
    current_count = await db.scalar(select(func.count(Ambassador.id)))
    if (current_count or 0) >= max_ambassadors:
        raise ValidationError(f"Maximum {max_ambassadors} ambassadors allowed")

    referral_code = await _unique_referral_code(db, payload.name)
    password = generate_password()

    ambassador = Ambassador(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        password_hash=hash_password(password),
        referral_code=referral_code,
        social_media=payload.social_media or {},
        notes=payload.notes,
        status=AmbassadorStatus.active.value,
    )
    db.add(ambassador)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        # Lost a race on email or referral code
        raise ConflictError("Email or referral code already exists") from e
    await db.refresh(ambassador)

    logger.info("ambassador_created", ambassador_id=str(ambassador.id), referral_code=referral_code)
    return AmbassadorCreated(ambassador=AmbassadorResponse.model_validate(ambassador), password=password)


async def get_ambassador(db: AsyncSession, ambassador_id: UUID) -> AmbassadorResponse:
    return AmbassadorResponse.model_validate(await _get_or_404(db, ambassador_id))


async def update_ambassador(
    db: AsyncSession,
    ambassador_id: UUID,
    payload: AmbassadorUpdate,
) -> AmbassadorResponse:
    ambassador = await _get_or_404(db, ambassador_id)

    updates = payload.model_dump(exclude_unset=True)
    # name/email/phone/status/social_media cannot be cleared; None means "leave as is"
    for key in ("name", "email", "phone", "status", "social_media"):
        if updates.get(key) is None:
            updates.pop(key, None)
    if not updates:
        raise ValidationError("No fields to update")

    if "email" in updates and await _email_taken(db, updates["email"], exclude_id=ambassador_id):
        raise ConflictError("Email already exists")

    if "status" in updates:
        updates["status"] = AmbassadorStatus(updates["status"]).value

    for key, value in updates.items():
        setattr(ambassador, key, value)

    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("Email already exists") from e
    await db.refresh(ambassador)
    logger.info("ambassador_updated", ambassador_id=str(ambassador_id), fields=sorted(updates))
    return AmbassadorResponse.model_validate(ambassador)


async def deactivate_ambassador(db: AsyncSession, ambassador_id: UUID) -> None:
    """Soft delete: the row stays, status becomes inactive."""
    ambassador = await _get_or_404(db, ambassador_id)
    ambassador.status = AmbassadorStatus.inactive.value
    await db.commit()
    logger.info("ambassador_deactivated", ambassador_id=str(ambassador_id))


async def reset_password(db: AsyncSession, ambassador_id: UUID) -> PasswordReset:
    ambassador = await _get_or_404(db, ambassador_id)
    password = generate_password()
    ambassador.password_hash = hash_password(password)
    await db.commit()
    logger.info("ambassador_password_reset", ambassador_id=str(ambassador_id))
    return PasswordReset(password=password)
