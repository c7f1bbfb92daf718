"""
Referral ingestion: kill switch, dedup, attribution, then one atomic ledger write.

The order of checks is part of the contract; each step short-circuits the rest.
"""

from datetime import datetime, timezone

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import ledger
from app.core.enums import AmbassadorStatus, ReferralStatus
from app.core.exceptions import (
    DuplicateReferralError,
    InactiveAmbassadorError,
    InternalError,
    SystemInactiveError,
    UnknownReferralCodeError,
)
from app.core.logging_config import get_logger
from app.core.models import Ambassador, Referral
from app.core.settings_store import SettingsStore

from .schemas import SignupNotification, WebhookSuccess

logger = get_logger(__name__)


async def _is_duplicate(db: AsyncSession, notification: SignupNotification) -> bool:
    stmt = (
        select(Referral.id)
        .where(
            or_(
                Referral.student_id == notification.student_id,
                Referral.student_email == notification.student_email,
            )
        )
        .limit(1)
    )
    return (await db.execute(stmt)).first() is not None


async def ingest_referral(
    db: AsyncSession,
    store: SettingsStore,
    notification: SignupNotification,
) -> WebhookSuccess:
    # 1. System-wide kill switch
    if not await store.is_system_active():
        raise SystemInactiveError("System is currently inactive")

    # 2. Fast-path dedup; the unique indexes on referrals catch the race below
    if await _is_duplicate(db, notification):
        logger.info("referral_duplicate_rejected", shape=notification.shape)
        raise DuplicateReferralError("Student already registered")

    # 3. Attribution
    stmt = select(Ambassador.id, Ambassador.name, Ambassador.status).where(
        Ambassador.referral_code == notification.referral_code
    )
    ambassador = (await db.execute(stmt)).first()
    if ambassador is None:
        logger.warning("referral_code_unknown", referral_code=notification.referral_code)
        raise UnknownReferralCodeError("Invalid referral code")

    if ambassador.status != AmbassadorStatus.active.value:
        raise InactiveAmbassadorError("Ambassador account is not active")

    # 4. Award is frozen on the referral row; later setting changes never touch it
    points = await store.points_per_referral()

    # 5. Referral row and ambassador counters commit together or not at all
    try:
        referral = Referral(
            student_name=notification.student_name,
            student_email=notification.student_email,
            student_id=notification.student_id,
            ambassador_id=ambassador.id,
            ambassador_code=notification.referral_code,
            subscription_plan=notification.plan,
            subscription_price=notification.price,
            points_awarded=points,
            status=ReferralStatus.active.value,
            registered_at=notification.registered_at or datetime.now(timezone.utc),
        )
        db.add(referral)
        await db.flush()
        await ledger.credit_referral(db, ambassador.id, points)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if await _is_duplicate(db, notification):
            logger.info("referral_duplicate_rejected", shape=notification.shape, race=True)
            raise DuplicateReferralError("Student already registered") from e
        logger.exception("referral_ingestion_failed", ambassador_id=str(ambassador.id))
        raise InternalError("Failed to process referral") from e
    except Exception as e:
        await db.rollback()
        logger.exception("referral_ingestion_failed", ambassador_id=str(ambassador.id))
        raise InternalError("Failed to process referral") from e

    logger.info(
        "referral_recorded",
        referral_id=str(referral.id),
        ambassador_id=str(ambassador.id),
        points_awarded=points,
        shape=notification.shape,
    )
    return WebhookSuccess(points_awarded=points, ambassador_name=ambassador.name)
