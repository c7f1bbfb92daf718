"""
Payout ledger transitions.

Creating a payout holds its points; pending -> failed releases them again;
pending -> completed only stamps processed_at. Status changes are conditional
UPDATEs on status = 'pending', so a second (or concurrent) "failed" request
cannot release the same hold twice.
"""

from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import ledger
from app.core.dates import day_end_exclusive, day_start
from app.core.enums import AmbassadorStatus, PaymentMethod, PayoutStatus
from app.core.exceptions import (
    InsufficientBalanceError,
    InternalError,
    InvalidTransitionError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from app.core.logging_config import get_logger
from app.core.models import Ambassador, Payout
from app.core.schemas import PageParams, PaginatedData, PaginationMeta

from .schemas import PayoutCreate, PayoutResponse, PayoutUpdate, PendingPayoutAmbassador

logger = get_logger(__name__)

PAYMENT_METHODS = {m.value for m in PaymentMethod}
PAYOUT_STATUSES = {s.value for s in PayoutStatus}
METADATA_FIELDS = ("transaction_reference", "notes")


def _to_response(payout: Payout, ambassador_name: Optional[str] = None) -> PayoutResponse:
    response = PayoutResponse.model_validate(payout)
    response.ambassador_name = ambassador_name
    return response


async def _ambassador_name(db: AsyncSession, ambassador_id: Optional[UUID]) -> Optional[str]:
    if ambassador_id is None:
        return None
    return await db.scalar(select(Ambassador.name).where(Ambassador.id == ambassador_id))


async def create_payout(db: AsyncSession, payload: PayoutCreate) -> PayoutResponse:
    if payload.payment_method not in PAYMENT_METHODS:
        raise ValidationError("payment_method must be MTN or ORANGE")

    stmt = select(Ambassador.id, Ambassador.name, Ambassador.points_balance).where(
        Ambassador.id == payload.ambassador_id
    )
    ambassador = (await db.execute(stmt)).first()
    if ambassador is None:
        raise NotFoundError("Ambassador not found")

    if payload.amount > ambassador.points_balance:
        raise InsufficientBalanceError("Insufficient points balance")

    try:
        payout = Payout(
            ambassador_id=ambassador.id,
            amount=payload.amount,
            points_deducted=payload.amount,
            payment_method=payload.payment_method,
            phone_number=payload.phone_number,
            status=PayoutStatus.pending.value,
            transaction_reference=payload.transaction_reference,
            notes=payload.notes,
        )
        db.add(payout)
        await db.flush()
        # Re-checked in the UPDATE itself; the read above is only for the error message
        if not await ledger.hold_points(db, ambassador.id, payload.amount):
            raise InsufficientBalanceError("Insufficient points balance")
        await db.commit()
    except ServiceError:
        await db.rollback()
        raise
    except Exception as e:
        await db.rollback()
        logger.exception("payout_create_failed", ambassador_id=str(ambassador.id))
        raise InternalError("Failed to create payout") from e

    await db.refresh(payout)
    logger.info(
        "payout_created",
        payout_id=str(payout.id),
        ambassador_id=str(ambassador.id),
        amount=payload.amount,
        payment_method=payload.payment_method,
    )
    return _to_response(payout, ambassador.name)


async def _apply_transition(db: AsyncSession, payout: Payout, target: PayoutStatus) -> bool:
    """
    Move payout to target, releasing held points on failure.
    Returns False when the payout already has the target status (no-op).
    """
    current = PayoutStatus(payout.status)
    if target == current:
        return False
    if current != PayoutStatus.pending:
        raise InvalidTransitionError(f"Cannot change a {current.value} payout to {target.value}")

    ambassador_id = payout.ambassador_id
    points = payout.points_deducted
    values = {"status": target.value}
    if target == PayoutStatus.completed:
        values["processed_at"] = func.coalesce(Payout.processed_at, datetime.now(timezone.utc))

    result = await db.execute(
        update(Payout)
        .where(Payout.id == payout.id, Payout.status == PayoutStatus.pending.value)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise InvalidTransitionError("Payout is no longer pending")

    if target == PayoutStatus.failed and ambassador_id is not None:
        await ledger.release_points(db, ambassador_id, points)
        logger.info(
            "payout_failed_points_restored",
            payout_id=str(payout.id),
            ambassador_id=str(ambassador_id),
            points=points,
        )
    return True


async def update_payout(db: AsyncSession, payout_id: UUID, payload: PayoutUpdate) -> PayoutResponse:
    provided = payload.model_fields_set
    wants_status = payload.status is not None
    if not wants_status and not any(f in provided for f in METADATA_FIELDS):
        raise ValidationError("No fields to update")
    if wants_status and payload.status not in PAYOUT_STATUSES:
        raise ValidationError("Invalid status")

    try:
        stmt = (
            select(Payout)
            .where(Payout.id == payout_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        payout = (await db.execute(stmt)).scalar_one_or_none()
        if payout is None:
            raise NotFoundError("Payout not found")

        changed = False
        if wants_status:
            changed = await _apply_transition(db, payout, PayoutStatus(payload.status))

        for field in METADATA_FIELDS:
            if field in provided:
                setattr(payout, field, getattr(payload, field))

        await db.commit()
    except ServiceError:
        await db.rollback()
        raise
    except Exception as e:
        await db.rollback()
        logger.exception("payout_update_failed", payout_id=str(payout_id))
        raise InternalError("Failed to update payout") from e

    await db.refresh(payout)
    if changed:
        logger.info("payout_status_changed", payout_id=str(payout.id), status=payout.status)
    return _to_response(payout, await _ambassador_name(db, payout.ambassador_id))


async def get_payout(db: AsyncSession, payout_id: UUID) -> PayoutResponse:
    payout = await db.get(Payout, payout_id)
    if payout is None:
        raise NotFoundError("Payout not found")
    return _to_response(payout, await _ambassador_name(db, payout.ambassador_id))


async def list_payouts(
    db: AsyncSession,
    page: PageParams,
    ambassador_id: Optional[UUID] = None,
    status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> PaginatedData[PayoutResponse]:
    conditions = []
    if ambassador_id is not None:
        conditions.append(Payout.ambassador_id == ambassador_id)
    if status:
        conditions.append(Payout.status == status)
    if start_date:
        conditions.append(Payout.created_at >= day_start(start_date))
    if end_date:
        conditions.append(Payout.created_at < day_end_exclusive(end_date))

    total = await db.scalar(select(func.count(Payout.id)).where(*conditions))
    stmt = (
        select(Payout, Ambassador.name)
        .outerjoin(Ambassador, Payout.ambassador_id == Ambassador.id)
        .where(*conditions)
        .order_by(Payout.created_at.desc())
        .limit(page.limit)
        .offset(page.offset)
    )
    rows = (await db.execute(stmt)).all()
    return PaginatedData[PayoutResponse](
        data=[_to_response(payout, name) for payout, name in rows],
        pagination=PaginationMeta.build(page.page, page.limit, int(total or 0)),
    )


async def list_ambassadors_awaiting_payout(db: AsyncSession) -> List[PendingPayoutAmbassador]:
    stmt = (
        select(Ambassador)
        .where(Ambassador.points_balance > 0, Ambassador.status == AmbassadorStatus.active.value)
        .order_by(Ambassador.points_balance.desc())
    )
    result = await db.execute(stmt)
    return [PendingPayoutAmbassador.model_validate(a) for a in result.scalars().all()]
