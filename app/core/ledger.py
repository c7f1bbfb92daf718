"""
Ledger mutation primitives shared by referral ingestion and payout transitions.

None of these commit. Callers run them inside one transaction together with the
referral/payout row they belong to and commit or roll back as a unit. Every
write is a single relative UPDATE so concurrent writers never lose increments.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import PayoutStatus
from app.core.models import Ambassador, Payout

HELD_PAYOUT_STATUSES = (PayoutStatus.pending.value, PayoutStatus.completed.value)


async def credit_referral(db: AsyncSession, ambassador_id: UUID, points: int) -> None:
    await db.execute(
        update(Ambassador)
        .where(Ambassador.id == ambassador_id)
        .values(
            total_referrals=Ambassador.total_referrals + 1,
            total_points_earned=Ambassador.total_points_earned + points,
            points_balance=Ambassador.points_balance + points,
            updated_at=datetime.now(timezone.utc),
        )
        .execution_options(synchronize_session=False)
    )


async def hold_points(db: AsyncSession, ambassador_id: UUID, amount: int) -> bool:
    """Decrement the balance only if it covers amount. False means nothing changed."""
    result = await db.execute(
        update(Ambassador)
        .where(Ambassador.id == ambassador_id, Ambassador.points_balance >= amount)
        .values(
            points_balance=Ambassador.points_balance - amount,
            updated_at=datetime.now(timezone.utc),
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def release_points(db: AsyncSession, ambassador_id: UUID, amount: int) -> None:
    await db.execute(
        update(Ambassador)
        .where(Ambassador.id == ambassador_id)
        .values(
            points_balance=Ambassador.points_balance + amount,
            updated_at=datetime.now(timezone.utc),
        )
        .execution_options(synchronize_session=False)
    )


async def expected_balance(db: AsyncSession, ambassador_id: UUID) -> int:
    """Balance implied by the rows: points earned minus points held by live payouts."""
    earned = await db.scalar(
        select(Ambassador.total_points_earned).where(Ambassador.id == ambassador_id)
    )
    held = await db.scalar(
        select(func.coalesce(func.sum(Payout.points_deducted), 0)).where(
            Payout.ambassador_id == ambassador_id,
            Payout.status.in_(HELD_PAYOUT_STATUSES),
        )
    )
    return int(earned or 0) - int(held or 0)
