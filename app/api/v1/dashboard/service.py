from collections import OrderedDict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dates import month_key, month_start
from app.core.enums import PayoutStatus
from app.core.models import Ambassador, Payout, Referral
from app.core.settings_store import SettingsStore

from .schemas import DashboardStats, MonthlyReferrals

CHART_MONTHS = 6


async def _count(db: AsyncSession, column, *conditions) -> int:
    return int(await db.scalar(select(func.count(column)).where(*conditions)) or 0)


async def _referrals_per_month(db: AsyncSession) -> list:
    """Referral counts for the current month and the five before it, oldest first, zero-filled."""
    since = month_start(months_back=CHART_MONTHS - 1)
    buckets = OrderedDict(
        (month_key(month_start(months_back=back)), 0) for back in range(CHART_MONTHS - 1, -1, -1)
    )
    result = await db.execute(select(Referral.registered_at).where(Referral.registered_at >= since))
    for (registered_at,) in result.all():
        key = month_key(registered_at)
        if key in buckets:
            buckets[key] += 1
    return [MonthlyReferrals(month=month, referrals=count) for month, count in buckets.items()]


async def get_dashboard_stats(db: AsyncSession, store: SettingsStore) -> DashboardStats:
    this_month = month_start()
    last_month = month_start(months_back=1)

    points_owed = await db.scalar(select(func.coalesce(func.sum(Ambassador.points_balance), 0)))

    return DashboardStats(
        total_ambassadors=await _count(db, Ambassador.id),
        max_ambassadors=await store.max_ambassadors(),
        total_referrals=await _count(db, Referral.id),
        referrals_this_month=await _count(db, Referral.id, Referral.registered_at >= this_month),
        referrals_last_month=await _count(
            db, Referral.id, Referral.registered_at >= last_month, Referral.registered_at < this_month
        ),
        total_points_owed=int(points_owed or 0),
        pending_payouts_count=await _count(db, Payout.id, Payout.status == PayoutStatus.pending.value),
        referrals_over_time=await _referrals_per_month(db),
    )
