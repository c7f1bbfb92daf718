"""
Leaderboard over active ambassadors. Totals are summed from referral rows, so
period=month ranks by this month's referrals only; ambassadors with none still
appear with zeros.
"""

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dates import month_start
from app.core.enums import AmbassadorStatus
from app.core.exceptions import ValidationError
from app.core.models import Ambassador, Referral
from app.core.schemas import PageParams, PaginationMeta

from .schemas import Leaderboard, LeaderboardEntry

PERIODS = ("all", "month")


async def get_leaderboard(db: AsyncSession, page: PageParams, period: str = "all") -> Leaderboard:
    if period not in PERIODS:
        raise ValidationError("period must be 'all' or 'month'")

    join_on = Referral.ambassador_id == Ambassador.id
    if period == "month":
        # Date condition lives in ON so ambassadors without referrals keep their row
        join_on = and_(join_on, Referral.registered_at >= month_start())

    referral_count = func.count(Referral.id).label("total_referrals")
    points_sum = func.coalesce(func.sum(Referral.points_awarded), 0).label("total_points")
    base = (
        select(Ambassador.id, Ambassador.name, Ambassador.referral_code, referral_count, points_sum)
        .outerjoin(Referral, join_on)
        .where(Ambassador.status == AmbassadorStatus.active.value)
        .group_by(Ambassador.id, Ambassador.name, Ambassador.referral_code)
    )

    async def ranked(*order_by) -> list:
        stmt = base.order_by(*order_by, Ambassador.name).limit(page.limit).offset(page.offset)
        rows = (await db.execute(stmt)).all()
        return [
            LeaderboardEntry(
                rank=page.offset + index + 1,
                ambassador_id=row.id,
                ambassador_name=row.name,
                referral_code=row.referral_code,
                total_referrals=int(row.total_referrals),
                total_points=int(row.total_points),
            )
            for index, row in enumerate(rows)
        ]

    total = await db.scalar(
        select(func.count(Ambassador.id)).where(Ambassador.status == AmbassadorStatus.active.value)
    )
    return Leaderboard(
        period=period,
        by_referrals=await ranked(referral_count.desc(), points_sum.desc()),
        by_points=await ranked(points_sum.desc(), referral_count.desc()),
        pagination=PaginationMeta.build(page.page, page.limit, int(total or 0)),
    )
