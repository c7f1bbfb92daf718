from typing import List

from pydantic import BaseModel


class MonthlyReferrals(BaseModel):
    month: str  # YYYY-MM
    referrals: int


class DashboardStats(BaseModel):
    total_ambassadors: int
    max_ambassadors: int
    total_referrals: int
    referrals_this_month: int
    referrals_last_month: int
    total_points_owed: int
    pending_payouts_count: int
    referrals_over_time: List[MonthlyReferrals]
