from typing import List
from uuid import UUID

from pydantic import BaseModel

from app.core.schemas import PaginationMeta


class LeaderboardEntry(BaseModel):
    rank: int
    ambassador_id: UUID
    ambassador_name: str
    referral_code: str
    total_referrals: int
    total_points: int


class Leaderboard(BaseModel):
    period: str
    by_referrals: List[LeaderboardEntry]
    by_points: List[LeaderboardEntry]
    pagination: PaginationMeta
