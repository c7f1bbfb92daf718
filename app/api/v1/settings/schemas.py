from typing import Optional

from pydantic import BaseModel, Field


class SettingsUpdate(BaseModel):
    """Only the keys present in the body are written."""

    points_per_referral: Optional[int] = Field(None, ge=0)
    max_ambassadors: Optional[int] = Field(None, ge=0)
    system_active: Optional[bool] = None
    general_target_referrals: Optional[int] = Field(None, ge=0)
    general_target_points: Optional[int] = Field(None, ge=0)
