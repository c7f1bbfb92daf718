"""Ambassador self-service schemas."""

from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class AmbassadorDashboard(BaseModel):
    referral_code: str
    total_referrals: int
    total_points_earned: int
    points_balance: int
    referrals_this_month: int
    points_this_month: int
    target_referrals: Optional[int] = None
    target_points: Optional[int] = None
    kpi_notes: Optional[str] = None
    general_target_referrals: int = 0
    general_target_points: int = 0


class ProfileResponse(BaseModel):
    id: UUID
    name: str
    email: str
    phone: str
    referral_code: str
    social_media: Dict[str, str] = Field(default_factory=dict)
    joined_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    social_media: Optional[Dict[str, str]] = None


class PasswordChange(BaseModel):
    current_password: Optional[str] = Field(
        None, validation_alias=AliasChoices("current_password", "currentPassword")
    )
    new_password: Optional[str] = Field(None, validation_alias=AliasChoices("new_password", "newPassword"))
