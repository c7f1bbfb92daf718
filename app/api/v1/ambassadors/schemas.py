"""Ambassador schemas (admin)."""

from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.core.enums import AmbassadorStatus


class AmbassadorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    social_media: Dict[str, str] = Field(default_factory=dict, description="tiktok, facebook, instagram handles")
    notes: Optional[str] = None


class AmbassadorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    status: Optional[AmbassadorStatus] = None
    social_media: Optional[Dict[str, str]] = None
    target_referrals: Optional[int] = Field(None, ge=0)
    target_points: Optional[int] = Field(None, ge=0)
    kpi_notes: Optional[str] = None
    notes: Optional[str] = None


class AmbassadorResponse(BaseModel):
    """Never carries password_hash."""

    id: UUID
    name: str
    email: str
    phone: str
    referral_code: str
    total_referrals: int
    total_points_earned: int
    points_balance: int
    status: str
    social_media: Dict[str, str] = Field(default_factory=dict)
    target_referrals: Optional[int] = None
    target_points: Optional[int] = None
    kpi_notes: Optional[str] = None
    notes: Optional[str] = None
    joined_at: datetime
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AmbassadorCreated(BaseModel):
    ambassador: AmbassadorResponse
    password: str = Field(..., description="Generated password; shown once")


class PasswordReset(BaseModel):
    password: str
