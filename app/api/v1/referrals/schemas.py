"""Referral schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ReferralResponse(BaseModel):
    id: UUID
    student_name: str
    student_email: str
    student_id: str
    ambassador_id: Optional[UUID] = None
    ambassador_code: str
    ambassador_name: Optional[str] = None
    subscription_plan: str
    subscription_price: Decimal
    points_awarded: int
    status: str
    registered_at: datetime
    created_at: datetime

    class Config:
        from_attributes = True


class ReferralStatusUpdate(BaseModel):
    status: Optional[str] = Field(None, description="active or cancelled")
