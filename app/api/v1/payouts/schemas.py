"""Payout schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class PayoutCreate(BaseModel):
    ambassador_id: UUID = Field(..., validation_alias=AliasChoices("ambassador_id", "ambassadorId"))
    amount: int = Field(..., gt=0, description="Points to pay out; 1 point = 1 currency unit")
    payment_method: str = Field(..., description="MTN or ORANGE")
    phone_number: str = Field(..., min_length=1, max_length=50)
    transaction_reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class PayoutUpdate(BaseModel):
    """Status transition and/or metadata. Omitted metadata fields are left untouched."""

    status: Optional[str] = Field(None, description="pending, completed or failed")
    transaction_reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class PayoutResponse(BaseModel):
    id: UUID
    ambassador_id: Optional[UUID] = None
    ambassador_name: Optional[str] = None
    amount: int
    points_deducted: int
    payment_method: str
    phone_number: str
    status: str
    transaction_reference: Optional[str] = None
    notes: Optional[str] = None
    processed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PendingPayoutAmbassador(BaseModel):
    """Active ambassador with a positive balance, i.e. someone who can be paid."""

    id: UUID
    name: str
    email: str
    phone: str
    referral_code: str
    points_balance: int

    class Config:
        from_attributes = True
