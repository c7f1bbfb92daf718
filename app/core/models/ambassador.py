"""Ambassador: a referrer with a unique code and a points ledger."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Ambassador(Base):
    """
    Never hard-deleted; deactivation flips status to inactive.

    points_balance is kept equal to total_points_earned minus the points held by
    pending/completed payouts. Every mutation goes through app.core.ledger.
    """

    __tablename__ = "ambassadors"
    __table_args__ = (
        CheckConstraint("points_balance >= 0", name="ck_ambassador_points_balance_non_negative"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(50), nullable=False)
    password_hash = Column(Text, nullable=False)
    referral_code = Column(String(50), nullable=False, unique=True, index=True)
    total_referrals = Column(Integer, nullable=False, default=0)
    total_points_earned = Column(Integer, nullable=False, default=0)
    points_balance = Column(Integer, nullable=False, default=0)
    # active | inactive | suspended
    status = Column(String(20), nullable=False, default="active")
    # {"tiktok": ..., "facebook": ..., "instagram": ...}
    social_media = Column(JSON, nullable=False, default=dict)
    target_referrals = Column(Integer, nullable=True)
    target_points = Column(Integer, nullable=True)
    kpi_notes = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    joined_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    referrals = relationship("Referral", back_populates="ambassador")
    payouts = relationship("Payout", back_populates="ambassador")
