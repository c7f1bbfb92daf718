"""Payout: manually fulfilled cash disbursement held against an ambassador's points."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Payout(Base):
    """
    pending -> completed | failed. Points are held at creation (points_deducted == amount,
    1 point = 1 currency unit) and released again only on pending -> failed.
    """

    __tablename__ = "payouts"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payout_amount_positive"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    ambassador_id = Column(
        UUID(as_uuid=True),
        ForeignKey("ambassadors.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    amount = Column(Integer, nullable=False)
    points_deducted = Column(Integer, nullable=False)
    payment_method = Column(String(20), nullable=False)  # MTN, ORANGE
    phone_number = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    transaction_reference = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    # Set once, on the first transition to completed
    processed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    ambassador = relationship("Ambassador", back_populates="payouts")
