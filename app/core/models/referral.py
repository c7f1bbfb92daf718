"""
One row per referred student. Immutable after creation except for status.
points_awarded is frozen at creation from the then-current points_per_referral.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Referral(Base):
    """
    A student is a duplicate if either student_id or student_email already exists,
    so each column carries its own unique index.
    """

    __tablename__ = "referrals"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_name = Column(String(255), nullable=False)
    student_email = Column(String(255), nullable=False, unique=True)
    student_id = Column(String(255), nullable=False, unique=True)
    ambassador_id = Column(
        UUID(as_uuid=True),
        ForeignKey("ambassadors.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    ambassador_code = Column(String(50), nullable=False)
    subscription_plan = Column(String(100), nullable=False, default="Standard")
    subscription_price = Column(Numeric(12, 2), nullable=False, default=0)
    points_awarded = Column(Integer, nullable=False)
    # active | cancelled
    status = Column(String(20), nullable=False, default="active")
    registered_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    ambassador = relationship("Ambassador", back_populates="referrals")
