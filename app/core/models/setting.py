from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from app.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Setting(Base):
    """Flat key -> string configuration row, read fresh on every decision."""

    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
