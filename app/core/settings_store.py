"""
Live key/value configuration backed by the settings table.

Nothing is cached: every read is a round trip to the store, so a change made by
an admin is observed by the very next webhook or payout request.
"""

from datetime import datetime, timezone
from typing import Dict, Optional, Union

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import SettingKey
from app.core.models import Setting
from app.db.session import get_db

DEFAULT_POINTS_PER_REFERRAL = 1000
DEFAULT_MAX_AMBASSADORS = 50

DEFAULT_SETTINGS: Dict[str, str] = {
    SettingKey.POINTS_PER_REFERRAL.value: str(DEFAULT_POINTS_PER_REFERRAL),
    SettingKey.MAX_AMBASSADORS.value: str(DEFAULT_MAX_AMBASSADORS),
    SettingKey.SYSTEM_ACTIVE.value: "true",
    SettingKey.GENERAL_TARGET_REFERRALS.value: "0",
    SettingKey.GENERAL_TARGET_POINTS.value: "0",
}

# Keys an admin may change through the settings API
EDITABLE_KEYS = (
    SettingKey.POINTS_PER_REFERRAL.value,
    SettingKey.MAX_AMBASSADORS.value,
    SettingKey.SYSTEM_ACTIVE.value,
    SettingKey.GENERAL_TARGET_REFERRALS.value,
    SettingKey.GENERAL_TARGET_POINTS.value,
)

SECRET_KEYS = (SettingKey.WEBHOOK_SECRET.value,)


def parse_setting_value(value: Optional[str]) -> Union[bool, int, float, str, None]:
    """Typed view of a stored string: 'true'/'false' -> bool, numeric -> int/float."""
    if value is None:
        return None
    if value == "true":
        return True
    if value == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


class SettingsStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, key: str) -> Optional[str]:
        # Column select, not entity select: never served from the identity map
        result = await self.db.execute(select(Setting.value).where(Setting.key == key))
        return result.scalar_one_or_none()

    async def get_int(self, key: str, default: int) -> int:
        raw = await self.get(key)
        if raw is None:
            return default
        try:
            return int(raw.strip())
        except ValueError:
            return default

    async def is_system_active(self) -> bool:
        return await self.get(SettingKey.SYSTEM_ACTIVE.value) == "true"

    async def points_per_referral(self) -> int:
        points = await self.get_int(SettingKey.POINTS_PER_REFERRAL.value, DEFAULT_POINTS_PER_REFERRAL)
        # A negative award would debit the ledger
        return points if points >= 0 else DEFAULT_POINTS_PER_REFERRAL

    async def max_ambassadors(self) -> int:
        return await self.get_int(SettingKey.MAX_AMBASSADORS.value, DEFAULT_MAX_AMBASSADORS)

    async def webhook_secret(self) -> Optional[str]:
        value = await self.get(SettingKey.WEBHOOK_SECRET.value)
        return value or None

    async def all(self) -> Dict[str, str]:
        result = await self.db.execute(select(Setting.key, Setting.value))
        return {key: value for key, value in result.all()}

    async def set(self, key: str, value: str) -> None:
        """Upsert one row. Caller owns the transaction (commit/rollback)."""
        row = await self.db.get(Setting, key)
        if row is None:
            self.db.add(Setting(key=key, value=value))
        else:
            row.value = value
            row.updated_at = datetime.now(timezone.utc)

    async def seed_defaults(self) -> int:
        """Insert default rows that are missing; existing values are left alone."""
        existing = await self.all()
        added = 0
        for key, value in DEFAULT_SETTINGS.items():
            if key not in existing:
                self.db.add(Setting(key=key, value=value))
                added += 1
        return added


async def get_settings_store(db: AsyncSession = Depends(get_db)) -> SettingsStore:
    return SettingsStore(db)
