from typing import Any, Dict

from app.core.exceptions import InternalError, ValidationError
from app.core.logging_config import get_logger
from app.core.settings_store import SECRET_KEYS, SettingsStore, parse_setting_value

from .schemas import SettingsUpdate

logger = get_logger(__name__)

MASK = "********"


def _to_stored(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


async def read_settings(store: SettingsStore) -> Dict[str, Any]:
    """All rows, typed; secret values are masked and never leave the server."""
    typed: Dict[str, Any] = {}
    for key, value in (await store.all()).items():
        typed[key] = MASK if key in SECRET_KEYS and value else parse_setting_value(value)
    return typed


async def update_settings(store: SettingsStore, payload: SettingsUpdate) -> Dict[str, Any]:
    updates = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    if not updates:
        raise ValidationError("No settings to update")

    try:
        for key, value in updates.items():
            await store.set(key, _to_stored(value))
        await store.db.commit()
    except Exception as e:
        await store.db.rollback()
        logger.exception("settings_update_failed", keys=sorted(updates))
        raise InternalError("Failed to update settings") from e

    logger.info("settings_updated", changes={k: _to_stored(v) for k, v in updates.items()})
    return await read_settings(store)
