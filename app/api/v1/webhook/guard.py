"""Shared-secret check run before any webhook body is parsed."""

import secrets
from typing import Mapping, Optional

from app.core.config import settings
from app.core.exceptions import AuthError, SecretNotConfiguredError
from app.core.settings_store import SettingsStore

# Checked in this order; authorization is the last-resort fallback
SECRET_HEADERS = ("x-security-code", "x-webhook-secret", "authorization")


def extract_provided_secret(headers: Mapping[str, str]) -> Optional[str]:
    for name in SECRET_HEADERS:
        value = headers.get(name)
        if not value:
            continue
        if name == "authorization" and value[:7].lower() == "bearer ":
            value = value[7:]
        return value
    return None


async def resolve_webhook_secret(store: SettingsStore) -> Optional[str]:
    """Environment first, then the webhook_secret settings row."""
    if settings.webhook_secret:
        return settings.webhook_secret
    return await store.webhook_secret()


async def check_webhook_secret(headers: Mapping[str, str], store: SettingsStore) -> None:
    provided = extract_provided_secret(headers)
    if not provided:
        raise AuthError("Webhook secret required")

    expected = await resolve_webhook_secret(store)
    if not expected:
        raise SecretNotConfiguredError("Webhook secret not configured")

    if not secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise AuthError("Invalid webhook secret")
