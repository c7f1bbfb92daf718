"""Rate limiting configuration."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Single shared limiter instance, keyed by client address
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
    enabled=settings.rate_limit_enabled,
)
