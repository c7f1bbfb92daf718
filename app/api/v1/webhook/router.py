"""Webhook endpoint for the external signup system."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.rate_limit import limiter
from app.core.config import settings
from app.core.exceptions import ServiceError, ValidationError
from app.core.logging_config import get_logger
from app.core.settings_store import SettingsStore, get_settings_store
from app.db.session import get_db

from .guard import check_webhook_secret
from .schemas import WebhookSuccess, parse_signup_payload
from .service import ingest_referral

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/webhook", tags=["webhook"])


@router.post(
    "/referral",
    response_model=WebhookSuccess,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.webhook_rate_limit)
async def receive_referral(
    request: Request,
    db: AsyncSession = Depends(get_db),
    store: SettingsStore = Depends(get_settings_store),
) -> WebhookSuccess:
    """
    Record a student signup attributed by referral code.

    The shared secret is verified before the body is read.
    """
    try:
        await check_webhook_secret(request.headers, store)
    except ServiceError as e:
        logger.warning(
            "webhook_secret_rejected",
            reason=e.message,
            client=request.client.host if request.client else None,
        )
        raise HTTPException(status_code=e.status_code, detail=e.message)

    try:
        try:
            body = await request.json()
        except ValueError as e:
            raise ValidationError("Request body must be valid JSON") from e
        notification = parse_signup_payload(body)
        return await ingest_referral(db, store, notification)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
