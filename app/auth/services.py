import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import CurrentUser, LoginData, LoginRequest, TokenData, UserInfo
from app.auth.security import create_access_token, verify_password
from app.core.config import settings
from app.core.enums import AmbassadorStatus, UserRole
from app.core.exceptions import AuthError, ForbiddenError, NotFoundError
from app.core.logging_config import get_logger
from app.core.models import Ambassador

logger = get_logger(__name__)

ADMIN_USER_ID = "admin"
ADMIN_DISPLAY_NAME = "Admin"


def _issue_token(user_id: str, email: str, role: UserRole) -> str:
    return create_access_token(user_id=user_id, email=email, role=role.value)


def _is_admin_login(payload: LoginRequest) -> bool:
    if not settings.admin_email or not settings.admin_password:
        return False
    email_ok = payload.email.lower() == settings.admin_email.lower()
    password_ok = secrets.compare_digest(
        payload.password.encode("utf-8"), settings.admin_password.encode("utf-8")
    )
    return email_ok and password_ok


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginData:
    issued_at = datetime.now(timezone.utc)

    # 1. Environment-configured admin
    if _is_admin_login(payload):
        token = _issue_token(ADMIN_USER_ID, settings.admin_email, UserRole.ADMIN)
        logger.info("admin_logged_in")
        return LoginData(
            token=token,
            user=UserInfo(
                id=ADMIN_USER_ID,
                email=settings.admin_email,
                name=ADMIN_DISPLAY_NAME,
                role=UserRole.ADMIN,
            ),
            issued_at=issued_at,
        )

    # 2. Ambassador by email (case-insensitive)
    stmt = select(Ambassador).where(func.lower(Ambassador.email) == func.lower(payload.email))
    ambassador: Optional[Ambassador] = (await db.execute(stmt)).scalar_one_or_none()
    if not ambassador:
        raise AuthError("Invalid email or password")

    if ambassador.status != AmbassadorStatus.active.value:
        raise ForbiddenError("Account is not active")

    if not verify_password(payload.password, ambassador.password_hash):
        raise AuthError("Invalid email or password")

    token = _issue_token(str(ambassador.id), ambassador.email, UserRole.AMBASSADOR)
    logger.info("ambassador_logged_in", ambassador_id=str(ambassador.id))
    return LoginData(
        token=token,
        user=UserInfo(
            id=str(ambassador.id),
            email=ambassador.email,
            name=ambassador.name,
            role=UserRole.AMBASSADOR,
            referral_code=ambassador.referral_code,
        ),
        issued_at=issued_at,
    )


def refresh_token(current_user: CurrentUser) -> TokenData:
    return TokenData(token=_issue_token(current_user.user_id, current_user.email, current_user.role))


async def get_me(db: AsyncSession, current_user: CurrentUser) -> UserInfo:
    if current_user.role == UserRole.ADMIN:
        return UserInfo(
            id=ADMIN_USER_ID,
            email=settings.admin_email or current_user.email,
            name=ADMIN_DISPLAY_NAME,
            role=UserRole.ADMIN,
        )

    ambassador = await db.get(Ambassador, current_user.ambassador_id)
    if not ambassador:
        raise NotFoundError("User not found")
    return UserInfo(
        id=str(ambassador.id),
        email=ambassador.email,
        name=ambassador.name,
        role=UserRole.AMBASSADOR,
        referral_code=ambassador.referral_code,
    )
