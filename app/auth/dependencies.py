from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import CurrentUser
from app.auth.security import decode_access_token
from app.core.enums import AmbassadorStatus, UserRole
from app.core.models import Ambassador
from app.db.session import get_db


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login-oauth")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Resolve the authenticated user from the access token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise credentials_exception

    user_id = payload.get("userId") or payload.get("sub")
    email = payload.get("email")
    role_name = payload.get("role")
    if not user_id or not email or not role_name:
        raise credentials_exception

    try:
        role = UserRole(role_name)
    except ValueError:
        raise credentials_exception

    if role == UserRole.AMBASSADOR:
        # Deactivated ambassadors lose access even with an unexpired token
        try:
            ambassador_id = UUID(user_id)
        except ValueError:
            raise credentials_exception
        stmt = select(Ambassador.status).where(Ambassador.id == ambassador_id)
        ambassador_status = (await db.execute(stmt)).scalar_one_or_none()
        if ambassador_status != AmbassadorStatus.active.value:
            raise credentials_exception

    return CurrentUser(user_id=user_id, email=email, role=role)
