from fastapi import Depends, HTTPException, status

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.enums import UserRole


async def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Admin API: ambassadors, referrals, payouts, settings, exports."""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


async def require_ambassador(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Self-service portal; every query is scoped to current_user.ambassador_id."""
    if current_user.role != UserRole.AMBASSADOR:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Ambassador access required",
        )
    return current_user
