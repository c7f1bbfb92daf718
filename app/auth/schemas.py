from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.core.enums import UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserInfo(BaseModel):
    id: str  # "admin" for the environment-configured admin, ambassador UUID otherwise
    email: str
    name: str
    role: UserRole
    referral_code: Optional[str] = None


class LoginData(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserInfo
    issued_at: datetime


class TokenData(BaseModel):
    token: str
    token_type: str = "bearer"


class CurrentUser(BaseModel):
    """Identity carried by the bearer token: {userId, email, role}."""

    user_id: str
    email: str
    role: UserRole

    @property
    def ambassador_id(self) -> UUID:
        return UUID(self.user_id)
