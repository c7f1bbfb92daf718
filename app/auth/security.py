"""Password hashing (bcrypt) and access tokens (HS256 JWT carrying userId, email, role)."""

import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import bcrypt
from jose import jwt

from app.core.config import settings

GENERATED_PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*"


def hash_password(plain_password: str) -> str:
    return bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def generate_password(length: int = 12) -> str:
    """Random password handed to a new ambassador (or on reset); shown once, stored only as a hash."""
    return "".join(secrets.choice(GENERATED_PASSWORD_ALPHABET) for _ in range(length))


def create_access_token(
    *,
    user_id: str,
    email: str,
    role: str,
    expires_minutes: Optional[int] = None,
) -> str:
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "userId": user_id,
        "email": email,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict:
    """Raises jose.JWTError on a bad signature or an expired token."""
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
