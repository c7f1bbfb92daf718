"""
Inbound signup notifications.

Two body shapes are accepted and resolved once, at the boundary, into a single
SignupNotification. Nothing past parse_signup_payload knows which shape arrived.
"""

import hashlib
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationError

COMPACT_REQUIRED = ("name", "email", "referer")
LEGACY_REQUIRED = ("studentName", "studentEmail", "studentId", "plan", "referralCode")

DEFAULT_PLAN = "Standard"
STUDENT_ID_LENGTH = 32


class CompactSignupPayload(BaseModel):
    """{name, email, referer, date?} as sent by the signup platform."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    referer: str = Field(..., min_length=1, description="Ambassador referral code")
    date: Optional[Any] = None


class LegacySignupPayload(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    studentName: str = Field(..., min_length=1)
    studentEmail: str = Field(..., min_length=1)
    studentId: str = Field(..., min_length=1)
    plan: str = Field(..., min_length=1)
    price: Decimal = Field(Decimal("0"), ge=0)
    referralCode: str = Field(..., min_length=1)
    registeredAt: Optional[Any] = None


@dataclass(frozen=True)
class SignupNotification:
    """Canonical ingestion request."""

    student_name: str
    student_email: str
    student_id: str
    plan: str
    price: Decimal
    referral_code: str
    # None when absent or unparseable; the pipeline stamps "now"
    registered_at: Optional[datetime]
    shape: str


class WebhookSuccess(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Referral recorded"
    points_awarded: int = Field(..., alias="pointsAwarded")
    ambassador_name: str = Field(..., alias="ambassadorName")


def student_id_from_email(email: str) -> str:
    return hashlib.sha256(email.encode("utf-8")).hexdigest()[:STUDENT_ID_LENGTH]


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _field_error(exc: PydanticValidationError, required: tuple) -> ValidationError:
    for err in exc.errors():
        field = err["loc"][0] if err["loc"] else None
        if field in required and err["type"] in ("missing", "string_too_short", "string_type"):
            return ValidationError(f"Missing required fields: {', '.join(required)}")
    loc = ".".join(str(part) for part in exc.errors()[0]["loc"])
    return ValidationError(f"Invalid value for field: {loc}")


def is_compact_shape(body: dict) -> bool:
    return all(key in body for key in COMPACT_REQUIRED)


def parse_signup_payload(body: Any) -> SignupNotification:
    """Detect the body shape and normalize it. Raises ValidationError."""
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")

    if is_compact_shape(body):
        try:
            compact = CompactSignupPayload.model_validate(body)
        except PydanticValidationError as e:
            raise _field_error(e, COMPACT_REQUIRED) from e
        return SignupNotification(
            student_name=compact.name,
            student_email=compact.email,
            student_id=student_id_from_email(compact.email),
            plan=DEFAULT_PLAN,
            price=Decimal("0"),
            referral_code=compact.referer,
            registered_at=parse_timestamp(compact.date),
            shape="compact",
        )

    try:
        legacy = LegacySignupPayload.model_validate(body)
    except PydanticValidationError as e:
        raise _field_error(e, LEGACY_REQUIRED) from e
    return SignupNotification(
        student_name=legacy.studentName,
        student_email=legacy.studentEmail,
        student_id=legacy.studentId,
        plan=legacy.plan,
        price=legacy.price,
        referral_code=legacy.referralCode,
        registered_at=parse_timestamp(legacy.registeredAt),
        shape="legacy",
    )
