from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    AMBASSADOR = "ambassador"


class AmbassadorStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    suspended = "suspended"


class ReferralStatus(str, Enum):
    active = "active"
    cancelled = "cancelled"


class PayoutStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"


class PaymentMethod(str, Enum):
    MTN = "MTN"
    ORANGE = "ORANGE"


class SettingKey(str, Enum):
    POINTS_PER_REFERRAL = "points_per_referral"
    MAX_AMBASSADORS = "max_ambassadors"
    SYSTEM_ACTIVE = "system_active"
    WEBHOOK_SECRET = "webhook_secret"
    GENERAL_TARGET_REFERRALS = "general_target_referrals"
    GENERAL_TARGET_POINTS = "general_target_points"
