from app.core.models.ambassador import Ambassador
from app.core.models.payout import Payout
from app.core.models.referral import Referral
from app.core.models.setting import Setting

__all__ = [
    "Ambassador",
    "Payout",
    "Referral",
    "Setting",
]
