"""
Ambassador referral code generation.
Format: AMB- + first 4 letters of the name (letters only, uppercase) + 4-digit year + 3 random digits.
"""

import re
import secrets
from datetime import datetime


def generate_ambassador_referral_code(name: str) -> str:
    """
    Generate a referral code from the ambassador's name.

    Examples:
        John Smith -> AMB-JOHN2024001
        Jo         -> AMB-JO2024517
        ""         -> AMB-2024093

    Uniqueness is not guaranteed here; the caller regenerates on collision.
    """
    name_part = re.sub(r"[^A-Z]", "", str(name or "").upper())[:4]
    year = datetime.now().year
    random_part = f"{secrets.randbelow(1000):03d}"
    return f"AMB-{name_part}{year}{random_part}"
