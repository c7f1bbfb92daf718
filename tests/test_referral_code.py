"""Unit tests for ambassador referral code generation."""

import re
from datetime import datetime

from app.auth.referral_code import generate_ambassador_referral_code


def test_referral_code_format() -> None:
    """AMB- + up to 4 letters + 4 digit year + 3 digits."""
    code = generate_ambassador_referral_code("John Smith")
    year = str(datetime.now().year)
    assert re.match(rf"^AMB-JOHN{year}\d{{3}}$", code)


def test_letters_only_uppercased() -> None:
    code = generate_ambassador_referral_code("é-li 2 sa")
    assert code.startswith("AMB-LISA")


def test_short_name_is_not_padded() -> None:
    code = generate_ambassador_referral_code("Jo")
    assert re.match(r"^AMB-JO\d{7}$", code)


def test_empty_name_keeps_prefix_and_year() -> None:
    year = str(datetime.now().year)
    for name in ("", "   ", None):
        code = generate_ambassador_referral_code(name)
        assert re.match(rf"^AMB-{year}\d{{3}}$", code)


def test_referral_code_random_part_varies() -> None:
    """Multiple calls produce different codes (random suffix)."""
    codes = {generate_ambassador_referral_code("John Smith") for _ in range(20)}
    # 1000 possibilities; 20 calls should almost always have at least 2 distinct
    assert len(codes) >= 2
