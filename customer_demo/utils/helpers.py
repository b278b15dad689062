import re
from typing import Optional
from email_validator import validate_email, EmailNotValidError

PHONE_NUMBER_PATTERN = re.compile(r"^[0-9]{10,11}$")
POST_CODE_PATTERN = re.compile(r"^[0-9]{7}$")


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings"""
    return value is None or not value.strip()


def is_valid_email(email: str) -> bool:
    """Validate email address syntax (no deliverability/DNS check)"""
    if not email:
        return False
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_phone_number(phone: str) -> bool:
    """Validate phone number (10 or 11 digits, nothing else)"""
    return PHONE_NUMBER_PATTERN.fullmatch(phone or "") is not None


def is_valid_post_code(post_code: str) -> bool:
    """Validate postal code (exactly 7 digits)"""
    return POST_CODE_PATTERN.fullmatch(post_code or "") is not None
