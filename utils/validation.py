"""
Validation utilities for signup input
Syntactic checks only: no DNS/MX lookups, no internationalized addresses
"""
import re
from typing import Any, Tuple

from core.errors import INVALID_EMAIL_MESSAGE

# one "@", a dot somewhere after it, no whitespace anywhere
EMAIL_REGEX = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')


def is_valid_email(email: Any) -> bool:
    if not isinstance(email, str) or not email:
        return False
    return EMAIL_REGEX.fullmatch(email) is not None


def validate_email(email: Any) -> Tuple[bool, str]:
    """
    Validate a submitted email address.
    Returns (is_valid, error_message).
    """
    if not is_valid_email(email):
        return False, INVALID_EMAIL_MESSAGE
    return True, ""
