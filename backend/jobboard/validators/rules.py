"""Format and structural rules — pure predicates over a single field value.

None of these look at who is calling. Role-aware rules live in policy.py.
Every predicate takes (value, param) and returns True when the value passes.
Non-string values fail string rules instead of raising.
"""

import re
import uuid
from collections.abc import Sized
from typing import Any, Optional

from email_validator import EmailNotValidError, validate_email

PHONE_PATTERN = re.compile(r"\+?[1-9]\d{1,14}", re.ASCII)
URL_PATTERN = re.compile(r"(http|https)://[a-zA-Z0-9\-.]+\.[a-zA-Z]{2,}(/\S*)?", re.ASCII)
SALARY_RANGE_PATTERN = re.compile(r"\d+k?-\d+k?", re.ASCII)

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIALS = frozenset('!@#$%^&*(),.?":{}|<>')

JOB_TYPES = ("full-time", "part-time", "contract", "internship", "freelance", "remote")
EXPERIENCE_LEVELS = ("entry", "junior", "mid", "senior", "lead", "executive")
APPLICATION_STATUSES = ("pending", "reviewed", "accepted", "rejected")
JOB_STATUSES = ("active", "inactive", "closed", "draft")
SELF_SERVICE_ROLES = ("recruiter", "applicant", "job_seeker")
USER_ROLES = ("admin",) + SELF_SERVICE_ROLES


def is_empty(value: Any) -> bool:
    """None, a blank string or an empty collection. Booleans and numbers are never empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, Sized):
        return len(value) == 0
    return False


# ── Structural ──


def check_required(value: Any, param: Optional[Any] = None) -> bool:
    return not is_empty(value)


def _measure(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("min/max cannot be applied to booleans")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, Sized):
        return len(value)
    raise TypeError(f"min/max cannot be applied to {type(value).__name__}")


def check_min(value: Any, param: int) -> bool:
    if value is None:
        return False
    return _measure(value) >= param


def check_max(value: Any, param: int) -> bool:
    if value is None:
        return True
    return _measure(value) <= param


def check_email(value: Any, param: Optional[Any] = None) -> bool:
    if not isinstance(value, str):
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


# ── Format ──


def check_password(value: Any, param: Optional[Any] = None) -> bool:
    """At least 8 chars with an upper, a lower, a digit and a special character."""
    if not isinstance(value, str):
        return False
    has_upper = any("A" <= c <= "Z" for c in value)
    has_lower = any("a" <= c <= "z" for c in value)
    has_digit = any("0" <= c <= "9" for c in value)
    has_special = any(c in PASSWORD_SPECIALS for c in value)
    return len(value) >= PASSWORD_MIN_LENGTH and has_upper and has_lower and has_digit and has_special


def check_phone(value: Any, param: Optional[Any] = None) -> bool:
    return isinstance(value, str) and PHONE_PATTERN.fullmatch(value) is not None


def check_uuid(value: Any, param: Optional[Any] = None) -> bool:
    if isinstance(value, uuid.UUID):
        return True
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def _one_of(choices: tuple[str, ...]):
    allowed = frozenset(choices)

    def check(value: Any, param: Optional[Any] = None) -> bool:
        return isinstance(value, str) and value.lower() in allowed

    return check


check_job_type = _one_of(JOB_TYPES)
check_experience_level = _one_of(EXPERIENCE_LEVELS)
check_application_status = _one_of(APPLICATION_STATUSES)
check_job_status = _one_of(JOB_STATUSES)
check_self_service_role = _one_of(SELF_SERVICE_ROLES)
check_user_role = _one_of(USER_ROLES)


def check_url(value: Any, param: Optional[Any] = None) -> bool:
    return isinstance(value, str) and URL_PATTERN.fullmatch(value) is not None


def check_salary_range(value: Any, param: Optional[Any] = None) -> bool:
    """Matches '50000-75000', '50k-75k' and '50K-75K'."""
    return isinstance(value, str) and SALARY_RANGE_PATTERN.fullmatch(value.lower()) is not None
